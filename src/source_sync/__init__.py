"""
Source Sync - remote sync connection configurations

Define SCP and SFTP connection configurations, edit them in sessions that
commit all changes together or none of them, and associate projects with the
connection they sync with.

Example Usage:
    >>> from source_sync import (
    ...     ConnectionConfigurationSession,
    ...     SyncConfigurationType,
    ...     SyncRemoteConfigurationsService,
    ... )
    >>> store = SyncRemoteConfigurationsService.from_config_dir("~/.source-sync")
    >>> session = ConnectionConfigurationSession(store)
    >>> session.add_configuration(SyncConfigurationType.SFTP, "prod")
    >>> session.ok()

CLI Usage:
    $ source-sync list                      # Show configurations by kind
    $ source-sync add sftp prod --host h    # Add a configuration
    $ source-sync edit prod port=2222       # Change fields
    $ source-sync remove prod               # Delete a configuration
    $ source-sync associate myproj prod     # Use 'prod' for a project
"""

from .__version__ import (
    __version__,
    __version_info__,
    get_version,
    get_version_info,
)

# Core components
from .core.associations import ConnectionAssociations
from .core.component import ConnectionConfigurationComponent
from .core.config_manager import ConfigManager
from .core.selector import ConnectionSelector
from .core.session import ConnectionConfigurationSession
from .core.store import SyncRemoteConfigurationsService
from .core.tree import SyncConnectionsTreeModel

# Exceptions
from .core.exceptions import (
    SourceSyncError,
    ConfigurationError,
    ValidationError,
    StorePersistenceError,
    TreeModelError,
    SessionClosedError,
)

# Models
from .core.models import SyncConfiguration, SyncConfigurationType

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "get_version",
    "get_version_info",

    # Core classes
    "ConfigManager",
    "SyncRemoteConfigurationsService",
    "ConnectionAssociations",
    "ConnectionSelector",
    "ConnectionConfigurationSession",
    "ConnectionConfigurationComponent",
    "SyncConnectionsTreeModel",

    # Exceptions
    "SourceSyncError",
    "ConfigurationError",
    "ValidationError",
    "StorePersistenceError",
    "TreeModelError",
    "SessionClosedError",

    # Models
    "SyncConfiguration",
    "SyncConfigurationType",
]

# Package metadata
__title__ = "source-sync"
__description__ = "Remote sync connection configurations with all-or-nothing editing"
__license__ = "MIT"

# Compatibility check
import sys
from .__version__ import MINIMUM_PYTHON_VERSION

if sys.version_info < MINIMUM_PYTHON_VERSION:
    raise RuntimeError(
        f"Source Sync requires Python {'.'.join(map(str, MINIMUM_PYTHON_VERSION))} "
        f"or higher. You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )
