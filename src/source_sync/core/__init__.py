"""
Core modules for Source Sync.

This package contains the connection configuration records, the configuration
store and project associations, and the tree model and edit session used to
change them.
"""

from .associations import ConnectionAssociations
from .component import ConnectionConfigurationComponent
from .config_manager import ConfigManager
from .exceptions import (
    ConfigurationError,
    SessionClosedError,
    SourceSyncError,
    StorePersistenceError,
    TreeModelError,
    ValidationError,
)
from .models import (
    AssociationsDocument,
    ConnectionsDocument,
    SyncConfiguration,
    SyncConfigurationType,
)
from .selector import ConnectionSelector, SelectorPresentation
from .session import ConnectionConfigurationSession, SessionState
from .store import SyncRemoteConfigurationsService
from .tree import SyncConnectionsTreeModel, TreeNode

__all__ = [
    # Stores and managers
    "ConfigManager",
    "SyncRemoteConfigurationsService",
    "ConnectionAssociations",
    "ConnectionSelector",
    # Editing
    "ConnectionConfigurationSession",
    "ConnectionConfigurationComponent",
    "SyncConnectionsTreeModel",
    "TreeNode",
    "SelectorPresentation",
    # Models and data structures
    "SyncConfiguration",
    "ConnectionsDocument",
    "AssociationsDocument",
    # Enums
    "SyncConfigurationType",
    "SessionState",
    # Exceptions
    "SourceSyncError",
    "ConfigurationError",
    "ValidationError",
    "StorePersistenceError",
    "TreeModelError",
    "SessionClosedError",
]
