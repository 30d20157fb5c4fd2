"""
Configuration store for Source Sync.

Holds the named connection configurations in memory and persists them through
the ConfigManager. Edit sessions replace the whole contents at once inside
``transaction()``, which restores the previous contents if saving fails.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional

from .config_manager import ConfigManager
from .exceptions import StorePersistenceError
from .models import ConnectionsDocument, SyncConfiguration, SyncConfigurationType


class SyncRemoteConfigurationsService:
    """Named connection configurations, keyed by configuration name."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        self.logger = logging.getLogger(__name__)
        self.config_manager = config_manager or ConfigManager()
        self._configurations: Dict[str, SyncConfiguration] = {}

    @classmethod
    def from_config_dir(cls, config_dir: Optional[str] = None):
        """Create a store backed by a data directory and load it."""
        store = cls(ConfigManager(config_dir))
        store.load()
        return store

    def load(self) -> None:
        """Replace in-memory contents with the persisted document."""
        document = self.config_manager.load_document(
            self.config_manager.connections_path, ConnectionsDocument
        )
        self._configurations = {}
        self.add_all(document.connections)
        self.logger.debug(f"Loaded {len(self._configurations)} configurations")

    def save(self) -> None:
        """Flush the current contents to disk."""
        document = ConnectionsDocument(connections=list(self._configurations.values()))
        self.config_manager.save_document(self.config_manager.connections_path, document)
        self.logger.info(f"Saved {len(self._configurations)} configurations")

    def find_all_of_type(self, config_type: SyncConfigurationType) -> List[SyncConfiguration]:
        return [c for c in self._configurations.values() if c.type == config_type]

    def find_by_name(self, name: str) -> Optional[SyncConfiguration]:
        return self._configurations.get(name)

    def all_configurations(self) -> List[SyncConfiguration]:
        return list(self._configurations.values())

    def connection_names(self) -> List[str]:
        return list(self._configurations.keys())

    def clear(self) -> None:
        self._configurations.clear()

    def add(self, configuration: SyncConfiguration) -> None:
        if configuration.name in self._configurations:
            self.logger.warning(
                f"Configuration '{configuration.name}' already exists, replacing it"
            )
        self._configurations[configuration.name] = configuration

    def add_all(self, configurations: Iterable[SyncConfiguration]) -> None:
        """Bulk insert; a later configuration replaces an earlier one of the same name."""
        for configuration in configurations:
            self.add(configuration)

    @contextmanager
    def transaction(self) -> Iterator["SyncRemoteConfigurationsService"]:
        """Restore the previous contents if the block raises.

        Any failure inside the block is reported as StorePersistenceError.
        """
        snapshot = dict(self._configurations)
        try:
            yield self
        except StorePersistenceError:
            self._configurations = snapshot
            self.logger.error("Store update failed, previous contents restored")
            raise
        except Exception as e:
            self._configurations = snapshot
            self.logger.error(f"Store update failed, previous contents restored: {e}")
            raise StorePersistenceError(f"Failed to update configurations: {e}") from e
