"""
Project to connection associations for Source Sync.

A small persisted mapping from a project name to the name of the connection
configuration the project syncs with.
"""

import logging
from typing import Dict, Optional

from .config_manager import ConfigManager
from .models import AssociationsDocument


class ConnectionAssociations:
    """Maps project names to connection configuration names."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        self.logger = logging.getLogger(__name__)
        self.config_manager = config_manager or ConfigManager()
        self._associations: Dict[str, str] = {}

    @classmethod
    def from_config_dir(cls, config_dir: Optional[str] = None):
        associations = cls(ConfigManager(config_dir))
        associations.load()
        return associations

    def load(self) -> None:
        document = self.config_manager.load_document(
            self.config_manager.associations_path, AssociationsDocument
        )
        self._associations = dict(document.associations)

    def save(self) -> None:
        document = AssociationsDocument(associations=dict(self._associations))
        self.config_manager.save_document(self.config_manager.associations_path, document)

    def get_association_for(self, project: str) -> Optional[str]:
        return self._associations.get(project)

    def associate_project_with_connection(self, project: str, connection_name: str) -> None:
        self._associations[project] = connection_name
        self.logger.info(f"Project '{project}' now uses connection '{connection_name}'")

    def remove_association_for(self, project: str) -> None:
        self._associations.pop(project, None)

    def resolve_association(self, project: str, store) -> Optional[str]:
        """Return the project's connection name, dropping it if it no longer exists.

        Args:
            project: Project name
            store: Configuration store used to check the name still exists

        Returns:
            The associated connection name, or None when the caller should
            prompt for a new selection
        """
        connection_name = self.get_association_for(project)
        if not connection_name:
            return None

        if store.find_by_name(connection_name) is None:
            self.logger.info(
                f"Connection '{connection_name}' for project '{project}' no longer "
                f"exists, removing association"
            )
            self.remove_association_for(project)
            self.save()
            return None

        return connection_name
