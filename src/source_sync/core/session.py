"""
Edit session for connection configurations.

A session loads the store into a fresh tree model, collects edits, additions
and removals, and either commits all of them to the store at once (apply/OK)
or discards them (cancel). The store is never touched between commits.
"""

import logging
from enum import Enum
from typing import Any, Optional

from .component import ConnectionConfigurationComponent
from .exceptions import SessionClosedError, StorePersistenceError, ValidationError
from .models import SyncConfiguration, SyncConfigurationType
from .store import SyncRemoteConfigurationsService
from .tree import SyncConnectionsTreeModel, TreeNode


class SessionState(str, Enum):
    """Lifecycle states of an edit session."""
    CLEAN = "clean"
    DIRTY = "dirty"
    CLOSED = "closed"


class ConnectionConfigurationSession:
    """One edit session over the configuration store."""

    def __init__(self, store: SyncRemoteConfigurationsService, associations=None):
        """Open a session and load the store into a new tree.

        Args:
            store: Configuration store edited by this session
            associations: Optional project associations collaborator
        """
        self.logger = logging.getLogger(__name__)
        self.store = store
        self.associations = associations
        self.tree = SyncConnectionsTreeModel()
        self.selected_component: Optional[ConnectionConfigurationComponent] = None
        self.apply_enabled = False
        self._structure_changed = False
        self._closed = False

        self.tree.load_from(store, self._on_config_modifications)
        self.logger.debug("Connection configuration session opened")

    @property
    def state(self) -> SessionState:
        if self._closed:
            return SessionState.CLOSED
        if self.has_modifications():
            return SessionState.DIRTY
        return SessionState.CLEAN

    @property
    def is_closed(self) -> bool:
        return self._closed

    def has_modifications(self) -> bool:
        return self._structure_changed or self.tree.has_modifications()

    def _on_config_modifications(self, component: ConnectionConfigurationComponent) -> None:
        self._update_apply_button()

    def _update_apply_button(self) -> None:
        self.apply_enabled = self.has_modifications()

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError()

    def select(self, node: TreeNode) -> Optional[ConnectionConfigurationComponent]:
        """Bind the detail view to a leaf; selecting a group keeps the current one."""
        self._ensure_open()
        if node.is_leaf:
            self.selected_component = node.component
        return self.selected_component

    def add_configuration(
        self, config_type: SyncConfigurationType, name: Optional[str] = None
    ) -> TreeNode:
        """Add a new default configuration of a kind and select it."""
        self._ensure_open()
        configuration = SyncConfiguration.default_for(config_type, name)
        component = ConnectionConfigurationComponent(
            configuration, self._on_config_modifications, modified=True
        )
        leaf = self.tree.add_leaf(config_type, component)
        self.select(leaf)
        self._update_apply_button()
        self.logger.info(f"Added {config_type.pretty_name} configuration '{component.name}'")
        return leaf

    def remove(self, node: TreeNode) -> None:
        """Remove a configuration leaf from the tree."""
        self._ensure_open()
        component = node.component
        self.tree.remove_leaf(node)
        if component is not None and component is self.selected_component:
            self.selected_component = None
        self._structure_changed = True
        self._update_apply_button()

    def find(self, name: str) -> TreeNode:
        """Leaf for a configuration name.

        Raises:
            ValidationError: If no configuration has that name
        """
        leaf = self.tree.find_leaf(name)
        if leaf is None:
            raise ValidationError(
                f"No configuration named '{name}'", field_name="name", field_value=name
            )
        return leaf

    def edit(self, connection_name: str, **fields: Any) -> ConnectionConfigurationComponent:
        """Apply field changes to a configuration; ``name`` in fields renames it."""
        self._ensure_open()
        component = self.find(connection_name).component
        for field_name, value in fields.items():
            component.set_field(field_name, value)
        return component

    def apply(self) -> None:
        """Replace the store contents with the tree's configurations.

        Raises:
            StorePersistenceError: If the store cannot be saved; the session
                stays dirty and the store keeps its previous contents
            ValidationError: If a component holds an invalid field value
        """
        self._ensure_open()
        configurations = self.tree.to_configuration_set()

        try:
            with self.store.transaction():
                self.store.clear()
                self.store.add_all(configurations)
                self.store.save()
        except StorePersistenceError as e:
            self.logger.error(f"Apply failed, edits kept: {e.message}")
            self._update_apply_button()
            raise

        for component in self.tree.all_components():
            component.mark_clean()
        self._structure_changed = False
        self._update_apply_button()
        self.logger.info(f"Applied {len(configurations)} configurations")

    def ok(self) -> None:
        """Apply pending changes, if any, and close the session."""
        self._ensure_open()
        if self.has_modifications():
            self.apply()
        self.close()

    def cancel(self) -> None:
        """Discard every pending change and close the session."""
        self._ensure_open()
        if self.has_modifications():
            self.logger.info("Discarding uncommitted configuration changes")
        self.close()

    def association_for(self, project: str) -> Optional[str]:
        """Connection name the project uses, checked against the committed store."""
        if self.associations is None:
            return None
        return self.associations.resolve_association(project, self.store)

    def close(self) -> None:
        self._closed = True
        self.selected_component = None
        self.apply_enabled = False
