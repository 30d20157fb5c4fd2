"""
Configuration tree model for one edit session.

The tree is kept as a flat arena of nodes addressed by integer id. The root
(id 0) holds one group node per configuration kind, and every group holds the
leaf nodes wrapping edit components. A group never outlives its last leaf.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

from .component import ConnectionConfigurationComponent, ModificationCallback
from .exceptions import TreeModelError
from .models import SyncConfiguration, SyncConfigurationType

ROOT_ID = 0


@dataclass
class TreeNode:
    """A node of the configuration tree."""

    node_id: int
    parent: Optional[int]
    children: List[int] = field(default_factory=list)
    group_type: Optional[SyncConfigurationType] = None
    component: Optional[ConnectionConfigurationComponent] = None

    @property
    def is_group(self) -> bool:
        return self.group_type is not None

    @property
    def is_leaf(self) -> bool:
        return self.component is not None

    @property
    def label(self) -> str:
        if self.group_type is not None:
            return self.group_type.pretty_name
        if self.component is not None:
            return self.component.name
        return "Root"


class SyncConnectionsTreeModel:
    """Arena-indexed hierarchy of configuration groups and edit components."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._nodes: Dict[int, TreeNode] = {}
        self._next_id = ROOT_ID
        self._listeners: List[Callable[["SyncConnectionsTreeModel"], None]] = []
        self._reset()

    def _reset(self) -> None:
        self._nodes = {ROOT_ID: TreeNode(node_id=ROOT_ID, parent=None)}
        self._next_id = ROOT_ID + 1

    def _new_node(self, parent: int, **kwargs) -> TreeNode:
        node = TreeNode(node_id=self._next_id, parent=parent, **kwargs)
        self._next_id += 1
        self._nodes[node.node_id] = node
        self._nodes[parent].children.append(node.node_id)
        return node

    def add_listener(self, listener: Callable[["SyncConnectionsTreeModel"], None]) -> None:
        """Register a callback invoked whenever the structure changes."""
        self._listeners.append(listener)

    def reload(self) -> None:
        """Announce a structure change to all listeners."""
        for listener in self._listeners:
            listener(self)

    @property
    def root(self) -> TreeNode:
        return self._nodes[ROOT_ID]

    def children_of(self, node: TreeNode) -> List[TreeNode]:
        return [self._nodes[child] for child in node.children]

    def parent_of(self, node: TreeNode) -> Optional[TreeNode]:
        if node.parent is None:
            return None
        return self._nodes[node.parent]

    def group_nodes(self) -> List[TreeNode]:
        return self.children_of(self.root)

    def leaf_nodes(self) -> List[TreeNode]:
        return [leaf for group in self.group_nodes() for leaf in self.children_of(group)]

    def is_empty(self) -> bool:
        return not self.root.children

    def load_from(self, store, on_modified: Optional[ModificationCallback] = None) -> None:
        """Populate the tree from the store, one group per non-empty kind."""
        self._reset()
        for config_type in SyncConfigurationType:
            connections = store.find_all_of_type(config_type)
            if not connections:
                continue
            group = self._new_node(ROOT_ID, group_type=config_type)
            for connection in connections:
                component = ConnectionConfigurationComponent(connection, on_modified)
                self._new_node(group.node_id, component=component)

        self.logger.debug(
            f"Loaded {len(self.leaf_nodes())} configurations in "
            f"{len(self.group_nodes())} groups"
        )
        self.reload()

    def find_group(self, config_type: SyncConfigurationType) -> Optional[TreeNode]:
        for group in self.group_nodes():
            if group.group_type == config_type:
                return group
        return None

    def get_or_create_group(self, config_type: SyncConfigurationType) -> TreeNode:
        group = self.find_group(config_type)
        if group is None:
            group = self._new_node(ROOT_ID, group_type=config_type)
        return group

    def add_leaf(
        self, config_type: SyncConfigurationType, component: ConnectionConfigurationComponent
    ) -> TreeNode:
        """Append a leaf for the component under the group of its kind."""
        group = self.get_or_create_group(config_type)
        leaf = self._new_node(group.node_id, component=component)
        self.reload()
        return leaf

    def remove_leaf(self, node: TreeNode) -> None:
        """Detach a leaf, and its group too when the group becomes empty.

        Raises:
            TreeModelError: If the node is not a leaf of this tree
        """
        current = self._nodes.get(node.node_id)
        if current is not node or not node.is_leaf:
            raise TreeModelError(
                f"Node {node.node_id} is not a configuration of this tree",
                node_id=node.node_id,
            )

        group = self._nodes[node.parent]
        group.children.remove(node.node_id)
        del self._nodes[node.node_id]

        if not group.children:
            self.root.children.remove(group.node_id)
            del self._nodes[group.node_id]
            self.logger.debug(f"Removed empty {group.label} group")

        self.reload()

    def find_leaf(self, name: str) -> Optional[TreeNode]:
        """First leaf whose component currently carries the given name."""
        for leaf in self.leaf_nodes():
            if leaf.component.name == name:
                return leaf
        return None

    def all_components(self) -> Iterator[ConnectionConfigurationComponent]:
        """Every edit component, in group order then child order."""
        for group_id in self.root.children:
            for leaf_id in self._nodes[group_id].children:
                yield self._nodes[leaf_id].component

    def has_modifications(self) -> bool:
        return any(component.modified for component in self.all_components())

    def to_configuration_set(self) -> List[SyncConfiguration]:
        """Materialize every component; duplicate names are kept."""
        return [component.to_configuration() for component in self.all_components()]

    def check_invariants(self) -> None:
        """Assert the tree shape: root -> non-empty groups -> leaves."""
        for group in self.group_nodes():
            assert group.is_group, f"Root child {group.node_id} is not a group"
            assert group.children, f"Group {group.label} has no configurations"
            for leaf in self.children_of(group):
                assert leaf.is_leaf, f"Node {leaf.node_id} under {group.label} is not a leaf"
                assert leaf.component.type == group.group_type, (
                    f"{leaf.label} is filed under the wrong group {group.label}"
                )
