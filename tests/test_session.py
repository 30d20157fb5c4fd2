#!/usr/bin/env python3
"""
Tests for the connection configuration edit session.

Covers the apply/OK/cancel protocol and its all-or-nothing effect on the store.
"""

import os
import sys
import tempfile
from unittest.mock import patch

import pytest

# Add src to path for testing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from source_sync.core import (
    ConfigManager,
    ConnectionAssociations,
    ConnectionConfigurationSession,
    SessionState,
    SyncConfiguration,
    SyncConfigurationType,
    SyncRemoteConfigurationsService,
)
from source_sync.core.exceptions import (
    SessionClosedError,
    StorePersistenceError,
    ValidationError,
)

SCP = SyncConfigurationType.SCP
SFTP = SyncConfigurationType.SFTP


class TestConnectionConfigurationSession:
    """Test the edit session state machine."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_manager = ConfigManager(self.temp_dir)
        self.store = SyncRemoteConfigurationsService(self.config_manager)
        self.prod = SyncConfiguration(name="prod", type=SFTP, host="prod.example.com")
        self.stage = SyncConfiguration(name="stage", type=SCP, host="stage.example.com")
        self.store.add_all([self.prod, self.stage])
        self.store.save()

    def teardown_method(self):
        import shutil

        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def reloaded_store(self):
        store = SyncRemoteConfigurationsService(self.config_manager)
        store.load()
        return store

    def test_session_starts_clean(self):
        session = ConnectionConfigurationSession(self.store)

        assert session.state == SessionState.CLEAN
        assert session.has_modifications() is False
        assert session.apply_enabled is False
        assert len(session.tree.group_nodes()) == 2
        assert len(session.tree.leaf_nodes()) == 2

    def test_edit_makes_session_dirty_and_enables_apply(self):
        session = ConnectionConfigurationSession(self.store)

        session.edit("stage", port=2222)

        assert session.state == SessionState.DIRTY
        assert session.apply_enabled is True
        assert self.store.find_by_name("stage").port == 22

    def test_remove_then_apply_scenario(self):
        session = ConnectionConfigurationSession(self.store)

        session.remove(session.find("prod"))

        assert [g.label for g in session.tree.group_nodes()] == ["SCP"]
        assert len(session.tree.leaf_nodes()) == 1
        assert session.state == SessionState.DIRTY

        session.apply()

        assert session.state == SessionState.CLEAN
        assert session.apply_enabled is False
        assert self.store.connection_names() == ["stage"]
        assert self.reloaded_store().connection_names() == ["stage"]

    def test_remove_then_cancel_leaves_store_unchanged(self):
        session = ConnectionConfigurationSession(self.store)

        session.remove(session.find("prod"))
        session.edit("stage", host="elsewhere")
        session.add_configuration(SFTP, "new")
        session.cancel()

        assert session.state == SessionState.CLOSED
        assert self.store.all_configurations() == [self.prod, self.stage]
        assert self.reloaded_store().all_configurations() == [self.prod, self.stage]

    def test_add_first_configuration_of_kind(self):
        self.store.clear()
        self.store.add(self.stage)
        session = ConnectionConfigurationSession(self.store)

        leaf = session.add_configuration(SFTP, "fresh")

        group = session.tree.parent_of(leaf)
        assert group.group_type == SFTP
        assert len(group.children) == 1
        assert session.has_modifications() is True
        assert session.apply_enabled is True
        assert session.selected_component is leaf.component
        assert leaf.component.get_field("host") == "sftp://"

    def test_apply_replaces_store_with_tree_contents(self):
        session = ConnectionConfigurationSession(self.store)
        session.edit("prod", username="deploy", port="2200")
        session.add_configuration(SCP, "backup")

        expected = session.tree.to_configuration_set()
        session.apply()

        assert self.store.all_configurations() == expected
        assert self.store.find_by_name("prod").port == 2200
        assert self.reloaded_store().all_configurations() == expected

    def test_apply_resets_component_flags(self):
        session = ConnectionConfigurationSession(self.store)
        session.edit("prod", username="deploy")

        session.apply()

        assert session.tree.has_modifications() is False
        assert session.has_modifications() is False

    def test_failed_save_keeps_session_dirty_and_store_intact(self):
        session = ConnectionConfigurationSession(self.store)
        session.remove(session.find("prod"))

        with patch.object(
            self.store, "save", side_effect=StorePersistenceError("disk full")
        ):
            with pytest.raises(StorePersistenceError):
                session.apply()

        assert session.state == SessionState.DIRTY
        assert session.apply_enabled is True
        assert self.store.all_configurations() == [self.prod, self.stage]

    def test_unexpected_save_failure_is_reported_as_persistence_error(self):
        session = ConnectionConfigurationSession(self.store)
        session.edit("stage", host="elsewhere")

        with patch.object(self.store, "save", side_effect=RuntimeError("boom")):
            with pytest.raises(StorePersistenceError):
                session.apply()

        assert self.store.find_by_name("stage").host == "stage.example.com"
        assert session.state == SessionState.DIRTY

    def test_invalid_field_blocks_apply_without_touching_store(self):
        session = ConnectionConfigurationSession(self.store)
        session.edit("stage", port="abc")

        with pytest.raises(ValidationError):
            session.apply()

        assert self.store.all_configurations() == [self.prod, self.stage]

    def test_ok_applies_and_closes(self):
        session = ConnectionConfigurationSession(self.store)
        session.edit("stage", host="elsewhere")

        session.ok()

        assert session.is_closed
        assert self.reloaded_store().find_by_name("stage").host == "elsewhere"

    def test_ok_without_changes_does_not_save(self):
        session = ConnectionConfigurationSession(self.store)

        with patch.object(self.store, "save") as mock_save:
            session.ok()

        mock_save.assert_not_called()
        assert session.state == SessionState.CLOSED

    def test_closed_session_rejects_operations(self):
        session = ConnectionConfigurationSession(self.store)
        session.cancel()

        with pytest.raises(SessionClosedError):
            session.apply()
        with pytest.raises(SessionClosedError):
            session.add_configuration(SCP)

    def test_selecting_group_keeps_current_selection(self):
        session = ConnectionConfigurationSession(self.store)
        leaf = session.find("prod")

        session.select(leaf)
        selected = session.select(session.tree.parent_of(leaf))

        assert selected is leaf.component
        assert session.selected_component is leaf.component

    def test_removing_selected_leaf_clears_selection(self):
        session = ConnectionConfigurationSession(self.store)
        leaf = session.find("prod")
        session.select(leaf)

        session.remove(leaf)

        assert session.selected_component is None

    def test_rename_through_edit(self):
        session = ConnectionConfigurationSession(self.store)

        component = session.edit("stage", name="staging", port=2201)

        assert component.name == "staging"
        assert session.tree.find_leaf("stage") is None
        session.apply()
        assert self.reloaded_store().connection_names() == ["staging", "prod"]
        assert self.store.find_by_name("staging").port == 2201

    def test_rename_onto_existing_name_is_forwarded_unmerged(self):
        session = ConnectionConfigurationSession(self.store)

        session.edit("stage", name="prod")

        assert [c.name for c in session.tree.to_configuration_set()] == ["prod", "prod"]
        assert len(session.tree.leaf_nodes()) == 2

    def test_find_unknown_name(self):
        session = ConnectionConfigurationSession(self.store)

        with pytest.raises(ValidationError):
            session.find("missing")

    def test_association_for_heals_after_removal(self):
        associations = ConnectionAssociations(self.config_manager)
        associations.associate_project_with_connection("webapp", "prod")
        session = ConnectionConfigurationSession(self.store, associations)

        assert session.association_for("webapp") == "prod"

        session.remove(session.find("prod"))
        assert session.association_for("webapp") == "prod"

        session.apply()
        assert session.association_for("webapp") is None
        assert associations.get_association_for("webapp") is None
