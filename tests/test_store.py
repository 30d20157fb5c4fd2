#!/usr/bin/env python3
"""
Tests for the configuration store, project associations and the selector.
"""

import os
import sys
import tempfile

import pytest

# Add src to path for testing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from source_sync.core import (
    ConfigManager,
    ConnectionAssociations,
    ConnectionSelector,
    SyncConfiguration,
    SyncConfigurationType,
    SyncRemoteConfigurationsService,
)
from source_sync.core.exceptions import StorePersistenceError, ValidationError
from source_sync.core.selector import ADD_CONFIGURATION_TEXT

SCP = SyncConfigurationType.SCP
SFTP = SyncConfigurationType.SFTP


class StoreTestCase:
    """Shared temporary data directory."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_manager = ConfigManager(self.temp_dir)
        self.store = SyncRemoteConfigurationsService(self.config_manager)
        self.prod = SyncConfiguration(name="prod", type=SFTP, host="prod.example.com")
        self.stage = SyncConfiguration(name="stage", type=SCP, host="stage.example.com")

    def teardown_method(self):
        import shutil

        shutil.rmtree(self.temp_dir, ignore_errors=True)


class TestSyncRemoteConfigurationsService(StoreTestCase):
    """Test store queries, persistence and transactions."""

    def test_find_all_of_type(self):
        self.store.add_all([self.prod, self.stage])

        assert self.store.find_all_of_type(SFTP) == [self.prod]
        assert self.store.find_all_of_type(SCP) == [self.stage]

    def test_duplicate_names_last_wins(self):
        replacement = SyncConfiguration(name="prod", type=SCP, host="other")

        self.store.add_all([self.prod, replacement])

        assert self.store.all_configurations() == [replacement]

    def test_save_and_reload(self):
        self.store.add_all([self.prod, self.stage])
        self.store.save()

        reloaded = SyncRemoteConfigurationsService.from_config_dir(self.temp_dir)

        assert reloaded.all_configurations() == [self.prod, self.stage]

    def test_clear(self):
        self.store.add_all([self.prod, self.stage])
        self.store.clear()

        assert self.store.connection_names() == []

    def test_transaction_commits_on_success(self):
        self.store.add(self.prod)

        with self.store.transaction():
            self.store.clear()
            self.store.add(self.stage)

        assert self.store.connection_names() == ["stage"]

    def test_transaction_restores_on_failure(self):
        self.store.add(self.prod)

        with pytest.raises(StorePersistenceError):
            with self.store.transaction():
                self.store.clear()
                self.store.add(self.stage)
                raise OSError("read-only file system")

        assert self.store.all_configurations() == [self.prod]


class TestConnectionAssociations(StoreTestCase):
    """Test project associations and their self-healing lookup."""

    def setup_method(self):
        super().setup_method()
        self.associations = ConnectionAssociations(self.config_manager)

    def test_associate_and_remove(self):
        self.associations.associate_project_with_connection("webapp", "prod")
        assert self.associations.get_association_for("webapp") == "prod"

        self.associations.remove_association_for("webapp")
        assert self.associations.get_association_for("webapp") is None

    def test_remove_unknown_project_is_noop(self):
        self.associations.remove_association_for("nothing")

        assert self.associations.get_association_for("nothing") is None

    def test_persisted_associations(self):
        self.associations.associate_project_with_connection("webapp", "prod")
        self.associations.save()

        reloaded = ConnectionAssociations.from_config_dir(self.temp_dir)

        assert reloaded.get_association_for("webapp") == "prod"

    def test_resolve_existing_association(self):
        self.store.add(self.prod)
        self.associations.associate_project_with_connection("webapp", "prod")

        assert self.associations.resolve_association("webapp", self.store) == "prod"

    def test_resolve_dangling_association_drops_it(self):
        self.associations.associate_project_with_connection("webapp", "prod")
        self.associations.save()

        assert self.associations.resolve_association("webapp", self.store) is None
        assert self.associations.get_association_for("webapp") is None
        reloaded = ConnectionAssociations.from_config_dir(self.temp_dir)
        assert reloaded.get_association_for("webapp") is None


class TestConnectionSelector(StoreTestCase):
    """Test the current connection chooser."""

    def setup_method(self):
        super().setup_method()
        self.store.add_all([self.prod, self.stage])
        self.associations = ConnectionAssociations(self.config_manager)
        self.selector = ConnectionSelector(self.store, self.associations)

    def test_presentation_without_association(self):
        presentation = self.selector.presentation("webapp")

        assert presentation.text == ADD_CONFIGURATION_TEXT
        assert presentation.enabled is True
        assert presentation.has_icon is False

    def test_select_and_present(self):
        self.selector.select("webapp", "stage")

        presentation = self.selector.presentation("webapp")
        assert presentation.text == "stage"
        assert presentation.has_icon is True
        assert ConnectionAssociations.from_config_dir(self.temp_dir).get_association_for(
            "webapp"
        ) == "stage"

    def test_presentation_after_connection_deleted(self):
        self.selector.select("webapp", "prod")
        self.store.clear()
        self.store.add(self.stage)

        presentation = self.selector.presentation("webapp")

        assert presentation.text == ADD_CONFIGURATION_TEXT
        assert self.associations.get_association_for("webapp") is None

    def test_select_unknown_connection(self):
        with pytest.raises(ValidationError):
            self.selector.select("webapp", "missing")

    def test_choices_lists_connection_names(self):
        assert self.selector.choices() == ["prod", "stage"]

    def test_clear(self):
        self.selector.select("webapp", "prod")
        self.selector.clear("webapp")

        assert self.associations.get_association_for("webapp") is None
