"""
Current connection selector for Source Sync.

Backs the "which connection does this project sync with" chooser: what it
should display for a project, which names it offers, and what selecting one
does.
"""

import logging
from dataclasses import dataclass
from typing import List

from .associations import ConnectionAssociations
from .exceptions import ValidationError
from .store import SyncRemoteConfigurationsService

ADD_CONFIGURATION_TEXT = "Add configuration..."


@dataclass
class SelectorPresentation:
    """What the selector shows for a project."""

    text: str
    enabled: bool = True
    has_icon: bool = False


class ConnectionSelector:
    """Chooser for the connection configuration a project is associated with."""

    def __init__(
        self,
        store: SyncRemoteConfigurationsService,
        associations: ConnectionAssociations,
    ):
        self.logger = logging.getLogger(__name__)
        self.store = store
        self.associations = associations

    def presentation(self, project: str) -> SelectorPresentation:
        """Presentation for a project, dropping an association to a deleted connection."""
        connection_name = self.associations.resolve_association(project, self.store)
        if not connection_name:
            return SelectorPresentation(text=ADD_CONFIGURATION_TEXT)
        return SelectorPresentation(text=connection_name, has_icon=True)

    def choices(self) -> List[str]:
        return self.store.connection_names()

    def select(self, project: str, connection_name: str) -> None:
        """Associate the project with a connection and persist the mapping."""
        if self.store.find_by_name(connection_name) is None:
            raise ValidationError(
                f"No configuration named '{connection_name}'",
                field_name="connection_name",
                field_value=connection_name,
                expected_type="one of: " + ", ".join(self.choices()),
            )
        self.associations.associate_project_with_connection(project, connection_name)
        self.associations.save()

    def clear(self, project: str) -> None:
        self.associations.remove_association_for(project)
        self.associations.save()
