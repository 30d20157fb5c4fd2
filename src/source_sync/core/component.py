"""
Edit component for a single connection configuration.

The component owns the editable field values of one configuration, records
whether any of them changed, and can materialize them back into a new
immutable SyncConfiguration.
"""

import logging
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError
from .models import SyncConfiguration, SyncConfigurationType

ModificationCallback = Callable[["ConnectionConfigurationComponent"], None]


class ConnectionConfigurationComponent:
    """Editable field state of one configuration."""

    def __init__(
        self,
        configuration: SyncConfiguration,
        on_modified: Optional[ModificationCallback] = None,
        modified: bool = False,
    ):
        """Initialize the component from a configuration.

        Args:
            configuration: Configuration whose fields are edited
            on_modified: Called once for every field change event
            modified: Initial modification flag, True for never saved entries
        """
        self.logger = logging.getLogger(__name__)
        self.on_modified = on_modified
        self.type: SyncConfigurationType = configuration.type
        self._fields: Dict[str, Any] = {}
        self.initialized_from(configuration)
        self.modified = modified

    def initialized_from(self, configuration: SyncConfiguration) -> "ConnectionConfigurationComponent":
        """Populate all fields from a configuration and reset the modified flag."""
        self.type = configuration.type
        values = configuration.model_dump()
        self._fields = {name: values[name] for name in self.type.field_schema}
        self.modified = False
        return self

    @property
    def name(self) -> str:
        return self._fields["name"]

    @property
    def fields(self) -> Dict[str, Any]:
        return dict(self._fields)

    def get_field(self, field_name: str) -> Any:
        self._check_field(field_name)
        return self._fields[field_name]

    def set_field(self, field_name: str, value: Any) -> None:
        """Record a field change event and notify the change callback."""
        self._check_field(field_name)
        self._fields[field_name] = value
        self.modified = True
        self.logger.debug(f"Field '{field_name}' of '{self.name}' changed")
        if self.on_modified is not None:
            self.on_modified(self)

    def mark_clean(self) -> None:
        self.modified = False

    def to_configuration(self) -> SyncConfiguration:
        """Build a new configuration from the current field values.

        Raises:
            ValidationError: If a field value is not valid for a configuration
        """
        try:
            return SyncConfiguration(type=self.type, **self._fields)
        except PydanticValidationError as e:
            first_error = e.errors()[0]
            field_name = str(first_error["loc"][0]) if first_error.get("loc") else None
            raise ValidationError(
                f"Invalid value for configuration '{self.name}': {first_error['msg']}",
                field_name=field_name,
                field_value=first_error.get("input"),
            ) from e

    def _check_field(self, field_name: str) -> None:
        if field_name not in self._fields:
            raise ValidationError(
                f"Unknown field '{field_name}' for {self.type.pretty_name} configuration",
                field_name=field_name,
                expected_type="one of: " + ", ".join(self.type.field_schema),
            )

    def __repr__(self) -> str:
        flag = "*" if self.modified else ""
        return f"<ConnectionConfigurationComponent {self.type.pretty_name}:{self.name}{flag}>"
