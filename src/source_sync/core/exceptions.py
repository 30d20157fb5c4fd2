"""
Exception classes for Source Sync.

Errors raised while loading, editing and committing connection configurations.
Every error carries a machine-readable code and a details mapping the CLI can
print with --verbose.
"""

from typing import Optional, Dict, Any


class SourceSyncError(Exception):
    """Base exception for configuration store, session and association errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize SourceSyncError.

        Args:
            message: Message shown to the user by the CLI
            error_code: Stable code, defaults to the exception class name
            details: Offending paths, field names or values
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(SourceSyncError):
    """Raised when a data file cannot be read or does not validate."""

    def __init__(
        self,
        message: str,
        config_path: Optional[str] = None,
        validation_errors: Optional[list] = None
    ):
        """Initialize ConfigurationError.

        Args:
            message: Error message
            config_path: Path to the data file with issues
            validation_errors: List of specific validation errors
        """
        details = {}
        if config_path:
            details["config_path"] = config_path
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(message, "CONFIG_ERROR", details)
        self.config_path = config_path
        self.validation_errors = validation_errors or []


class ValidationError(SourceSyncError):
    """Raised for an unknown field, an invalid field value or an unknown configuration name."""

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        expected_type: Optional[str] = None
    ):
        """Initialize ValidationError.

        Args:
            message: Error message
            field_name: Configuration field, or "name" for lookups by name
            field_value: Rejected value
            expected_type: Accepted fields or format, for the error details
        """
        details = {}
        if field_name:
            details["field_name"] = field_name
        if field_value is not None:
            details["field_value"] = str(field_value)
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(message, "VALIDATION_ERROR", details)
        self.field_name = field_name
        self.field_value = field_value
        self.expected_type = expected_type


class StorePersistenceError(SourceSyncError):
    """Raised when the configuration store cannot be written."""

    def __init__(self, message: str, store_path: Optional[str] = None):
        """Initialize StorePersistenceError.

        Args:
            message: Error message
            store_path: Path of the file that could not be written
        """
        details = {}
        if store_path:
            details["store_path"] = store_path

        super().__init__(message, "STORE_PERSISTENCE_ERROR", details)
        self.store_path = store_path


class TreeModelError(SourceSyncError):
    """Raised on an invalid configuration tree operation."""

    def __init__(self, message: str, node_id: Optional[int] = None):
        details = {}
        if node_id is not None:
            details["node_id"] = node_id

        super().__init__(message, "TREE_MODEL_ERROR", details)
        self.node_id = node_id


class SessionClosedError(SourceSyncError):
    """Raised when a finished edit session is used again."""

    def __init__(self, message: str = "Edit session is already closed"):
        super().__init__(message, "SESSION_CLOSED")
