"""
Pydantic models for Source Sync connection configurations.

This module defines the connection configuration record and the configuration
kinds, together with the persisted document shapes used by the store and the
project associations.
"""

from typing import Dict, List, Optional, Tuple
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SyncConfigurationType(str, Enum):
    """Supported remote connection kinds, in display order."""
    SCP = "scp"
    SFTP = "sftp"

    @property
    def pretty_name(self) -> str:
        """Display name used for the group node of this kind."""
        return self.name

    @property
    def default_host(self) -> str:
        return f"{self.value}://"

    @property
    def field_schema(self) -> Tuple[str, ...]:
        """Editable fields exposed by an edit component of this kind."""
        return FIELD_SCHEMAS[self]


COMMON_FIELDS = (
    "name",
    "host",
    "port",
    "username",
    "password",
    "workspace_base_path",
    "excluded_files",
    "preserve_timestamps",
)

SSH_KEY_FIELDS = (
    "use_ssh_key",
    "use_ssh_key_passphrase",
    "ssh_key_path",
)

FIELD_SCHEMAS: Dict[SyncConfigurationType, Tuple[str, ...]] = {
    SyncConfigurationType.SCP: COMMON_FIELDS + SSH_KEY_FIELDS,
    SyncConfigurationType.SFTP: COMMON_FIELDS + SSH_KEY_FIELDS,
}


class SyncConfiguration(BaseModel):
    """One named remote endpoint definition."""

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    name: str = Field("Unnamed", description="Unique configuration name")
    type: SyncConfigurationType = Field(description="Connection kind")
    host: str = Field("", description="Remote host")
    port: int = Field(22, description="Remote port")
    username: str = Field("", description="Login user")
    password: str = Field("", description="Login password or key passphrase")
    workspace_base_path: str = Field("", description="Remote base path for uploads")
    excluded_files: str = Field(
        ".crc;.iml", description="Semicolon separated file patterns to skip"
    )
    preserve_timestamps: bool = Field(True, description="Keep source modification times")
    use_ssh_key: bool = Field(False, description="Authenticate with a private key")
    use_ssh_key_passphrase: bool = Field(
        False, description="Private key is protected by a passphrase"
    )
    ssh_key_path: Optional[str] = Field(None, description="Path to the private key")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Configuration names identify entries and cannot be blank."""
        if not v or not v.strip():
            raise ValueError("Configuration name must not be blank")
        return v

    @field_validator('port')
    @classmethod
    def validate_port(cls, v):
        """Validate port is in valid range."""
        if v < 1 or v > 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @classmethod
    def default_for(
        cls, config_type: SyncConfigurationType, name: Optional[str] = None
    ) -> "SyncConfiguration":
        """Create a fresh configuration with the defaults for a kind."""
        return cls(
            name=name or "Unnamed",
            type=config_type,
            host=config_type.default_host,
        )

    def excluded_file_patterns(self) -> List[str]:
        """Split the exclusion string into individual patterns."""
        return [p.strip() for p in self.excluded_files.split(";") if p.strip()]


class ConnectionsDocument(BaseModel):
    """Persisted form of the configuration store."""

    connections: List[SyncConfiguration] = Field(
        default_factory=list, description="All stored configurations"
    )


class AssociationsDocument(BaseModel):
    """Persisted form of the project associations."""

    associations: Dict[str, str] = Field(
        default_factory=dict, description="Project name to configuration name"
    )
