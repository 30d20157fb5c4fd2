"""
Data file management for Source Sync.

This module resolves the Source Sync data directory and handles loading,
validating, and atomically writing the YAML documents behind the
configuration store and the project associations.
"""

import logging
import os
import tempfile
from typing import Optional, Type, TypeVar

import yaml
from pydantic import BaseModel

from .exceptions import ConfigurationError, StorePersistenceError

CONNECTIONS_FILE = "connections.yaml"
ASSOCIATIONS_FILE = "associations.yaml"
HOME_ENV_VAR = "SOURCE_SYNC_HOME"
DEFAULT_HOME = "~/.source-sync"

DocumentT = TypeVar("DocumentT", bound=BaseModel)


class ConfigManager:
    """Manages the data directory and its YAML documents."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_dir: Data directory. If None, auto-detect.
        """
        self.logger = logging.getLogger(__name__)
        self.config_dir = self._resolve_config_dir(config_dir)

    def _resolve_config_dir(self, config_dir: Optional[str]) -> str:
        """Resolve data directory from argument, environment, or default."""
        if config_dir:
            return os.path.expanduser(config_dir)

        env_dir = os.environ.get(HOME_ENV_VAR)
        if env_dir:
            self.logger.debug(f"Using data directory from {HOME_ENV_VAR}: {env_dir}")
            return os.path.expanduser(env_dir)

        return os.path.expanduser(DEFAULT_HOME)

    @property
    def connections_path(self) -> str:
        return os.path.join(self.config_dir, CONNECTIONS_FILE)

    @property
    def associations_path(self) -> str:
        return os.path.join(self.config_dir, ASSOCIATIONS_FILE)

    def load_document(self, path: str, model: Type[DocumentT]) -> DocumentT:
        """Load and validate a YAML document.

        Args:
            path: Path to the YAML file
            model: Pydantic model describing the document

        Returns:
            Validated document; an empty one if the file does not exist

        Raises:
            ConfigurationError: If the file is unreadable or invalid
        """
        if not os.path.exists(path):
            self.logger.debug(f"No data file at {path}, starting empty")
            return model()

        try:
            with open(path, "r") as f:
                raw_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in data file: {e}", config_path=path
            )
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read data file: {e}", config_path=path
            )

        if raw_data is None:
            return model()

        if not isinstance(raw_data, dict):
            raise ConfigurationError(
                "Data file must contain a mapping at the top level",
                config_path=path,
            )

        try:
            document = model(**raw_data)
        except Exception as e:
            raise ConfigurationError(
                f"Data file validation failed: {e}",
                config_path=path,
                validation_errors=[str(e)],
            )

        self.logger.info(f"Loaded {model.__name__} from {path}")
        return document

    def save_document(self, path: str, document: BaseModel) -> str:
        """Write a document to YAML, replacing the previous file atomically.

        Raises:
            StorePersistenceError: If the file cannot be written
        """
        data = document.model_dump(mode="json")
        directory = os.path.dirname(path) or "."

        try:
            os.makedirs(directory, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                prefix=".", suffix=".tmp", dir=directory
            )
            try:
                with os.fdopen(fd, "w") as f:
                    yaml.safe_dump(data, f, default_flow_style=False, indent=2, sort_keys=False)
                os.replace(temp_path, path)
            except Exception:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
                raise
        except OSError as e:
            raise StorePersistenceError(
                f"Failed to write data file: {e}", store_path=path
            )

        self.logger.debug(f"Saved {type(document).__name__} to {path}")
        return path
