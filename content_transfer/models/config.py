"""
Configuration models for the Content Transfer Assistant.

This module defines the Pydantic settings model and its loading from
YAML/TOML files and environment variables.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import toml
import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from content_transfer.core.exceptions import ConfigurationError

ENV_PREFIX = "CONTENT_TRANSFER_"
DEFAULT_CONFIG_DIR = Path.home() / ".content-transfer"


class TransferSettings(BaseModel):
    """Settings governing how content transfers are performed."""
    buffer_size: int = Field(default=64 * 1024, ge=1)
    remove_partial_output: bool = False
    preferences_file: str = str(DEFAULT_CONFIG_DIR / "preferences.yaml")
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator('log_level')
    @classmethod
    def log_level_must_be_valid(cls, v):
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f'Invalid log level: {v}')
        return level

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None,
             environ: Optional[Dict[str, str]] = None) -> "TransferSettings":
        """
        Load settings from a file, then apply environment overrides.

        Args:
            path: Optional YAML or TOML settings file
            environ: Environment mapping, defaults to os.environ

        Returns:
            TransferSettings instance

        Raises:
            ConfigurationError: If the file cannot be read or is invalid
        """
        data: Dict[str, Any] = {}
        if path is not None:
            data.update(_read_settings_file(Path(path)))

        environ = os.environ if environ is None else environ
        for field_name in cls.model_fields:
            env_key = f"{ENV_PREFIX}{field_name.upper()}"
            if env_key in environ:
                data[field_name] = environ[env_key]

        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Invalid transfer settings: {e}",
                details={"errors": e.errors(include_url=False)},
                path=path
            )


def _read_settings_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}", path=path)

    suffix = path.suffix.lower()
    if suffix not in ('.yaml', '.yml', '.toml'):
        raise ConfigurationError(f"Unsupported file format: {path.suffix}", path=path)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            if suffix == '.toml':
                data = toml.load(f)
            else:
                data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML format in {path}", path=path, cause=e)
    except toml.TomlDecodeError as e:
        raise ConfigurationError(f"Invalid TOML format in {path}", path=path, cause=e)
    except UnicodeDecodeError as e:
        raise ConfigurationError(f"Configuration file {path} is not valid UTF-8", path=path, cause=e)
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}", path=path, cause=e)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping", path=path)
    return data
