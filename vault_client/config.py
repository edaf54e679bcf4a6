"""
Configuration management for the Vault client.

Credentials come from a JSON file (``{"host", "username", "password"}``)
with environment variables layered on top. The file is read, never written.
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "credentials.json"
CONFIG_PATH_ENV = "VAULT_CONFIG"

ENV_VARS = {
    "host": "VAULT_HOST",
    "username": "VAULT_USERNAME",
    "password": "VAULT_PASSWORD",
    "timeout": "VAULT_TIMEOUT",
    "verify_ssl": "VAULT_VERIFY_SSL",
    "verbose": "VAULT_VERBOSE",
}

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class VaultConfig:
    """Connection settings and credentials for a Vault."""

    host: str = ""
    username: str = ""
    password: str = ""
    timeout: Optional[float] = None
    verify_ssl: bool = True
    verbose: bool = False

    def is_configured(self) -> bool:
        """Check if enough is set to authenticate."""
        return bool(self.host and self.username and self.password)

    def credentials(self) -> Dict[str, str]:
        """Credentials in the shape ``authenticate`` expects."""
        return {
            "host": self.host,
            "username": self.username,
            "password": self.password,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VaultConfig":
        """Create a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}

        if values.get("timeout") is not None:
            values["timeout"] = _parse_timeout(values["timeout"])
        for flag in ("verify_ssl", "verbose"):
            if flag in values:
                values[flag] = _parse_bool(values[flag])

        return cls(**values)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


def _parse_timeout(value: Any) -> Optional[float]:
    if value in ("", None):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid timeout value: {value!r}")


class ConfigManager:
    """Loads Vault configuration from a credentials file and the environment."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the config manager.

        Args:
            config_path: Credentials file. Defaults to $VAULT_CONFIG, then
                ./credentials.json.
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_FILE
        self.config_path = Path(config_path).expanduser()
        self._config: Optional[VaultConfig] = None

    def get_config_path(self) -> Path:
        """Get the credentials file path."""
        return self.config_path

    def _load_file(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            logger.debug("No credentials file at %s", self.config_path)
            return {}

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in credentials file: {self.config_path}",
                details=str(e),
            )
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read credentials file: {self.config_path}",
                details=str(e),
            )

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Credentials file must contain a JSON object: {self.config_path}"
            )
        return data

    def _load_env(self) -> Dict[str, Any]:
        data = {}
        for key, env_var in ENV_VARS.items():
            value = os.environ.get(env_var)
            if value is not None:
                data[key] = value
        return data

    def load(self) -> VaultConfig:
        """Load configuration, environment overriding the file."""
        data = self._load_file()
        data.update(self._load_env())
        self._config = VaultConfig.from_dict(data)
        return self._config

    def get(self) -> VaultConfig:
        """Get the current configuration, loading it on first use."""
        if self._config is None:
            self.load()
        assert self._config is not None
        return self._config


def get_config_manager(config_path: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Get a config manager for the given (or default) credentials file."""
    return ConfigManager(config_path)


def get_config(config_path: Optional[Union[str, Path]] = None) -> VaultConfig:
    """Load the configuration for the given (or default) credentials file."""
    return get_config_manager(config_path).get()
