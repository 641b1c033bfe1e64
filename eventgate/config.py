"""Gateway configuration.

Values come from an optional YAML file and are overridden by environment
variables (a ``.env`` file is loaded first).
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from eventgate.exceptions import ConfigError

DEFAULT_EVENTBUS_INIT_MODULE = "eventgate.core.events.factory"
CONFIG_PATH_ENV = "EVENTGATE_CONFIG"

# config field -> environment variable
ENV_VARS = {
    "error_schema_uri": "ERROR_SCHEMA_URI",
    "error_stream": "ERROR_STREAM",
    "eventbus_init_module": "EVENTBUS_INIT_MODULE",
    "api_host": "API_HOST",
    "api_port": "API_PORT",
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
}


class GatewayConfig(BaseModel):
    """Settings shared by every request handled by one gateway."""

    error_schema_uri: str = "/error/0.0.1"
    error_stream: str | None = None
    eventbus_init_module: str = DEFAULT_EVENTBUS_INIT_MODULE
    api_host: str = "127.0.0.1"
    api_port: int = 8192
    log_level: str = "INFO"
    log_file: str | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("error_stream", "log_file", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        """Treat empty strings as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> str:
        return str(value).upper()

    @property
    def error_events_enabled(self) -> bool:
        """Whether failed events are resubmitted to an error stream."""
        return self.error_stream is not None


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML configuration file into a dict.

    Args:
        path: Path of the YAML file

    Returns:
        Mapping of configuration values

    Raises:
        ConfigError: If the file is missing, unparsable or not a mapping
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as err:
        raise ConfigError(f"Config file not found: {path}") from err
    except yaml.YAMLError as err:
        raise ConfigError(f"Failed to parse config file {path}: {err}") from err

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: str | Path | None = None) -> GatewayConfig:
    """Build the gateway configuration.

    Args:
        path: Optional YAML file, defaults to ``$EVENTGATE_CONFIG``

    Returns:
        GatewayConfig: The merged configuration
    """
    load_dotenv()

    data: dict[str, Any] = {}
    config_path = path or os.getenv(CONFIG_PATH_ENV)
    if config_path:
        data.update(read_config_file(Path(config_path)))

    for key, env_var in ENV_VARS.items():
        value = os.getenv(env_var)
        if value is not None:
            data[key] = value

    try:
        return GatewayConfig(**data)
    except ValidationError as err:
        raise ConfigError(f"Invalid configuration: {err}") from err
