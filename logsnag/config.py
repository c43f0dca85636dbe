import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from typing import Final

from loguru import logger
from pydantic import Field
from pydantic import SecretStr
from pydantic import ValidationError

from logsnag.errors import ConfigError
from logsnag.frozen_model import FrozenModel
from logsnag.primitives import ChannelName
from logsnag.primitives import ProjectName
from logsnag.transport import DEFAULT_BASE_URL
from logsnag.transport import DEFAULT_TIMEOUT_SECONDS

# Environment variable -> config field. Environment values override the config file.
_ENV_VARS: Final[dict[str, str]] = {
    "LOGSNAG_TOKEN": "token",
    "LOGSNAG_PROJECT": "project",
    "LOGSNAG_CHANNEL": "default_channel",
    "LOGSNAG_BASE_URL": "base_url",
    "LOGSNAG_TIMEOUT": "timeout_seconds",
}

# Names accepted in the config file, mapped to config fields
_FILE_KEYS: Final[dict[str, str]] = {
    "token": "token",
    "project": "project",
    "channel": "default_channel",
    "base_url": "base_url",
    "timeout": "timeout_seconds",
}

CONFIG_PATH_ENV_VAR: Final[str] = "LOGSNAG_CONFIG"

_FILE_TABLE_NAME: Final[str] = "logsnag"


class LogSnagConfig(FrozenModel):
    """Everything needed to talk to LogSnag on behalf of one project."""

    token: SecretStr = Field(description="LogSnag API token, sent as a bearer token")
    project: ProjectName = Field(description="Project that every request is recorded under")
    default_channel: ChannelName | None = Field(
        default=None,
        description="Channel used for events logged without an explicit channel",
    )
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Base URL of the LogSnag API")
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0, description="Timeout for each request")


def load_config(config_path: Path | None = None, environ: Mapping[str, str] | None = None) -> LogSnagConfig:
    """Load configuration from a TOML file and the environment.

    Precedence (lowest to highest):
    1. Config file (config_path, or the path in LOGSNAG_CONFIG). Keys may sit at the
       top level or in a [logsnag] table.
    2. Environment variables (LOGSNAG_TOKEN, LOGSNAG_PROJECT, LOGSNAG_CHANNEL,
       LOGSNAG_BASE_URL, LOGSNAG_TIMEOUT)
    """
    if environ is None:
        environ = os.environ

    if config_path is None and environ.get(CONFIG_PATH_ENV_VAR):
        config_path = Path(environ[CONFIG_PATH_ENV_VAR])

    raw: dict[str, Any] = {}
    if config_path is not None:
        raw.update(_load_config_file(config_path))

    for env_var, field_name in _ENV_VARS.items():
        value = environ.get(env_var)
        if value:
            raw[field_name] = value

    if "token" not in raw:
        raise ConfigError("No LogSnag token configured. Set LOGSNAG_TOKEN or add 'token' to the config file.")
    if "project" not in raw:
        raise ConfigError("No LogSnag project configured. Set LOGSNAG_PROJECT or add 'project' to the config file.")

    try:
        return LogSnagConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid LogSnag configuration: {e}") from e


def _load_config_file(config_path: Path) -> dict[str, Any]:
    logger.debug("Loading LogSnag config from {}", config_path)
    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_path}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file {config_path}: {e}") from e
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to parse config file {config_path}: {e}") from e

    table = data.get(_FILE_TABLE_NAME, data)
    if not isinstance(table, dict):
        raise ConfigError(f"[{_FILE_TABLE_NAME}] in {config_path} must be a table")

    unknown_keys = sorted(set(table) - set(_FILE_KEYS))
    if unknown_keys:
        raise ConfigError(f"Unknown keys in config file {config_path}: {', '.join(unknown_keys)}")

    return {_FILE_KEYS[key]: value for key, value in table.items()}
