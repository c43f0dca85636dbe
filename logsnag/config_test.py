"""Unit tests for loading the LogSnag configuration."""

from pathlib import Path

import pytest

from logsnag.config import LogSnagConfig
from logsnag.config import load_config
from logsnag.errors import ConfigError


def test_loads_from_environment() -> None:
    config = load_config(
        environ={
            "LOGSNAG_TOKEN": "env-token",
            "LOGSNAG_PROJECT": "my-saas",
            "LOGSNAG_CHANNEL": "deploys",
        }
    )

    assert config.token.get_secret_value() == "env-token"
    assert config.project == "my-saas"
    assert config.default_channel == "deploys"
    assert config.base_url == "https://api.logsnag.com"
    assert config.timeout_seconds == 10.0


def test_loads_from_logsnag_table_in_file(tmp_path: Path) -> None:
    config_path = tmp_path / "logsnag.toml"
    config_path.write_text(
        '[logsnag]\ntoken = "file-token"\nproject = "my-saas"\nchannel = "payments"\ntimeout = 2.5\n'
    )

    config = load_config(config_path=config_path, environ={})

    assert config.token.get_secret_value() == "file-token"
    assert config.default_channel == "payments"
    assert config.timeout_seconds == 2.5


def test_loads_top_level_keys_from_file(tmp_path: Path) -> None:
    config_path = tmp_path / "logsnag.toml"
    config_path.write_text('token = "file-token"\nproject = "my-saas"\n')

    config = load_config(config_path=config_path, environ={})

    assert config.project == "my-saas"
    assert config.default_channel is None


def test_environment_overrides_file(tmp_path: Path) -> None:
    config_path = tmp_path / "logsnag.toml"
    config_path.write_text('token = "file-token"\nproject = "file-project"\n')

    config = load_config(
        config_path=config_path,
        environ={"LOGSNAG_PROJECT": "env-project", "LOGSNAG_BASE_URL": "https://logsnag.internal"},
    )

    assert config.token.get_secret_value() == "file-token"
    assert config.project == "env-project"
    assert config.base_url == "https://logsnag.internal"


def test_config_path_can_come_from_environment(tmp_path: Path) -> None:
    config_path = tmp_path / "logsnag.toml"
    config_path.write_text('token = "file-token"\nproject = "my-saas"\n')

    config = load_config(environ={"LOGSNAG_CONFIG": str(config_path)})

    assert config.project == "my-saas"


def test_missing_token_raises() -> None:
    with pytest.raises(ConfigError, match="No LogSnag token configured"):
        load_config(environ={"LOGSNAG_PROJECT": "my-saas"})


def test_missing_project_raises() -> None:
    with pytest.raises(ConfigError, match="No LogSnag project configured"):
        load_config(environ={"LOGSNAG_TOKEN": "t"})


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Config file not found"):
        load_config(config_path=tmp_path / "missing.toml", environ={})


def test_malformed_file_raises(tmp_path: Path) -> None:
    config_path = tmp_path / "logsnag.toml"
    config_path.write_text("token = \n")

    with pytest.raises(ConfigError, match="Failed to parse config file"):
        load_config(config_path=config_path, environ={})


def test_unknown_file_keys_raise(tmp_path: Path) -> None:
    config_path = tmp_path / "logsnag.toml"
    config_path.write_text('token = "t"\nproject = "p"\nretries = 3\n')

    with pytest.raises(ConfigError, match="Unknown keys in config file .*retries"):
        load_config(config_path=config_path, environ={})


def test_invalid_timeout_raises() -> None:
    with pytest.raises(ConfigError, match="Invalid LogSnag configuration"):
        load_config(environ={"LOGSNAG_TOKEN": "t", "LOGSNAG_PROJECT": "p", "LOGSNAG_TIMEOUT": "-1"})


def test_config_is_immutable() -> None:
    config = LogSnagConfig.model_validate({"token": "t", "project": "p"})

    with pytest.raises(ValueError):
        config.project = "other"  # type: ignore[misc]

    assert "'t'" not in repr(config)


def test_directory_as_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Failed to read config file"):
        load_config(config_path=tmp_path, environ={})


def test_non_utf8_file_raises(tmp_path: Path) -> None:
    config_path = tmp_path / "logsnag.toml"
    config_path.write_bytes(b'token = "\xff"\nproject = "p"\n')

    with pytest.raises(ConfigError, match="Failed to parse config file"):
        load_config(config_path=config_path, environ={})
