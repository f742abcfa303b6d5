import json
from pathlib import Path

import pytest

from coffee_recipes.config import (
    ConfigError,
    load_settings,
    merge_config,
    parse_settings,
)

BASE = {
    "mode": "debug",
    "server": {"host": "127.0.0.1", "port": 8080},
    "openai": {"api_key": "", "model": "gpt-4"},
    "logging": {"access_log": False},
}


def write_config(directory: Path, data, name="config.json"):
    path = directory / name
    path.write_text(json.dumps(data))
    return path


def test_override_file_is_merged(tmp_path: Path):
    write_config(tmp_path, BASE)
    write_config(tmp_path, {"mode": "release", "openai": {"api_key": "sk-secret"}}, "config.override.json")

    settings = load_settings(tmp_path, environ={})

    assert settings.openai.api_key == "sk-secret"
    assert settings.openai.model == "gpt-4"
    assert settings.server.host == "127.0.0.1"
    assert settings.server.port == 8080
    assert settings.is_release
    assert settings.log_level == "INFO"
    assert settings.logging.access_log is False
    assert settings.storage.backend == "none"


def test_port_environment_variable_wins(tmp_path: Path):
    write_config(tmp_path, {**BASE, "openai": {"api_key": "sk-secret"}})
    settings = load_settings(tmp_path, environ={"PORT": "9090"})
    assert settings.server.port == 9090


def test_missing_api_key_fails(tmp_path: Path):
    write_config(tmp_path, BASE)
    with pytest.raises(ConfigError, match="API key"):
        load_settings(tmp_path, environ={})


def test_missing_port_fails():
    data = {"openai": {"api_key": "sk-secret"}, "server": {}}
    with pytest.raises(ConfigError, match="port is not configured"):
        parse_settings(data, environ={})


@pytest.mark.parametrize("env_port", ["abc", "0", "70000"])
def test_invalid_port_fails(env_port):
    data = {"openai": {"api_key": "sk-secret"}}
    with pytest.raises(ConfigError):
        parse_settings(data, environ={"PORT": env_port})


def test_missing_base_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="missing"):
        load_settings(tmp_path, environ={})


def test_invalid_json(tmp_path: Path):
    (tmp_path / "config.json").write_text("{not json")
    with pytest.raises(ConfigError, match="Invalid JSON"):
        load_settings(tmp_path, environ={})


def test_unknown_storage_backend():
    data = {"openai": {"api_key": "sk"}, "server": {"port": 80}, "storage": {"backend": "postgres"}}
    with pytest.raises(ConfigError, match="storage backend"):
        parse_settings(data, environ={})


def test_section_must_be_mapping():
    with pytest.raises(ConfigError, match="mapping for openai"):
        parse_settings({"openai": "sk", "server": {"port": 80}}, environ={})


def test_debug_mode_defaults_to_debug_logging():
    settings = parse_settings({"openai": {"api_key": "sk"}, "server": {"port": 80}}, environ={})
    assert not settings.is_release
    assert settings.log_level == "DEBUG"


def test_explicit_log_level():
    data = {"openai": {"api_key": "sk"}, "server": {"port": 80}, "logging": {"level": "warning"}}
    settings = parse_settings(data, environ={})
    assert settings.log_level == "WARNING"


def test_merge_config_is_deep_and_non_destructive():
    base = {"a": {"b": 1, "c": 2}, "d": [1]}
    merged = merge_config(base, {"a": {"c": 3}, "d": [2]})
    assert merged == {"a": {"b": 1, "c": 3}, "d": [2]}
    assert base == {"a": {"b": 1, "c": 2}, "d": [1]}


@pytest.mark.parametrize("level", ["verbose", "warn", "trace"])
def test_unknown_log_level_fails(level):
    data = {"openai": {"api_key": "sk"}, "server": {"port": 80}, "logging": {"level": level}}
    with pytest.raises(ConfigError, match="log level"):
        parse_settings(data, environ={})


def test_storage_max_entries():
    data = {"openai": {"api_key": "sk"}, "server": {"port": 80}, "storage": {"backend": "memory", "max_entries": 5}}
    assert parse_settings(data, environ={}).storage.max_entries == 5
    data["storage"]["max_entries"] = 0
    with pytest.raises(ConfigError, match="max_entries"):
        parse_settings(data, environ={})
