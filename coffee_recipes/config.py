"""Configuration loading and validation for coffee-recipes."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

log = logging.getLogger(__name__)

BASE_CONFIG_NAME = "config.json"
OVERRIDE_CONFIG_NAME = "config.override.json"
PORT_ENV_VAR = "PORT"
CONFIG_DIR_ENV_VAR = "COFFEE_RECIPES_CONFIG_DIR"

STORAGE_BACKENDS = ("none", "memory")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(RuntimeError):
    """Configuration error exception

    This exception is raised whenever the configuration
    files are invalid or a required value cannot be resolved
    """


@dataclass(slots=True, frozen=True)
class ServerConfig:
    """Listener configuration for the HTTP API.

    The port has no default: it has to come from the configuration files
    or from the ``PORT`` environment variable."""

    port: int
    host: str = "0.0.0.0"


@dataclass(slots=True, frozen=True)
class OpenAIConfig:
    """Credentials and model selection for the chat-completion API"""

    api_key: str
    model: str = "gpt-4"
    base_url: Optional[str] = None


@dataclass(slots=True, frozen=True)
class TimeoutConfig:
    connect_s: float = 10.0
    read_s: float = 120.0


@dataclass(slots=True, frozen=True)
class LoggingConfig:
    """Logging configuration

    When no level is given it is derived from the run mode (DEBUG in
    debug mode, INFO in release mode)."""

    level: Optional[str] = None
    access_log: bool = True
    file: Optional[str] = None


@dataclass(slots=True, frozen=True)
class StorageConfig:
    backend: str = "none"
    max_entries: int = 1000


@dataclass(slots=True, frozen=True)
class Settings:
    server: ServerConfig
    openai: OpenAIConfig
    mode: str = "debug"
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @property
    def is_release(self) -> bool:
        return self.mode == "release"

    @property
    def log_level(self) -> str:
        if self.logging.level:
            return self.logging.level.upper()
        return "INFO" if self.is_release else "DEBUG"


def _load_mapping(value: Any, ctx: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"Expected mapping for {ctx}")
    return value


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _load_json(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file missing: {path}") from exc
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc


def merge_config(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``.

    Nested mappings are merged key by key, every other value in the
    override replaces the base value."""

    merged: Dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config(current, value)
        else:
            merged[key] = value
    return merged


def _resolve_port(server_raw: Mapping[str, Any], environ: Mapping[str, str]) -> int:
    env_port = environ.get(PORT_ENV_VAR)
    if env_port:
        value: Any = env_port
        source = f"environment variable {PORT_ENV_VAR}"
    else:
        value = server_raw.get("port")
        source = "server.port"
    if value is None or value == "":
        raise ConfigError("Server port is not configured")
    try:
        port = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid port in {source}: {value!r}") from exc
    if not 0 < port < 65536:
        raise ConfigError(f"Port out of range in {source}: {port}")
    return port


def parse_settings(data: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build a :class:`Settings` value from an already merged mapping."""

    if environ is None:
        environ = os.environ

    server_raw = _load_mapping(data.get("server"), "server")
    openai_raw = _load_mapping(data.get("openai"), "openai")
    timeouts_raw = _load_mapping(data.get("timeouts"), "timeouts")
    logging_raw = _load_mapping(data.get("logging"), "logging")
    storage_raw = _load_mapping(data.get("storage"), "storage")

    api_key = _optional_str(openai_raw.get("api_key"))
    if api_key is None:
        raise ConfigError("OpenAI API key is not configured")

    server = ServerConfig(
        port=_resolve_port(server_raw, environ),
        host=str(server_raw.get("host") or "0.0.0.0"),
    )

    openai_cfg = OpenAIConfig(
        api_key=api_key,
        model=str(openai_raw.get("model") or "gpt-4"),
        base_url=_optional_str(openai_raw.get("base_url")),
    )

    try:
        timeouts = TimeoutConfig(
            connect_s=float(timeouts_raw.get("connect_s", 10.0)),
            read_s=float(timeouts_raw.get("read_s", 120.0)),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid timeout value: {exc}") from exc

    level = _optional_str(logging_raw.get("level"))
    if level is not None:
        level = level.upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level '{level}' in logging.level")

    logging_cfg = LoggingConfig(
        level=level,
        access_log=bool(logging_raw.get("access_log", True)),
        file=_optional_str(logging_raw.get("file")),
    )

    backend = str(storage_raw.get("backend", "none")).lower()
    if backend not in STORAGE_BACKENDS:
        raise ConfigError(f"Unknown storage backend '{backend}'")
    try:
        max_entries = int(storage_raw.get("max_entries", 1000))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid storage.max_entries: {exc}") from exc
    if max_entries <= 0:
        raise ConfigError("storage.max_entries must be positive")

    return Settings(
        server=server,
        openai=openai_cfg,
        mode=str(data.get("mode") or "debug").lower(),
        timeouts=timeouts,
        logging=logging_cfg,
        storage=StorageConfig(backend=backend, max_entries=max_entries),
    )


def load_settings(config_dir: Path, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Load ``config.json`` plus the optional ``config.override.json``."""

    base_path = config_dir / BASE_CONFIG_NAME
    data = _load_json(base_path)
    if not isinstance(data, Mapping):
        raise ConfigError(f"{BASE_CONFIG_NAME} must contain an object")
    log.debug("Loaded base configuration from %s", base_path)

    override_path = config_dir / OVERRIDE_CONFIG_NAME
    if override_path.exists():
        override = _load_json(override_path)
        if not isinstance(override, Mapping):
            raise ConfigError(f"{OVERRIDE_CONFIG_NAME} must contain an object")
        data = merge_config(data, override)
        log.debug("Merged override configuration from %s", override_path)
    else:
        log.debug("No override configuration found at %s", override_path)

    return parse_settings(data, environ)


def resolve_config_dir(config_dir: str | os.PathLike[str] | None) -> Path:
    if config_dir:
        return Path(config_dir)
    env_dir = os.environ.get(CONFIG_DIR_ENV_VAR)
    if env_dir:
        return Path(env_dir)
    return Path.cwd() / "config"


__all__ = [
    "ConfigError",
    "LoggingConfig",
    "OpenAIConfig",
    "ServerConfig",
    "Settings",
    "StorageConfig",
    "TimeoutConfig",
    "load_settings",
    "merge_config",
    "parse_settings",
    "resolve_config_dir",
]
