from __future__ import annotations

import os
from typing import Any, Dict

from shared.settings import load_env

DEFAULT_SERVER_CONFIG: Dict[str, Any] = {
    "host": "0.0.0.0",
    "port": 8088,
    "backlog": 10,
    "max_connections": 200,
    "log_level": "INFO",
}

SERVER_CONFIG = DEFAULT_SERVER_CONFIG.copy()


class ConfigError(Exception):
    """Raised when configuration values are invalid."""

    pass


def load_server_config(env_path: str = ".env") -> Dict[str, Any]:
    load_env(env_path)
    try:
        SERVER_CONFIG["host"] = os.getenv("SERVER_HOST", SERVER_CONFIG["host"])
        SERVER_CONFIG["port"] = int(os.getenv("SERVER_PORT", SERVER_CONFIG["port"]))
        SERVER_CONFIG["backlog"] = int(os.getenv("SERVER_BACKLOG", SERVER_CONFIG["backlog"]))
        SERVER_CONFIG["max_connections"] = int(os.getenv("SERVER_MAX_CONNECTIONS", SERVER_CONFIG["max_connections"]))
    except ValueError as exc:
        raise ConfigError(f"Invalid server setting: {exc}") from exc
    SERVER_CONFIG["log_level"] = os.getenv("SERVER_LOG_LEVEL", SERVER_CONFIG["log_level"])
    _validate_config()
    return SERVER_CONFIG


def _validate_config() -> None:
    if not (0 <= SERVER_CONFIG["port"] <= 65535):
        raise ConfigError("port must be between 0 and 65535")
    if SERVER_CONFIG["backlog"] <= 0:
        raise ConfigError("backlog must be positive")
    if SERVER_CONFIG["max_connections"] < 0:
        raise ConfigError("max_connections must not be negative")


__all__ = ["SERVER_CONFIG", "DEFAULT_SERVER_CONFIG", "ConfigError", "load_server_config"]
