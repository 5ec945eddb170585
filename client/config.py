from __future__ import annotations

import os
from typing import Any, Dict

from shared.settings import load_env

DEFAULT_CONFIG: Dict[str, Any] = {
    "log_level": "WARNING",
    "connect_retries": 0,
    "reconnect_backoff": 1.0,
    "max_reconnect_backoff": 30.0,
    "ack_timeout": 0.0,  # TCP; 0 blocks until the server answers or disconnects
    "udp_ack_timeout": 5.0,
}

CLIENT_CONFIG: Dict[str, Any] = DEFAULT_CONFIG.copy()


class ConfigError(Exception):
    """Raised when configuration values are invalid."""

    pass


def load_config(env_path: str = ".env") -> Dict[str, Any]:
    """Load client configuration from env file/environment variables."""
    load_env(env_path)

    for key, default_value in DEFAULT_CONFIG.items():
        env_key = f"CLIENT_{key.upper()}"
        value = os.getenv(env_key, default_value)
        CLIENT_CONFIG[key] = _coerce_type(value, type(default_value))

    _validate_config()
    return CLIENT_CONFIG


def _coerce_type(value: Any, target_type: type) -> Any:
    if isinstance(value, target_type):
        return value
    try:
        if target_type is bool:
            return str(value).lower() in ("1", "true", "yes", "on")
        return target_type(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Cannot convert {value} to {target_type}") from exc


def _validate_config() -> None:
    if CLIENT_CONFIG["connect_retries"] < 0:
        raise ConfigError("connect_retries must not be negative")
    if CLIENT_CONFIG["reconnect_backoff"] <= 0:
        raise ConfigError("reconnect_backoff must be positive")
    if CLIENT_CONFIG["ack_timeout"] < 0 or CLIENT_CONFIG["udp_ack_timeout"] < 0:
        raise ConfigError("ack timeouts must not be negative")


__all__ = ["CLIENT_CONFIG", "DEFAULT_CONFIG", "ConfigError", "load_config"]
