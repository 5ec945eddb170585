from __future__ import annotations

import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def load_env(env_path: str = ".env") -> bool:
    """Load variables from a .env file if one exists; real env vars win."""
    if Path(env_path).exists():
        return load_dotenv(env_path, override=False)
    return False


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once for an entry point."""
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=[logging.StreamHandler(sys.stdout)])


__all__ = ["LOG_FORMAT", "load_env", "setup_logging"]
