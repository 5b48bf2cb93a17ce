"""Configuration paths and view defaults for Cartograph."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("CARTOGRAPH_HOME", str(Path.home() / ".cartograph"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

DEFAULT_MAX_DISTANCE = 2
DEFAULT_BIDIRECTIONAL = True
DEFAULT_LOG_LEVEL = "WARNING"


def ensure_base_dirs() -> None:
    """Create the base directory for the config file if needed."""
    BASE_DIR.mkdir(parents=True, exist_ok=True)
