"""Configuration manager for Cartograph using TOML files."""

from __future__ import annotations

import logging
from typing import Any, Dict

import toml

from . import config

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_view_config() -> Dict[str, Any]:
    return {
        "max_distance": config.DEFAULT_MAX_DISTANCE,
        "bidirectional": config.DEFAULT_BIDIRECTIONAL,
    }


def load_full_config() -> Dict[str, Any]:
    """Load the entire TOML config (all sections).

    A missing file yields an empty dict; a malformed one is logged and
    treated as empty.
    """
    if not config.CONFIG_FILE.exists():
        return {}
    try:
        with open(config.CONFIG_FILE, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (toml.TomlDecodeError, UnicodeDecodeError) as exc:
        logger.warning("Ignoring malformed config file %s: %s", config.CONFIG_FILE, exc)
        return {}


def _section(name: str) -> Dict[str, Any]:
    """Return one table of the config, or an empty dict when it is not a table."""
    section = load_full_config().get(name, {})
    if not isinstance(section, dict):
        logger.warning("Ignoring config key %r: expected a table, got %r", name, section)
        return {}
    return section


def _save_full_config(payload: Dict[str, Any]) -> None:
    """Write entire config dict to TOML file, preserving all sections."""
    config.ensure_base_dirs()
    with open(config.CONFIG_FILE, "w", encoding="utf-8") as f:
        toml.dump(payload, f)


# ------------------------------------------------------------------
# View configuration
# ------------------------------------------------------------------

def load_view_config() -> Dict[str, Any]:
    """Load ``[view]`` settings merged over the built-in defaults.

    Returns:
        Dict with ``max_distance`` (int >= 0) and ``bidirectional`` (bool).
    """
    view = default_view_config()
    section = _section("view")

    max_distance = section.get("max_distance")
    if max_distance is not None:
        if isinstance(max_distance, int) and not isinstance(max_distance, bool) and max_distance >= 0:
            view["max_distance"] = max_distance
        else:
            logger.warning("Ignoring invalid view.max_distance: %r", max_distance)

    bidirectional = section.get("bidirectional")
    if bidirectional is not None:
        if isinstance(bidirectional, bool):
            view["bidirectional"] = bidirectional
        else:
            logger.warning("Ignoring invalid view.bidirectional: %r", bidirectional)

    return view


def save_view_config(max_distance: int, bidirectional: bool) -> None:
    """Save view defaults to the ``[view]`` section.

    Preserves ``[logging]`` and other sections in the file.
    """
    payload = load_full_config()
    payload["view"] = {
        "max_distance": max(0, max_distance),
        "bidirectional": bidirectional,
    }
    _save_full_config(payload)


# ------------------------------------------------------------------
# Logging configuration
# ------------------------------------------------------------------

def load_log_level() -> str:
    """Return the configured ``[logging] level``, upper-cased."""
    level = str(_section("logging").get("level", config.DEFAULT_LOG_LEVEL)).upper()
    if level not in LOG_LEVELS:
        logger.warning("Unknown log level %r, falling back to %s", level, config.DEFAULT_LOG_LEVEL)
        return config.DEFAULT_LOG_LEVEL
    return level
