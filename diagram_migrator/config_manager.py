"""Configuration manager for diagram-migrator using TOML files."""

from __future__ import annotations

import logging
from dataclasses import asdict, fields
from typing import Any, Dict

import toml

from . import config
from .models import MigrationOptions

logger = logging.getLogger(__name__)

CONFIG_FILE = config.CONFIG_FILE

MIGRATION_SECTION = "migration"

_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


def load_full_config() -> Dict[str, Any]:
    """Load the entire TOML config (all sections)."""
    if not CONFIG_FILE.exists():
        return {}
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", CONFIG_FILE, exc)
        return {}


def _save_full_config(data: Dict[str, Any]) -> None:
    """Write entire config dict to TOML file, preserving all sections."""
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    with open(CONFIG_FILE, "w", encoding="utf-8") as f:
        toml.dump(data, f)


def load_migration_config() -> Dict[str, Any]:
    """Load the ``[migration]`` section, or an empty dict."""
    section = load_full_config().get(MIGRATION_SECTION, {})
    return section if isinstance(section, dict) else {}


def migration_options() -> MigrationOptions:
    """Build :class:`MigrationOptions` from defaults overlaid with the config file.

    Unknown keys and values of the wrong type are ignored with a warning.
    """
    defaults = asdict(MigrationOptions())
    overrides = {}
    for key, value in load_migration_config().items():
        if key not in defaults:
            logger.warning("Unknown migration option '%s' in %s", key, CONFIG_FILE)
        elif not isinstance(value, type(defaults[key])):
            logger.warning("Migration option '%s' must be %s", key, type(defaults[key]).__name__)
        else:
            overrides[key] = value
    return MigrationOptions(**{**defaults, **overrides})


def option_names() -> list[str]:
    return [f.name for f in fields(MigrationOptions)]


def parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise ValueError(f"Expected a boolean (true/false), got '{text}'")


def save_migration_option(key: str, value: str) -> MigrationOptions:
    """Persist one ``[migration]`` option and return the resulting options.

    Preserves other sections in the file.

    Raises:
        KeyError: If ``key`` is not a known option.
        ValueError: If ``value`` cannot be parsed for that option.
    """
    if key not in option_names():
        raise KeyError(key)
    data = load_full_config()
    section = data.setdefault(MIGRATION_SECTION, {})
    section[key] = parse_bool(value)
    _save_full_config(data)
    return migration_options()


def clear_migration_config() -> None:
    """Remove ``[migration]`` section from config, resetting to defaults."""
    data = load_full_config()
    if data.pop(MIGRATION_SECTION, None) is not None:
        _save_full_config(data)
