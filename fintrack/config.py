"""Configuration file management for fintrack."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from fintrack.domain.transactions import SUGGESTED_CATEGORIES
from fintrack.store.schema import get_db_path

DEFAULT_CURRENCY = "$"
CONFIG_KEYS = ("database", "currency", "categories")


@dataclass(frozen=True)
class Settings:
    """Effective settings after merging the config file over defaults."""

    database: Path
    currency: str = DEFAULT_CURRENCY
    categories: list[str] = field(default_factory=lambda: list(SUGGESTED_CATEGORIES))


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the path of fintrack's config.toml under XDG_CONFIG_HOME."""
    return get_xdg_config_home() / "fintrack" / "config.toml"


def default_config() -> dict[str, Any]:
    """Build the default configuration dictionary."""
    return {
        "database": str(get_db_path()),
        "currency": DEFAULT_CURRENCY,
        "categories": list(SUGGESTED_CATEGORIES),
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Write the default database, currency and categories to a new config file.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    save_config(default_config(), path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Read the fintrack keys from a TOML config file.

    Keys other than database, currency and categories are ignored.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Mapping of the fintrack keys present in the file.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    path = config_path or get_config_path()
    raw = tomllib.loads(path.read_text(encoding="utf-8"))
    return {key: value for key, value in raw.items() if key in CONFIG_KEYS}


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Write the fintrack keys of a config mapping, readable by the owner only.

    Args:
        config: Mapping with database, currency and/or categories.
        config_path: Path to config file. If None, uses default location.
    """
    path = config_path or get_config_path()
    path.write_text(tomli_w.dumps({key: config[key] for key in CONFIG_KEYS if key in config}), encoding="utf-8")
    path.chmod(0o600)


def load_settings(config_path: Path | None = None) -> Settings:
    """Load effective settings, falling back to defaults for anything unset.

    A missing config file is not an error; defaults are used.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Settings with file values merged over defaults.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = {}

    merged = {**default_config(), **config}

    categories = merged.get("categories")
    if not isinstance(categories, list) or not all(isinstance(c, str) for c in categories):
        categories = list(SUGGESTED_CATEGORIES)

    return Settings(
        database=Path(str(merged["database"])).expanduser(),
        currency=str(merged.get("currency") or DEFAULT_CURRENCY),
        categories=categories,
    )
