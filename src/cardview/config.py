"""cardview configuration loading."""

import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any

import yaml  # type: ignore[import-untyped]

from .constants import (
    DEFAULT_CACHE_SIZE,
    DEFAULT_EXTENSIONS,
    DEFAULT_FLUSH_INTERVAL,
    DEFAULT_LOAD_MORE_THRESHOLD,
    DEFAULT_PAGE_SIZE,
    DEFAULT_REFRESH_INTERVAL,
)

logger = logging.getLogger(__name__)


@dataclass
class CardViewConfig:
    """User settings for cardview."""

    page_size: int = DEFAULT_PAGE_SIZE
    flush_interval: float = DEFAULT_FLUSH_INTERVAL
    case_sensitive: bool = False
    sort: str = "modified-desc"
    pinned_files: list[str] = field(default_factory=list)
    show_empty_notes: bool = False
    refresh_interval: int = DEFAULT_REFRESH_INTERVAL
    cache_size: int = DEFAULT_CACHE_SIZE
    load_more_threshold: int = DEFAULT_LOAD_MORE_THRESHOLD
    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))


def _get_config_path() -> str:
    """Get the path to the cardview config file."""
    return os.path.expanduser("~/.config/cardview/cardview.yml")


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Return value if it has the same type as the default, else the default."""
    if isinstance(default, bool):
        ok = isinstance(value, bool)
    elif isinstance(default, float):
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        if ok:
            value = float(value)
    elif isinstance(default, int):
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif isinstance(default, list):
        ok = isinstance(value, list) and all(isinstance(item, str) for item in value)
    else:
        ok = isinstance(value, type(default))

    if not ok:
        logger.warning("Ignoring invalid value for %s: %r", name, value)
        return default
    return value


def load_config() -> CardViewConfig:
    """Load config from cardview.yml, returning defaults for anything missing."""
    config_path = _get_config_path()

    if not os.path.exists(config_path):
        return CardViewConfig()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning("Ignoring invalid config file %s: %s", config_path, e)
        return CardViewConfig()

    if data is None:
        return CardViewConfig()
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a mapping", config_path)
        return CardViewConfig()

    defaults = CardViewConfig()
    values: dict[str, Any] = {}
    for f in fields(CardViewConfig):
        if f.name in data:
            values[f.name] = _coerce(f.name, data[f.name], getattr(defaults, f.name))

    return CardViewConfig(**values)
