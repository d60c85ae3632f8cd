"""Layout settings. Stored at ~/.cellkit/tabular.json, overridable from the environment."""

from __future__ import annotations

import json
import logging
import os
import shutil
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".cellkit"
SETTINGS_FILE_NAME = "tabular.json"


@dataclass
class LayoutSettings:
    """Defaults used when a caller does not say otherwise."""

    default_width: int | None = None  # None: use the terminal width
    truncate_marker: str = "…"
    border: str = "light"
    separator: str = " "
    cache_size: int = 128


def _get_config_dir() -> Path:
    return Path(os.environ.get("CELLKIT_CONFIG_DIR", Path.home() / CONFIG_DIR_NAME))


def get_settings_path() -> Path:
    return _get_config_dir() / SETTINGS_FILE_NAME


def settings_from_dict(data: dict[str, Any]) -> LayoutSettings:
    known = {f.name for f in fields(LayoutSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown layout settings: %s", ", ".join(unknown))
    return LayoutSettings(**{k: v for k, v in data.items() if k in known})


def load_settings() -> LayoutSettings:
    """Read the settings file, then apply ``CELLKIT_*`` environment overrides.

    An unreadable or invalid settings file is logged and ignored.
    """
    settings = LayoutSettings()
    path = get_settings_path()
    if path.exists():
        try:
            data = json.loads(path.read_text())
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            settings = settings_from_dict(data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Error reading layout settings %s: %s", path, e)

    width = os.environ.get("CELLKIT_WIDTH")
    if width:
        if width.isdecimal():
            settings.default_width = int(width)
        else:
            logger.warning("Ignoring CELLKIT_WIDTH=%r: not a width", width)
    border = os.environ.get("CELLKIT_BORDER")
    if border:
        settings.border = border
    marker = os.environ.get("CELLKIT_TRUNCATE_MARKER")
    if marker is not None:
        settings.truncate_marker = marker
    return settings


def terminal_width(settings: LayoutSettings | None = None) -> int:
    """Width to render at: the configured default, else the terminal's."""
    if settings is None:
        settings = load_settings()
    if settings.default_width is not None:
        return settings.default_width
    return shutil.get_terminal_size().columns
