"""Configuration defaults and filenames."""

from __future__ import annotations

from pipectx.constants.expressions import DEFAULT_LONG_LIVED_BRANCHES

CONFIG_FILENAME: str = "pipectx.yaml"

DEFAULT_ALLOW_UNKNOWN_KEYS: bool = True
DEFAULT_LOG_SUMMARIES: bool = True
DEFAULT_BRANCHES_CONFIG: tuple[str, ...] = DEFAULT_LONG_LIVED_BRANCHES
