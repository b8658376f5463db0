"""Configuration-related exceptions."""

from __future__ import annotations

from pipectx.exceptions.base import PipectxError


class ConfigError(PipectxError, ValueError):
    """Raised when processor configuration is invalid."""
