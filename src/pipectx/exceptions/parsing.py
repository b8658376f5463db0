"""Parsing-related exceptions."""

from __future__ import annotations

from pipectx.exceptions.base import PipectxError


class DocumentParseError(PipectxError, ValueError):
    """Raised when a source or context document cannot be read or parsed."""
