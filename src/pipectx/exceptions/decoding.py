"""Exceptions raised while decoding untyped context values into model objects."""

from __future__ import annotations

from pipectx.exceptions.base import PipectxError


class DeserializationError(PipectxError, ValueError):
    """Raised when a trigger or build info mapping matches no known shape."""
