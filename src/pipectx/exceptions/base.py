"""Root exception type for pipectx."""

from __future__ import annotations


class PipectxError(Exception):
    """Base class for all pipectx errors."""
