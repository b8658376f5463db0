"""Placeholder detection for literal short-circuiting."""

from __future__ import annotations

from typing import Any

from pipectx.constants.expressions import EXPRESSION_START


def contains_expression(value: Any) -> bool:
    """Return True when ``value`` is a non-empty string containing ``${``."""
    return isinstance(value, str) and bool(value) and EXPRESSION_START in value
