"""Shared exception hierarchy for pipectx."""

from __future__ import annotations

from .base import PipectxError
from .config import ConfigError
from .decoding import DeserializationError
from .expressions import (
    EvaluatorConfigurationError,
    ExpressionError,
    ExpressionFunctionError,
    ExpressionParseError,
    UnknownReferenceError,
)
from .parsing import DocumentParseError

__all__ = [
    "ConfigError",
    "DeserializationError",
    "DocumentParseError",
    "EvaluatorConfigurationError",
    "ExpressionError",
    "ExpressionFunctionError",
    "ExpressionParseError",
    "PipectxError",
    "UnknownReferenceError",
]
