"""Expression evaluation exceptions.

Everything below ``ExpressionError`` is raised inside the evaluator and
converted into evaluation summary entries; it never reaches callers of
``ExpressionProcessor.process``. ``EvaluatorConfigurationError`` is the
exception that does propagate.
"""

from __future__ import annotations

from pipectx.exceptions.base import PipectxError


class EvaluatorConfigurationError(PipectxError):
    """Raised when the evaluator or its function registry is misconfigured."""


class ExpressionError(PipectxError):
    """Base class for per-field expression failures."""


class ExpressionParseError(ExpressionError):
    """Raised when placeholder text cannot be parsed."""


class UnknownReferenceError(ExpressionError):
    """Raised when an expression references a context field that does not exist."""


class ExpressionFunctionError(ExpressionError):
    """Raised when an expression function is unknown or fails."""
