"""Stage context preparation and expression evaluation for pipeline stages."""

from __future__ import annotations

__version__ = "0.1.0"

from pipectx.expressions import (
    ExpressionProcessor,
    augment_context,
    build_execution_context,
    contains_expression,
)
from pipectx.model import EvaluationSummary, StageEvaluationContext

__all__ = [
    "EvaluationSummary",
    "ExpressionProcessor",
    "StageEvaluationContext",
    "__version__",
    "augment_context",
    "build_execution_context",
    "contains_expression",
]
