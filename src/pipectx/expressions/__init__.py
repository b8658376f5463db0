"""Context augmentation and expression evaluation for stage configuration."""

from __future__ import annotations

from .augmenter import augment_context, select_scm_info
from .builder import build_execution_context
from .detector import contains_expression
from .evaluator import Evaluator, PipelineExpressionEvaluator
from .functions import FUNCTION_REGISTRY, ExpressionScope, build_function_registry
from .processor import ExpressionProcessor

__all__ = [
    "FUNCTION_REGISTRY",
    "Evaluator",
    "ExpressionProcessor",
    "ExpressionScope",
    "PipelineExpressionEvaluator",
    "augment_context",
    "build_execution_context",
    "build_function_registry",
    "contains_expression",
    "select_scm_info",
]
