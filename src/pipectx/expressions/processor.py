"""Top-level entry point: augment the context, evaluate a stage document, surface diagnostics."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pipectx.constants.expressions import SUMMARY_RESULT_KEY
from pipectx.expressions.augmenter import augment_context
from pipectx.expressions.evaluator import Evaluator, PipelineExpressionEvaluator
from pipectx.expressions.functions import build_function_registry
from pipectx.model import EvaluationSummary, StageEvaluationContext
from pipectx.types import ProcessorConfig

logger = logging.getLogger(__name__)


class ExpressionProcessor:
    """Evaluates stage configuration documents against their stage context.

    One processor can be shared across concurrently evaluated stages: it
    keeps no per-call state and never mutates the caller's context. The
    injected evaluator must be equally safe to share.
    """

    def __init__(
        self,
        config: ProcessorConfig | None = None,
        evaluator: Evaluator | None = None,
    ) -> None:
        self._config = config or ProcessorConfig()
        if evaluator is None:
            default_evaluator = PipelineExpressionEvaluator(build_function_registry(self._config.functions.disabled))
            logger.debug("Expression functions: %s", ", ".join(default_evaluator.function_names))
            evaluator = default_evaluator
        self._evaluator = evaluator

    @property
    def config(self) -> ProcessorConfig:
        return self._config

    def process(
        self,
        source: Mapping[str, Any] | None,
        context: Mapping[str, Any],
        allow_unknown_keys: bool,
        summary: EvaluationSummary | None = None,
        *,
        log_summary: bool = False,
    ) -> dict[str, Any] | None:
        """Evaluate ``source`` against ``context``.

        Returns None for a None source and a new empty dict for an empty
        one. Per-field failures never raise: failed fields keep their
        literal text and, when any failed, the result carries an
        ``expressionEvaluationSummary`` block. Pass ``summary`` to aggregate
        counts across calls. ``log_summary`` requests an INFO record once
        anything was evaluated.

        Raises DeserializationError when the context holds a malformed
        trigger.
        """
        if source is None:
            return None
        if not source:
            return {}

        if summary is None:
            summary = EvaluationSummary()

        augmented = augment_context(context, long_lived_branches=self._config.long_lived_branches)
        result = self._evaluator.evaluate(source, augmented, summary, allow_unknown_keys)

        if log_summary and self._config.log_summaries and summary.total_evaluated > 0:
            logger.info("Evaluated %s", summary)

        if summary.failure_count > 0:
            result[SUMMARY_RESULT_KEY] = summary.expression_result()

        return result

    def process_stage(
        self,
        stage_context: StageEvaluationContext,
        source: Mapping[str, Any] | None,
        allow_unknown_keys: bool,
        summary: EvaluationSummary | None = None,
    ) -> dict[str, Any] | None:
        """Evaluate ``source`` against a built stage context, logging when it is execution scoped."""
        return self.process(
            source,
            stage_context.context,
            allow_unknown_keys,
            summary,
            log_summary=stage_context.execution_scoped,
        )
