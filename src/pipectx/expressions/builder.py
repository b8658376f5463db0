"""Build the per-stage evaluation context."""

from __future__ import annotations

from pipectx.constants.expressions import (
    EXECUTION_KEY,
    PIPELINE_EXECUTION_TYPE,
    TRIGGER_KEY,
)
from pipectx.model import Stage, StageEvaluationContext, trigger_to_mapping
from pipectx.types import Context


def build_execution_context(stage: Stage) -> StageEvaluationContext:
    """Copy the stage context and, for pipeline executions, add ``trigger`` and ``execution``.

    ``trigger`` is the flattened mapping form of the execution's trigger;
    ``execution`` is the execution object itself, which stage lookup
    functions read. Augmentation happens later, inside the processor.
    """
    context: Context = dict(stage.context)
    execution = stage.execution
    if execution is None or execution.type != PIPELINE_EXECUTION_TYPE:
        return StageEvaluationContext(stage=stage, context=context)

    context[TRIGGER_KEY] = trigger_to_mapping(execution.trigger)
    context[EXECUTION_KEY] = execution
    return StageEvaluationContext(stage=stage, context=context, execution_scoped=True)
