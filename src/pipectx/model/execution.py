"""Minimal execution and stage model the context builder and stage functions read."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pipectx.model.fields import to_plain
from pipectx.model.triggers import Trigger
from pipectx.types import Context, ExecutionType


@dataclass
class Stage:
    """A single stage of an execution and its mutable context."""

    name: str
    type: str = ""
    id: str = ""
    ref_id: str | None = None
    status: str = "NOT_STARTED"
    context: Context = field(default_factory=dict)
    outputs: dict[str, Any] = field(default_factory=dict)
    execution: Execution | None = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Project the stage without its back-reference to the owning execution."""
        return {
            "id": self.id,
            "refId": self.ref_id,
            "name": self.name,
            "type": self.type,
            "status": self.status,
            "context": to_plain(self.context),
            "outputs": to_plain(self.outputs),
        }


@dataclass
class Execution:
    """A pipeline run or an ad-hoc orchestration owning a list of stages."""

    type: ExecutionType
    id: str = ""
    application: str | None = None
    name: str | None = None
    trigger: Trigger | None = None
    stages: list[Stage] = field(default_factory=list)

    def add_stage(self, stage: Stage) -> Stage:
        """Attach a stage to this execution and return it."""
        stage.execution = self
        self.stages.append(stage)
        return stage

    def stage_by_name(self, name: str) -> Stage | None:
        return next((stage for stage in self.stages if stage.name == name), None)

    def stage_by_ref_id(self, ref_id: str) -> Stage | None:
        return next((stage for stage in self.stages if stage.ref_id == ref_id), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "application": self.application,
            "name": self.name,
            "trigger": self.trigger.to_dict() if self.trigger is not None else None,
            "stages": [stage.to_dict() for stage in self.stages],
        }


@dataclass(frozen=True)
class StageEvaluationContext:
    """A stage paired with the context its configuration is evaluated against.

    ``execution_scoped`` is true when the builder injected execution-level
    fields (``trigger`` and ``execution``) into ``context``.
    """

    stage: Stage
    context: Context
    execution_scoped: bool = False
