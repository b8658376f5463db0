"""Core data models for pipectx."""

from .execution import Execution, Stage, StageEvaluationContext
from .summary import EvaluationSummary, ExpressionDiagnostic
from .triggers import (
    TRIGGER_TYPES,
    BuildInfo,
    BuildTrigger,
    ConcourseTrigger,
    DefaultTrigger,
    DockerTrigger,
    GitTrigger,
    JenkinsTrigger,
    PipelineTrigger,
    SourceControl,
    Trigger,
    coerce_build_info,
    coerce_trigger,
    decode_trigger,
    trigger_to_mapping,
)

__all__ = [
    "TRIGGER_TYPES",
    "BuildInfo",
    "BuildTrigger",
    "ConcourseTrigger",
    "DefaultTrigger",
    "DockerTrigger",
    "EvaluationSummary",
    "Execution",
    "ExpressionDiagnostic",
    "GitTrigger",
    "JenkinsTrigger",
    "PipelineTrigger",
    "SourceControl",
    "Stage",
    "StageEvaluationContext",
    "Trigger",
    "coerce_build_info",
    "coerce_trigger",
    "decode_trigger",
    "trigger_to_mapping",
]
