"""Audited function registry for expressions.

Every function callable from ``${fn(...)}`` is registered here. Each takes
the ExpressionScope of the evaluation followed by its expression arguments.
No eval, no dynamic imports, no network access.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

import yaml

from pipectx.constants.expressions import (
    EXECUTION_KEY,
    JUDGMENT_INPUT_KEY,
    MANUAL_JUDGMENT_STAGE_TYPE,
    NON_ALPHANUMERIC_PATTERN,
)
from pipectx.exceptions import EvaluatorConfigurationError, ExpressionFunctionError
from pipectx.model import Execution, Stage
from pipectx.model.fields import to_plain

ExpressionFunction: TypeAlias = Callable[..., Any]


@dataclass(frozen=True)
class ExpressionScope:
    """Read-only view of the context a function call is evaluated in."""

    context: Mapping[str, Any]

    @property
    def execution(self) -> Execution | None:
        execution = self.context.get(EXECUTION_KEY)
        return execution if isinstance(execution, Execution) else None


def to_json(scope: ExpressionScope, value: Any) -> str:
    """Serialize a value (model objects included) to a JSON string."""
    return json.dumps(to_plain(value), default=str)


def to_int(scope: ExpressionScope, value: Any) -> int:
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ExpressionFunctionError(f"Cannot convert {value!r} to an integer") from exc


def to_float(scope: ExpressionScope, value: Any) -> float:
    try:
        return float(str(value).strip())
    except ValueError as exc:
        raise ExpressionFunctionError(f"Cannot convert {value!r} to a float") from exc


def to_boolean(scope: ExpressionScope, value: Any) -> bool:
    """Return True only for a case-insensitive ``"true"``."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def to_base64(scope: ExpressionScope, value: Any) -> str:
    return base64.b64encode(str(value).encode("utf-8")).decode("ascii")


def from_base64(scope: ExpressionScope, value: Any) -> str:
    try:
        return base64.b64decode(str(value), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ExpressionFunctionError(f"Invalid base64 input: {exc}") from exc


def alphanumerical(scope: ExpressionScope, value: Any) -> str:
    """Strip every character that is not an ASCII letter or digit."""
    return NON_ALPHANUMERIC_PATTERN.sub("", str(value))


def read_json(scope: ExpressionScope, text: Any) -> Any:
    try:
        return json.loads(str(text))
    except json.JSONDecodeError as exc:
        raise ExpressionFunctionError(f"Invalid JSON: {exc}") from exc


def read_yaml(scope: ExpressionScope, text: Any) -> Any:
    try:
        return yaml.safe_load(str(text))
    except yaml.YAMLError as exc:
        raise ExpressionFunctionError(f"Invalid YAML: {exc}") from exc


def stage(scope: ExpressionScope, name: str) -> Stage:
    """Return the stage named ``name`` in the current execution."""
    found = _require_execution(scope, "stage").stage_by_name(name)
    if found is None:
        raise ExpressionFunctionError(f"Unable to locate [{name}] stage")
    return found


def stage_exists(scope: ExpressionScope, name: str) -> bool:
    return _require_execution(scope, "stageExists").stage_by_name(name) is not None


def stage_by_ref_id(scope: ExpressionScope, ref_id: str) -> Stage:
    found = _require_execution(scope, "stageByRefId").stage_by_ref_id(ref_id)
    if found is None:
        raise ExpressionFunctionError(f"Unable to locate stage with refId [{ref_id}]")
    return found


def judgment(scope: ExpressionScope, name: str) -> Any:
    """Return the input chosen in the manual judgment stage named ``name``."""
    execution = _require_execution(scope, "judgment")
    for candidate in execution.stages:
        if candidate.type == MANUAL_JUDGMENT_STAGE_TYPE and candidate.name == name:
            return candidate.context.get(JUDGMENT_INPUT_KEY)
    raise ExpressionFunctionError(f"Unable to locate manual judgment stage [{name}]")


def _require_execution(scope: ExpressionScope, function_name: str) -> Execution:
    execution = scope.execution
    if execution is None:
        raise ExpressionFunctionError(f"{function_name}() requires an execution in the evaluation context")
    return execution


FUNCTION_REGISTRY: dict[str, ExpressionFunction] = {
    "toJson": to_json,
    "toInt": to_int,
    "toFloat": to_float,
    "toBoolean": to_boolean,
    "toBase64": to_base64,
    "fromBase64": from_base64,
    "alphanumerical": alphanumerical,
    "readJson": read_json,
    "readYaml": read_yaml,
    "stage": stage,
    "stageExists": stage_exists,
    "stageByRefId": stage_by_ref_id,
    "judgment": judgment,
}


def build_function_registry(disabled: Iterable[str] = ()) -> dict[str, ExpressionFunction]:
    """Return the registry without the ``disabled`` functions.

    Raises EvaluatorConfigurationError when a disabled name is not registered.
    """
    disabled_names = set(disabled)
    unknown = sorted(disabled_names - FUNCTION_REGISTRY.keys())
    if unknown:
        raise EvaluatorConfigurationError(f"Unknown expression function(s): {', '.join(unknown)}")
    return {name: fn for name, fn in FUNCTION_REGISTRY.items() if name not in disabled_names}
