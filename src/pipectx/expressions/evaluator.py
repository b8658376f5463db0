"""Default expression evaluator: walks a document and substitutes ``${...}`` placeholders.

The evaluator holds no per-call state, so one instance can serve many
concurrent evaluations as long as each call gets its own context and summary.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from pipectx.exceptions import (
    EvaluatorConfigurationError,
    ExpressionError,
    ExpressionFunctionError,
    UnknownReferenceError,
)
from pipectx.expressions.detector import contains_expression
from pipectx.expressions.functions import FUNCTION_REGISTRY, ExpressionFunction, ExpressionScope
from pipectx.expressions.parser import (
    Attribute,
    Call,
    Index,
    Literal,
    Node,
    Placeholder,
    Reference,
    parse_expression,
    split_template,
)
from pipectx.model import EvaluationSummary
from pipectx.model.fields import snake_key, to_plain

logger = logging.getLogger(__name__)


class Evaluator(Protocol):
    """Evaluates a document against a context, recording every substitution in ``summary``.

    Implementations must not raise for a per-field failure and must return
    a mapping with the same shape as ``source``.
    """

    def evaluate(
        self,
        source: Mapping[str, Any],
        context: Mapping[str, Any],
        summary: EvaluationSummary,
        allow_unknown_keys: bool,
    ) -> dict[str, Any]: ...


@dataclass(frozen=True)
class _EvaluationPass:
    scope: ExpressionScope
    summary: EvaluationSummary
    allow_unknown_keys: bool


class PipelineExpressionEvaluator:
    """Evaluator supporting property references and registered function calls."""

    def __init__(self, functions: Mapping[str, ExpressionFunction] | None = None) -> None:
        registry = dict(FUNCTION_REGISTRY if functions is None else functions)
        not_callable = sorted(name for name, fn in registry.items() if not callable(fn))
        if not_callable:
            raise EvaluatorConfigurationError(f"Expression function(s) are not callable: {', '.join(not_callable)}")
        self._functions = registry

    @property
    def function_names(self) -> tuple[str, ...]:
        return tuple(sorted(self._functions))

    def evaluate(
        self,
        source: Mapping[str, Any],
        context: Mapping[str, Any],
        summary: EvaluationSummary,
        allow_unknown_keys: bool,
    ) -> dict[str, Any]:
        """Return a copy of ``source`` with every placeholder substituted.

        A placeholder that fails leaves its whole string literal. Unknown
        references are recorded as failures unless ``allow_unknown_keys``;
        every other error is always recorded.
        """
        run = _EvaluationPass(
            scope=ExpressionScope(context=context),
            summary=summary,
            allow_unknown_keys=allow_unknown_keys,
        )
        return self._walk_mapping(source, "", run)

    def _walk(self, value: Any, path: str, run: _EvaluationPass) -> Any:
        if isinstance(value, Mapping):
            return self._walk_mapping(value, path, run)
        if isinstance(value, (list, tuple)):
            return [self._walk(item, f"{path}[{index}]", run) for index, item in enumerate(value)]
        if contains_expression(value):
            return self._evaluate_string(value, path, run)
        return value

    def _walk_mapping(self, value: Mapping[str, Any], path: str, run: _EvaluationPass) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, item in value.items():
            child_path = f"{path}.{key}" if path else str(key)
            result[key] = self._walk(item, child_path, run)
        return result

    def _evaluate_string(self, text: str, path: str, run: _EvaluationPass) -> Any:
        try:
            parts = split_template(text)
        except ExpressionError as exc:
            run.summary.increment_total_evaluated()
            self._record_failure(run, path, text, exc)
            return text

        values: list[Any] = []
        failed = False
        for part in parts:
            if not isinstance(part, Placeholder):
                continue
            run.summary.increment_total_evaluated()
            try:
                values.append(self._resolve(parse_expression(part.body), run.scope))
            except UnknownReferenceError as exc:
                failed = True
                if not run.allow_unknown_keys:
                    self._record_failure(run, path, part.text, exc)
            except ExpressionError as exc:
                failed = True
                self._record_failure(run, path, part.text, exc)

        if failed:
            return text
        if len(parts) == 1:
            return values[0]

        rendered = iter(values)
        return "".join(_render(next(rendered)) if isinstance(part, Placeholder) else part for part in parts)

    def _record_failure(self, run: _EvaluationPass, path: str, expression: str, exc: ExpressionError) -> None:
        logger.debug("Failed to evaluate %s at %s: %s", expression, path, exc)
        run.summary.add_failure(
            path,
            expression=expression,
            description=f"Failed to evaluate [{path}] {exc}",
            exception_type=type(exc).__name__,
        )

    def _resolve(self, node: Node, scope: ExpressionScope) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Reference):
            if node.name not in scope.context:
                raise UnknownReferenceError(f"unknown reference '{node.name}'")
            return scope.context[node.name]
        if isinstance(node, Attribute):
            return _read_attribute(self._resolve(node.target, scope), node.name)
        if isinstance(node, Index):
            return _read_index(self._resolve(node.target, scope), self._resolve(node.key, scope))
        return self._call(node, scope)

    def _call(self, node: Call, scope: ExpressionScope) -> Any:
        function = self._functions.get(node.name)
        if function is None:
            raise ExpressionFunctionError(f"unknown function '{node.name}'")
        args = [self._resolve(arg, scope) for arg in node.args]
        try:
            return function(scope, *args)
        except ExpressionError:
            raise
        except Exception as exc:
            raise ExpressionFunctionError(f"{node.name}() failed: {exc}") from exc


def _read_attribute(target: Any, name: str) -> Any:
    if target is None:
        raise UnknownReferenceError(f"cannot read '{name}' of null")
    if isinstance(target, Mapping):
        if name not in target:
            raise UnknownReferenceError(f"'{name}' not found")
        return target[name]
    if name.startswith("_") or isinstance(target, (str, int, float, bool, list, tuple)):
        raise UnknownReferenceError(f"'{name}' not found on {type(target).__name__}")

    for attribute in (snake_key(name), name):
        try:
            value = getattr(target, attribute)
        except AttributeError:
            continue
        except Exception as exc:
            raise ExpressionError(f"reading '{name}' of {type(target).__name__} failed: {exc}") from exc
        if not callable(value):
            return value
    raise UnknownReferenceError(f"'{name}' not found on {type(target).__name__}")


def _read_index(target: Any, key: Any) -> Any:
    if isinstance(target, Mapping):
        if not isinstance(key, (str, int, float, bool)) and key is not None:
            raise ExpressionError(f"mapping key must be a scalar, got {type(key).__name__}")
        if key not in target:
            raise UnknownReferenceError(f"'{key}' not found")
        return target[key]
    if isinstance(target, (list, tuple)):
        if isinstance(key, bool) or not isinstance(key, int):
            raise ExpressionError(f"list index must be an integer, got {key!r}")
        if not -len(target) <= key < len(target):
            raise UnknownReferenceError(f"index {key} out of range")
        return target[key]
    if isinstance(key, str):
        return _read_attribute(target, key)
    raise ExpressionError(f"cannot index {type(target).__name__} with {key!r}")


def _render(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (Mapping, list, tuple)) or callable(getattr(value, "to_dict", None)):
        return json.dumps(to_plain(value), default=str)
    return str(value)
