"""Aggregated diagnostics for one or more expression evaluation passes."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from pipectx.constants.expressions import DIAGNOSTIC_LEVEL_ERROR


def _now_millis() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ExpressionDiagnostic:
    """Why a single placeholder could not be evaluated."""

    expression: str
    description: str
    exception_type: str | None = None
    level: str = DIAGNOSTIC_LEVEL_ERROR
    timestamp: int = field(default_factory=_now_millis)

    def to_dict(self) -> dict[str, Any]:
        return {
            "expression": self.expression,
            "description": self.description,
            "exceptionType": self.exception_type,
            "level": self.level,
            "timestamp": self.timestamp,
        }


@dataclass
class EvaluationSummary:
    """Counts of attempted and failed substitutions plus failure detail per field path.

    Counts only ever grow. A summary may be passed to several ``process``
    calls to aggregate across them.
    """

    total_evaluated: int = 0
    failure_count: int = 0
    failures: dict[str, list[ExpressionDiagnostic]] = field(default_factory=dict)

    @property
    def has_failures(self) -> bool:
        return self.failure_count > 0

    def increment_total_evaluated(self) -> None:
        self.total_evaluated += 1

    def add_failure(
        self,
        field_path: str,
        *,
        expression: str,
        description: str,
        exception_type: str | None = None,
    ) -> None:
        """Record one failed substitution at ``field_path``."""
        diagnostic = ExpressionDiagnostic(
            expression=expression,
            description=description,
            exception_type=exception_type,
        )
        self.failures.setdefault(field_path, []).append(diagnostic)
        self.failure_count += 1

    def expression_result(self) -> dict[str, list[dict[str, Any]]]:
        """Return the failure detail as a JSON-serializable mapping."""
        return {
            path: [diagnostic.to_dict() for diagnostic in diagnostics]
            for path, diagnostics in sorted(self.failures.items())
        }

    def __str__(self) -> str:
        return f"{self.total_evaluated} expression(s), {self.failure_count} failure(s)"
