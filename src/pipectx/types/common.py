"""Cross-module type aliases."""

from __future__ import annotations

from typing import Any, Literal, TypeAlias

ExecutionType: TypeAlias = Literal["pipeline", "orchestration"]

Context: TypeAlias = dict[str, Any]
