"""Typed configuration structures for the expression processor."""

from __future__ import annotations

from dataclasses import dataclass

from pipectx.constants.config import (
    DEFAULT_ALLOW_UNKNOWN_KEYS,
    DEFAULT_BRANCHES_CONFIG,
    DEFAULT_LOG_SUMMARIES,
)


@dataclass(frozen=True)
class FunctionConfig:
    """Expression function toggles."""

    disabled: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProcessorConfig:
    """Resolved processor config."""

    allow_unknown_keys: bool = DEFAULT_ALLOW_UNKNOWN_KEYS
    long_lived_branches: tuple[str, ...] = DEFAULT_BRANCHES_CONFIG
    functions: FunctionConfig = FunctionConfig()
    log_summaries: bool = DEFAULT_LOG_SUMMARIES
