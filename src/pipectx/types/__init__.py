"""Shared type aliases for pipectx."""

from .common import Context, ExecutionType
from .config import FunctionConfig, ProcessorConfig

__all__ = [
    "Context",
    "ExecutionType",
    "FunctionConfig",
    "ProcessorConfig",
]
