"""CLI branding strings."""

from __future__ import annotations

CLI_DESCRIPTION: str = (
    "pipectx prepares pipeline stage contexts and evaluates ${...} expressions\n"
    "embedded in stage configuration documents."
)
