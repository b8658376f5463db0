"""Read YAML/JSON documents and render evaluated output as JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from pipectx.constants.io import JSON_INDENT, JSON_SUFFIXES, YAML_SUFFIXES
from pipectx.exceptions import DocumentParseError
from pipectx.model.fields import to_plain


def load_document(path: Path) -> dict[str, Any]:
    """Load a mapping document from a `.json`, `.yaml` or `.yml` file.

    Other suffixes are parsed as YAML, which accepts JSON as well. An empty
    file loads as an empty mapping.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentParseError(f"Cannot read {path}: {exc}") from exc

    suffix = path.suffix.lower()
    try:
        if suffix in JSON_SUFFIXES:
            data = json.loads(text) if text.strip() else None
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        kind = "JSON" if suffix in JSON_SUFFIXES else "YAML" if suffix in YAML_SUFFIXES else "document"
        raise DocumentParseError(f"Invalid {kind} in {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DocumentParseError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def render_json(value: Any) -> str:
    """Render evaluated output, projecting model objects onto plain data."""
    return json.dumps(to_plain(value), indent=JSON_INDENT, default=str)
