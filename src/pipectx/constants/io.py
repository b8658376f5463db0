"""Constants for document loading and JSON rendering."""

from __future__ import annotations

YAML_SUFFIXES: frozenset[str] = frozenset({".yaml", ".yml"})
JSON_SUFFIXES: frozenset[str] = frozenset({".json"})
JSON_INDENT: int = 2
