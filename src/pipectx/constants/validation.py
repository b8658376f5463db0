"""Stable validation error codes and allowed-key sets for config validation."""

from __future__ import annotations

CFG001: str = "CFG001"  # config file not found (explicit --config)
CFG002: str = "CFG002"  # invalid YAML parse
CFG003: str = "CFG003"  # top-level value is not a mapping
CFG004: str = "CFG004"  # unknown key
CFG005: str = "CFG005"  # invalid value type
CFG006: str = "CFG006"  # unknown function name
CFG007: str = "CFG007"  # invalid nested mapping
CFG008: str = "CFG008"  # root directory not found

ALLOWED_CONFIG_KEYS: frozenset[str] = frozenset(
    {
        "allow_unknown_keys",
        "long_lived_branches",
        "functions",
        "log_summaries",
    }
)

ALLOWED_FUNCTION_KEYS: frozenset[str] = frozenset({"disabled"})

BOOLEAN_KEYS: tuple[str, ...] = ("allow_unknown_keys", "log_summaries")
LIST_OF_STRINGS_KEYS: tuple[str, ...] = ("long_lived_branches",)
