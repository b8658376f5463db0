"""Configuration loading and validation for the expression processor."""

from __future__ import annotations

import difflib
import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from pipectx.constants.config import (
    CONFIG_FILENAME,
    DEFAULT_ALLOW_UNKNOWN_KEYS,
    DEFAULT_BRANCHES_CONFIG,
    DEFAULT_LOG_SUMMARIES,
)
from pipectx.constants.validation import (
    ALLOWED_CONFIG_KEYS,
    ALLOWED_FUNCTION_KEYS,
    BOOLEAN_KEYS,
    CFG001,
    CFG002,
    CFG003,
    CFG004,
    CFG005,
    CFG006,
    CFG007,
    LIST_OF_STRINGS_KEYS,
)
from pipectx.exceptions import ConfigError
from pipectx.exceptions.validation import ValidationError
from pipectx.expressions.functions import FUNCTION_REGISTRY
from pipectx.types import FunctionConfig, ProcessorConfig

__all__ = [
    "FunctionConfig",
    "ProcessorConfig",
    "config_fingerprint",
    "load_config",
    "validate_config_file",
]


def load_config(root: Path, config_path: Path | None = None) -> ProcessorConfig:
    """Load and validate processor config from `pipectx.yaml` or an explicit path."""
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return ProcessorConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML config file at {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a YAML mapping")

    unknown = sorted(set(raw) - ALLOWED_CONFIG_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(map(str, unknown))}")

    for key in BOOLEAN_KEYS:
        if key in raw and not isinstance(raw[key], bool):
            raise ConfigError(f"{key} must be a boolean")

    functions_raw = raw.get("functions", {})
    if functions_raw is None:
        functions_raw = {}
    if not isinstance(functions_raw, dict):
        raise ConfigError("functions must be a mapping")
    unknown_function_keys = sorted(set(functions_raw) - ALLOWED_FUNCTION_KEYS)
    if unknown_function_keys:
        raise ConfigError(f"Unknown functions key(s): {', '.join(map(str, unknown_function_keys))}")

    disabled = tuple(_ensure_string_list(functions_raw.get("disabled", []), "functions.disabled"))
    unknown_functions = sorted(set(disabled) - FUNCTION_REGISTRY.keys())
    if unknown_functions:
        raise ConfigError(f"functions.disabled names unknown function(s): {', '.join(unknown_functions)}")

    branches = tuple(
        branch.strip()
        for branch in _ensure_string_list(
            raw.get("long_lived_branches", list(DEFAULT_BRANCHES_CONFIG)),
            "long_lived_branches",
        )
        if branch.strip()
    )

    return ProcessorConfig(
        allow_unknown_keys=raw.get("allow_unknown_keys", DEFAULT_ALLOW_UNKNOWN_KEYS),
        long_lived_branches=branches,
        functions=FunctionConfig(disabled=disabled),
        log_summaries=raw.get("log_summaries", DEFAULT_LOG_SUMMARIES),
    )


def config_fingerprint(config: ProcessorConfig) -> str:
    """Return a stable hash fingerprint of the resolved config."""
    payload = {
        "allow_unknown_keys": config.allow_unknown_keys,
        "long_lived_branches": list(config.long_lived_branches),
        "functions_disabled": sorted(config.functions.disabled),
        "log_summaries": config.log_summaries,
    }
    blob = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(blob).hexdigest()


def _ensure_string_list(value: Any, key_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key_name} must be a list of strings")
    return list(value)


def validate_config_file(
    root: Path,
    config_path: Path | None = None,
    *,
    config_explicit: bool = False,
) -> list[ValidationError]:
    """Validate a pipectx.yaml file and return all validation errors.

    Collect-all counterpart of :func:`load_config` used by
    ``pipectx validate-config``. It never raises.
    """
    errors: list[ValidationError] = []
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    path_str = str(path)

    if not path.exists():
        if config_explicit:
            errors.append(
                ValidationError(
                    code=CFG001,
                    path=path_str,
                    field="",
                    message=f"config file not found: {path}",
                )
            )
        return errors

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        errors.append(
            ValidationError(
                code=CFG002,
                path=path_str,
                field="",
                message=f"invalid YAML: {exc}",
            )
        )
        return errors

    if raw is None:
        return errors

    if not isinstance(raw, dict):
        errors.append(
            ValidationError(
                code=CFG003,
                path=path_str,
                field="",
                message=f"config must be a YAML mapping, got {type(raw).__name__}",
            )
        )
        return errors

    for key in sorted(map(str, raw)):
        if key not in ALLOWED_CONFIG_KEYS:
            errors.append(
                ValidationError(
                    code=CFG004,
                    path=path_str,
                    field=key,
                    message=f"unknown key `{key}`",
                    hint=_suggest_key(key, ALLOWED_CONFIG_KEYS),
                )
            )

    for key in BOOLEAN_KEYS:
        if key in raw and not isinstance(raw[key], bool):
            errors.append(
                ValidationError(
                    code=CFG005,
                    path=path_str,
                    field=key,
                    message=f"invalid type for `{key}`",
                    hint="expected a boolean",
                )
            )

    for key in LIST_OF_STRINGS_KEYS:
        if key in raw and not _is_string_list(raw[key]):
            errors.append(
                ValidationError(
                    code=CFG005,
                    path=path_str,
                    field=key,
                    message=f"invalid type for `{key}`",
                    hint="expected a list of strings",
                )
            )

    _validate_functions_block(raw, path_str, errors)

    return errors


def _validate_functions_block(
    raw: dict[str, Any],
    path_str: str,
    errors: list[ValidationError],
) -> None:
    """Validate the ``functions`` nested mapping in pipectx.yaml."""
    if "functions" not in raw:
        return
    functions = raw["functions"]
    if functions is None:
        return
    if not isinstance(functions, dict):
        errors.append(
            ValidationError(
                code=CFG007,
                path=path_str,
                field="functions",
                message="`functions` must be a mapping",
            )
        )
        return

    for key in sorted(map(str, functions)):
        if key not in ALLOWED_FUNCTION_KEYS:
            errors.append(
                ValidationError(
                    code=CFG004,
                    path=path_str,
                    field=f"functions.{key}",
                    message=f"unknown key `{key}` in `functions`",
                    hint=_suggest_key(key, ALLOWED_FUNCTION_KEYS),
                )
            )

    if "disabled" not in functions:
        return
    disabled = functions["disabled"]
    if not _is_string_list(disabled):
        errors.append(
            ValidationError(
                code=CFG005,
                path=path_str,
                field="functions.disabled",
                message="invalid type for `functions.disabled`",
                hint="expected a list of strings",
            )
        )
        return

    registered = frozenset(FUNCTION_REGISTRY)
    for name in sorted(set(disabled or [])):
        if name not in registered:
            errors.append(
                ValidationError(
                    code=CFG006,
                    path=path_str,
                    field="functions.disabled",
                    message=f"unknown expression function `{name}`",
                    hint=_suggest_key(name, registered),
                )
            )


def _is_string_list(value: Any) -> bool:
    return value is None or (isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value))


def _suggest_key(unknown: str, allowed: frozenset[str]) -> str:
    """Return a 'did you mean …' hint for a close key match, or empty string."""
    matches = difflib.get_close_matches(unknown, sorted(allowed), n=1, cutoff=0.6)
    if matches:
        return f"did you mean `{matches[0]}`?"
    return ""
