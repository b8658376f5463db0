"""Constants for placeholder detection, context keys, and evaluation diagnostics."""

from __future__ import annotations

import re

EXPRESSION_START: str = "${"
EXPRESSION_END: str = "}"

# Context keys the augmenter and execution context builder own.
TRIGGER_KEY: str = "trigger"
EXECUTION_KEY: str = "execution"
PARAMETERS_KEY: str = "parameters"
BUILD_INFO_KEY: str = "buildInfo"
SCM_INFO_KEY: str = "scmInfo"

SUMMARY_RESULT_KEY: str = "expressionEvaluationSummary"

DEFAULT_LONG_LIVED_BRANCHES: tuple[str, ...] = ("master", "develop")

FUNCTION_PREFIX: str = "#"

TOKEN_PATTERN: re.Pattern[str] = re.compile(
    r"\s*(?:"
    r"(?P<number>-?\d+(?:\.\d+)?)"
    r"|(?P<string>'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\")"
    r"|(?P<ident>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<punct>[.\[\](),#])"
    r")"
)
NON_ALPHANUMERIC_PATTERN: re.Pattern[str] = re.compile(r"[^A-Za-z0-9]")
CAMEL_BOUNDARY_PATTERN: re.Pattern[str] = re.compile(r"(?<!^)(?=[A-Z])")

KEYWORD_LITERALS: dict[str, object] = {"true": True, "false": False, "null": None}

MANUAL_JUDGMENT_STAGE_TYPE: str = "manualJudgment"
JUDGMENT_INPUT_KEY: str = "judgmentInput"

DIAGNOSTIC_LEVEL_ERROR: str = "ERROR"

PIPELINE_EXECUTION_TYPE: str = "pipeline"
