"""Tests for config validation (error codes, messages, ordering)."""

from __future__ import annotations

from pathlib import Path

import pytest

from pipectx.cli.main import main
from pipectx.config import _suggest_key, validate_config_file
from pipectx.constants.validation import (
    ALLOWED_CONFIG_KEYS,
    CFG001,
    CFG002,
    CFG003,
    CFG004,
    CFG005,
    CFG006,
    CFG007,
    CFG008,
)
from pipectx.exceptions.validation import ValidationError, format_errors, sort_errors
from pipectx.validation import preflight_validate


def _write_config(tmp_path: Path, content: str) -> Path:
    cfg = tmp_path / "pipectx.yaml"
    cfg.write_text(content, encoding="utf-8")
    return cfg


def test_validation_error_format_with_hint() -> None:
    err = ValidationError(
        code="CFG004",
        path="/repo/pipectx.yaml",
        field="log_summary",
        message="unknown key `log_summary`",
        hint="did you mean `log_summaries`?",
    )
    assert err.format() == "[CFG004] /repo/pipectx.yaml unknown key `log_summary` (did you mean `log_summaries`?)"


def test_validation_error_format_without_hint() -> None:
    err = ValidationError(
        code="CFG003",
        path="/repo/pipectx.yaml",
        field="",
        message="config must be a YAML mapping, got list",
    )
    assert err.format() == "[CFG003] /repo/pipectx.yaml config must be a YAML mapping, got list"


def test_sort_errors_is_deterministic() -> None:
    errs = [
        ValidationError(code="CFG005", path="/b.yaml", field="x", message="m"),
        ValidationError(code="CFG004", path="/a.yaml", field="y", message="m"),
        ValidationError(code="CFG004", path="/a.yaml", field="x", message="m"),
    ]
    sorted_errs = sort_errors(errs)
    assert [e.code for e in sorted_errs] == ["CFG004", "CFG004", "CFG005"]
    assert [e.field for e in sorted_errs] == ["x", "y", "x"]


def test_format_errors_combines_sorted_lines() -> None:
    errs = [
        ValidationError(code="CFG005", path="/b.yaml", field="x", message="bad type"),
        ValidationError(code="CFG004", path="/a.yaml", field="y", message="unknown"),
    ]
    lines = format_errors(errs).strip().split("\n")
    assert len(lines) == 2
    assert lines[0].startswith("[CFG004]")
    assert lines[1].startswith("[CFG005]")


@pytest.mark.parametrize(
    ("unknown", "expected_in_hint"),
    [
        pytest.param("log_summary", "log_summaries", id="close-match"),
        pytest.param("allow_unkown_keys", "allow_unknown_keys", id="typo"),
        pytest.param("zzzzz_totally_wrong", "", id="no-match"),
    ],
)
def test_suggest_key(unknown: str, expected_in_hint: str) -> None:
    hint = _suggest_key(unknown, ALLOWED_CONFIG_KEYS)
    if expected_in_hint:
        assert expected_in_hint in hint
    else:
        assert hint == ""


def test_missing_default_config_returns_no_errors(tmp_path: Path) -> None:
    assert validate_config_file(tmp_path) == []


def test_valid_config_returns_no_errors(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        "allow_unknown_keys: false\nlong_lived_branches: [main]\nfunctions:\n  disabled: [readYaml]\n",
    )
    assert validate_config_file(tmp_path) == []


def test_missing_explicit_config_returns_cfg001(tmp_path: Path) -> None:
    missing = tmp_path / "does_not_exist.yaml"
    errors = validate_config_file(tmp_path, missing, config_explicit=True)
    assert len(errors) == 1
    assert errors[0].code == CFG001


@pytest.mark.parametrize(
    ("yaml_content", "expected_code"),
    [
        pytest.param(":\n  - :\n  bad: [", CFG002, id="invalid-yaml"),
        pytest.param("- item1\n- item2\n", CFG003, id="non-mapping"),
        pytest.param("allow_unknown_keys: maybe\n", CFG005, id="non-bool-allow-unknown"),
        pytest.param("long_lived_branches: 123\n", CFG005, id="non-list-branches"),
        pytest.param("functions:\n  disabled: toJson\n", CFG005, id="disabled-not-list"),
        pytest.param("functions:\n  disabled: [toXml]\n", CFG006, id="unknown-function"),
        pytest.param("functions: notamap\n", CFG007, id="functions-not-mapping"),
    ],
)
def test_config_file_rejects_invalid_values(tmp_path: Path, yaml_content: str, expected_code: str) -> None:
    _write_config(tmp_path, yaml_content)
    errors = validate_config_file(tmp_path)
    assert any(e.code == expected_code for e in errors)


def test_unknown_key_includes_typo_suggestion(tmp_path: Path) -> None:
    _write_config(tmp_path, "log_summary: true\n")
    errors = validate_config_file(tmp_path)
    cfg004 = [e for e in errors if e.code == CFG004]
    assert len(cfg004) == 1
    assert cfg004[0].field == "log_summary"
    assert "log_summaries" in cfg004[0].hint


def test_unknown_function_includes_suggestion(tmp_path: Path) -> None:
    _write_config(tmp_path, "functions:\n  disabled: [toBase46]\n")
    errors = validate_config_file(tmp_path)
    assert [e.code for e in errors] == [CFG006]
    assert "toBase64" in errors[0].hint


def test_functions_unknown_subkey_returns_cfg004(tmp_path: Path) -> None:
    _write_config(tmp_path, "functions:\n  disable: [toJson]\n")
    errors = validate_config_file(tmp_path)
    assert any(e.code == CFG004 and e.field == "functions.disable" for e in errors)


def test_all_errors_are_collected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus: 1\nallow_unknown_keys: 3\nlog_summaries: x\nfunctions: []\n")
    errors = validate_config_file(tmp_path)
    assert sorted(e.code for e in errors) == [CFG004, CFG005, CFG005, CFG007]


def test_preflight_reports_missing_root(tmp_path: Path) -> None:
    errors = preflight_validate(tmp_path / "absent")
    assert [e.code for e in errors] == [CFG008]


def test_preflight_sorts_errors(tmp_path: Path) -> None:
    _write_config(tmp_path, "log_summaries: x\nbogus: 1\n")
    errors = preflight_validate(tmp_path)
    assert [e.code for e in errors] == [CFG004, CFG005]


def test_validate_config_command_valid(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write_config(tmp_path, "allow_unknown_keys: true\n")

    assert main(["validate-config", "--root", str(tmp_path)]) == 0
    assert "Configuration is valid." in capsys.readouterr().out


def test_validate_config_command_invalid(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write_config(tmp_path, "log_summary: true\n")

    assert main(["validate-config", "--root", str(tmp_path)]) == 2
    assert "[CFG004]" in capsys.readouterr().err


def test_validate_config_command_missing_explicit_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["validate-config", "--root", str(tmp_path), "--config", str(tmp_path / "nope.yaml")])

    assert code == 2
    assert "[CFG001]" in capsys.readouterr().err
