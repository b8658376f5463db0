"""Tests for the top-level expression processor."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import pytest

from pipectx.exceptions import DeserializationError, EvaluatorConfigurationError
from pipectx.expressions import ExpressionProcessor, build_execution_context
from pipectx.model import EvaluationSummary, Execution, SourceControl, Stage
from pipectx.types import FunctionConfig, ProcessorConfig

PROCESSOR_LOGGER = "pipectx.expressions.processor"


def test_none_source_returns_none(processor: ExpressionProcessor) -> None:
    assert processor.process(None, {}, True) is None


def test_empty_source_returns_new_empty_mapping(processor: ExpressionProcessor) -> None:
    source: dict[str, Any] = {}

    result = processor.process(source, {"parameters": {"a": 1}}, True)

    assert result == {}
    assert result is not source


def test_result_keeps_source_keys(processor: ExpressionProcessor) -> None:
    source = {"region": "${parameters.region}", "count": 2, "nested": {"a": "b"}}

    result = processor.process(source, {"parameters": {"region": "eu-west-1"}}, True)

    assert result == {"region": "eu-west-1", "count": 2, "nested": {"a": "b"}}


def test_context_is_not_modified(processor: ExpressionProcessor, jenkins_trigger_payload: dict[str, Any]) -> None:
    context = {"trigger": jenkins_trigger_payload}

    processor.process({"branch": "${scmInfo.branch}"}, context, True)

    assert context == {"trigger": jenkins_trigger_payload}


def test_trigger_parameters_and_scm_are_available(
    processor: ExpressionProcessor,
    jenkins_trigger_payload: dict[str, Any],
) -> None:
    source = {
        "region": "${parameters.region}",
        "branch": "${scmInfo.branch}",
        "sha": "${scmInfo.sha1}",
        "build": "${trigger.buildNumber}",
    }

    result = processor.process(source, {"trigger": jenkins_trigger_payload}, False)

    assert result == {"region": "us-west-2", "branch": "feature-x", "sha": "bbb222", "build": 42}


def test_missing_field_strict_adds_summary_block(processor: ExpressionProcessor) -> None:
    summary = EvaluationSummary()

    result = processor.process({"k": "${missing.field}"}, {}, False, summary)

    assert result is not None
    assert result["k"] == "${missing.field}"
    assert summary.failure_count == 1
    [diagnostic] = result["expressionEvaluationSummary"]["k"]
    assert diagnostic["expression"] == "${missing.field}"
    assert diagnostic["exceptionType"] == "UnknownReferenceError"


def test_missing_field_lenient_has_no_summary_block(processor: ExpressionProcessor) -> None:
    summary = EvaluationSummary()

    result = processor.process({"k": "${missing.field}"}, {}, True, summary)

    assert result == {"k": "${missing.field}"}
    assert summary.total_evaluated == 1
    assert summary.failure_count == 0


def test_shared_summary_aggregates_across_calls(processor: ExpressionProcessor) -> None:
    summary = EvaluationSummary()
    context = {"parameters": {"region": "us-east-1"}}

    processor.process({"a": "${parameters.region}"}, context, False, summary)
    second = processor.process({"b": "${missing}", "c": "${parameters.region}"}, context, False, summary)

    assert summary.total_evaluated == 3
    assert summary.failure_count == 1
    assert second is not None
    assert set(second["expressionEvaluationSummary"]) == {"b"}


def test_summary_block_carries_earlier_failures(processor: ExpressionProcessor) -> None:
    summary = EvaluationSummary()

    processor.process({"a": "${missing}"}, {}, False, summary)
    second = processor.process({"b": "plain"}, {}, False, summary)

    assert second is not None
    assert set(second["expressionEvaluationSummary"]) == {"a"}


def test_malformed_trigger_raises(processor: ExpressionProcessor) -> None:
    with pytest.raises(DeserializationError, match="Unknown trigger type"):
        processor.process({"k": "${parameters}"}, {"trigger": {"type": "carrier-pigeon"}}, True)


def test_existing_scm_info_is_reduced(processor: ExpressionProcessor) -> None:
    context = {
        "scmInfo": [
            SourceControl(branch="develop", sha1="111"),
            SourceControl(branch="hotfix", sha1="222"),
        ]
    }

    result = processor.process({"sha": "${scmInfo.sha1}"}, context, False)

    assert result == {"sha": "222"}


def test_configured_long_lived_branches(jenkins_trigger_payload: dict[str, Any]) -> None:
    processor = ExpressionProcessor(ProcessorConfig(long_lived_branches=("feature-x",)))

    result = processor.process({"branch": "${scmInfo.branch}"}, {"trigger": jenkins_trigger_payload}, False)

    assert result == {"branch": "master"}


def test_log_summary_emits_info_record(processor: ExpressionProcessor, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger=PROCESSOR_LOGGER)

    processor.process({"k": "${parameters}"}, {}, True, log_summary=True)

    messages = [record.getMessage() for record in caplog.records if record.name == PROCESSOR_LOGGER]
    assert messages == ["Evaluated 1 expression(s), 0 failure(s)"]


@pytest.mark.parametrize(
    ("source", "log_summary", "log_summaries"),
    [
        ({"k": "${parameters}"}, False, True),
        ({"k": "plain"}, True, True),
        ({"k": "${parameters}"}, True, False),
    ],
    ids=["not-requested", "nothing-evaluated", "disabled-in-config"],
)
def test_log_summary_is_silent(
    caplog: pytest.LogCaptureFixture,
    source: dict[str, Any],
    log_summary: bool,
    log_summaries: bool,
) -> None:
    caplog.set_level(logging.INFO, logger=PROCESSOR_LOGGER)
    processor = ExpressionProcessor(ProcessorConfig(log_summaries=log_summaries))

    processor.process(source, {}, True, log_summary=log_summary)

    assert not [record for record in caplog.records if record.name == PROCESSOR_LOGGER]


def test_process_stage_evaluates_against_execution(
    processor: ExpressionProcessor,
    pipeline_execution: Execution,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger=PROCESSOR_LOGGER)
    deploy = pipeline_execution.stages[2]
    built = build_execution_context(deploy)

    result = processor.process_stage(built, deploy.context, False)

    assert result == {"account": "prod", "image": "ami-1234"}
    assert any(record.name == PROCESSOR_LOGGER for record in caplog.records)


def test_process_stage_without_execution_does_not_log(
    processor: ExpressionProcessor,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger=PROCESSOR_LOGGER)
    execution = Execution(type="orchestration", id="01ORCH")
    stage = execution.add_stage(Stage(name="Resize", context={"capacity": "${toInt('3')}"}))

    result = processor.process_stage(build_execution_context(stage), stage.context, False)

    assert result == {"capacity": 3}
    assert not [record for record in caplog.records if record.name == PROCESSOR_LOGGER]


def test_disabled_functions_fail() -> None:
    processor = ExpressionProcessor(ProcessorConfig(functions=FunctionConfig(disabled=("toBase64",))))

    result = processor.process({"k": "${toBase64('x')}"}, {}, True)

    assert result is not None
    assert result["k"] == "${toBase64('x')}"
    assert result["expressionEvaluationSummary"]["k"][0]["exceptionType"] == "ExpressionFunctionError"


def test_unknown_disabled_function_is_a_configuration_error() -> None:
    with pytest.raises(EvaluatorConfigurationError, match="toXml"):
        ExpressionProcessor(ProcessorConfig(functions=FunctionConfig(disabled=("toXml",))))


class RecordingEvaluator:
    def __init__(self) -> None:
        self.contexts: list[Mapping[str, Any]] = []

    def evaluate(
        self,
        source: Mapping[str, Any],
        context: Mapping[str, Any],
        summary: EvaluationSummary,
        allow_unknown_keys: bool,
    ) -> dict[str, Any]:
        self.contexts.append(context)
        summary.increment_total_evaluated()
        return {key: "evaluated" for key in source}


def test_custom_evaluator_receives_augmented_context(jenkins_trigger_payload: dict[str, Any]) -> None:
    evaluator = RecordingEvaluator()
    processor = ExpressionProcessor(evaluator=evaluator)

    result = processor.process({"a": "${x}", "b": 1}, {"trigger": jenkins_trigger_payload}, True)

    assert result == {"a": "evaluated", "b": "evaluated"}
    [context] = evaluator.contexts
    assert context["parameters"] == {"region": "us-west-2"}
    assert context["scmInfo"].branch == "feature-x"


def test_bad_string_escape_does_not_abort_the_document(processor: ExpressionProcessor) -> None:
    result = processor.process({"a": r"${'\N'}", "b": "${parameters}"}, {}, True)

    assert result is not None
    assert result["a"] == r"${'\N'}"
    assert result["b"] == {}
    assert list(result["expressionEvaluationSummary"]) == ["a"]


def test_undecodable_build_info_does_not_abort_the_document(processor: ExpressionProcessor) -> None:
    context = {"buildInfo": {"building": "false", "number": "12a"}}

    result = processor.process({"k": "${parameters}", "scm": "${scmInfo}"}, context, False)

    assert result == {"k": {}, "scm": None}


def test_placeholder_key_is_kept_beside_colliding_sibling(processor: ExpressionProcessor) -> None:
    source = {"${parameters.x}": 1, "x": 2}

    result = processor.process(source, {"parameters": {"x": "x"}}, True)

    assert result == {"${parameters.x}": 1, "x": 2}


def test_default_evaluator_logs_enabled_functions(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger=PROCESSOR_LOGGER)

    ExpressionProcessor(ProcessorConfig(functions=FunctionConfig(disabled=("readYaml",))))

    [message] = [record.getMessage() for record in caplog.records if record.name == PROCESSOR_LOGGER]
    assert message.startswith("Expression functions: ")
    assert "readJson" in message
    assert "readYaml" not in message
