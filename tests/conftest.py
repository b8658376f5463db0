"""Shared pytest fixtures for triggers, executions, and processors."""

from __future__ import annotations

from typing import Any

import pytest

from pipectx.expressions import ExpressionProcessor
from pipectx.model import Execution, JenkinsTrigger, Stage, decode_trigger


@pytest.fixture()
def jenkins_trigger_payload() -> dict[str, Any]:
    """Return an untyped Jenkins trigger as it arrives from the pipeline engine."""
    return {
        "type": "jenkins",
        "user": "anonymous",
        "master": "ci",
        "job": "app-build",
        "buildNumber": 42,
        "parameters": {"region": "us-west-2"},
        "buildInfo": {
            "name": "app-build",
            "number": 42,
            "url": "https://ci.example.com/job/app-build/42/",
            "result": "SUCCESS",
            "scm": [
                {"name": "origin", "branch": "master", "sha1": "aaa111"},
                {"name": "origin", "branch": "feature-x", "sha1": "bbb222"},
            ],
        },
    }


@pytest.fixture()
def jenkins_trigger(jenkins_trigger_payload: dict[str, Any]) -> JenkinsTrigger:
    trigger = decode_trigger(jenkins_trigger_payload)
    assert isinstance(trigger, JenkinsTrigger)
    return trigger


@pytest.fixture()
def pipeline_execution(jenkins_trigger: JenkinsTrigger) -> Execution:
    """Return a pipeline execution with a bake stage, a judgment, and a deploy stage."""
    execution = Execution(type="pipeline", id="01EXEC", application="app", name="deploy", trigger=jenkins_trigger)
    execution.add_stage(
        Stage(
            name="Bake",
            type="bake",
            id="s1",
            ref_id="1",
            status="SUCCEEDED",
            context={"region": "us-west-2"},
            outputs={"ami": "ami-1234"},
        )
    )
    execution.add_stage(
        Stage(
            name="Approve",
            type="manualJudgment",
            id="s2",
            ref_id="2",
            status="SUCCEEDED",
            context={"judgmentInput": "ship it"},
        )
    )
    execution.add_stage(
        Stage(
            name="Deploy",
            type="deploy",
            id="s3",
            ref_id="3",
            context={"account": "prod", "image": "${stage('Bake').outputs.ami}"},
        )
    )
    return execution


@pytest.fixture()
def processor() -> ExpressionProcessor:
    return ExpressionProcessor()
