"""Trigger variants, build metadata, and the trigger decoding collaborator.

A trigger describes what started a pipeline execution. The set of variants
is closed: ``decode_trigger`` dispatches on the ``type`` discriminator and
rejects anything it does not recognise. Each variant carries only the
fields meaningful to its origin.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar

from pipectx.constants.triggers import (
    CONCOURSE_TRIGGER_TYPE,
    DOCKER_TRIGGER_TYPE,
    GENERIC_TRIGGER_TYPES,
    GIT_TRIGGER_TYPE,
    JENKINS_TRIGGER_TYPE,
    PIPELINE_TRIGGER_TYPE,
    TRIGGER_TYPE_FIELD,
)
from pipectx.exceptions import DeserializationError
from pipectx.model.fields import (
    MappingModel,
    as_bool,
    as_mapping,
    as_mapping_tuple,
    as_optional_int,
    as_optional_str,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class SourceControl(MappingModel):
    """One source-control record attached to a build."""

    _LABEL: ClassVar[str] = "scm"
    _FIELD_DECODERS: ClassVar[dict[str, Any]] = {
        "name": as_optional_str,
        "branch": as_optional_str,
        "sha1": as_optional_str,
    }

    name: str | None = None
    branch: str | None = None
    sha1: str | None = None
    other: dict[str, Any] = field(default_factory=dict)


def _as_scm_records(value: Any, location: str) -> tuple[SourceControl, ...] | None:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        raise DeserializationError(f"{location} must be a list, got {type(value).__name__}")
    return tuple(
        item if isinstance(item, SourceControl) else SourceControl.from_mapping(item) for item in value
    )


@dataclass(frozen=True, kw_only=True)
class BuildInfo(MappingModel):
    """Build metadata reported by a CI system."""

    _LABEL: ClassVar[str] = "buildInfo"
    _FIELD_DECODERS: ClassVar[dict[str, Any]] = {
        "name": as_optional_str,
        "number": as_optional_int,
        "url": as_optional_str,
        "result": as_optional_str,
        "building": as_bool,
        "scm": _as_scm_records,
    }

    name: str | None = None
    number: int | None = None
    url: str | None = None
    result: str | None = None
    building: bool = False
    scm: tuple[SourceControl, ...] | None = None
    other: dict[str, Any] = field(default_factory=dict)


def coerce_build_info(value: Any) -> BuildInfo | None:
    """Return ``value`` as BuildInfo when it holds build metadata, else None.

    Untyped mappings are decoded leniently; one that does not decode yields None.
    """
    if isinstance(value, BuildInfo):
        return value
    if not isinstance(value, Mapping):
        return None
    try:
        return BuildInfo.from_mapping(value)
    except DeserializationError as exc:
        logger.debug("Ignoring undecodable buildInfo: %s", exc)
        return None


def _as_build_info(value: Any, location: str) -> BuildInfo | None:
    if value is None or isinstance(value, BuildInfo):
        return value
    if not isinstance(value, Mapping):
        raise DeserializationError(f"{location} must be a mapping, got {type(value).__name__}")
    return BuildInfo.from_mapping(value)


@dataclass(frozen=True, kw_only=True)
class Trigger(MappingModel):
    """Fields shared by every trigger variant."""

    _LABEL: ClassVar[str] = "trigger"
    _FIELD_DECODERS: ClassVar[dict[str, Any]] = {
        "type": as_optional_str,
        "user": as_optional_str,
        "correlation_id": as_optional_str,
        "parameters": as_mapping,
        "artifacts": as_mapping_tuple,
        "notifications": as_mapping_tuple,
        "rebake": as_bool,
        "dry_run": as_bool,
        "strategy": as_bool,
    }

    type: str
    user: str | None = None
    correlation_id: str | None = None
    parameters: dict[str, Any] = field(default_factory=dict)
    artifacts: tuple[dict[str, Any], ...] = ()
    notifications: tuple[dict[str, Any], ...] = ()
    rebake: bool = False
    dry_run: bool = False
    strategy: bool = False
    other: dict[str, Any] = field(default_factory=dict)

    def source_control_candidates(self) -> Sequence[SourceControl] | None:
        """Return the source-control records this trigger contributes to ``scmInfo``."""
        return None


@dataclass(frozen=True, kw_only=True)
class DefaultTrigger(Trigger):
    """Trigger for origins with no variant-specific fields (manual, cron, webhook, ...)."""


@dataclass(frozen=True, kw_only=True)
class BuildTrigger(Trigger):
    """Trigger fired by a CI build; its build info feeds ``scmInfo``."""

    _FIELD_DECODERS: ClassVar[dict[str, Any]] = {"build_info": _as_build_info}

    build_info: BuildInfo | None = None

    def source_control_candidates(self) -> Sequence[SourceControl] | None:
        if self.build_info is None:
            return ()
        return self.build_info.scm


@dataclass(frozen=True, kw_only=True)
class JenkinsTrigger(BuildTrigger):
    """Trigger fired by a completed Jenkins job."""

    _FIELD_DECODERS: ClassVar[dict[str, Any]] = {
        "master": as_optional_str,
        "job": as_optional_str,
        "build_number": as_optional_int,
        "property_file": as_optional_str,
        "properties": as_mapping,
    }

    master: str | None = None
    job: str | None = None
    build_number: int | None = None
    property_file: str | None = None
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class ConcourseTrigger(BuildTrigger):
    """Trigger fired by a Concourse pipeline job."""


@dataclass(frozen=True, kw_only=True)
class GitTrigger(Trigger):
    """Trigger fired by a push or pull request event from a git host."""

    _FIELD_DECODERS: ClassVar[dict[str, Any]] = {
        "source": as_optional_str,
        "project": as_optional_str,
        "slug": as_optional_str,
        "branch": as_optional_str,
        "hash": as_optional_str,
        "action": as_optional_str,
    }

    source: str | None = None
    project: str | None = None
    slug: str | None = None
    branch: str | None = None
    hash: str | None = None
    action: str | None = None


@dataclass(frozen=True, kw_only=True)
class DockerTrigger(Trigger):
    """Trigger fired by a new image tag in a docker registry."""

    _FIELD_DECODERS: ClassVar[dict[str, Any]] = {
        "account": as_optional_str,
        "repository": as_optional_str,
        "tag": as_optional_str,
        "digest": as_optional_str,
    }

    account: str | None = None
    repository: str | None = None
    tag: str | None = None
    digest: str | None = None


@dataclass(frozen=True, kw_only=True)
class PipelineTrigger(Trigger):
    """Trigger fired by the completion of another pipeline."""

    _FIELD_DECODERS: ClassVar[dict[str, Any]] = {
        "parent_execution_id": as_optional_str,
        "parent_pipeline_stage_id": as_optional_str,
        "parent_pipeline_application": as_optional_str,
    }

    parent_execution_id: str | None = None
    parent_pipeline_stage_id: str | None = None
    parent_pipeline_application: str | None = None


TRIGGER_TYPES: dict[str, type[Trigger]] = {
    JENKINS_TRIGGER_TYPE: JenkinsTrigger,
    CONCOURSE_TRIGGER_TYPE: ConcourseTrigger,
    GIT_TRIGGER_TYPE: GitTrigger,
    DOCKER_TRIGGER_TYPE: DockerTrigger,
    PIPELINE_TRIGGER_TYPE: PipelineTrigger,
    **{trigger_type: DefaultTrigger for trigger_type in sorted(GENERIC_TRIGGER_TYPES)},
}


def decode_trigger(data: Any) -> Trigger:
    """Decode an untyped trigger mapping into its variant.

    Raises DeserializationError when the value is not a mapping, has no
    string ``type`` discriminator, or names an unknown trigger type.
    """
    if not isinstance(data, Mapping):
        raise DeserializationError(f"trigger must be a mapping, got {type(data).__name__}")

    trigger_type = data.get(TRIGGER_TYPE_FIELD)
    if not isinstance(trigger_type, str) or not trigger_type.strip():
        raise DeserializationError("trigger is missing a string 'type' discriminator")

    variant = TRIGGER_TYPES.get(trigger_type)
    if variant is None:
        allowed = ", ".join(sorted(TRIGGER_TYPES))
        raise DeserializationError(f"Unknown trigger type {trigger_type!r}. Allowed: {allowed}")
    return variant.from_mapping(data)


def coerce_trigger(value: Any) -> Trigger | None:
    """Return the decoded trigger for a context value.

    ``None`` means no trigger; an already decoded variant is returned as-is.
    A given call graph is expected to supply one representation per field.
    """
    if value is None or isinstance(value, Trigger):
        return value
    return decode_trigger(value)


def trigger_to_mapping(trigger: Trigger | None) -> dict[str, Any] | None:
    """Flatten a trigger into the untyped mapping expressions evaluate against."""
    if trigger is None:
        return None
    return trigger.to_dict()
