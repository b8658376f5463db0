"""Trigger discriminator values."""

from __future__ import annotations

TRIGGER_TYPE_FIELD: str = "type"

JENKINS_TRIGGER_TYPE: str = "jenkins"
CONCOURSE_TRIGGER_TYPE: str = "concourse"
GIT_TRIGGER_TYPE: str = "git"
DOCKER_TRIGGER_TYPE: str = "docker"
PIPELINE_TRIGGER_TYPE: str = "pipeline"

# Trigger types that carry no origin-specific fields.
GENERIC_TRIGGER_TYPES: frozenset[str] = frozenset(
    {
        "manual",
        "cron",
        "webhook",
        "pubsub",
        "artifactory",
        "nexus",
        "helm",
        "plugin",
    }
)
