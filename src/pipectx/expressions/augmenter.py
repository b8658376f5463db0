"""Derive ``parameters`` and a single ``scmInfo`` record from trigger and build metadata."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pipectx.constants.expressions import (
    BUILD_INFO_KEY,
    DEFAULT_LONG_LIVED_BRANCHES,
    PARAMETERS_KEY,
    SCM_INFO_KEY,
    TRIGGER_KEY,
)
from pipectx.model import SourceControl, coerce_build_info, coerce_trigger
from pipectx.types import Context

logger = logging.getLogger(__name__)


def augment_context(
    context: Mapping[str, Any],
    *,
    long_lived_branches: Sequence[str] = DEFAULT_LONG_LIVED_BRANCHES,
) -> Context:
    """Return a copy of ``context`` with ``parameters`` and ``scmInfo`` derived.

    ``parameters`` comes from a trigger with non-empty parameters, else the
    existing value, else ``{}``. ``scmInfo`` starts from its existing value,
    is replaced by ``buildInfo.scm`` when build info is present, and falls
    back to the trigger's build metadata; the result is reduced to a single
    record or None.

    Raises DeserializationError when ``trigger`` holds an unrecognised
    shape; an undecodable ``buildInfo`` counts as absent. The input mapping is never modified.
    """
    augmented: Context = dict(context)
    trigger = coerce_trigger(augmented.get(TRIGGER_KEY))

    if trigger is not None and trigger.parameters:
        augmented[PARAMETERS_KEY] = trigger.parameters
    elif PARAMETERS_KEY not in augmented:
        augmented[PARAMETERS_KEY] = {}

    candidate = augmented.get(SCM_INFO_KEY)
    build_info = coerce_build_info(augmented.get(BUILD_INFO_KEY))
    if build_info is not None:
        candidate = build_info.scm
    if candidate is None and trigger is not None:
        candidate = trigger.source_control_candidates()

    augmented[SCM_INFO_KEY] = select_scm_info(candidate, long_lived_branches=long_lived_branches)
    return augmented


def select_scm_info(
    candidate: Any,
    *,
    long_lived_branches: Sequence[str] = DEFAULT_LONG_LIVED_BRANCHES,
) -> Any:
    """Reduce a candidate to one source-control record.

    With several records the first on a branch outside ``long_lived_branches``
    wins, falling back to the first record. A candidate that is already a
    single record is returned unchanged; None or empty yields None.
    """
    if candidate is None:
        return None
    if not isinstance(candidate, Sequence) or isinstance(candidate, str):
        return candidate
    if not candidate:
        return None
    if len(candidate) == 1:
        return candidate[0]

    excluded = frozenset(long_lived_branches)
    for record in candidate:
        if _branch_of(record) not in excluded:
            return record
    logger.debug("All %d scm records are on long-lived branches; using the first", len(candidate))
    return candidate[0]


def _branch_of(record: Any) -> str | None:
    if isinstance(record, SourceControl):
        return record.branch
    if isinstance(record, Mapping):
        return record.get("branch")
    return None
