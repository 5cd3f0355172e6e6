"""Promise lifecycle: aging, scope-based expiry, ID assignment, snapshots."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from storytree.models.page import ResolvedPromiseMeta
from storytree.models.promise import PromiseScope, TrackedPromise
from storytree.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from storytree.models.promise import DetectedPromise

log = get_logger(__name__)

_PROMISE_ID_RE = re.compile(r"^pr-(\d+)$")


def compute_accumulated_promises(
    parent_promises: Sequence[TrackedPromise],
    resolved_ids: Sequence[str],
    detected: Sequence[DetectedPromise],
    max_existing_id: int,
    *,
    scene_expiry_threshold: int | None,
) -> tuple[TrackedPromise, ...]:
    """Compute the promises tracked on the new page.

    Resolved promises are dropped, survivors age by one, and SCENE-scoped
    survivors older than ``scene_expiry_threshold`` expire. Detected promises
    with a non-blank description are appended as "pr-N" starting after
    ``max_existing_id``.

    Args:
        parent_promises: The parent page's tracked promises.
        resolved_ids: Promise IDs resolved on this page.
        detected: Promises detected on this page, in order.
        max_existing_id: Highest "pr-N" number on the parent's branch.
        scene_expiry_threshold: Maximum age for SCENE promises; None disables expiry.

    Returns:
        Surviving promises in their original order, then the new ones.
    """
    resolved = set(resolved_ids)
    survivors: list[TrackedPromise] = []
    expired: list[str] = []

    for promise in parent_promises:
        if promise.id in resolved:
            continue
        aged = promise.model_copy(update={"age": promise.age + 1})
        if (
            aged.scope == PromiseScope.SCENE
            and scene_expiry_threshold is not None
            and aged.age > scene_expiry_threshold
        ):
            expired.append(aged.id)
            continue
        survivors.append(aged)

    if expired:
        log.debug("promises_expired", ids=expired, threshold=scene_expiry_threshold)

    next_number = max_existing_id
    minted: list[TrackedPromise] = []
    for candidate in detected:
        description = candidate.description.strip()
        if not description:
            continue
        next_number += 1
        minted.append(
            TrackedPromise(
                id=f"pr-{next_number}",
                description=description,
                promise_type=candidate.promise_type,
                scope=candidate.scope,
                resolution_hint=candidate.resolution_hint,
                suggested_urgency=candidate.suggested_urgency,
                age=0,
            )
        )

    return (*survivors, *minted)


def get_max_promise_id_number(promises: Sequence[TrackedPromise]) -> int:
    """Return the highest "pr-N" number, ignoring IDs of any other shape.

    Returns 0 when no ID matches.
    """
    highest = 0
    for promise in promises:
        match = _PROMISE_ID_RE.match(promise.id)
        if match is None:
            continue
        highest = max(highest, int(match.group(1)))
    return highest


def build_resolved_promise_meta(
    resolved_ids: Sequence[str],
    parent_promises: Sequence[TrackedPromise],
) -> dict[str, ResolvedPromiseMeta]:
    """Snapshot type, scope and urgency of each promise resolved on this page.

    IDs not tracked on the parent are skipped.
    """
    if not resolved_ids:
        return {}

    by_id = {promise.id: promise for promise in parent_promises}
    meta: dict[str, ResolvedPromiseMeta] = {}
    missing: list[str] = []
    for promise_id in resolved_ids:
        promise = by_id.get(promise_id)
        if promise is None:
            missing.append(promise_id)
            continue
        meta[promise_id] = ResolvedPromiseMeta(
            promise_type=promise.promise_type,
            scope=promise.scope,
            urgency=promise.suggested_urgency,
        )

    if missing:
        log.info("resolved_promise_ids_unknown", count=len(missing), ids=missing)
    return meta
