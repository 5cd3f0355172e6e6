"""Thread lifecycle: ages, resolution safety net, and resolution snapshots.

Thread IDs are numbered along a single root-to-page path. Ages count the
pages a thread has stayed open; resolved threads drop out of the age map
entirely.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from storytree.models.page import ResolvedThreadMeta
from storytree.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from storytree.models.active_state import ThreadAddition
    from storytree.models.generation import AnalystResult
    from storytree.models.keyed_entry import ThreadEntry

log = get_logger(__name__)


def compute_opening_thread_ages(threads_added: Sequence[ThreadAddition]) -> dict[str, int]:
    """Assign "td-1".."td-n" with age 0, in input order.

    Used only for the opening page, where every thread is new.
    """
    return {f"td-{i + 1}": 0 for i in range(len(threads_added))}


def compute_continuation_thread_ages(
    parent_thread_ages: Mapping[str, int],
    parent_open_thread_ids: Sequence[str],
    threads_added: Sequence[ThreadAddition],
    threads_resolved: Sequence[str],
    new_thread_start_id: int,
) -> dict[str, int]:
    """Compute thread ages for a continuation page.

    Inherited threads age by one (a missing parent age counts as 0), new
    threads start at 0 with IDs following ``new_thread_start_id``, and
    resolved threads are omitted.

    The start ID comes from the parent's *open* threads, so once the
    highest-numbered thread on a path is resolved its number is minted again
    for the next new thread. Ancestors' ``resolved_thread_meta`` keeps
    describing the earlier thread under that ID.

    Args:
        parent_thread_ages: The parent page's thread ages.
        parent_open_thread_ids: IDs of the parent's open threads.
        threads_added: Threads added on this page, in order.
        threads_resolved: IDs resolved on this page.
        new_thread_start_id: Highest "td-N" number among the parent's open threads.

    Returns:
        Mapping of thread ID to age.
    """
    resolved = set(threads_resolved)
    ages: dict[str, int] = {}

    for thread_id in parent_open_thread_ids:
        if thread_id in resolved:
            continue
        ages[thread_id] = parent_thread_ages.get(thread_id, 0) + 1

    for i in range(len(threads_added)):
        ages[f"td-{new_thread_start_id + i + 1}"] = 0

    return ages


def augment_threads_resolved_from_analyst(
    reconciler_threads_resolved: Sequence[str],
    analyst_result: AnalystResult | None,
    parent_open_threads: Sequence[ThreadEntry],
) -> tuple[str, ...]:
    """Add threads the analyst saw paid off but the reconciler missed.

    The analyst's payoff assessments act as a safety net. An assessed thread
    is added only if it is open on the parent and not already resolved;
    IDs that never belonged to this branch are ignored.

    Returns:
        The reconciler's IDs followed by any additions, without duplicates.
    """
    resolved = tuple(reconciler_threads_resolved)
    if analyst_result is None or not analyst_result.thread_payoff_assessments:
        return resolved

    seen = set(resolved)
    parent_ids = {thread.id for thread in parent_open_threads}
    additional: list[str] = []
    ignored: list[str] = []

    for assessment in analyst_result.thread_payoff_assessments:
        thread_id = assessment.thread_id
        if thread_id in seen:
            continue
        if thread_id not in parent_ids:
            ignored.append(thread_id)
            continue
        seen.add(thread_id)
        additional.append(thread_id)

    if ignored:
        log.info("analyst_thread_ids_ignored", count=len(ignored), ids=ignored)
    if not additional:
        return resolved

    log.debug("threads_resolved_augmented", added=additional)
    return (*resolved, *additional)


def build_resolved_thread_meta(
    threads_resolved: Sequence[str],
    parent_open_threads: Sequence[ThreadEntry],
) -> dict[str, ResolvedThreadMeta]:
    """Snapshot type and urgency of each thread resolved on this page.

    The resolved threads no longer appear in the page's open threads, so the
    snapshot keeps what payoff displays need. IDs not open on the parent are
    skipped.
    """
    if not threads_resolved:
        return {}

    by_id = {thread.id: thread for thread in parent_open_threads}
    meta: dict[str, ResolvedThreadMeta] = {}
    missing: list[str] = []
    for thread_id in threads_resolved:
        thread = by_id.get(thread_id)
        if thread is None:
            missing.append(thread_id)
            continue
        meta[thread_id] = ResolvedThreadMeta(thread_type=thread.thread_type, urgency=thread.urgency)

    if missing:
        log.info("resolved_thread_ids_unknown", count=len(missing), ids=missing)
    return meta
