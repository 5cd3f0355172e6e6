"""Map flat producer fields onto an active-state delta."""

from __future__ import annotations

from typing import TYPE_CHECKING

from storytree.models.active_state import ActiveStateChanges

if TYPE_CHECKING:
    from collections.abc import Sequence

    from storytree.models.generation import PageBuildResult


def map_active_state_changes(
    result: PageBuildResult,
    effective_threads_resolved: Sequence[str],
) -> ActiveStateChanges:
    """Translate a page build result into ``ActiveStateChanges``.

    A blank ``current_location`` means the location did not change. Thread
    additions with blank text are dropped here, so the additions the reducer
    numbers are the same ones the thread lifecycle ages.

    Args:
        result: Writer and accountant output for the page.
        effective_threads_resolved: Resolved thread IDs after the analyst
            safety net has been applied.
    """
    location = result.current_location.strip()
    return ActiveStateChanges(
        new_location=location or None,
        threats_added=result.threats_added,
        threats_removed=result.threats_removed,
        constraints_added=result.constraints_added,
        constraints_removed=result.constraints_removed,
        threads_added=tuple(t for t in result.threads_added if t.text.strip()),
        threads_resolved=tuple(effective_threads_resolved),
    )
