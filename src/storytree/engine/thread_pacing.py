"""Thread pacing: which open threads have gone unresolved for too long."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from storytree.config import ThreadPacingConfig
    from storytree.models.keyed_entry import ThreadEntry


@dataclass(frozen=True)
class OverdueThread:
    thread: ThreadEntry
    age: int
    threshold: int


def get_overdue_threads(
    open_threads: Sequence[ThreadEntry],
    thread_ages: Mapping[str, int],
    pacing: ThreadPacingConfig,
) -> list[OverdueThread]:
    """Return open threads whose age has reached their urgency's threshold.

    Threads without a recorded age are never overdue. Order follows
    ``open_threads``.
    """
    overdue: list[OverdueThread] = []
    for thread in open_threads:
        age = thread_ages.get(thread.id)
        if age is None:
            continue
        threshold = pacing.overdue_threshold(thread.urgency)
        if age >= threshold:
            overdue.append(OverdueThread(thread=thread, age=age, threshold=threshold))
    return overdue
