"""Active state: what is true right now on a branch.

The active state tracks the current location, threats, constraints and open
narrative threads. It is replaced wholesale on every page by applying an
``ActiveStateChanges`` delta to the parent's active state.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from storytree.models.keyed_entry import (
    ConstraintEntry,
    ConstraintType,
    ThreadEntry,
    ThreadType,
    ThreatEntry,
    ThreatType,
    Urgency,
    get_max_id_number,
    remove_by_ids,
)


class ActiveState(BaseModel):
    """Accumulated active state carried by a page."""

    model_config = ConfigDict(frozen=True)

    current_location: str = ""
    active_threats: tuple[ThreatEntry, ...] = ()
    active_constraints: tuple[ConstraintEntry, ...] = ()
    open_threads: tuple[ThreadEntry, ...] = ()


class ThreatAddition(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    threat_type: ThreatType


class ConstraintAddition(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    constraint_type: ConstraintType


class ThreadAddition(BaseModel):
    """A new thread proposed by an upstream producer.

    Producers that only supply text get INFORMATION/MEDIUM defaults.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    thread_type: ThreadType = ThreadType.INFORMATION
    urgency: Urgency = Urgency.MEDIUM


class ActiveStateChanges(BaseModel):
    """This page's delta against the parent's active state.

    Attributes:
        new_location: Replacement location, or None for "unchanged".
        threats_removed: IDs ("th-N") of threats to drop.
        constraints_removed: IDs ("cn-N") of constraints to drop.
        threads_resolved: IDs ("td-N") of threads resolved on this page.
    """

    model_config = ConfigDict(frozen=True)

    new_location: str | None = None
    threats_added: tuple[ThreatAddition, ...] = ()
    threats_removed: tuple[str, ...] = ()
    constraints_added: tuple[ConstraintAddition, ...] = ()
    constraints_removed: tuple[str, ...] = ()
    threads_added: tuple[ThreadAddition, ...] = ()
    threads_resolved: tuple[str, ...] = ()


def create_empty_active_state() -> ActiveState:
    return ActiveState()


def create_empty_active_state_changes() -> ActiveStateChanges:
    return ActiveStateChanges()


def _apply_threat_changes(
    current: tuple[ThreatEntry, ...],
    added: tuple[ThreatAddition, ...],
    removed: tuple[str, ...],
) -> tuple[ThreatEntry, ...]:
    kept = remove_by_ids(current, removed)
    next_number = get_max_id_number(current, "th")
    minted: list[ThreatEntry] = []
    for addition in added:
        text = addition.text.strip()
        if not text:
            continue
        next_number += 1
        minted.append(
            ThreatEntry(id=f"th-{next_number}", text=text, threat_type=addition.threat_type)
        )
    return (*kept, *minted)


def _apply_constraint_changes(
    current: tuple[ConstraintEntry, ...],
    added: tuple[ConstraintAddition, ...],
    removed: tuple[str, ...],
) -> tuple[ConstraintEntry, ...]:
    kept = remove_by_ids(current, removed)
    next_number = get_max_id_number(current, "cn")
    minted: list[ConstraintEntry] = []
    for addition in added:
        text = addition.text.strip()
        if not text:
            continue
        next_number += 1
        minted.append(
            ConstraintEntry(
                id=f"cn-{next_number}", text=text, constraint_type=addition.constraint_type
            )
        )
    return (*kept, *minted)


def _apply_thread_changes(
    current: tuple[ThreadEntry, ...],
    added: tuple[ThreadAddition, ...],
    resolved: tuple[str, ...],
) -> tuple[ThreadEntry, ...]:
    # Numbering continues from the open threads before removal, matching the
    # age computation. A number resolved on an earlier page can come back.
    kept = remove_by_ids(current, resolved)
    next_number = get_max_id_number(current, "td")
    minted: list[ThreadEntry] = []
    for addition in added:
        text = addition.text.strip()
        if not text:
            continue
        next_number += 1
        minted.append(
            ThreadEntry(
                id=f"td-{next_number}",
                text=text,
                thread_type=addition.thread_type,
                urgency=addition.urgency,
            )
        )
    return (*kept, *minted)


def apply_active_state_changes(current: ActiveState, changes: ActiveStateChanges) -> ActiveState:
    """Apply ``changes`` to ``current`` and return the new active state.

    Removals are applied before additions. New entries are numbered after the
    highest ID present in ``current`` for their prefix.
    """
    return ActiveState(
        current_location=(
            changes.new_location if changes.new_location is not None else current.current_location
        ),
        active_threats=_apply_threat_changes(
            current.active_threats, changes.threats_added, changes.threats_removed
        ),
        active_constraints=_apply_constraint_changes(
            current.active_constraints, changes.constraints_added, changes.constraints_removed
        ),
        open_threads=_apply_thread_changes(
            current.open_threads, changes.threads_added, changes.threads_resolved
        ),
    )
