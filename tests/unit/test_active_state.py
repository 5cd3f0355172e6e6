"""Tests for the active state reducer."""

from __future__ import annotations

from storytree.models.active_state import (
    ActiveState,
    ActiveStateChanges,
    ConstraintAddition,
    ThreadAddition,
    ThreatAddition,
    apply_active_state_changes,
    create_empty_active_state,
    create_empty_active_state_changes,
)
from storytree.models.keyed_entry import (
    ConstraintEntry,
    ConstraintType,
    ThreadEntry,
    ThreadType,
    ThreatEntry,
    ThreatType,
    Urgency,
)


def test_empty_factories() -> None:
    assert create_empty_active_state() == ActiveState()
    assert create_empty_active_state_changes() == ActiveStateChanges()
    assert create_empty_active_state().open_threads == ()


class TestLocation:
    def test_none_keeps_location(self) -> None:
        current = ActiveState(current_location="Cellar")

        result = apply_active_state_changes(current, ActiveStateChanges())

        assert result.current_location == "Cellar"

    def test_new_location_replaces(self) -> None:
        current = ActiveState(current_location="Cellar")

        result = apply_active_state_changes(current, ActiveStateChanges(new_location="Attic"))

        assert result.current_location == "Attic"


class TestThreatsAndConstraints:
    def test_add_threat_mints_next_id(self) -> None:
        current = ActiveState(
            active_threats=(
                ThreatEntry(id="th-2", text="Guard dog", threat_type=ThreatType.CREATURE),
            )
        )
        changes = ActiveStateChanges(
            threats_added=(
                ThreatAddition(text="Rising water", threat_type=ThreatType.ENVIRONMENTAL),
            )
        )

        result = apply_active_state_changes(current, changes)

        assert [t.id for t in result.active_threats] == ["th-2", "th-3"]
        assert result.active_threats[1].threat_type == ThreatType.ENVIRONMENTAL

    def test_remove_then_add_does_not_reuse_id(self) -> None:
        current = ActiveState(
            active_constraints=(
                ConstraintEntry(
                    id="cn-1", text="Locked door", constraint_type=ConstraintType.PHYSICAL
                ),
            )
        )
        changes = ActiveStateChanges(
            constraints_removed=("cn-1",),
            constraints_added=(
                ConstraintAddition(text="Dawn approaches", constraint_type=ConstraintType.TEMPORAL),
            ),
        )

        result = apply_active_state_changes(current, changes)

        assert [c.id for c in result.active_constraints] == ["cn-2"]
        assert result.active_constraints[0].text == "Dawn approaches"

    def test_blank_additions_skipped(self) -> None:
        changes = ActiveStateChanges(
            threats_added=(
                ThreatAddition(text="  ", threat_type=ThreatType.CREATURE),
                ThreatAddition(text="Wolf", threat_type=ThreatType.CREATURE),
            )
        )

        result = apply_active_state_changes(ActiveState(), changes)

        assert [(t.id, t.text) for t in result.active_threats] == [("th-1", "Wolf")]


class TestThreads:
    def test_resolve_and_add(self) -> None:
        current = ActiveState(
            open_threads=(
                ThreadEntry(id="td-1", text="Find the key"),
                ThreadEntry(id="td-2", text="Who sent the letter?"),
            )
        )
        changes = ActiveStateChanges(
            threads_resolved=("td-1",),
            threads_added=(
                ThreadAddition(
                    text="Escape the manor",
                    thread_type=ThreadType.DANGER,
                    urgency=Urgency.HIGH,
                ),
            ),
        )

        result = apply_active_state_changes(current, changes)

        assert [t.id for t in result.open_threads] == ["td-2", "td-3"]
        new_thread = result.open_threads[1]
        assert new_thread.thread_type == ThreadType.DANGER
        assert new_thread.urgency == Urgency.HIGH

    def test_addition_defaults(self) -> None:
        changes = ActiveStateChanges(threads_added=(ThreadAddition(text="Find the key"),))

        result = apply_active_state_changes(ActiveState(), changes)

        thread = result.open_threads[0]
        assert thread.id == "td-1"
        assert thread.thread_type == ThreadType.INFORMATION
        assert thread.urgency == Urgency.MEDIUM

    def test_unknown_resolution_ignored(self) -> None:
        current = ActiveState(open_threads=(ThreadEntry(id="td-1", text="Find the key"),))

        result = apply_active_state_changes(
            current, ActiveStateChanges(threads_resolved=("td-99",))
        )

        assert result.open_threads == current.open_threads

    def test_input_not_mutated(self) -> None:
        current = ActiveState(open_threads=(ThreadEntry(id="td-1", text="Find the key"),))

        apply_active_state_changes(current, ActiveStateChanges(threads_resolved=("td-1",)))

        assert [t.id for t in current.open_threads] == ["td-1"]
