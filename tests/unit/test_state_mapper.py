"""Tests for mapping page build results onto active-state deltas."""

from __future__ import annotations

from storytree.engine.state_mapper import map_active_state_changes
from storytree.models.active_state import ThreadAddition, ThreatAddition
from storytree.models.keyed_entry import ThreatType


class TestMapActiveStateChanges:
    def test_blank_location_means_unchanged(self, make_result) -> None:
        changes = map_active_state_changes(make_result(current_location="   "), [])

        assert changes.new_location is None

    def test_location_trimmed(self, make_result) -> None:
        changes = map_active_state_changes(make_result(current_location=" The attic "), [])

        assert changes.new_location == "The attic"

    def test_uses_effective_resolved_ids(self, make_result) -> None:
        result = make_result(threads_resolved=("td-1",))

        changes = map_active_state_changes(result, ("td-1", "td-3"))

        assert changes.threads_resolved == ("td-1", "td-3")

    def test_blank_thread_additions_dropped(self, make_result) -> None:
        result = make_result(
            threads_added=(ThreadAddition(text=" "), ThreadAddition(text="Find the key"))
        )

        changes = map_active_state_changes(result, [])

        assert changes.threads_added == (ThreadAddition(text="Find the key"),)

    def test_threats_passed_through(self, make_result) -> None:
        threat = ThreatAddition(text="Wolf", threat_type=ThreatType.CREATURE)
        result = make_result(threats_added=(threat,), threats_removed=("th-1",))

        changes = map_active_state_changes(result, [])

        assert changes.threats_added == (threat,)
        assert changes.threats_removed == ("th-1",)
