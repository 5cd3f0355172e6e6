"""Tests for build_page."""

from __future__ import annotations

import pytest

from storytree.engine.context import ContinuationPageContext, OpeningPageContext
from storytree.engine.errors import PageBuildError
from storytree.engine.page_builder import build_page
from storytree.models.active_state import ActiveState, ThreadAddition
from storytree.models.character_state import CharacterStateAddition
from storytree.models.generation import (
    AnalystResult,
    Choice,
    ProtagonistAffect,
    ThreadPayoffAssessment,
)
from storytree.models.keyed_entry import KeyedEntry, ThreadEntry, ThreadType, Urgency
from storytree.models.npc import NpcAgenda, NpcRelationship
from storytree.models.promise import DetectedPromise, PromiseScope, PromiseType, TrackedPromise


@pytest.fixture
def continuation_context(
    open_threads: tuple[ThreadEntry, ...],
    inventory: tuple[KeyedEntry, ...],
    tracked_promises: tuple[TrackedPromise, ...],
) -> ContinuationPageContext:
    return ContinuationPageContext(
        page_id=2,
        parent_page_id=1,
        parent_choice_index=0,
        parent_active_state=ActiveState(current_location="Cellar", open_threads=open_threads),
        parent_inventory=inventory,
        parent_character_state={"Greaves": (KeyedEntry(id="cs-1", text="Holding the map"),)},
        parent_thread_ages={"td-1": 1, "td-2": 3},
        parent_promises=tracked_promises,
        parent_npc_agendas={"Greaves": NpcAgenda(npc_name="Greaves", current_goal="Sell the map")},
        scene_promise_expiry=4,
    )


class TestOpeningPage:
    def test_minimal(self, make_result) -> None:
        page = build_page(make_result(), OpeningPageContext())

        assert page.id == 1
        assert page.parent_page_id is None
        assert page.parent_choice_index is None
        assert page.accumulated_active_state == ActiveState()
        assert page.thread_ages == {}
        assert page.accumulated_promises == ()
        assert page.resolved_thread_meta == {}

    def test_threads_numbered_from_one(self, make_result) -> None:
        result = make_result(
            threads_added=(
                ThreadAddition(text="Find the key"),
                ThreadAddition(text="  "),
                ThreadAddition(text="Escape", thread_type=ThreadType.DANGER, urgency=Urgency.HIGH),
            )
        )

        page = build_page(result, OpeningPageContext())

        assert [t.id for t in page.accumulated_active_state.open_threads] == ["td-1", "td-2"]
        assert page.thread_ages == {"td-1": 0, "td-2": 0}

    def test_seeds_npc_records_from_updates(self, make_result) -> None:
        context = OpeningPageContext(
            npc_agenda_updates=(NpcAgenda(npc_name="Greaves", current_goal="Sell the map"),),
            npc_relationship_updates=(
                NpcRelationship(npc_name="Greaves", valence=1, dynamic="ally"),
            ),
        )

        page = build_page(make_result(), context)

        assert list(page.accumulated_npc_agendas) == ["Greaves"]
        assert page.accumulated_npc_relationships["Greaves"].valence == 1

    def test_analyst_promises_tracked(self, make_result) -> None:
        analyst = AnalystResult(
            promises_detected=(
                DetectedPromise(
                    description="A locked drawer", promise_type=PromiseType.CHEKHOV_GUN
                ),
            )
        )

        page = build_page(make_result(), OpeningPageContext(), analyst)

        assert [(p.id, p.age) for p in page.accumulated_promises] == [("pr-1", 0)]
        assert page.analyst_result == analyst

    def test_narrative_trimmed_and_affect_kept(self, make_result) -> None:
        affect = ProtagonistAffect(
            primary_emotion="dread", primary_intensity="strong", primary_cause="the footsteps"
        )

        result = make_result(narrative="  Dark.  ", protagonist_affect=affect)

        page = build_page(result, OpeningPageContext())

        assert page.narrative_text == "Dark."
        assert page.protagonist_affect == affect


class TestContinuationPage:
    def test_parent_links(self, make_result, continuation_context: ContinuationPageContext) -> None:
        page = build_page(make_result(), continuation_context)

        assert page.id == 2
        assert page.parent_page_id == 1
        assert page.parent_choice_index == 0

    def test_location_carried_when_blank(
        self, make_result, continuation_context: ContinuationPageContext
    ) -> None:
        page = build_page(make_result(current_location=""), continuation_context)

        assert page.accumulated_active_state.current_location == "Cellar"

    def test_thread_ages_and_ids_agree(
        self, make_result, continuation_context: ContinuationPageContext
    ) -> None:
        result = make_result(
            threads_resolved=("td-1",),
            threads_added=(ThreadAddition(text="Who is following us?"),),
        )

        page = build_page(result, continuation_context)

        open_ids = [t.id for t in page.accumulated_active_state.open_threads]
        assert open_ids == ["td-2", "td-3"]
        assert page.thread_ages == {"td-2": 4, "td-3": 0}
        assert set(page.thread_ages) == set(open_ids)

    def test_resolved_thread_meta_snapshot(
        self, make_result, continuation_context: ContinuationPageContext
    ) -> None:
        page = build_page(make_result(threads_resolved=("td-1",)), continuation_context)

        meta = page.resolved_thread_meta["td-1"]
        assert meta.thread_type == ThreadType.MYSTERY
        assert meta.urgency == Urgency.HIGH

    def test_analyst_safety_net_resolves_missed_thread(
        self, make_result, continuation_context: ContinuationPageContext
    ) -> None:
        analyst = AnalystResult(
            thread_payoff_assessments=(
                ThreadPayoffAssessment(thread_id="td-2", satisfaction_level="WELL_EARNED"),
                ThreadPayoffAssessment(thread_id="td-99"),
            )
        )

        page = build_page(make_result(), continuation_context, analyst)

        assert [t.id for t in page.accumulated_active_state.open_threads] == ["td-1"]
        assert page.active_state_changes.threads_resolved == ("td-2",)
        assert set(page.resolved_thread_meta) == {"td-2"}
        assert page.thread_ages == {"td-1": 2}

    def test_promises_aged_resolved_and_expired(
        self, make_result, continuation_context: ContinuationPageContext
    ) -> None:
        analyst = AnalystResult(
            promises_resolved=("pr-1",),
            promises_detected=(
                DetectedPromise(
                    description="A second letter",
                    promise_type=PromiseType.FORESHADOWING,
                    scope=PromiseScope.SCENE,
                ),
            ),
        )

        page = build_page(make_result(), continuation_context, analyst)

        # pr-1 resolved, pr-2 (SCENE, age 4 -> 5) expired
        assert [(p.id, p.age) for p in page.accumulated_promises] == [("pr-3", 0)]
        assert page.resolved_promise_meta["pr-1"].promise_type == PromiseType.CHEKHOV_GUN

    def test_expiry_disabled(
        self, make_result, continuation_context: ContinuationPageContext
    ) -> None:
        context = continuation_context.model_copy(update={"scene_promise_expiry": None})

        page = build_page(make_result(), context)

        assert [(p.id, p.age) for p in page.accumulated_promises] == [("pr-1", 3), ("pr-2", 5)]

    def test_inventory_health_and_character_state(
        self, make_result, continuation_context: ContinuationPageContext
    ) -> None:
        result = make_result(
            inventory_added=("Rope",),
            inventory_removed=("inv-1",),
            health_added=("Sprained ankle",),
            character_state_changes_added=(
                CharacterStateAddition(character_name="greaves", states=("Limping",)),
            ),
            character_state_changes_removed=("cs-1",),
        )

        page = build_page(result, continuation_context)

        assert [e.id for e in page.accumulated_inventory] == ["inv-2", "inv-3"]
        assert page.accumulated_health == (KeyedEntry(id="hp-1", text="Sprained ankle"),)
        assert page.accumulated_character_state == {
            "Greaves": (KeyedEntry(id="cs-2", text="Limping"),)
        }

    def test_npc_updates_replace_records(
        self, make_result, continuation_context: ContinuationPageContext
    ) -> None:
        context = continuation_context.model_copy(
            update={
                "npc_agenda_updates": (NpcAgenda(npc_name="GREAVES", current_goal="Flee"),)
            }
        )

        page = build_page(make_result(), context)

        assert page.accumulated_npc_agendas["Greaves"].current_goal == "Flee"

    def test_parent_context_not_mutated(
        self, make_result, continuation_context: ContinuationPageContext
    ) -> None:
        before = continuation_context.model_dump()

        build_page(
            make_result(threads_resolved=("td-1",), inventory_removed=("inv-1",)),
            continuation_context,
        )

        assert continuation_context.model_dump() == before

    def test_deterministic(
        self, make_result, continuation_context: ContinuationPageContext
    ) -> None:
        result = make_result(threads_added=(ThreadAddition(text="A"),), inventory_added=("Rope",))

        first = build_page(result, continuation_context)
        second = build_page(result, continuation_context)

        assert first == second


class TestEndingAndErrors:
    def test_ending_page(self, make_result, continuation_context: ContinuationPageContext) -> None:
        page = build_page(make_result(choices=(), is_ending=True), continuation_context)

        assert page.is_ending
        assert page.choices == ()

    def test_ending_with_choices_raises(
        self, make_result, continuation_context: ContinuationPageContext
    ) -> None:
        with pytest.raises(PageBuildError, match="Ending pages must have no choices") as exc_info:
            build_page(make_result(is_ending=True), continuation_context)

        assert exc_info.value.page_id == 2

    def test_single_choice_raises(self, make_result) -> None:
        with pytest.raises(PageBuildError, match="at least 2 choices"):
            build_page(make_result(choices=(Choice(text="Only way"),)), OpeningPageContext())
