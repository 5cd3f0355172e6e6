"""Page construction: reduce a parent's state plus this page's deltas to a Page.

``build_page`` is the single entry point. It runs the lifecycle managers in a
fixed order and assembles one frozen ``Page``:

1. Resolve threads (opening: reconciler output verbatim; continuation:
   augmented by the analyst safety net).
2. Age threads and promises, minting new IDs from the parent's branch.
3. Snapshot metadata for resolved threads and promises.
4. Map and apply active-state, inventory, health and character-state deltas.
5. Apply NPC agenda and relationship updates.

The builder performs no I/O and never retries. Unknown IDs in the inputs are
dropped by the individual managers; a page whose own shape is invalid raises
``PageBuildError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pydantic import ValidationError

from storytree.engine.character_state_manager import create_character_state_changes
from storytree.engine.context import ContinuationPageContext, OpeningPageContext
from storytree.engine.errors import PageBuildError
from storytree.engine.inventory_manager import create_health_changes, create_inventory_changes
from storytree.engine.npc_accumulator import apply_agenda_updates, apply_relationship_updates
from storytree.engine.promise_lifecycle import (
    build_resolved_promise_meta,
    compute_accumulated_promises,
    get_max_promise_id_number,
)
from storytree.engine.state_mapper import map_active_state_changes
from storytree.engine.thread_lifecycle import (
    augment_threads_resolved_from_analyst,
    build_resolved_thread_meta,
    compute_continuation_thread_ages,
    compute_opening_thread_ages,
)
from storytree.models.active_state import ActiveState, apply_active_state_changes
from storytree.models.character_state import apply_character_state_changes
from storytree.models.inventory import apply_health_changes, apply_inventory_changes
from storytree.models.keyed_entry import get_max_id_number
from storytree.models.page import Page
from storytree.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from storytree.models.generation import AnalystResult, PageBuildResult
    from storytree.models.keyed_entry import KeyedEntry
    from storytree.models.npc import NpcAgenda, NpcRelationship
    from storytree.models.page import ResolvedPromiseMeta, ResolvedThreadMeta
    from storytree.models.promise import TrackedPromise

log = get_logger(__name__)


@dataclass(frozen=True)
class _ParentSnapshot:
    """The parent's accumulated state as seen by the builder.

    Opening pages get the empty default.
    """

    active_state: ActiveState = field(default_factory=ActiveState)
    inventory: tuple[KeyedEntry, ...] = ()
    health: tuple[KeyedEntry, ...] = ()
    character_state: Mapping[str, tuple[KeyedEntry, ...]] = field(default_factory=dict)
    thread_ages: Mapping[str, int] = field(default_factory=dict)
    promises: tuple[TrackedPromise, ...] = ()
    npc_agendas: Mapping[str, NpcAgenda] = field(default_factory=dict)
    npc_relationships: Mapping[str, NpcRelationship] = field(default_factory=dict)


def _parent_snapshot(context: OpeningPageContext | ContinuationPageContext) -> _ParentSnapshot:
    if isinstance(context, OpeningPageContext):
        return _ParentSnapshot()
    return _ParentSnapshot(
        active_state=context.parent_active_state,
        inventory=context.parent_inventory,
        health=context.parent_health,
        character_state=context.parent_character_state,
        thread_ages=context.parent_thread_ages,
        promises=context.parent_promises,
        npc_agendas=context.parent_npc_agendas,
        npc_relationships=context.parent_npc_relationships,
    )


def _reconcile_threads(
    result: PageBuildResult,
    context: OpeningPageContext | ContinuationPageContext,
    parent: _ParentSnapshot,
    analyst_result: AnalystResult | None,
) -> tuple[tuple[str, ...], dict[str, int], dict[str, ResolvedThreadMeta]]:
    open_threads = parent.active_state.open_threads
    added = tuple(t for t in result.threads_added if t.text.strip())

    if isinstance(context, OpeningPageContext):
        resolved = tuple(result.threads_resolved)
        ages = compute_opening_thread_ages(added)
    else:
        resolved = augment_threads_resolved_from_analyst(
            result.threads_resolved, analyst_result, open_threads
        )
        ages = compute_continuation_thread_ages(
            parent.thread_ages,
            [thread.id for thread in open_threads],
            added,
            resolved,
            get_max_id_number(open_threads, "td"),
        )

    return resolved, ages, build_resolved_thread_meta(resolved, open_threads)


def _reconcile_promises(
    context: OpeningPageContext | ContinuationPageContext,
    parent: _ParentSnapshot,
    analyst_result: AnalystResult | None,
) -> tuple[tuple[TrackedPromise, ...], dict[str, ResolvedPromiseMeta]]:
    resolved_ids = analyst_result.promises_resolved if analyst_result else ()
    detected = analyst_result.promises_detected if analyst_result else ()
    promises = compute_accumulated_promises(
        parent.promises,
        resolved_ids,
        detected,
        get_max_promise_id_number(parent.promises),
        scene_expiry_threshold=context.scene_promise_expiry,
    )
    return promises, build_resolved_promise_meta(resolved_ids, parent.promises)


def build_page(
    result: PageBuildResult,
    context: OpeningPageContext | ContinuationPageContext,
    analyst_result: AnalystResult | None = None,
) -> Page:
    """Build the page described by ``result`` on top of ``context``.

    Args:
        result: Narrative and raw deltas for the new page.
        context: Opening or continuation context. Continuation contexts carry
            the parent's accumulated snapshots.
        analyst_result: The analyst's read of the page, if it ran.

    Returns:
        The new, frozen page.

    Raises:
        PageBuildError: If the assembled page violates its own shape, e.g. an
            ending page with choices.
    """
    parent = _parent_snapshot(context)
    if isinstance(context, ContinuationPageContext):
        parent_page_id: int | None = context.parent_page_id
        parent_choice_index: int | None = context.parent_choice_index
    else:
        parent_page_id = None
        parent_choice_index = None

    threads_resolved, thread_ages, resolved_thread_meta = _reconcile_threads(
        result, context, parent, analyst_result
    )
    promises, resolved_promise_meta = _reconcile_promises(context, parent, analyst_result)

    active_state_changes = map_active_state_changes(result, threads_resolved)
    character_state_changes = create_character_state_changes(
        result.character_state_changes_added, result.character_state_changes_removed
    )
    inventory_changes = create_inventory_changes(result.inventory_added, result.inventory_removed)
    health_changes = create_health_changes(result.health_added, result.health_removed)

    try:
        page = Page(
            id=context.page_id,
            parent_page_id=parent_page_id,
            parent_choice_index=parent_choice_index,
            narrative_text=result.narrative.strip(),
            scene_summary=result.scene_summary.strip(),
            choices=result.choices,
            protagonist_affect=result.protagonist_affect,
            is_ending=result.is_ending,
            active_state_changes=active_state_changes,
            accumulated_active_state=apply_active_state_changes(
                parent.active_state, active_state_changes
            ),
            inventory_changes=inventory_changes,
            accumulated_inventory=apply_inventory_changes(parent.inventory, inventory_changes),
            health_changes=health_changes,
            accumulated_health=apply_health_changes(parent.health, health_changes),
            character_state_changes=character_state_changes,
            accumulated_character_state=apply_character_state_changes(
                parent.character_state, character_state_changes
            ),
            thread_ages=thread_ages,
            resolved_thread_meta=resolved_thread_meta,
            accumulated_promises=promises,
            resolved_promise_meta=resolved_promise_meta,
            accumulated_npc_agendas=apply_agenda_updates(
                parent.npc_agendas, context.npc_agenda_updates
            ),
            accumulated_npc_relationships=apply_relationship_updates(
                parent.npc_relationships, context.npc_relationship_updates
            ),
            page_act_index=context.page_act_index,
            page_beat_index=context.page_beat_index,
            structure_version_id=context.structure_version_id,
            analyst_result=analyst_result,
        )
    except ValidationError as e:
        problems = [error["msg"] for error in e.errors()]
        raise PageBuildError(page_id=context.page_id, problems=problems) from e

    log.debug(
        "page_built",
        page_id=page.id,
        parent_page_id=page.parent_page_id,
        open_threads=len(page.accumulated_active_state.open_threads),
        threads_resolved=len(threads_resolved),
        promises=len(page.accumulated_promises),
    )
    return page
