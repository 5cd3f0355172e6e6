"""Reconciliation engine - builds pages from a parent page plus deltas.

Every function here is pure: state is read from the arguments and returned
as new objects. ``build_page`` is the orchestrator; the other modules are
the lifecycle managers it runs.
"""

from storytree.engine.character_state_manager import (
    create_character_state_changes,
    format_character_state_for_prompt,
    get_character_state,
    has_character_state,
)
from storytree.engine.context import (
    ContinuationPageContext,
    OpeningPageContext,
    PageBuildContext,
    continuation_context_from_parent,
    parse_page_build_context,
)
from storytree.engine.errors import PageBuildError
from storytree.engine.inventory_manager import (
    count_inventory_item,
    create_health_changes,
    create_inventory_changes,
    format_health_for_prompt,
    format_inventory_for_prompt,
    has_inventory_item,
)
from storytree.engine.npc_accumulator import (
    apply_agenda_updates,
    apply_relationship_updates,
    build_initial_npc_agendas,
    build_initial_npc_relationships,
    format_npc_relationships_for_prompt,
)
from storytree.engine.page_builder import build_page
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
from storytree.engine.thread_pacing import OverdueThread, get_overdue_threads

__all__ = [
    "ContinuationPageContext",
    "OpeningPageContext",
    "OverdueThread",
    "PageBuildContext",
    "PageBuildError",
    "apply_agenda_updates",
    "apply_relationship_updates",
    "augment_threads_resolved_from_analyst",
    "build_initial_npc_agendas",
    "build_initial_npc_relationships",
    "build_page",
    "build_resolved_promise_meta",
    "build_resolved_thread_meta",
    "compute_accumulated_promises",
    "compute_continuation_thread_ages",
    "compute_opening_thread_ages",
    "continuation_context_from_parent",
    "count_inventory_item",
    "create_character_state_changes",
    "create_health_changes",
    "create_inventory_changes",
    "format_character_state_for_prompt",
    "format_health_for_prompt",
    "format_inventory_for_prompt",
    "format_npc_relationships_for_prompt",
    "get_character_state",
    "get_max_promise_id_number",
    "get_overdue_threads",
    "has_character_state",
    "has_inventory_item",
    "map_active_state_changes",
    "parse_page_build_context",
]
