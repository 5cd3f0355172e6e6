"""Pydantic models for pages and accumulated story state.

Everything stored on a page is frozen; reducers return new objects rather
than mutating their inputs.
"""

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
from storytree.models.character_state import (
    AccumulatedCharacterState,
    CharacterStateAddition,
    CharacterStateChanges,
    apply_character_state_changes,
    create_empty_accumulated_character_state,
    create_empty_character_state_changes,
)
from storytree.models.frozen_mapping import FrozenMapping
from storytree.models.generation import (
    AnalystResult,
    Choice,
    PageBuildResult,
    PromisePayoffAssessment,
    ProtagonistAffect,
    SecondaryEmotion,
    ThreadPayoffAssessment,
)
from storytree.models.inventory import (
    Health,
    HealthChanges,
    Inventory,
    InventoryChanges,
    apply_health_changes,
    apply_inventory_changes,
)
from storytree.models.keyed_entry import (
    ConstraintEntry,
    ConstraintType,
    KeyedEntry,
    StateIdPrefix,
    ThreadEntry,
    ThreadType,
    ThreatEntry,
    ThreatType,
    Urgency,
    assign_ids,
    extract_id_number,
    get_max_id_number,
    next_id,
    remove_by_ids,
)
from storytree.models.npc import (
    AccumulatedNpcAgendas,
    AccumulatedNpcRelationships,
    DecomposedCharacter,
    DecomposedRelationship,
    NpcAgenda,
    NpcRelationship,
)
from storytree.models.page import (
    OPENING_PAGE_ID,
    Page,
    ResolvedPromiseMeta,
    ResolvedThreadMeta,
)
from storytree.models.promise import (
    DetectedPromise,
    PromiseScope,
    PromiseType,
    TrackedPromise,
)

__all__ = [
    "OPENING_PAGE_ID",
    "AccumulatedCharacterState",
    "AccumulatedNpcAgendas",
    "AccumulatedNpcRelationships",
    "ActiveState",
    "ActiveStateChanges",
    "AnalystResult",
    "CharacterStateAddition",
    "CharacterStateChanges",
    "Choice",
    "ConstraintAddition",
    "ConstraintEntry",
    "ConstraintType",
    "DecomposedCharacter",
    "DecomposedRelationship",
    "DetectedPromise",
    "FrozenMapping",
    "Health",
    "HealthChanges",
    "Inventory",
    "InventoryChanges",
    "KeyedEntry",
    "NpcAgenda",
    "NpcRelationship",
    "Page",
    "PageBuildResult",
    "PromisePayoffAssessment",
    "PromiseScope",
    "PromiseType",
    "ProtagonistAffect",
    "ResolvedPromiseMeta",
    "ResolvedThreadMeta",
    "SecondaryEmotion",
    "StateIdPrefix",
    "ThreadAddition",
    "ThreadEntry",
    "ThreadPayoffAssessment",
    "ThreadType",
    "ThreatAddition",
    "ThreatEntry",
    "ThreatType",
    "TrackedPromise",
    "Urgency",
    "apply_active_state_changes",
    "apply_character_state_changes",
    "apply_health_changes",
    "apply_inventory_changes",
    "assign_ids",
    "create_empty_accumulated_character_state",
    "create_empty_active_state",
    "create_empty_active_state_changes",
    "create_empty_character_state_changes",
    "extract_id_number",
    "get_max_id_number",
    "next_id",
    "remove_by_ids",
]
