"""The page record: one immutable node of the story tree.

A page carries both the deltas applied on it and the accumulated snapshots
that result. Snapshots are derived only from the parent page's snapshots plus
this page's deltas, so any page can be rendered or continued without reading
sibling branches.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from storytree.models.active_state import ActiveState, ActiveStateChanges
from storytree.models.character_state import CharacterStateChanges
from storytree.models.frozen_mapping import (  # noqa: TC001 - pydantic field type
    FrozenMapping,
    empty_mapping,
)
from storytree.models.generation import AnalystResult, Choice, ProtagonistAffect
from storytree.models.inventory import HealthChanges, InventoryChanges
from storytree.models.keyed_entry import KeyedEntry, ThreadType, Urgency
from storytree.models.npc import NpcAgenda, NpcRelationship
from storytree.models.promise import PromiseScope, PromiseType, TrackedPromise

OPENING_PAGE_ID = 1
MIN_CHOICES = 2


class ResolvedThreadMeta(BaseModel):
    """Snapshot of a thread's classification at the moment it was resolved."""

    model_config = ConfigDict(frozen=True)

    thread_type: ThreadType
    urgency: Urgency


class ResolvedPromiseMeta(BaseModel):
    """Snapshot of a promise's classification at the moment it was resolved."""

    model_config = ConfigDict(frozen=True)

    promise_type: PromiseType
    scope: PromiseScope
    urgency: Urgency


class Page(BaseModel):
    """An immutable story page.

    Attributes:
        id: Page number; the opening page is 1.
        parent_page_id: None only for the opening page.
        parent_choice_index: Index of the parent's choice that led here.
        thread_ages: Pages each open thread has stayed open ("td-N" -> age).
        page_act_index: Act the page was written in.
        page_beat_index: Beat the page was written in.

    Mapping fields are read-only views; build a new page to change them.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    parent_page_id: int | None = None
    parent_choice_index: int | None = Field(default=None, ge=0)

    narrative_text: str
    scene_summary: str = ""
    choices: tuple[Choice, ...] = ()
    protagonist_affect: ProtagonistAffect | None = None
    is_ending: bool = False

    active_state_changes: ActiveStateChanges = Field(default_factory=ActiveStateChanges)
    accumulated_active_state: ActiveState = Field(default_factory=ActiveState)
    inventory_changes: InventoryChanges = Field(default_factory=InventoryChanges)
    accumulated_inventory: tuple[KeyedEntry, ...] = ()
    health_changes: HealthChanges = Field(default_factory=HealthChanges)
    accumulated_health: tuple[KeyedEntry, ...] = ()
    character_state_changes: CharacterStateChanges = Field(default_factory=CharacterStateChanges)
    accumulated_character_state: FrozenMapping[str, tuple[KeyedEntry, ...]] = Field(
        default_factory=empty_mapping
    )

    thread_ages: FrozenMapping[str, int] = Field(default_factory=empty_mapping)
    resolved_thread_meta: FrozenMapping[str, ResolvedThreadMeta] = Field(
        default_factory=empty_mapping
    )
    accumulated_promises: tuple[TrackedPromise, ...] = ()
    resolved_promise_meta: FrozenMapping[str, ResolvedPromiseMeta] = Field(
        default_factory=empty_mapping
    )

    accumulated_npc_agendas: FrozenMapping[str, NpcAgenda] = Field(default_factory=empty_mapping)
    accumulated_npc_relationships: FrozenMapping[str, NpcRelationship] = Field(
        default_factory=empty_mapping
    )

    page_act_index: int = Field(default=0, ge=0)
    page_beat_index: int = Field(default=0, ge=0)
    structure_version_id: str | None = None
    analyst_result: AnalystResult | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> Page:
        if self.is_ending and self.choices:
            raise ValueError("Ending pages must have no choices")
        if not self.is_ending and len(self.choices) < MIN_CHOICES:
            raise ValueError(f"Non-ending pages must have at least {MIN_CHOICES} choices")

        if self.parent_page_id is None:
            if self.parent_choice_index is not None:
                raise ValueError("Opening page cannot have a parent choice index")
            if self.id != OPENING_PAGE_ID:
                raise ValueError(f"Only page {OPENING_PAGE_ID} may omit a parent")
        else:
            if self.parent_choice_index is None:
                raise ValueError("Continuation pages must record the parent choice index")
            if self.parent_page_id == self.id:
                raise ValueError("A page cannot be its own parent")
        return self

    @property
    def is_opening(self) -> bool:
        return self.parent_page_id is None
