"""Page build contexts: what the orchestrator knows besides this page's deltas.

A context is either an ``OpeningPageContext`` (the tree root, no parent) or
a ``ContinuationPageContext`` carrying the parent's accumulated snapshots.
The two are discriminated on ``kind`` and validated once, at the boundary.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from storytree.config import DEFAULT_SCENE_PROMISE_EXPIRY
from storytree.engine.errors import PageBuildError
from storytree.models.active_state import ActiveState
from storytree.models.frozen_mapping import (  # noqa: TC001 - pydantic field type
    FrozenMapping,
    empty_mapping,
)
from storytree.models.keyed_entry import KeyedEntry  # noqa: TC001 - pydantic field type
from storytree.models.npc import NpcAgenda, NpcRelationship
from storytree.models.page import OPENING_PAGE_ID
from storytree.models.promise import TrackedPromise  # noqa: TC001 - pydantic field type

if TYPE_CHECKING:
    from collections.abc import Sequence

    from storytree.models.page import Page


class _PageContextBase(BaseModel):
    """Fields shared by both context variants.

    Attributes:
        page_act_index: Act the new page belongs to.
        page_beat_index: Beat the new page belongs to.
        scene_promise_expiry: Maximum age of SCENE promises, fixed at story
            creation. None disables expiry.
        npc_agenda_updates: Agendas rewritten on this page.
        npc_relationship_updates: Relationships rewritten on this page.
    """

    model_config = ConfigDict(frozen=True)

    page_act_index: int = Field(default=0, ge=0)
    page_beat_index: int = Field(default=0, ge=0)
    structure_version_id: str | None = None
    scene_promise_expiry: int | None = Field(default=DEFAULT_SCENE_PROMISE_EXPIRY, ge=0)
    npc_agenda_updates: tuple[NpcAgenda, ...] = ()
    npc_relationship_updates: tuple[NpcRelationship, ...] = ()


class OpeningPageContext(_PageContextBase):
    """Context for the first page of a story.

    Every accumulated structure starts empty. Initial NPC agendas and
    relationships are passed as this page's updates.
    """

    kind: Literal["opening"] = "opening"

    @property
    def page_id(self) -> int:
        return OPENING_PAGE_ID


class ContinuationPageContext(_PageContextBase):
    """Context for a page reached from a parent page's choice."""

    kind: Literal["continuation"] = "continuation"

    page_id: int = Field(gt=OPENING_PAGE_ID)
    parent_page_id: int = Field(ge=OPENING_PAGE_ID)
    parent_choice_index: int = Field(ge=0)

    parent_active_state: ActiveState = Field(default_factory=ActiveState)
    parent_inventory: tuple[KeyedEntry, ...] = ()
    parent_health: tuple[KeyedEntry, ...] = ()
    parent_character_state: FrozenMapping[str, tuple[KeyedEntry, ...]] = Field(
        default_factory=empty_mapping
    )
    parent_thread_ages: FrozenMapping[str, int] = Field(default_factory=empty_mapping)
    parent_promises: tuple[TrackedPromise, ...] = ()
    parent_npc_agendas: FrozenMapping[str, NpcAgenda] = Field(default_factory=empty_mapping)
    parent_npc_relationships: FrozenMapping[str, NpcRelationship] = Field(
        default_factory=empty_mapping
    )


PageBuildContext = Annotated[
    OpeningPageContext | ContinuationPageContext,
    Field(discriminator="kind"),
]

_CONTEXT_ADAPTER: TypeAdapter[OpeningPageContext | ContinuationPageContext] = TypeAdapter(
    PageBuildContext
)


def parse_page_build_context(data: Any) -> OpeningPageContext | ContinuationPageContext:
    """Validate raw context data into one of the two context variants.

    Raises:
        pydantic.ValidationError: If ``kind`` is missing or fields are invalid.
    """
    return _CONTEXT_ADAPTER.validate_python(data)


def continuation_context_from_parent(
    parent: Page,
    *,
    page_id: int,
    choice_index: int,
    scene_promise_expiry: int | None,
    page_act_index: int | None = None,
    page_beat_index: int | None = None,
    structure_version_id: str | None = None,
    npc_agenda_updates: Sequence[NpcAgenda] = (),
    npc_relationship_updates: Sequence[NpcRelationship] = (),
) -> ContinuationPageContext:
    """Derive a continuation context from the parent page's snapshots.

    Structural position and structure version default to the parent's.

    Raises:
        PageBuildError: If the parent is an ending page or the choice index
            does not name one of the parent's choices.
    """
    problems = []
    if parent.is_ending:
        problems.append(f"parent page {parent.id} is an ending and cannot be continued")
    elif not 0 <= choice_index < len(parent.choices):
        problems.append(
            f"choice index {choice_index} out of range for parent page {parent.id} "
            f"({len(parent.choices)} choices)"
        )
    if problems:
        raise PageBuildError(page_id=page_id, problems=problems)

    return ContinuationPageContext(
        page_id=page_id,
        parent_page_id=parent.id,
        parent_choice_index=choice_index,
        parent_active_state=parent.accumulated_active_state,
        parent_inventory=parent.accumulated_inventory,
        parent_health=parent.accumulated_health,
        parent_character_state=parent.accumulated_character_state,
        parent_thread_ages=parent.thread_ages,
        parent_promises=parent.accumulated_promises,
        parent_npc_agendas=parent.accumulated_npc_agendas,
        parent_npc_relationships=parent.accumulated_npc_relationships,
        page_act_index=parent.page_act_index if page_act_index is None else page_act_index,
        page_beat_index=parent.page_beat_index if page_beat_index is None else page_beat_index,
        structure_version_id=structure_version_id or parent.structure_version_id,
        scene_promise_expiry=scene_promise_expiry,
        npc_agenda_updates=tuple(npc_agenda_updates),
        npc_relationship_updates=tuple(npc_relationship_updates),
    )
