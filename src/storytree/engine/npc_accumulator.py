"""NPC agenda and relationship accumulation.

Each NPC has one current agenda and one current relationship. Updates
replace the stored record; the stored key keeps the casing it was first
written with.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from storytree.models.npc import NpcAgenda, NpcRelationship
from storytree.normalize import NameIndex

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from storytree.models.npc import DecomposedCharacter

NpcRecordT = TypeVar("NpcRecordT", NpcAgenda, NpcRelationship)


def _apply_npc_updates(
    current: Mapping[str, NpcRecordT],
    updates: Sequence[NpcRecordT],
) -> Mapping[str, NpcRecordT]:
    if not updates:
        return current

    index = NameIndex(current)
    result: dict[str, NpcRecordT] = dict(current)
    for update in updates:
        result[index.register(update.npc_name)] = update
    return result


def apply_agenda_updates(
    current: Mapping[str, NpcAgenda],
    updates: Sequence[NpcAgenda],
) -> Mapping[str, NpcAgenda]:
    """Replace agendas for the NPCs named in ``updates``.

    Returns ``current`` itself when there are no updates. Otherwise an NPC
    already present (matched case-insensitively) keeps its stored key; an
    unknown NPC is added under the update's name. Later updates for the same
    NPC win.
    """
    return _apply_npc_updates(current, updates)


def apply_relationship_updates(
    current: Mapping[str, NpcRelationship],
    updates: Sequence[NpcRelationship],
) -> Mapping[str, NpcRelationship]:
    """Replace relationships for the NPCs named in ``updates``.

    Same matching and identity rules as ``apply_agenda_updates``.
    """
    return _apply_npc_updates(current, updates)


def build_initial_npc_relationships(
    decomposed_characters: Iterable[DecomposedCharacter],
) -> tuple[NpcRelationship, ...]:
    """Seed relationships from decomposed characters, skipping the protagonist."""
    relationships: list[NpcRelationship] = []
    for character in decomposed_characters:
        rel = character.protagonist_relationship
        if rel is None:
            continue
        relationships.append(
            NpcRelationship(
                npc_name=character.name,
                valence=rel.valence,
                dynamic=rel.dynamic,
                history=rel.history,
                current_tension=rel.current_tension,
                leverage=rel.leverage,
            )
        )
    return tuple(relationships)


def build_initial_npc_agendas(agendas: Iterable[NpcAgenda]) -> dict[str, NpcAgenda]:
    """Key initial agendas by NPC name; a repeated name keeps the last agenda."""
    return dict(apply_agenda_updates({}, list(agendas)))


def format_npc_relationships_for_prompt(relationships: Mapping[str, NpcRelationship]) -> str:
    """Render relationships for prompt construction; "" when empty."""
    blocks = []
    for name, rel in relationships.items():
        lines = [
            f"[{name}] {rel.dynamic} (valence {rel.valence:+d})",
            f"  History: {rel.history}",
            f"  Current tension: {rel.current_tension}",
            f"  Leverage: {rel.leverage}",
        ]
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
