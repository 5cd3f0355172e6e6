"""Branch-isolated character state.

Character state holds free-text situational facts about characters ("holding
the map", "wounded in the left arm") keyed by character name. Names are
stored with the casing first seen on the branch and looked up
case-insensitively.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from storytree.models.keyed_entry import KeyedEntry, get_max_id_number
from storytree.normalize import NameIndex, normalize_character_name
from storytree.observability.logging import get_logger

log = get_logger(__name__)

AccumulatedCharacterState = Mapping[str, tuple[KeyedEntry, ...]]


class CharacterStateAddition(BaseModel):
    """New state texts for one character."""

    model_config = ConfigDict(frozen=True)

    character_name: str
    states: tuple[str, ...] = ()


class CharacterStateChanges(BaseModel):
    """This page's character-state delta.

    Attributes:
        added: New state texts grouped by character.
        removed: IDs ("cs-N") of entries to drop, whichever character holds them.
    """

    model_config = ConfigDict(frozen=True)

    added: tuple[CharacterStateAddition, ...] = ()
    removed: tuple[str, ...] = ()


def create_empty_character_state_changes() -> CharacterStateChanges:
    return CharacterStateChanges()


def create_empty_accumulated_character_state() -> dict[str, tuple[KeyedEntry, ...]]:
    return {}


def apply_character_state_changes(
    current: AccumulatedCharacterState,
    changes: CharacterStateChanges,
) -> dict[str, tuple[KeyedEntry, ...]]:
    """Apply ``changes`` to ``current`` and return the new character state.

    Removals by ID run first across all characters. Additions are numbered
    after the highest "cs-N" on the branch and filed under the existing key
    for that character when one matches case-insensitively, otherwise under
    the addition's own name. Characters left without entries are dropped.
    """
    result: dict[str, list[KeyedEntry]] = {name: list(entries) for name, entries in current.items()}
    index = NameIndex(result)

    if changes.removed:
        remove_set = set(changes.removed)
        matched: set[str] = set()
        for name, entries in result.items():
            kept = [entry for entry in entries if entry.id not in remove_set]
            matched.update(entry.id for entry in entries if entry.id in remove_set)
            result[name] = kept
        unmatched = [entry_id for entry_id in changes.removed if entry_id not in matched]
        if unmatched:
            log.warning("character_state_removal_unmatched", ids=unmatched)

    next_number = get_max_id_number(
        (entry for entries in current.values() for entry in entries), "cs"
    )
    for addition in changes.added:
        display_name = normalize_character_name(addition.character_name)
        if not display_name:
            continue
        storage_key = index.register(display_name)
        bucket = result.setdefault(storage_key, [])
        for state in addition.states:
            text = state.strip()
            if not text:
                continue
            next_number += 1
            bucket.append(KeyedEntry(id=f"cs-{next_number}", text=text))

    return {name: tuple(entries) for name, entries in result.items() if entries}
