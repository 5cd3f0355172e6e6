"""Character state: building deltas, lookups and prompt formatting.

Applying a delta to accumulated state is done by
``storytree.models.character_state.apply_character_state_changes``; this
module turns raw producer output into well-formed deltas and reads the
accumulated state back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from storytree.models.character_state import CharacterStateAddition, CharacterStateChanges
from storytree.normalize import normalize_character_name, normalize_for_comparison

if TYPE_CHECKING:
    from collections.abc import Iterable

    from storytree.models.character_state import AccumulatedCharacterState
    from storytree.models.keyed_entry import KeyedEntry


def create_character_state_changes(
    added: Iterable[CharacterStateAddition],
    removed: Iterable[str],
) -> CharacterStateChanges:
    """Build a character-state delta from producer output.

    Names are normalized and states trimmed. Additions left without a name
    or without any non-blank state are dropped. Additions for the same
    character (compared case- and punctuation-insensitively) are merged under
    the first-seen spelling.

    Args:
        added: Per-character state additions.
        removed: Entry IDs ("cs-N") to remove.

    Returns:
        The cleaned delta.
    """
    merged: dict[str, tuple[str, list[str]]] = {}
    for addition in added:
        name = normalize_character_name(addition.character_name)
        if not name:
            continue
        states = [s.strip() for s in addition.states if s.strip()]
        if not states:
            continue
        key = normalize_for_comparison(name)
        if key in merged:
            merged[key][1].extend(states)
        else:
            merged[key] = (name, states)

    return CharacterStateChanges(
        added=tuple(
            CharacterStateAddition(character_name=name, states=tuple(states))
            for name, states in merged.values()
        ),
        removed=tuple(entry_id.strip() for entry_id in removed if entry_id.strip()),
    )


def get_character_state(
    state: AccumulatedCharacterState,
    character_name: str,
) -> tuple[KeyedEntry, ...]:
    """Return a character's entries, matching the name case-insensitively.

    Stored keys keep their original casing, so every key is compared.
    Returns an empty tuple when the character has no state.
    """
    lookup = normalize_for_comparison(normalize_character_name(character_name))
    for name, entries in state.items():
        if normalize_for_comparison(name) == lookup:
            return tuple(entries)
    return ()


def has_character_state(
    state: AccumulatedCharacterState,
    character_name: str,
    state_entry: str,
) -> bool:
    """Check whether a character holds ``state_entry`` (case-insensitive)."""
    wanted = state_entry.strip().lower()
    entries = get_character_state(state, character_name)
    return any(entry.text.strip().lower() == wanted for entry in entries)


def format_character_state_for_prompt(state: AccumulatedCharacterState) -> str:
    """Render accumulated character state for prompt construction.

    Example output::

        [Greaves]
        - [cs-1] Gave protagonist a map
        - [cs-2] Proposed a 70-30 split

        [Vespera]
        - [cs-3] Knows about the hidden cave

    Characters without entries are skipped; returns "" when nothing remains.
    """
    blocks = []
    for name, entries in state.items():
        if not entries:
            continue
        lines = [f"[{name}]", *(f"- [{entry.id}] {entry.text}" for entry in entries)]
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
