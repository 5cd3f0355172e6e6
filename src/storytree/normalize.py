"""Name normalization for character and NPC keyed state.

Two forms are used throughout the engine:

- The *storage* form (``normalize_character_name``) keeps the author's casing
  but removes stray whitespace. Accumulated mappings are keyed by it.
- The *comparison* form (``normalize_for_comparison``) applies Unicode NFKC,
  casefolds, and strips every character that is not a letter or digit in any
  script, so "Dr. Cohen", "dr cohen" and "  DR COHEN " all compare equal
  while "李" and "王", or "Élodie" and "Lodie", stay distinct.

``NameIndex`` pairs the two: it is built once per reducer call from the keys
of an accumulated mapping and resolves any spelling of a name back to the key
that was stored first.
"""

from __future__ import annotations

import re
import unicodedata
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_character_name(name: str) -> str:
    """Return the storage form of a character name.

    Trims and collapses internal whitespace. Casing is preserved.

    Examples:
        "  Greaves " -> "Greaves"
        "The   Kid" -> "The Kid"
    """
    return _WHITESPACE_RE.sub(" ", name).strip()


def normalize_for_comparison(text: str) -> str:
    """Return the comparison key for a name or entry.

    Casefolds the NFKC form and removes every character that is not a
    letter or digit. Names made only of punctuation or symbols would all
    collapse to the empty key, so they fall back to their casefolded,
    whitespace-collapsed form instead.

    Examples:
        "Dr. Cohen" -> "drcohen"
        "  GREAVES  " -> "greaves"
        "Élodie" -> "élodie"
        " ?? " -> "??"
    """
    folded = unicodedata.normalize("NFKC", text).casefold()
    key = "".join(ch for ch in folded if ch.isalnum())
    if key:
        return key
    return normalize_character_name(folded)


class NameIndex:
    """Case-insensitive index from comparison keys to stored keys.

    The index keeps the first key registered for a given comparison key;
    later spellings of the same name resolve to it. Iteration yields stored
    keys in registration order.
    """

    def __init__(self, keys: Iterable[str] = ()) -> None:
        self._by_comparison: dict[str, str] = {}
        for key in keys:
            self.register(key)

    def resolve(self, name: str) -> str | None:
        """Return the stored key matching ``name``, or None."""
        return self._by_comparison.get(normalize_for_comparison(name))

    def register(self, key: str) -> str:
        """Register ``key`` unless a matching key exists; return the stored key."""
        comparison = normalize_for_comparison(key)
        existing = self._by_comparison.get(comparison)
        if existing is not None:
            return existing
        self._by_comparison[comparison] = key
        return key

    def discard(self, key: str) -> None:
        """Forget the stored key matching ``key``, if any."""
        self._by_comparison.pop(normalize_for_comparison(key), None)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.resolve(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_comparison.values())

    def __len__(self) -> int:
        return len(self._by_comparison)
