"""Keyed state entries and ID management.

Every piece of accumulated state that can later be removed carries a
server-assigned sequential ID ("inv-1", "cs-3", "td-2"). Upstream producers
refer to entries by these IDs, never by their text.

ID counters are always seeded from the entries visible on the current
branch, so sibling branches may mint the same IDs independently.
"""

from __future__ import annotations

import re
from enum import StrEnum
from typing import TYPE_CHECKING, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from storytree.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

log = get_logger(__name__)

StateIdPrefix = Literal["inv", "hp", "cs", "th", "cn", "td", "pr"]

_ID_PATTERN = re.compile(r"^[a-z]+-(\d+)$")


class ThreadType(StrEnum):
    MYSTERY = "MYSTERY"
    QUEST = "QUEST"
    RELATIONSHIP = "RELATIONSHIP"
    DANGER = "DANGER"
    INFORMATION = "INFORMATION"
    RESOURCE = "RESOURCE"
    MORAL = "MORAL"


class Urgency(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ThreatType(StrEnum):
    HOSTILE_AGENT = "HOSTILE_AGENT"
    ENVIRONMENTAL = "ENVIRONMENTAL"
    CREATURE = "CREATURE"


class ConstraintType(StrEnum):
    PHYSICAL = "PHYSICAL"
    ENVIRONMENTAL = "ENVIRONMENTAL"
    TEMPORAL = "TEMPORAL"


class KeyedEntry(BaseModel):
    """A piece of state text with a stable, server-assigned ID."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    text: str


class ThreatEntry(KeyedEntry):
    threat_type: ThreatType


class ConstraintEntry(KeyedEntry):
    constraint_type: ConstraintType


class ThreadEntry(KeyedEntry):
    """An open narrative thread."""

    thread_type: ThreadType = ThreadType.INFORMATION
    urgency: Urgency = Urgency.MEDIUM


KeyedT = TypeVar("KeyedT", bound=KeyedEntry)


def extract_id_number(entry_id: str) -> int:
    """Return the numeric suffix of a keyed ID.

    Raises:
        ValueError: If the ID is not of the form "<prefix>-<n>".
    """
    match = _ID_PATTERN.match(entry_id)
    if match is None:
        raise ValueError(f'Malformed keyed entry ID: "{entry_id}"')
    return int(match.group(1))


def get_max_id_number(entries: Iterable[KeyedEntry], prefix: StateIdPrefix) -> int:
    """Return the highest numeric suffix among entries with ``prefix``.

    IDs that do not match "<prefix>-<n>" exactly are ignored. Returns 0 when
    nothing matches.
    """
    pattern = re.compile(rf"^{re.escape(prefix)}-(\d+)$")
    highest = 0
    for entry in entries:
        match = pattern.match(entry.id)
        if match is None:
            continue
        highest = max(highest, int(match.group(1)))
    return highest


def next_id(prefix: StateIdPrefix, current_max: int) -> str:
    """Return the ID following ``current_max`` for ``prefix``."""
    return f"{prefix}-{current_max + 1}"


def assign_ids(
    existing: Iterable[KeyedEntry],
    new_texts: Iterable[str],
    prefix: StateIdPrefix,
) -> tuple[KeyedEntry, ...]:
    """Mint keyed entries for ``new_texts``, continuing after ``existing``.

    Blank texts are skipped without consuming an ID.
    """
    current_max = get_max_id_number(existing, prefix)
    minted: list[KeyedEntry] = []
    for text in new_texts:
        trimmed = text.strip()
        if not trimmed:
            continue
        current_max += 1
        minted.append(KeyedEntry(id=f"{prefix}-{current_max}", text=trimmed))
    return tuple(minted)


def remove_by_ids(entries: Sequence[KeyedT], ids_to_remove: Iterable[str]) -> tuple[KeyedT, ...]:
    """Return ``entries`` without those whose ID is in ``ids_to_remove``.

    Unmatched IDs are logged and otherwise ignored.
    """
    remove = list(ids_to_remove)
    if not remove:
        return tuple(entries)

    remove_set = set(remove)
    matched: set[str] = set()
    kept: list[KeyedT] = []
    for entry in entries:
        if entry.id in remove_set:
            matched.add(entry.id)
        else:
            kept.append(entry)

    unmatched = [entry_id for entry_id in remove if entry_id not in matched]
    if unmatched:
        log.warning("keyed_removal_unmatched", ids=unmatched)
    return tuple(kept)
