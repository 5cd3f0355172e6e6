"""Inventory and health: keyed lists accumulated along a branch."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from storytree.models.keyed_entry import KeyedEntry, StateIdPrefix, assign_ids, remove_by_ids

Inventory = tuple[KeyedEntry, ...]
Health = tuple[KeyedEntry, ...]


class KeyedListChanges(BaseModel):
    """Texts to add and IDs to remove for a keyed list."""

    model_config = ConfigDict(frozen=True)

    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()


class InventoryChanges(KeyedListChanges):
    pass


class HealthChanges(KeyedListChanges):
    pass


def _apply_keyed_list_changes(
    current: tuple[KeyedEntry, ...],
    changes: KeyedListChanges,
    prefix: StateIdPrefix,
) -> tuple[KeyedEntry, ...]:
    kept = remove_by_ids(current, changes.removed)
    return (*kept, *assign_ids(current, changes.added, prefix))


def apply_inventory_changes(current: Inventory, changes: InventoryChanges) -> Inventory:
    """Remove items by ID, then append new items as "inv-N" entries."""
    return _apply_keyed_list_changes(current, changes, "inv")


def apply_health_changes(current: Health, changes: HealthChanges) -> Health:
    """Remove conditions by ID, then append new conditions as "hp-N" entries."""
    return _apply_keyed_list_changes(current, changes, "hp")
