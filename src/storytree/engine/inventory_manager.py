"""Inventory and health deltas, lookups and prompt formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from storytree.models.inventory import HealthChanges, InventoryChanges

if TYPE_CHECKING:
    from collections.abc import Iterable

    from storytree.models.inventory import Health, Inventory


def _clean(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(value.strip() for value in values if value.strip())


def create_inventory_changes(added: Iterable[str], removed: Iterable[str]) -> InventoryChanges:
    """Build inventory changes from item texts to add and "inv-N" IDs to remove."""
    return InventoryChanges(added=_clean(added), removed=_clean(removed))


def create_health_changes(added: Iterable[str], removed: Iterable[str]) -> HealthChanges:
    """Build health changes from condition texts to add and "hp-N" IDs to remove."""
    return HealthChanges(added=_clean(added), removed=_clean(removed))


def _normalize_text(text: str) -> str:
    return text.strip().lower()


def has_inventory_item(inventory: Inventory, item: str) -> bool:
    """Check whether the inventory holds ``item`` (case-insensitive)."""
    wanted = _normalize_text(item)
    return any(_normalize_text(entry.text) == wanted for entry in inventory)


def count_inventory_item(inventory: Inventory, item: str) -> int:
    """Count copies of ``item`` in the inventory (case-insensitive)."""
    wanted = _normalize_text(item)
    return sum(1 for entry in inventory if _normalize_text(entry.text) == wanted)


def format_inventory_for_prompt(inventory: Inventory) -> str:
    """Render the inventory for prompt construction; "" when empty."""
    if not inventory:
        return ""
    lines = "\n".join(f"- [{entry.id}] {entry.text}" for entry in inventory)
    return f"YOUR INVENTORY:\n{lines}\n"


def format_health_for_prompt(health: Health) -> str:
    """Render health conditions; an empty list reads as "You feel fine."."""
    if not health:
        return "YOUR HEALTH:\n- You feel fine.\n"
    lines = "\n".join(f"- [{entry.id}] {entry.text}" for entry in health)
    return f"YOUR HEALTH:\n{lines}\n"
