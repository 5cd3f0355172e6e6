"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from storytree.models import (
    Choice,
    KeyedEntry,
    PageBuildResult,
    PromiseScope,
    PromiseType,
    ThreadEntry,
    ThreadType,
    TrackedPromise,
    Urgency,
)


@pytest.fixture(autouse=True)
def clear_scene_expiry_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's environment from leaking into config tests."""
    monkeypatch.delenv("STORYTREE_SCENE_PROMISE_EXPIRY", raising=False)


@pytest.fixture
def two_choices() -> tuple[Choice, ...]:
    """Return the minimum set of choices for a non-ending page."""
    return (Choice(text="Go left"), Choice(text="Go right"))


@pytest.fixture
def make_result(two_choices: tuple[Choice, ...]):
    """Factory for page build results with sensible defaults."""

    def _make(**overrides: object) -> PageBuildResult:
        fields: dict[str, object] = {
            "narrative": "The corridor stretches into darkness.",
            "scene_summary": "A dark corridor.",
            "choices": two_choices,
        }
        fields.update(overrides)
        return PageBuildResult.model_validate(fields)

    return _make


@pytest.fixture
def open_threads() -> tuple[ThreadEntry, ...]:
    """Two open threads as they would sit on a parent page."""
    return (
        ThreadEntry(
            id="td-1",
            text="Who sent the letter?",
            thread_type=ThreadType.MYSTERY,
            urgency=Urgency.HIGH,
        ),
        ThreadEntry(
            id="td-2",
            text="Find the key",
            thread_type=ThreadType.QUEST,
            urgency=Urgency.LOW,
        ),
    )


@pytest.fixture
def inventory() -> tuple[KeyedEntry, ...]:
    return (
        KeyedEntry(id="inv-1", text="Rusty key"),
        KeyedEntry(id="inv-2", text="Lantern"),
    )


@pytest.fixture
def tracked_promises() -> tuple[TrackedPromise, ...]:
    return (
        TrackedPromise(
            id="pr-1",
            description="The pistol on the mantel",
            promise_type=PromiseType.CHEKHOV_GUN,
            scope=PromiseScope.STORY,
            suggested_urgency=Urgency.HIGH,
            age=2,
        ),
        TrackedPromise(
            id="pr-2",
            description="A glance across the room",
            promise_type=PromiseType.UNRESOLVED_EMOTION,
            scope=PromiseScope.SCENE,
            age=4,
        ),
    )
