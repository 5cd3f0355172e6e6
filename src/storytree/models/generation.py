"""Inputs produced by the generation collaborators.

These records arrive already parsed and schema-checked. The writer and
state accountant produce a ``PageBuildResult``; the analyst optionally
produces an ``AnalystResult`` for continuation pages.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from storytree.models.active_state import ConstraintAddition, ThreadAddition, ThreatAddition
from storytree.models.character_state import CharacterStateAddition
from storytree.models.promise import DetectedPromise

EmotionIntensity = Literal["mild", "moderate", "strong", "overwhelming"]
SatisfactionLevel = Literal["RUSHED", "ADEQUATE", "WELL_EARNED"]


class Choice(BaseModel):
    """A protagonist choice offered at the end of a page."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    choice_type: str = ""
    primary_delta: str = ""


class SecondaryEmotion(BaseModel):
    model_config = ConfigDict(frozen=True)

    emotion: str
    cause: str


class ProtagonistAffect(BaseModel):
    """How the protagonist feels at the end of a page.

    A per-page snapshot; never accumulated.
    """

    model_config = ConfigDict(frozen=True)

    primary_emotion: str
    primary_intensity: EmotionIntensity
    primary_cause: str
    secondary_emotions: tuple[SecondaryEmotion, ...] = ()
    dominant_motivation: str = ""


class PageBuildResult(BaseModel):
    """Narrative plus raw deltas for one page.

    Removal fields hold keyed IDs ("th-2", "inv-4", "cs-1"); addition fields
    hold text or typed additions.
    """

    model_config = ConfigDict(frozen=True)

    narrative: str
    scene_summary: str = ""
    choices: tuple[Choice, ...] = ()

    current_location: str = ""
    threats_added: tuple[ThreatAddition, ...] = ()
    threats_removed: tuple[str, ...] = ()
    constraints_added: tuple[ConstraintAddition, ...] = ()
    constraints_removed: tuple[str, ...] = ()
    threads_added: tuple[ThreadAddition, ...] = ()
    threads_resolved: tuple[str, ...] = ()

    inventory_added: tuple[str, ...] = ()
    inventory_removed: tuple[str, ...] = ()
    health_added: tuple[str, ...] = ()
    health_removed: tuple[str, ...] = ()
    character_state_changes_added: tuple[CharacterStateAddition, ...] = ()
    character_state_changes_removed: tuple[str, ...] = ()

    protagonist_affect: ProtagonistAffect | None = None
    is_ending: bool = False


class ThreadPayoffAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    thread_id: str
    thread_text: str = ""
    satisfaction_level: SatisfactionLevel = "ADEQUATE"
    reasoning: str = ""


class PromisePayoffAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    promise_id: str
    description: str = ""
    satisfaction_level: SatisfactionLevel = "ADEQUATE"
    reasoning: str = ""


class AnalystResult(BaseModel):
    """The analyst's read of a generated page.

    Only the fields the reconciliation engine consumes are modelled.
    """

    model_config = ConfigDict(frozen=True)

    narrative_summary: str = ""
    thread_payoff_assessments: tuple[ThreadPayoffAssessment, ...] = ()
    promises_detected: tuple[DetectedPromise, ...] = ()
    promises_resolved: tuple[str, ...] = ()
    promise_payoff_assessments: tuple[PromisePayoffAssessment, ...] = ()
