"""Narrative promises: foreshadowing and setups awaiting payoff."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from storytree.models.keyed_entry import Urgency


class PromiseType(StrEnum):
    CHEKHOV_GUN = "CHEKHOV_GUN"
    FORESHADOWING = "FORESHADOWING"
    DRAMATIC_IRONY = "DRAMATIC_IRONY"
    UNRESOLVED_EMOTION = "UNRESOLVED_EMOTION"
    SETUP_PAYOFF = "SETUP_PAYOFF"


class PromiseScope(StrEnum):
    """Narrative horizon over which a promise stays relevant.

    Only SCENE promises expire by age.
    """

    SCENE = "SCENE"
    BEAT = "BEAT"
    ACT = "ACT"
    STORY = "STORY"


class DetectedPromise(BaseModel):
    """A promise spotted by the analyst on the current page."""

    model_config = ConfigDict(frozen=True)

    description: str
    promise_type: PromiseType
    scope: PromiseScope = PromiseScope.BEAT
    resolution_hint: str = ""
    suggested_urgency: Urgency = Urgency.MEDIUM


class TrackedPromise(BaseModel):
    """A promise carried forward along a branch.

    ``age`` counts pages since the promise was first detected.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    description: str
    promise_type: PromiseType
    scope: PromiseScope = PromiseScope.BEAT
    resolution_hint: str = ""
    suggested_urgency: Urgency = Urgency.MEDIUM
    age: int = Field(default=0, ge=0)
