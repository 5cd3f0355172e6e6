"""NPC agendas and protagonist relationships.

Unlike threads and promises, NPC records are replaced rather than appended:
each NPC has exactly one current agenda and one current relationship.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field


class NpcAgenda(BaseModel):
    """What an NPC is pursuing, on- or off-screen."""

    model_config = ConfigDict(frozen=True)

    npc_name: str = Field(min_length=1)
    current_goal: str
    leverage: str = ""
    fear: str = ""
    off_screen_behavior: str = ""


class NpcRelationship(BaseModel):
    """An NPC's current relationship with the protagonist."""

    model_config = ConfigDict(frozen=True)

    npc_name: str = Field(min_length=1)
    valence: int = Field(ge=-5, le=5, description="-5 (hostile) to +5 (devoted)")
    dynamic: str = Field(description="Label such as mentor, rival, ally, dependency")
    history: str = ""
    current_tension: str = ""
    leverage: str = ""


class DecomposedRelationship(BaseModel):
    """Relationship data produced by character decomposition."""

    model_config = ConfigDict(frozen=True)

    valence: int = Field(ge=-5, le=5)
    dynamic: str
    history: str = ""
    current_tension: str = ""
    leverage: str = ""


class DecomposedCharacter(BaseModel):
    """The slice of a decomposed character the engine consumes.

    The protagonist is the character whose ``protagonist_relationship`` is None.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    protagonist_relationship: DecomposedRelationship | None = None


AccumulatedNpcAgendas = Mapping[str, NpcAgenda]
AccumulatedNpcRelationships = Mapping[str, NpcRelationship]
