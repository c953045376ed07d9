"""Pydantic V2 schemas for the AI opponent.

Personality traits and difficulty behaviour parameters are static
configuration; ``AIInfo`` is the snapshot recorded on a battle and
``BattleAnalysis`` the memory summary captured when it ends.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from barcode_battler.models.enums import ActionType, Difficulty, PersonalityName, Strategy


Probability = Annotated[float, Field(ge=0.0, le=1.0)]


class PersonalityTraits(BaseModel):
    """Numeric traits of an AI personality, each in [0, 1].

    Attributes:
        attack_preference: Bias towards the aggressive strategy.
        special_attack_usage: Inclination to use special attacks.
        risk_tolerance: Low values favour the defensive strategy.
        adaptability: Bias towards the tactical strategy.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    attack_preference: Probability
    special_attack_usage: Probability
    risk_tolerance: Probability
    adaptability: Probability


class AIBehaviorParams(BaseModel):
    """Difficulty-dependent decision parameters.

    Attributes:
        decision_accuracy: How often the AI picks a sensible action.
        strategy_consistency: How strongly the AI sticks to a strategy.
        adaptation_speed: How quickly the AI reacts to player patterns.
        mistake_chance: Chance of a random action on easy.
        optimal_play_chance: Chance of the computed optimal action on hard.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    decision_accuracy: Probability
    strategy_consistency: Probability
    adaptation_speed: Probability
    mistake_chance: Probability
    optimal_play_chance: Probability


class AIInfo(BaseModel):
    """AI configuration recorded on a battle."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    personality: PersonalityName
    difficulty: Difficulty
    traits: PersonalityTraits
    behavior: AIBehaviorParams


class AIDecision(BaseModel):
    """One decision taken by the AI, kept in its decision log."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    turn: int = Field(ge=0)
    strategy: Strategy
    action: ActionType
    player_pattern: str


class BattleAnalysis(BaseModel):
    """Summary of the AI's memory at the end of a battle.

    Attributes:
        personality: Personality that drove the AI.
        difficulty: Tier the AI played at.
        turns_elapsed: Decisions the AI was asked to make.
        damage_dealt: Damage the AI accumulated in memory.
        damage_taken: Damage the AI recorded as taken.
        player_pattern: Last classification of the player's actions.
        player_actions: Recent player actions the AI observed.
        recent_decisions: The AI's own recent decisions.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    personality: PersonalityName
    difficulty: Difficulty
    turns_elapsed: int = Field(ge=0)
    damage_dealt: int = Field(ge=0)
    damage_taken: int = Field(ge=0)
    player_pattern: str
    player_actions: list[ActionType] = Field(default_factory=list)
    recent_decisions: list[AIDecision] = Field(default_factory=list)


__all__ = [
    "PersonalityTraits",
    "AIBehaviorParams",
    "AIInfo",
    "AIDecision",
    "BattleAnalysis",
]
