"""Pydantic V2 schemas for difficulty tiers and unlock progression."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, computed_field

from barcode_battler.models.enums import Difficulty, PersonalityName


class DifficultyProfile(BaseModel):
    """Static configuration of one difficulty tier.

    Attributes:
        difficulty: Tier this profile describes.
        name: Display name.
        description: Display description.
        color: Display colour (hex).
        icon: Display icon.
        opponent_stat_multiplier: Scale applied to opponent level and stats.
        experience_multiplier: Scale applied to the experience reward.
        ai_personality_weights: Ordered (personality, weight) pairs.
        special_attack_frequency: Tier's special attack frequency.
        critical_hit_chance: Base critical chance for scaled opponents.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    difficulty: Difficulty
    name: str
    description: str
    color: str
    icon: str
    opponent_stat_multiplier: Annotated[float, Field(gt=0.0)]
    experience_multiplier: Annotated[float, Field(gt=0.0)]
    ai_personality_weights: tuple[tuple[PersonalityName, float], ...]
    special_attack_frequency: Annotated[float, Field(ge=0.0, le=1.0)]
    critical_hit_chance: Annotated[float, Field(ge=0.0, le=1.0)]

    @property
    def total_personality_weight(self) -> float:
        """Sum of all personality weights."""
        return sum(weight for _, weight in self.ai_personality_weights)


class WinLossRecord(BaseModel):
    """Win and loss counters for one tier."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    wins: Annotated[int, Field(ge=0)] = 0
    losses: Annotated[int, Field(ge=0)] = 0


def _empty_records() -> dict[Difficulty, WinLossRecord]:
    return {difficulty: WinLossRecord() for difficulty in Difficulty}


class DifficultyProgress(BaseModel):
    """Persistable difficulty progression state.

    Attributes:
        current_difficulty: Tier currently selected.
        unlocked_difficulties: Tiers unlocked so far, in unlock order.
        records: Per-tier win and loss counters.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    current_difficulty: Difficulty = Difficulty.EASY
    unlocked_difficulties: list[Difficulty] = Field(
        default_factory=lambda: [Difficulty.EASY],
    )
    records: dict[Difficulty, WinLossRecord] = Field(default_factory=_empty_records)

    @property
    def total_wins(self) -> int:
        """Wins across all tiers."""
        return sum(record.wins for record in self.records.values())

    def wins_on(self, difficulty: Difficulty) -> int:
        """Wins recorded on one tier."""
        record = self.records.get(difficulty)
        return record.wins if record else 0


class UnlockRequirement(BaseModel):
    """Progress towards unlocking one locked tier.

    Attributes:
        difficulty: Tier being unlocked.
        description: Human-readable requirement.
        current_total: Total wins so far.
        required_total: Total wins required.
        current_medium: Medium wins so far (hard tier only).
        required_medium: Medium wins required (hard tier only).
        percentage: Completion percentage, capped at 100.
    """

    model_config = ConfigDict(frozen=True)

    difficulty: Difficulty
    description: str
    current_total: int
    required_total: int
    current_medium: int | None = None
    required_medium: int | None = None
    percentage: Annotated[float, Field(ge=0.0, le=100.0)]


class ProgressUpdate(BaseModel):
    """Result of recording a battle on the progression tracker."""

    model_config = ConfigDict(frozen=True)

    difficulty: Difficulty
    won: bool
    total_wins: int
    unlocked_difficulties: list[Difficulty] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def unlocked_any(self) -> bool:
        """Whether this result unlocked at least one tier."""
        return bool(self.unlocked_difficulties)


__all__ = [
    "DifficultyProfile",
    "WinLossRecord",
    "DifficultyProgress",
    "UnlockRequirement",
    "ProgressUpdate",
]
