"""Pydantic V2 schemas for creatures.

A creature is derived from a barcode and then evolves through leveling and
battles. The models here enforce the structural invariants (non-negative
stats, ``hp <= max_hp``, ASCII-digit barcodes, level at least 1), so a
``Creature`` that exists is a structurally valid creature.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from barcode_battler.models.enums import Difficulty


BARCODE_PATTERN = r"^[0-9]+$"


class CreatureStats(BaseModel):
    """Combat statistics of a creature.

    Attributes:
        hp: Current hit points.
        max_hp: Maximum hit points.
        attack: Attack power.
        defense: Defense power.
        speed: Speed, used for turn order.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    hp: Annotated[int, Field(ge=0, description="Current hit points")]
    max_hp: Annotated[int, Field(ge=0, description="Maximum hit points")]
    attack: Annotated[int, Field(ge=0, description="Attack power")]
    defense: Annotated[int, Field(ge=0, description="Defense power")]
    speed: Annotated[int, Field(ge=0, description="Speed stat for turn order")]

    @model_validator(mode="after")
    def validate_hp_within_max(self) -> "CreatureStats":
        """Ensure current HP never exceeds maximum HP.

        Returns:
            Self if validation passes.

        Raises:
            ValueError: If hp > max_hp.
        """
        if self.hp > self.max_hp:
            raise ValueError(f"hp ({self.hp}) cannot exceed max_hp ({self.max_hp})")
        return self

    @property
    def hp_fraction(self) -> float:
        """Current HP as a fraction of maximum HP (0.0 when max_hp is 0)."""
        if self.max_hp == 0:
            return 0.0
        return self.hp / self.max_hp


class DifficultyBonuses(BaseModel):
    """Difficulty-specific bonuses attached to a scaled opponent.

    Attributes:
        special_attack_frequency: Tier's special attack frequency.
        critical_hit_chance: Base critical hit chance replacing the default.
        experience_reward: Level-scaled experience hint for display.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    special_attack_frequency: Annotated[float, Field(ge=0.0, le=1.0)]
    critical_hit_chance: Annotated[float, Field(ge=0.0, le=1.0)]
    experience_reward: Annotated[int, Field(ge=0)]


class Creature(BaseModel):
    """A barcode-derived creature.

    Attributes:
        id: Unique creature identifier.
        name: Procedurally generated name.
        barcode: Source digit string, the creature's natural key.
        stats: Combat statistics.
        level: Current level.
        experience: Experience accumulated towards the next level.
        experience_to_next: Experience needed to reach the next level.
        discovery_date: When the creature was generated.
        battles_won: Number of battles won.
        battles_lost: Number of battles lost.
        is_opponent: Whether this is a difficulty-scaled opponent snapshot.
        difficulty: Tier an opponent was scaled for.
        difficulty_bonuses: Tier bonuses carried by a scaled opponent.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    id: UUID = Field(default_factory=uuid4, description="Unique creature ID")
    name: str = Field(min_length=1, max_length=100, description="Creature name")
    barcode: str = Field(
        min_length=8,
        max_length=20,
        pattern=BARCODE_PATTERN,
        description="Source barcode",
    )
    stats: CreatureStats = Field(description="Combat statistics")
    level: Annotated[int, Field(ge=1, description="Current level")] = 1
    experience: Annotated[int, Field(ge=0, description="Current experience")] = 0
    experience_to_next: Annotated[int, Field(gt=0, description="Experience to next level")] = 100
    discovery_date: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Discovery timestamp",
    )
    battles_won: Annotated[int, Field(ge=0)] = 0
    battles_lost: Annotated[int, Field(ge=0)] = 0
    is_opponent: bool = Field(default=False, description="Scaled opponent snapshot")
    difficulty: Difficulty | None = Field(default=None, description="Opponent tier")
    difficulty_bonuses: DifficultyBonuses | None = Field(
        default=None,
        description="Opponent tier bonuses",
    )

    @property
    def total_battles(self) -> int:
        """Total battles fought."""
        return self.battles_won + self.battles_lost

    @property
    def win_rate(self) -> float:
        """Win rate as a decimal (0.0 to 1.0), 0.0 when no battles were fought."""
        if self.total_battles == 0:
            return 0.0
        return self.battles_won / self.total_battles


__all__ = [
    "BARCODE_PATTERN",
    "CreatureStats",
    "DifficultyBonuses",
    "Creature",
]
