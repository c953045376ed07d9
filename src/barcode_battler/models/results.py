"""Tagged result records returned by creature and progression operations.

Validation failures are reported through ``success=False`` and a
``reason`` rather than raised, so callers decide how to message them.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, computed_field

from barcode_battler.models.creature import CreatureStats


class OperationResult(BaseModel):
    """Generic success/failure result.

    Attributes:
        success: Whether the operation was applied.
        reason: Failure reason when success is False.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    reason: str | None = None

    @classmethod
    def ok(cls) -> OperationResult:
        """Build a successful result."""
        return cls(success=True)

    @classmethod
    def fail(cls, reason: str) -> OperationResult:
        """Build a failed result with a reason."""
        return cls(success=False, reason=reason)


class StatGains(BaseModel):
    """Per-stat difference between two stat blocks."""

    model_config = ConfigDict(frozen=True)

    max_hp: int = 0
    attack: int = 0
    defense: int = 0
    speed: int = 0

    @classmethod
    def between(cls, old: CreatureStats, new: CreatureStats) -> StatGains:
        """Compute the gains from ``old`` to ``new``."""
        return cls(
            max_hp=new.max_hp - old.max_hp,
            attack=new.attack - old.attack,
            defense=new.defense - old.defense,
            speed=new.speed - old.speed,
        )


class ExperienceResult(OperationResult):
    """Outcome of an experience award or direct level-up.

    Attributes:
        experience_gained: Experience that was awarded.
        old_level: Level before the operation.
        new_level: Level after the operation.
        old_stats: Stats before the operation.
        new_stats: Stats after the operation.
        stat_gains: Per-stat difference.
        capped: True when the level-up safety cap stopped the loop.
    """

    experience_gained: int = 0
    old_level: int | None = None
    new_level: int | None = None
    old_stats: CreatureStats | None = None
    new_stats: CreatureStats | None = None
    stat_gains: StatGains | None = None
    capped: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def levels_gained(self) -> int:
        """Number of levels gained."""
        if self.old_level is None or self.new_level is None:
            return 0
        return self.new_level - self.old_level

    @computed_field  # type: ignore[prop-decorator]
    @property
    def leveled_up(self) -> bool:
        """Whether at least one level was gained."""
        return self.levels_gained > 0


class ImportResult(OperationResult):
    """Outcome of importing a collection export."""

    imported: int = 0
    skipped: int = 0
    total: int = 0


class CollectionStats(BaseModel):
    """Aggregate statistics over a creature collection."""

    model_config = ConfigDict(frozen=True)

    total_creatures: int = 0
    average_level: float = 0.0
    highest_level: int = 0
    total_battles: int = 0
    total_victories: int = 0
    oldest_discovery: datetime | None = None
    newest_discovery: datetime | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_win_rate(self) -> float:
        """Victories as a fraction of all battles fought."""
        if self.total_battles == 0:
            return 0.0
        return self.total_victories / self.total_battles


__all__ = [
    "OperationResult",
    "StatGains",
    "ExperienceResult",
    "ImportResult",
    "CollectionStats",
]
