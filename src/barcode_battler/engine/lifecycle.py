"""Creature lifecycle: experience, levels, battle bookkeeping and collections.

The per-creature functions mutate the creature they are given and return a
tagged result; invalid input yields ``success=False`` with a reason rather
than an exception. :class:`CreatureCollection` is a convenience container
owned by the caller that keeps barcodes unique and hands out copies.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from barcode_battler.core.config import get_settings
from barcode_battler.core.logging import get_logger
from barcode_battler.engine.creature_generator import validate_creature
from barcode_battler.engine.experience import (
    apply_level_ups,
    experience_to_next,
    stats_for_level,
)
from barcode_battler.models.battle import Battle
from barcode_battler.models.creature import Creature
from barcode_battler.models.enums import BattleStatus, Side
from barcode_battler.models.results import (
    CollectionStats,
    ExperienceResult,
    ImportResult,
    StatGains,
)


logger = get_logger(__name__)

EXPORT_VERSION = "1.0"

SortCriteria = Literal[
    "name",
    "level",
    "discovery_date",
    "battles_won",
    "total_battles",
    "win_rate",
    "hp",
    "attack",
    "defense",
    "speed",
]

_SORT_KEYS: dict[str, Callable[[Creature], Any]] = {
    "name": lambda c: c.name.lower(),
    "level": lambda c: c.level,
    "discovery_date": lambda c: c.discovery_date,
    "battles_won": lambda c: c.battles_won,
    "total_battles": lambda c: c.total_battles,
    "win_rate": lambda c: c.win_rate,
    "hp": lambda c: c.stats.max_hp,
    "attack": lambda c: c.stats.attack,
    "defense": lambda c: c.stats.defense,
    "speed": lambda c: c.stats.speed,
}


# =============================================================================
# Per-creature operations
# =============================================================================


def award_experience(
    creature: Creature,
    amount: int,
    *,
    max_level_ups: int | None = None,
) -> ExperienceResult:
    """Add experience to a creature and apply any resulting level-ups.

    Args:
        creature: Creature to update (mutated).
        amount: Non-negative experience to add.
        max_level_ups: Level-up safety cap, defaults to the configured value.

    Returns:
        ExperienceResult describing the change, or a failure for a negative
        or non-integer amount.
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        logger.warning("Rejected experience award", creature=creature.name, amount=amount)
        return ExperienceResult(success=False, reason="Invalid experience amount")

    if max_level_ups is None:
        max_level_ups = get_settings().game.max_level_ups_per_award

    old_level = creature.level
    old_stats = creature.stats.model_copy()

    creature.experience += amount
    _, capped = apply_level_ups(creature, max_level_ups=max_level_ups)

    if creature.level > old_level:
        logger.info(
            "Creature leveled up",
            creature=creature.name,
            experience_gained=amount,
            old_level=old_level,
            new_level=creature.level,
        )
    else:
        logger.debug(
            "Experience awarded",
            creature=creature.name,
            experience=creature.experience,
            experience_to_next=creature.experience_to_next,
        )

    return ExperienceResult(
        success=True,
        experience_gained=amount,
        old_level=old_level,
        new_level=creature.level,
        old_stats=old_stats,
        new_stats=creature.stats.model_copy(),
        stat_gains=StatGains.between(old_stats, creature.stats),
        capped=capped,
    )


def level_up_creature(creature: Creature, levels: int = 1) -> ExperienceResult:
    """Raise a creature's level directly, without spending experience.

    Args:
        creature: Creature to update (mutated).
        levels: Positive number of levels to add.

    Returns:
        ExperienceResult describing the change, or a failure for a
        non-positive level count.
    """
    if isinstance(levels, bool) or not isinstance(levels, int) or levels < 1:
        logger.warning("Rejected level-up", creature=creature.name, levels=levels)
        return ExperienceResult(success=False, reason="Invalid level amount")

    old_level = creature.level
    old_stats = creature.stats.model_copy()

    creature.level += levels
    creature.stats = stats_for_level(creature)
    creature.experience_to_next = experience_to_next(creature.level)

    logger.info(
        "Creature leveled up directly",
        creature=creature.name,
        old_level=old_level,
        new_level=creature.level,
    )
    return ExperienceResult(
        success=True,
        old_level=old_level,
        new_level=creature.level,
        old_stats=old_stats,
        new_stats=creature.stats.model_copy(),
        stat_gains=StatGains.between(old_stats, creature.stats),
    )


def update_battle_stats(
    creature: Creature,
    won: bool,
    experience_gained: int = 0,
) -> ExperienceResult:
    """Record a battle outcome and award any experience earned.

    Args:
        creature: Creature to update (mutated).
        won: Whether the creature won.
        experience_gained: Experience earned from the battle.

    Returns:
        ExperienceResult for the experience part of the update.
    """
    if won:
        creature.battles_won += 1
    else:
        creature.battles_lost += 1

    return award_experience(creature, experience_gained)


def settle_battle(battle: Battle, creature: Creature) -> ExperienceResult:
    """Apply a finished battle to the canonical player creature.

    Args:
        battle: A battle whose status is won or lost.
        creature: The canonical creature the battle's working copy came from.

    Returns:
        ExperienceResult, or a failure if the battle is still active or was
        fought by another creature.
    """
    if battle.status == BattleStatus.ACTIVE:
        return ExperienceResult(success=False, reason="Battle is still active")
    if battle.player_creature.id != creature.id:
        return ExperienceResult(success=False, reason="Creature did not fight this battle")

    won = battle.winner == Side.PLAYER
    return update_battle_stats(creature, won, battle.experience_reward or 0)


# =============================================================================
# Collection
# =============================================================================


class CollectionExport(BaseModel):
    """Serialized collection backup."""

    model_config = ConfigDict(extra="ignore")

    creatures: list[Creature]
    export_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    version: str = EXPORT_VERSION


class _ImportEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    creatures: list[dict[str, Any]]


class CreatureCollection:
    """Mapping of creature id to creature with unique barcodes.

    Creatures are stored and returned as deep copies, so callers mutate
    the stored entries only through the collection's own operations.

    Example:
        >>> collection = CreatureCollection()
        >>> collection.add(generate_creature("12345678"))
        True
        >>> collection.find_by_barcode("12345678").name
        'Ivarno'
    """

    def __init__(self, creatures: list[Creature] | None = None) -> None:
        """Initialize the collection.

        Args:
            creatures: Optional creatures to add.
        """
        self._creatures: dict[UUID, Creature] = {}
        for creature in creatures or []:
            self.add(creature)

    def __len__(self) -> int:
        return len(self._creatures)

    def __contains__(self, creature_id: object) -> bool:
        return creature_id in self._creatures

    def __iter__(self) -> Iterator[Creature]:
        return iter(self.creatures())

    # -------------------------------------------------------------------------
    # Membership
    # -------------------------------------------------------------------------

    def add(self, creature: Creature) -> bool:
        """Add a copy of a creature.

        Returns:
            False if the creature is invalid or its barcode is already present.
        """
        if not validate_creature(creature):
            logger.error("Invalid creature data", creature=getattr(creature, "name", None))
            return False
        if self._find(creature.barcode) is not None:
            logger.warning("Creature with barcode already exists", barcode=creature.barcode)
            return False

        self._creatures[creature.id] = creature.model_copy(deep=True)
        logger.info("Added creature to collection", creature=creature.name)
        return True

    def get(self, creature_id: UUID) -> Creature | None:
        """Get a copy of a creature by id."""
        creature = self._creatures.get(creature_id)
        return creature.model_copy(deep=True) if creature else None

    def find_by_barcode(self, barcode: str) -> Creature | None:
        """Get a copy of the creature generated from ``barcode``."""
        creature = self._find(barcode)
        return creature.model_copy(deep=True) if creature else None

    def remove(self, creature_id: UUID) -> bool:
        """Remove a creature by id."""
        creature = self._creatures.pop(creature_id, None)
        if creature is None:
            logger.warning("Creature not found", creature_id=str(creature_id))
            return False
        logger.info("Removed creature from collection", creature=creature.name)
        return True

    def clear(self) -> None:
        """Remove every creature."""
        self._creatures.clear()

    def creatures(self) -> list[Creature]:
        """Get copies of all creatures in insertion order."""
        return [creature.model_copy(deep=True) for creature in self._creatures.values()]

    def _find(self, barcode: str) -> Creature | None:
        for creature in self._creatures.values():
            if creature.barcode == barcode:
                return creature
        return None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def award_experience(self, creature_id: UUID, amount: int) -> ExperienceResult:
        """Award experience to a stored creature."""
        creature = self._creatures.get(creature_id)
        if creature is None:
            return ExperienceResult(success=False, reason="Creature not found")
        return award_experience(creature, amount)

    def level_up(self, creature_id: UUID, levels: int = 1) -> ExperienceResult:
        """Level up a stored creature directly."""
        creature = self._creatures.get(creature_id)
        if creature is None:
            return ExperienceResult(success=False, reason="Creature not found")
        return level_up_creature(creature, levels)

    def update_battle_stats(
        self,
        creature_id: UUID,
        won: bool,
        experience_gained: int = 0,
    ) -> ExperienceResult:
        """Record a battle outcome on a stored creature."""
        creature = self._creatures.get(creature_id)
        if creature is None:
            return ExperienceResult(success=False, reason="Creature not found")
        return update_battle_stats(creature, won, experience_gained)

    def settle_battle(self, battle: Battle) -> ExperienceResult:
        """Apply a finished battle to the stored player creature."""
        creature = self._creatures.get(battle.player_creature.id)
        if creature is None:
            return ExperienceResult(success=False, reason="Creature not found")
        return settle_battle(battle, creature)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def sorted(
        self,
        criteria: SortCriteria = "discovery_date",
        *,
        descending: bool = True,
    ) -> list[Creature]:
        """Get copies of all creatures sorted by a criterion.

        Unknown criteria are logged and leave the insertion order unchanged.
        """
        creatures = self.creatures()
        key = _SORT_KEYS.get(criteria)
        if key is None:
            logger.warning("Unknown sort criteria", criteria=criteria)
            return creatures
        return sorted(creatures, key=key, reverse=descending)

    def filter(
        self,
        *,
        min_level: int | None = None,
        max_level: int | None = None,
        name: str | None = None,
        barcode: str | None = None,
        has_battled: bool = False,
    ) -> list[Creature]:
        """Get copies of the creatures matching every given filter.

        Args:
            min_level: Minimum level, inclusive.
            max_level: Maximum level, inclusive.
            name: Case-insensitive name substring.
            barcode: Barcode substring.
            has_battled: Only creatures that fought at least once.
        """
        creatures = self.creatures()
        if min_level is not None:
            creatures = [c for c in creatures if c.level >= min_level]
        if max_level is not None:
            creatures = [c for c in creatures if c.level <= max_level]
        if name:
            needle = name.lower()
            creatures = [c for c in creatures if needle in c.name.lower()]
        if barcode:
            creatures = [c for c in creatures if barcode in c.barcode]
        if has_battled:
            creatures = [c for c in creatures if c.total_battles > 0]
        return creatures

    def stats(self) -> CollectionStats:
        """Aggregate statistics over the collection."""
        creatures = list(self._creatures.values())
        if not creatures:
            return CollectionStats()

        average_level = sum(c.level for c in creatures) / len(creatures)
        dates = [c.discovery_date for c in creatures]
        return CollectionStats(
            total_creatures=len(creatures),
            average_level=math.floor(average_level * 10 + 0.5) / 10,
            highest_level=max(c.level for c in creatures),
            total_battles=sum(c.total_battles for c in creatures),
            total_victories=sum(c.battles_won for c in creatures),
            oldest_discovery=min(dates),
            newest_discovery=max(dates),
        )

    # -------------------------------------------------------------------------
    # Backup
    # -------------------------------------------------------------------------

    def export_json(self) -> str:
        """Serialize the collection to a JSON backup."""
        return CollectionExport(creatures=list(self._creatures.values())).model_dump_json(indent=2)

    def import_json(self, data: str, *, merge: bool = False) -> ImportResult:
        """Load creatures from a JSON backup.

        Invalid entries and, when merging, entries whose id or barcode is
        already present are skipped.

        Args:
            data: JSON produced by :meth:`export_json`.
            merge: Keep existing creatures instead of replacing them.

        Returns:
            ImportResult with imported and skipped counts.
        """
        try:
            envelope = _ImportEnvelope.model_validate_json(data)
        except PydanticValidationError as exc:
            logger.error("Invalid import data format", error=str(exc))
            return ImportResult(success=False, reason="Invalid import data format")

        if not merge:
            self._creatures.clear()

        imported = 0
        skipped = 0
        for raw in envelope.creatures:
            try:
                creature = Creature.model_validate(raw)
            except PydanticValidationError:
                logger.warning("Invalid creature data in import", name=raw.get("name"))
                skipped += 1
                continue

            if creature.id in self._creatures or self._find(creature.barcode) is not None:
                skipped += 1
                continue

            self._creatures[creature.id] = creature
            imported += 1

        logger.info("Collection imported", imported=imported, skipped=skipped)
        return ImportResult(
            success=True,
            imported=imported,
            skipped=skipped,
            total=len(envelope.creatures),
        )


__all__ = [
    "award_experience",
    "level_up_creature",
    "update_battle_stats",
    "settle_battle",
    "CollectionExport",
    "CreatureCollection",
    "SortCriteria",
]
