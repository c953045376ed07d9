"""Experience curve and level-up application.

Stats at any level are re-derived from the creature's barcode, so a
creature's stats are always a pure function of ``(barcode, level)`` apart
from current HP.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from barcode_battler.core.constants import (
    BASE_EXPERIENCE_TO_LEVEL,
    EXPERIENCE_MULTIPLIER,
    STAT_GROWTH_PER_LEVEL,
)
from barcode_battler.core.logging import get_logger
from barcode_battler.models.creature import CreatureStats


if TYPE_CHECKING:
    from barcode_battler.models.creature import Creature


logger = get_logger(__name__)


def experience_to_next(level: int) -> int:
    """Experience required to advance from ``level`` to the next level.

    Args:
        level: Current level (1 or higher).

    Returns:
        ``floor(100 * 1.5 ** (level - 1))``.
    """
    return math.floor(BASE_EXPERIENCE_TO_LEVEL * EXPERIENCE_MULTIPLIER ** (level - 1))


def stat_at_level(base_stat: int, level: int) -> int:
    """Scale a level-1 stat to ``level``."""
    return base_stat + (level - 1) * STAT_GROWTH_PER_LEVEL


def stats_for_level(creature: Creature) -> CreatureStats:
    """Re-derive a creature's stats for its current level.

    Max HP, attack, defense and speed come from the barcode base stats;
    current HP keeps its ratio to max HP (floored, at least 1).

    Args:
        creature: Creature whose level has already been updated.

    Returns:
        New stat block.
    """
    # Imported here: creature_generator depends on this module
    from barcode_battler.engine.creature_generator import calculate_stats

    base = calculate_stats(creature.barcode)
    new_max_hp = stat_at_level(base.max_hp, creature.level)
    hp_ratio = creature.stats.hp_fraction
    return CreatureStats(
        hp=min(new_max_hp, max(1, math.floor(new_max_hp * hp_ratio))),
        max_hp=new_max_hp,
        attack=stat_at_level(base.attack, creature.level),
        defense=stat_at_level(base.defense, creature.level),
        speed=stat_at_level(base.speed, creature.level),
    )


def apply_level_ups(creature: Creature, *, max_level_ups: int = 50) -> tuple[int, bool]:
    """Consume accumulated experience into level-ups, in place.

    Args:
        creature: Creature to level (mutated).
        max_level_ups: Safety cap on level-ups in one call.

    Returns:
        Tuple of (levels gained, whether the cap stopped the loop).
    """
    levels_gained = 0
    while creature.experience >= creature.experience_to_next:
        if levels_gained >= max_level_ups:
            logger.warning(
                "Level-up cap reached",
                creature=creature.name,
                levels_gained=levels_gained,
                remaining_experience=creature.experience,
            )
            return levels_gained, True

        creature.experience -= creature.experience_to_next
        creature.level += 1
        creature.stats = stats_for_level(creature)
        creature.experience_to_next = experience_to_next(creature.level)
        levels_gained += 1

    return levels_gained, False


__all__ = [
    "experience_to_next",
    "stat_at_level",
    "stats_for_level",
    "apply_level_ups",
]
