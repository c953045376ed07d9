"""Game engine module for the Barcode Battler core.

This module provides the deterministic creature generator, the experience
and lifecycle model, difficulty tiers and progression, the AI opponent and
the turn-based battle engine.

Submodules:
    random_source: Seeded LCG and injectable random sources
    creature_generator: Barcode to seed to stats and name
    experience: Experience curve and level-up application
    lifecycle: Creature mutations and the creature collection
    difficulty: Tiers, opponent scaling and unlock progression
    ai_opponent: AI decision engine
    battle_engine: Combat state machine

Example:
    >>> from barcode_battler.engine import (
    ...     BattleEngine, SystemRandomSource, generate_creature, generate_opponent
    ... )
    >>>
    >>> player = generate_creature("12345678")
    >>> opponent = generate_opponent(generate_creature("99998888"), Difficulty.EASY)
    >>> engine = BattleEngine(random_source=SystemRandomSource())
    >>> battle = engine.initiate_battle(player, opponent, Difficulty.EASY)
"""

from __future__ import annotations

# =============================================================================
# Random Sources
# =============================================================================
from barcode_battler.engine.random_source import (
    RandomSource,
    SeededRandom,
    SystemRandomSource,
)

# =============================================================================
# Creature Generation
# =============================================================================
from barcode_battler.engine.creature_generator import (
    GenerationData,
    calculate_stats,
    generate_creature,
    generate_creature_name,
    generate_random_barcode,
    generate_seed,
    get_generation_data,
    validate_barcode,
    validate_creature,
)

# =============================================================================
# Experience and Lifecycle
# =============================================================================
from barcode_battler.engine.experience import (
    apply_level_ups,
    experience_to_next,
    stat_at_level,
)
from barcode_battler.engine.lifecycle import (
    CreatureCollection,
    award_experience,
    level_up_creature,
    settle_battle,
    update_battle_stats,
)

# =============================================================================
# Difficulty
# =============================================================================
from barcode_battler.engine.difficulty import (
    DIFFICULTY_PROFILES,
    DifficultyProgression,
    create_opponent,
    evaluate_unlocks,
    generate_opponent,
    get_difficulty_profile,
    select_ai_personality,
)

# =============================================================================
# AI and Battle
# =============================================================================
from barcode_battler.engine.ai_opponent import AIOpponent, classify_pattern
from barcode_battler.engine.battle_engine import BattleEngine


__all__ = [
    # Random sources
    "RandomSource",
    "SeededRandom",
    "SystemRandomSource",
    # Generation
    "GenerationData",
    "calculate_stats",
    "generate_creature",
    "generate_creature_name",
    "generate_random_barcode",
    "generate_seed",
    "get_generation_data",
    "validate_barcode",
    "validate_creature",
    # Experience and lifecycle
    "apply_level_ups",
    "experience_to_next",
    "stat_at_level",
    "CreatureCollection",
    "award_experience",
    "level_up_creature",
    "settle_battle",
    "update_battle_stats",
    # Difficulty
    "DIFFICULTY_PROFILES",
    "DifficultyProgression",
    "create_opponent",
    "evaluate_unlocks",
    "generate_opponent",
    "get_difficulty_profile",
    "select_ai_personality",
    # AI and battle
    "AIOpponent",
    "classify_pattern",
    "BattleEngine",
]
