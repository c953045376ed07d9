"""Pydantic V2 schemas for the Barcode Battler core.

This module provides the data model layer: creatures, battles, AI
configuration, difficulty progression and tagged operation results. All
records serialize with ``model_dump_json()`` and validate back with
``model_validate_json()``.

Submodules:
    enums: Enumeration types (Difficulty, Side, ActionType, BattleStatus, etc.)
    creature: Creature and its stat block
    battle: Battle state, log entries and action results
    ai: AI personality traits, behaviour parameters and analysis
    difficulty: Difficulty profiles and progression state
    results: Tagged operation results

Example:
    >>> from barcode_battler.models import Creature, CreatureStats
    >>> stats = CreatureStats(hp=80, max_hp=80, attack=48, defense=48, speed=53)
    >>> creature = Creature(name="Ivarno", barcode="12345678", stats=stats)
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from barcode_battler.models.enums import (
    ActionType,
    BattleStatus,
    Difficulty,
    HealthStatus,
    LogEntryType,
    NameStyle,
    PersonalityName,
    Side,
    Strategy,
)

# =============================================================================
# Creatures
# =============================================================================
from barcode_battler.models.creature import (
    Creature,
    CreatureStats,
    DifficultyBonuses,
)

# =============================================================================
# AI
# =============================================================================
from barcode_battler.models.ai import (
    AIBehaviorParams,
    AIDecision,
    AIInfo,
    BattleAnalysis,
    PersonalityTraits,
)

# =============================================================================
# Battles
# =============================================================================
from barcode_battler.models.battle import (
    ActionResult,
    ActionTracking,
    Battle,
    BattleLogEntry,
    BattleStats,
)

# =============================================================================
# Difficulty
# =============================================================================
from barcode_battler.models.difficulty import (
    DifficultyProfile,
    DifficultyProgress,
    ProgressUpdate,
    UnlockRequirement,
    WinLossRecord,
)

# =============================================================================
# Results
# =============================================================================
from barcode_battler.models.results import (
    CollectionStats,
    ExperienceResult,
    ImportResult,
    OperationResult,
    StatGains,
)


__all__ = [
    # Enums
    "ActionType",
    "BattleStatus",
    "Difficulty",
    "HealthStatus",
    "LogEntryType",
    "NameStyle",
    "PersonalityName",
    "Side",
    "Strategy",
    # Creatures
    "Creature",
    "CreatureStats",
    "DifficultyBonuses",
    # AI
    "AIBehaviorParams",
    "AIDecision",
    "AIInfo",
    "BattleAnalysis",
    "PersonalityTraits",
    # Battles
    "ActionResult",
    "ActionTracking",
    "Battle",
    "BattleLogEntry",
    "BattleStats",
    # Difficulty
    "DifficultyProfile",
    "DifficultyProgress",
    "ProgressUpdate",
    "UnlockRequirement",
    "WinLossRecord",
    # Results
    "CollectionStats",
    "ExperienceResult",
    "ImportResult",
    "OperationResult",
    "StatGains",
]
