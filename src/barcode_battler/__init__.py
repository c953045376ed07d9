"""Barcode Battler - deterministic creature generation and turn-based battles.

Creatures are derived from barcode digit strings and fought against an AI
opponent whose behaviour depends on a personality and a difficulty tier.

DETERMINISM:
- A barcode always yields the same stats and name, in any implementation
- Battles and AI decisions draw from an injected random source
- The core has no I/O; persistence and rendering belong to the caller

Example:
    >>> from barcode_battler import BattleEngine, Difficulty, generate_creature
    >>>
    >>> player = generate_creature("11112222")
    >>> opponent = generate_creature("99998888")
    >>> engine = BattleEngine()
    >>> battle = engine.initiate_battle(player, opponent, Difficulty.MEDIUM)
    >>> if battle.current_turn == Side.PLAYER:
    ...     result = engine.execute_player_action(ActionType.ATTACK)

Modules:
    core: Configuration, logging, constants and base exceptions.
    models: Pydantic V2 schemas for creatures, battles and progression.
    engine: Generation, leveling, difficulty, AI and battle engine.
"""

from __future__ import annotations

# Core
from barcode_battler.core.config import Settings, get_settings
from barcode_battler.core.exceptions import BarcodeBattlerError
from barcode_battler.core.logging import configure_logging, get_logger

# Engine
from barcode_battler.engine import (
    AIOpponent,
    BattleEngine,
    CreatureCollection,
    DifficultyProgression,
    SeededRandom,
    SystemRandomSource,
    award_experience,
    create_opponent,
    generate_creature,
    generate_opponent,
    settle_battle,
    validate_barcode,
)

# Models
from barcode_battler.models import (
    ActionResult,
    ActionType,
    Battle,
    BattleStatus,
    Creature,
    CreatureStats,
    Difficulty,
    Side,
)


__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "Settings",
    "get_settings",
    "BarcodeBattlerError",
    "configure_logging",
    "get_logger",
    # Engine
    "AIOpponent",
    "BattleEngine",
    "CreatureCollection",
    "DifficultyProgression",
    "SeededRandom",
    "SystemRandomSource",
    "award_experience",
    "create_opponent",
    "generate_creature",
    "generate_opponent",
    "settle_battle",
    "validate_barcode",
    # Models
    "ActionResult",
    "ActionType",
    "Battle",
    "BattleStatus",
    "Creature",
    "CreatureStats",
    "Difficulty",
    "Side",
]
