"""Game-wide constants for the Barcode Battler core.

These values define the deterministic creature model and the combat
formulas. They are deliberately not exposed through settings: a barcode
must yield the same creature everywhere.
"""

from __future__ import annotations

# =============================================================================
# Barcode Validation
# =============================================================================

MIN_BARCODE_LENGTH = 8
"""Shortest accepted barcode (EAN-8)."""

MAX_BARCODE_LENGTH = 20
"""Longest accepted barcode."""

RANDOM_BARCODE_LENGTH = 12
"""Length of barcodes generated for random opponents (UPC-A)."""

# =============================================================================
# Seeded Random Generator (Park-Miller minimal standard)
# =============================================================================

LCG_MODULUS = 2147483647
"""Prime modulus 2^31 - 1."""

LCG_MULTIPLIER = 16807
"""Multiplier 7^5."""

SEED_PRIME = 31
"""Prime weight applied to every digit when deriving the seed."""

# =============================================================================
# Base Stat Ranges
# =============================================================================

BASE_HP_MIN = 80
BASE_HP_MAX = 120
BASE_ATTACK_MIN = 30
BASE_ATTACK_MAX = 70
BASE_DEFENSE_MIN = 25
BASE_DEFENSE_MAX = 65
BASE_SPEED_MIN = 20
BASE_SPEED_MAX = 60

HP_VARIATION = 10
"""Seeded perturbation applied to hp (plus or minus)."""

STAT_VARIATION = 5
"""Seeded perturbation applied to attack, defense and speed (plus or minus)."""

# =============================================================================
# Level Progression
# =============================================================================

BASE_EXPERIENCE_TO_LEVEL = 100
EXPERIENCE_MULTIPLIER = 1.5
STAT_GROWTH_PER_LEVEL = 5

# =============================================================================
# Battle Constants
# =============================================================================

CRITICAL_HIT_BASE_CHANCE = 0.05
CRITICAL_HIT_LEVEL_BONUS = 0.01
CRITICAL_HIT_MULTIPLIER = 1.5
SPECIAL_CRITICAL_MODIFIER = 0.5
"""Special attacks crit half as often as normal attacks."""

SPECIAL_ATTACK_MULTIPLIER = 1.3
DEFEND_DAMAGE_REDUCTION = 0.5
"""Defense bonus (as a fraction) for a defender whose last action was defend."""

DEFEND_HEAL_FRACTION = 0.1
DAMAGE_VARIANCE = 0.2
SPEED_ADVANTAGE_THRESHOLD = 1.2
"""Speed ratio that guarantees the first turn."""

EXPERIENCE_BASE_REWARD = 50
EXPERIENCE_LEVEL_MULTIPLIER = 10
EXPERIENCE_LEVEL_GAP_BONUS = 20

# =============================================================================
# AI Memory
# =============================================================================

AI_PLAYER_ACTION_WINDOW = 5
AI_DECISION_LOG_SIZE = 10

# =============================================================================
# Difficulty Progression
# =============================================================================

MEDIUM_UNLOCK_TOTAL_WINS = 5
HARD_UNLOCK_TOTAL_WINS = 15
HARD_UNLOCK_MEDIUM_WINS = 8


__all__ = [
    # Barcode
    "MIN_BARCODE_LENGTH",
    "MAX_BARCODE_LENGTH",
    "RANDOM_BARCODE_LENGTH",
    # RNG
    "LCG_MODULUS",
    "LCG_MULTIPLIER",
    "SEED_PRIME",
    # Stats
    "BASE_HP_MIN",
    "BASE_HP_MAX",
    "BASE_ATTACK_MIN",
    "BASE_ATTACK_MAX",
    "BASE_DEFENSE_MIN",
    "BASE_DEFENSE_MAX",
    "BASE_SPEED_MIN",
    "BASE_SPEED_MAX",
    "HP_VARIATION",
    "STAT_VARIATION",
    # Progression
    "BASE_EXPERIENCE_TO_LEVEL",
    "EXPERIENCE_MULTIPLIER",
    "STAT_GROWTH_PER_LEVEL",
    # Battle
    "CRITICAL_HIT_BASE_CHANCE",
    "CRITICAL_HIT_LEVEL_BONUS",
    "CRITICAL_HIT_MULTIPLIER",
    "SPECIAL_CRITICAL_MODIFIER",
    "SPECIAL_ATTACK_MULTIPLIER",
    "DEFEND_DAMAGE_REDUCTION",
    "DEFEND_HEAL_FRACTION",
    "DAMAGE_VARIANCE",
    "SPEED_ADVANTAGE_THRESHOLD",
    "EXPERIENCE_BASE_REWARD",
    "EXPERIENCE_LEVEL_MULTIPLIER",
    "EXPERIENCE_LEVEL_GAP_BONUS",
    # AI
    "AI_PLAYER_ACTION_WINDOW",
    "AI_DECISION_LOG_SIZE",
    # Difficulty
    "MEDIUM_UNLOCK_TOTAL_WINS",
    "HARD_UNLOCK_TOTAL_WINS",
    "HARD_UNLOCK_MEDIUM_WINS",
]
