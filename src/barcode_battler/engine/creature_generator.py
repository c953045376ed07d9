"""Deterministic creature generation from barcodes.

A barcode is reduced to an integer seed; stats and name are each derived
from their own :class:`SeededRandom` built from that seed, so the two never
share generator state and the same barcode always yields the same
creature, byte for byte.

Example:
    >>> creature = generate_creature("12345678")
    >>> creature.name
    'Ivarno'
    >>> creature.stats.attack
    48
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from barcode_battler.core.constants import (
    BASE_ATTACK_MAX,
    BASE_ATTACK_MIN,
    BASE_DEFENSE_MAX,
    BASE_DEFENSE_MIN,
    BASE_HP_MAX,
    BASE_HP_MIN,
    BASE_SPEED_MAX,
    BASE_SPEED_MIN,
    HP_VARIATION,
    MAX_BARCODE_LENGTH,
    MIN_BARCODE_LENGTH,
    RANDOM_BARCODE_LENGTH,
    SEED_PRIME,
    STAT_VARIATION,
)
from barcode_battler.core.logging import get_logger
from barcode_battler.engine.experience import experience_to_next
from barcode_battler.engine.random_source import RandomSource, SeededRandom
from barcode_battler.models.creature import Creature, CreatureStats
from barcode_battler.models.enums import NameStyle


logger = get_logger(__name__)


# =============================================================================
# Name Tables
# =============================================================================

SYLLABLES: tuple[str, ...] = (
    "ka", "ri", "mo", "na", "zu", "te", "lo", "xi", "ba", "do",
    "fe", "gu", "hi", "ja", "ko", "lu", "me", "no", "po", "qu",
    "ra", "si", "tu", "vo", "wa", "xe", "ya", "zi", "bo", "cu",
    "da", "el", "fi", "go", "hu", "iv", "jo", "ke", "li", "ma",
    "ar", "en", "or", "un", "al", "er", "in", "on", "at", "ed",
    "is", "it", "ou", "an", "he", "wa", "fo", "nd", "ng", "ha",
    "th", "re", "ve", "st", "gh", "nd", "le", "se", "nt", "ti",
    "ro", "ur", "li", "ch", "la", "ne", "mi", "el", "co", "de",
)
"""Fixed syllable table. Order and duplicates are part of the name contract."""

CONSONANTS = "bcdfghjklmnpqrstvwxyz"
MAX_SYLLABLE_ATTEMPTS = 10
SHORT_DOUBLING_CHANCE = 0.3
LONG_APOSTROPHE_CHANCE = 0.2


@dataclass(frozen=True)
class NamePattern:
    """Syllable-count range for one name style."""

    min_length: int
    max_length: int
    style: NameStyle


NAME_PATTERNS: tuple[NamePattern, ...] = (
    NamePattern(2, 3, NameStyle.SHORT),
    NamePattern(3, 4, NameStyle.MEDIUM),
    NamePattern(4, 5, NameStyle.LONG),
)


# (digit positions, min, max) per stat channel
_STAT_CHANNELS: dict[str, tuple[tuple[int, ...], int, int]] = {
    "hp": ((0, 1), BASE_HP_MIN, BASE_HP_MAX),
    "attack": ((2, 3), BASE_ATTACK_MIN, BASE_ATTACK_MAX),
    "defense": ((4, 5), BASE_DEFENSE_MIN, BASE_DEFENSE_MAX),
    "speed": ((6, 7), BASE_SPEED_MIN, BASE_SPEED_MAX),
}


@dataclass(frozen=True)
class GenerationData:
    """Intermediate values of a creature generation, for debugging.

    Attributes:
        barcode: Source barcode.
        seed: Derived integer seed.
        pattern: Name pattern that was drawn.
        name_length: Number of syllables drawn.
        syllables_used: Syllables in the order they were concatenated.
        name: Final styled name.
        stats: Level-1 stats.
    """

    barcode: str
    seed: int
    pattern: NamePattern
    name_length: int
    syllables_used: tuple[str, ...]
    name: str
    stats: CreatureStats


# =============================================================================
# Barcode and Seed
# =============================================================================


def validate_barcode(barcode: Any) -> bool:
    """Check whether a value is an acceptable barcode.

    Args:
        barcode: Candidate value.

    Returns:
        True if it is a string of 8 to 20 ASCII digits.
    """
    if not isinstance(barcode, str):
        return False
    if not MIN_BARCODE_LENGTH <= len(barcode) <= MAX_BARCODE_LENGTH:
        return False
    return barcode.isascii() and barcode.isdigit()


def generate_seed(barcode: str) -> int:
    """Derive the generation seed from a barcode.

    Args:
        barcode: Digit string.

    Returns:
        Sum of ``digit * (index + 1) * 31`` over all positions.
    """
    return sum(int(digit) * (index + 1) * SEED_PRIME for index, digit in enumerate(barcode))


# =============================================================================
# Stats
# =============================================================================


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _stat_from_digits(barcode: str, positions: tuple[int, ...], low: int, high: int) -> int:
    total = sum(int(barcode[pos]) for pos in positions if pos < len(barcode))
    normalized = total / (len(positions) * 9)
    return low + math.floor(normalized * (high - low))


def calculate_stats(barcode: str) -> CreatureStats:
    """Calculate level-1 stats for a barcode.

    Each channel maps its digit pair linearly into the stat range, then a
    seeded perturbation is applied in hp, attack, defense, speed order and
    the result is floored and clamped back into range.

    Args:
        barcode: Valid barcode.

    Returns:
        Stats with ``hp == max_hp``.
    """
    rng = SeededRandom(generate_seed(barcode))
    values: dict[str, int] = {}
    for stat, (positions, low, high) in _STAT_CHANNELS.items():
        base = _stat_from_digits(barcode, positions, low, high)
        spread = HP_VARIATION if stat == "hp" else STAT_VARIATION
        perturbed = math.floor(base + (rng.next() * spread * 2 - spread))
        values[stat] = _clamp(perturbed, low, high)

    return CreatureStats(
        hp=values["hp"],
        max_hp=values["hp"],
        attack=values["attack"],
        defense=values["defense"],
        speed=values["speed"],
    )


# =============================================================================
# Names
# =============================================================================


def _style_name(name: str, style: NameStyle, rng: SeededRandom) -> str:
    if style == NameStyle.SHORT:
        if rng.next() < SHORT_DOUBLING_CHANCE:
            pos = math.floor(rng.next() * (len(name) - 1)) + 1
            char = name[pos]
            if char in CONSONANTS:
                name = name[:pos] + char + name[pos:]
    elif style == NameStyle.LONG:
        # The draw is consumed even when the name is too short to style
        if rng.next() < LONG_APOSTROPHE_CHANCE and len(name) > 4:
            pos = math.floor(rng.next() * (len(name) - 2)) + 2
            name = name[:pos] + "'" + name[pos:]
    return name


def _build_name(seed: int) -> tuple[NamePattern, int, tuple[str, ...], str]:
    rng = SeededRandom(seed)
    pattern = NAME_PATTERNS[math.floor(rng.next() * len(NAME_PATTERNS))]
    name_length = pattern.min_length + math.floor(
        rng.next() * (pattern.max_length - pattern.min_length + 1)
    )

    used: list[str] = []
    for _ in range(name_length):
        attempts = 0
        while True:
            syllable = SYLLABLES[math.floor(rng.next() * len(SYLLABLES))]
            attempts += 1
            if not (name_length <= 3 and syllable in used and attempts < MAX_SYLLABLE_ATTEMPTS):
                break
        used.append(syllable)

    name = _style_name("".join(used), pattern.style, rng)
    return pattern, name_length, tuple(used), name[:1].upper() + name[1:]


def generate_creature_name(barcode: str) -> str:
    """Generate the procedural name for a barcode.

    Args:
        barcode: Valid barcode.

    Returns:
        Capitalized name built from the syllable table.
    """
    return _build_name(generate_seed(barcode))[3]


# =============================================================================
# Creatures
# =============================================================================


def validate_creature(data: Any) -> bool:
    """Check whether a creature (or its serialized form) is structurally valid.

    Args:
        data: A Creature or a mapping of creature fields.

    Returns:
        True if the data validates as a Creature.
    """
    if isinstance(data, Creature):
        data = data.model_dump()
    try:
        Creature.model_validate(data)
    except PydanticValidationError:
        return False
    return True


def generate_creature(barcode: Any) -> Creature | None:
    """Generate a level-1 creature from a barcode.

    Args:
        barcode: Candidate barcode.

    Returns:
        The creature, or None if the barcode is invalid or the result fails
        structural validation.
    """
    if not validate_barcode(barcode):
        logger.debug("Rejected barcode", barcode=barcode)
        return None

    try:
        creature = Creature(
            name=generate_creature_name(barcode),
            barcode=barcode,
            stats=calculate_stats(barcode),
            level=1,
            experience=0,
            experience_to_next=experience_to_next(1),
        )
    except PydanticValidationError as exc:
        logger.error("Generated invalid creature", barcode=barcode, error=str(exc))
        return None

    logger.debug("Creature generated", barcode=barcode, name=creature.name)
    return creature


def get_generation_data(barcode: str) -> GenerationData | None:
    """Expose the intermediate values of a generation.

    Args:
        barcode: Candidate barcode.

    Returns:
        Generation data, or None if the barcode is invalid.
    """
    if not validate_barcode(barcode):
        return None

    seed = generate_seed(barcode)
    pattern, name_length, syllables, name = _build_name(seed)
    return GenerationData(
        barcode=barcode,
        seed=seed,
        pattern=pattern,
        name_length=name_length,
        syllables_used=syllables,
        name=name,
        stats=calculate_stats(barcode),
    )


def generate_random_barcode(
    random_source: RandomSource,
    length: int = RANDOM_BARCODE_LENGTH,
) -> str:
    """Generate a random digit string for opponent creation.

    Args:
        random_source: Source of uniform draws.
        length: Number of digits.

    Returns:
        A digit string of the requested length.
    """
    return "".join(str(math.floor(random_source.next() * 10)) for _ in range(length))


__all__ = [
    "SYLLABLES",
    "NAME_PATTERNS",
    "NamePattern",
    "GenerationData",
    "validate_barcode",
    "generate_seed",
    "calculate_stats",
    "generate_creature_name",
    "validate_creature",
    "generate_creature",
    "get_generation_data",
    "generate_random_barcode",
]
