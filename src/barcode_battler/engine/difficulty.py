"""Difficulty tiers, opponent scaling and unlock progression.

The tier table is static. Unlock evaluation is a pure function of win
counters; :class:`DifficultyProgression` wraps it with the mutable state a
game session needs and reports changes through return values and
optional caller-registered callbacks.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any
from uuid import uuid4

from barcode_battler.core.constants import (
    HARD_UNLOCK_MEDIUM_WINS,
    HARD_UNLOCK_TOTAL_WINS,
    MEDIUM_UNLOCK_TOTAL_WINS,
)
from barcode_battler.core.exceptions import InvalidCreatureError
from barcode_battler.core.logging import get_logger
from barcode_battler.engine.creature_generator import (
    generate_creature,
    generate_random_barcode,
)
from barcode_battler.engine.random_source import RandomSource
from barcode_battler.models.creature import Creature, CreatureStats, DifficultyBonuses
from barcode_battler.models.difficulty import (
    DifficultyProfile,
    DifficultyProgress,
    ProgressUpdate,
    UnlockRequirement,
    WinLossRecord,
)
from barcode_battler.models.enums import Difficulty, PersonalityName
from barcode_battler.models.results import OperationResult


logger = get_logger(__name__)


# =============================================================================
# Tier Table
# =============================================================================

DIFFICULTY_PROFILES: dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(
        difficulty=Difficulty.EASY,
        name="Easy",
        description="Perfect for beginners learning the game",
        color="#4CAF50",
        icon="🟢",
        opponent_stat_multiplier=0.8,
        experience_multiplier=1.0,
        ai_personality_weights=(
            (PersonalityName.AGGRESSIVE, 0.1),
            (PersonalityName.DEFENSIVE, 0.4),
            (PersonalityName.TACTICAL, 0.2),
            (PersonalityName.BERSERKER, 0.05),
            (PersonalityName.CAUTIOUS, 0.25),
        ),
        special_attack_frequency=0.2,
        critical_hit_chance=0.05,
    ),
    Difficulty.MEDIUM: DifficultyProfile(
        difficulty=Difficulty.MEDIUM,
        name="Medium",
        description="Balanced challenge for experienced players",
        color="#FF9800",
        icon="🟡",
        opponent_stat_multiplier=1.0,
        experience_multiplier=1.2,
        ai_personality_weights=(
            (PersonalityName.AGGRESSIVE, 0.25),
            (PersonalityName.DEFENSIVE, 0.25),
            (PersonalityName.TACTICAL, 0.3),
            (PersonalityName.BERSERKER, 0.1),
            (PersonalityName.CAUTIOUS, 0.1),
        ),
        special_attack_frequency=0.35,
        critical_hit_chance=0.1,
    ),
    Difficulty.HARD: DifficultyProfile(
        difficulty=Difficulty.HARD,
        name="Hard",
        description="Ultimate challenge for master battlers",
        color="#F44336",
        icon="🔴",
        opponent_stat_multiplier=1.3,
        experience_multiplier=1.5,
        ai_personality_weights=(
            (PersonalityName.AGGRESSIVE, 0.3),
            (PersonalityName.DEFENSIVE, 0.15),
            (PersonalityName.TACTICAL, 0.4),
            (PersonalityName.BERSERKER, 0.05),
        ),
        special_attack_frequency=0.5,
        critical_hit_chance=0.15,
    ),
}

UNLOCK_DESCRIPTIONS: dict[Difficulty, str] = {
    Difficulty.MEDIUM: f"Win {MEDIUM_UNLOCK_TOTAL_WINS} battles on Easy difficulty",
    Difficulty.HARD: (
        f"Win {HARD_UNLOCK_TOTAL_WINS} total battles including "
        f"{HARD_UNLOCK_MEDIUM_WINS} on Medium difficulty"
    ),
}

STAT_BONUS_FACTOR = 0.5
"""Share of the multiplier excess added again to attack and defense."""


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return math.floor(value + 0.5)


def parse_difficulty(value: Any) -> Difficulty | None:
    """Coerce a difficulty identifier, returning None when it is unknown."""
    if isinstance(value, Difficulty):
        return value
    try:
        return Difficulty(value)
    except ValueError:
        return None


def get_difficulty_profile(difficulty: Difficulty | str) -> DifficultyProfile:
    """Look up the profile of a tier.

    Raises:
        KeyError: If the identifier is not a known tier.
    """
    parsed = parse_difficulty(difficulty)
    if parsed is None:
        raise KeyError(difficulty)
    return DIFFICULTY_PROFILES[parsed]


# =============================================================================
# Unlock Evaluation
# =============================================================================


def evaluate_unlocks(total_wins: int, medium_wins: int) -> list[Difficulty]:
    """Determine which tiers are unlocked for the given counters.

    Args:
        total_wins: Wins across all tiers.
        medium_wins: Wins on the medium tier.

    Returns:
        Unlocked tiers in unlock order; easy is always included.
    """
    unlocked = [Difficulty.EASY]
    if total_wins >= MEDIUM_UNLOCK_TOTAL_WINS:
        unlocked.append(Difficulty.MEDIUM)
    if total_wins >= HARD_UNLOCK_TOTAL_WINS and medium_wins >= HARD_UNLOCK_MEDIUM_WINS:
        unlocked.append(Difficulty.HARD)
    return unlocked


def calculate_unlock_progress(
    progress: DifficultyProgress,
) -> dict[Difficulty, UnlockRequirement]:
    """Progress towards every tier that is still locked.

    Args:
        progress: Current progression state.

    Returns:
        Mapping of locked tier to its requirement progress.
    """
    total_wins = progress.total_wins
    medium_wins = progress.wins_on(Difficulty.MEDIUM)
    result: dict[Difficulty, UnlockRequirement] = {}

    if Difficulty.MEDIUM not in progress.unlocked_difficulties:
        result[Difficulty.MEDIUM] = UnlockRequirement(
            difficulty=Difficulty.MEDIUM,
            description=UNLOCK_DESCRIPTIONS[Difficulty.MEDIUM],
            current_total=total_wins,
            required_total=MEDIUM_UNLOCK_TOTAL_WINS,
            percentage=min(100.0, total_wins / MEDIUM_UNLOCK_TOTAL_WINS * 100),
        )

    if Difficulty.HARD not in progress.unlocked_difficulties:
        overall = min(
            total_wins / HARD_UNLOCK_TOTAL_WINS,
            medium_wins / HARD_UNLOCK_MEDIUM_WINS,
        )
        result[Difficulty.HARD] = UnlockRequirement(
            difficulty=Difficulty.HARD,
            description=UNLOCK_DESCRIPTIONS[Difficulty.HARD],
            current_total=total_wins,
            required_total=HARD_UNLOCK_TOTAL_WINS,
            current_medium=medium_wins,
            required_medium=HARD_UNLOCK_MEDIUM_WINS,
            percentage=min(100.0, overall * 100),
        )

    return result


# =============================================================================
# Personalities and Opponents
# =============================================================================


def select_ai_personality(
    difficulty: Difficulty,
    random_source: RandomSource,
) -> PersonalityName:
    """Draw an AI personality from the tier's weights.

    Consumes exactly one draw. Weights are walked in their fixed order,
    subtracting each from the threshold until it is no longer positive.

    Args:
        difficulty: Tier whose weights are used.
        random_source: Source of the draw.

    Returns:
        The selected personality, or the first one if rounding leaves the
        threshold positive.
    """
    profile = get_difficulty_profile(difficulty)
    weights = profile.ai_personality_weights
    threshold = random_source.next() * profile.total_personality_weight

    for personality, weight in weights:
        threshold -= weight
        if threshold <= 0:
            return personality

    return weights[0][0]


def generate_opponent(base: Creature, difficulty: Difficulty) -> Creature:
    """Scale a creature into an opponent for a tier.

    Level and stats are multiplied by the tier's opponent multiplier and
    rounded half up; HP starts full. Tiers with a multiplier above 1 add a
    further ``round(stat * (m - 1) * 0.5)`` to attack and defense.

    Args:
        base: Creature to scale (not modified).
        difficulty: Target tier.

    Returns:
        A new opponent creature with difficulty bonuses attached.
    """
    profile = get_difficulty_profile(difficulty)
    multiplier = profile.opponent_stat_multiplier

    max_hp = round_half_up(base.stats.max_hp * multiplier)
    attack = round_half_up(base.stats.attack * multiplier)
    defense = round_half_up(base.stats.defense * multiplier)
    speed = round_half_up(base.stats.speed * multiplier)
    if multiplier > 1.0:
        bonus = (multiplier - 1.0) * STAT_BONUS_FACTOR
        attack += round_half_up(attack * bonus)
        defense += round_half_up(defense * bonus)

    level = max(1, round_half_up(base.level * multiplier))
    opponent = base.model_copy(
        deep=True,
        update={
            "id": uuid4(),
            "name": f"{base.name} ({profile.name})",
            "stats": CreatureStats(
                hp=max_hp,
                max_hp=max_hp,
                attack=attack,
                defense=defense,
                speed=speed,
            ),
            "level": level,
            "is_opponent": True,
            "difficulty": profile.difficulty,
            "difficulty_bonuses": DifficultyBonuses(
                special_attack_frequency=profile.special_attack_frequency,
                critical_hit_chance=profile.critical_hit_chance,
                experience_reward=round_half_up(level * profile.experience_multiplier),
            ),
        },
    )
    logger.debug(
        "Opponent generated",
        name=opponent.name,
        difficulty=profile.difficulty,
        level=level,
    )
    return opponent


def create_opponent(difficulty: Difficulty, random_source: RandomSource) -> Creature:
    """Generate a random-barcode creature and scale it for a tier.

    Args:
        difficulty: Target tier.
        random_source: Source of the barcode digits.

    Returns:
        Scaled opponent creature.
    """
    barcode = generate_random_barcode(random_source)
    base = generate_creature(barcode)
    if base is None:
        raise InvalidCreatureError("Random barcode did not generate a creature", side="opponent")
    return generate_opponent(base, difficulty)


# =============================================================================
# Progression Tracker
# =============================================================================


def _repair_progress(progress: DifficultyProgress) -> None:
    """Repair restored progress in place so that easy stays selectable."""
    if Difficulty.EASY not in progress.unlocked_difficulties:
        logger.warning(
            "Restored progress did not unlock easy",
            unlocked=[str(d) for d in progress.unlocked_difficulties],
        )
        progress.unlocked_difficulties.insert(0, Difficulty.EASY)

    if progress.current_difficulty not in progress.unlocked_difficulties:
        logger.warning(
            "Restored difficulty is locked, falling back to easy",
            difficulty=progress.current_difficulty,
        )
        progress.current_difficulty = Difficulty.EASY


class DifficultyProgression:
    """Tracks the selected tier, win/loss counters and unlocked tiers.

    Persisting :attr:`progress` is the caller's concern. Callbacks are
    optional; every change is also reported through return values.

    Example:
        >>> progression = DifficultyProgression()
        >>> progression.set_difficulty(Difficulty.HARD).success
        False
        >>> for _ in range(5):
        ...     update = progression.record_battle_result(True)
        >>> update.unlocked_difficulties
        [<Difficulty.MEDIUM: 'medium'>]
    """

    def __init__(self, progress: DifficultyProgress | None = None) -> None:
        """Initialize the tracker.

        Restored state is repaired: easy is always unlocked, and a selected
        tier that is not unlocked falls back to easy.

        Args:
            progress: Previously persisted state, or None for a new game.
        """
        self._progress = progress.model_copy(deep=True) if progress else DifficultyProgress()
        _repair_progress(self._progress)
        self._unlock_callbacks: list[Callable[[Difficulty], None]] = []
        self._change_callbacks: list[Callable[[Difficulty], None]] = []
        self._progress_callbacks: list[Callable[[ProgressUpdate], None]] = []

    @property
    def progress(self) -> DifficultyProgress:
        """Copy of the current progression state."""
        return self._progress.model_copy(deep=True)

    @property
    def current_difficulty(self) -> Difficulty:
        """Currently selected tier."""
        return self._progress.current_difficulty

    @property
    def unlocked_difficulties(self) -> list[Difficulty]:
        """Unlocked tiers in unlock order."""
        return list(self._progress.unlocked_difficulties)

    @property
    def total_wins(self) -> int:
        """Wins across all tiers."""
        return self._progress.total_wins

    def is_unlocked(self, difficulty: Difficulty | str) -> bool:
        """Check whether a tier is unlocked."""
        return parse_difficulty(difficulty) in self._progress.unlocked_difficulties

    def records(self) -> dict[Difficulty, WinLossRecord]:
        """Copies of the per-tier win/loss counters."""
        return {d: r.model_copy() for d, r in self._progress.records.items()}

    # -------------------------------------------------------------------------
    # Callbacks
    # -------------------------------------------------------------------------

    def add_unlock_callback(self, callback: Callable[[Difficulty], None]) -> None:
        """Register a callback invoked with each newly unlocked tier."""
        self._unlock_callbacks.append(callback)

    def add_change_callback(self, callback: Callable[[Difficulty], None]) -> None:
        """Register a callback invoked when the selected tier changes."""
        self._change_callbacks.append(callback)

    def add_progress_callback(self, callback: Callable[[ProgressUpdate], None]) -> None:
        """Register a callback invoked after each recorded battle."""
        self._progress_callbacks.append(callback)

    def _notify(self, callbacks: list[Callable[[Any], None]], payload: Any) -> None:
        for callback in callbacks:
            try:
                callback(payload)
            except Exception:
                logger.exception("Progression callback failed")

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def set_difficulty(self, difficulty: Difficulty | str) -> OperationResult:
        """Select a tier.

        Returns:
            Failure for an unknown or still-locked tier.
        """
        parsed = parse_difficulty(difficulty)
        if parsed is None:
            logger.warning("Invalid difficulty", difficulty=difficulty)
            return OperationResult.fail("Invalid difficulty")
        if not self.is_unlocked(parsed):
            logger.warning("Difficulty is not unlocked yet", difficulty=parsed)
            return OperationResult.fail("Difficulty is locked")

        self._progress.current_difficulty = parsed
        logger.info("Difficulty changed", difficulty=parsed)
        self._notify(self._change_callbacks, parsed)
        return OperationResult.ok()

    def record_battle_result(
        self,
        won: bool,
        difficulty: Difficulty | None = None,
    ) -> ProgressUpdate:
        """Count a battle outcome and unlock any tiers it qualifies for.

        Args:
            won: Whether the player won.
            difficulty: Tier the battle was played on, defaults to the
                selected tier.

        Returns:
            ProgressUpdate listing the tiers unlocked by this result.
        """
        tier = difficulty or self._progress.current_difficulty
        record = self._progress.records.setdefault(tier, WinLossRecord())
        if won:
            record.wins += 1
        else:
            record.losses += 1

        newly_unlocked = [
            d
            for d in evaluate_unlocks(
                self._progress.total_wins,
                self._progress.wins_on(Difficulty.MEDIUM),
            )
            if d not in self._progress.unlocked_difficulties
        ]
        for unlocked in newly_unlocked:
            self._progress.unlocked_difficulties.append(unlocked)
            logger.info("Difficulty unlocked", difficulty=unlocked)
            self._notify(self._unlock_callbacks, unlocked)

        update = ProgressUpdate(
            difficulty=tier,
            won=won,
            total_wins=self._progress.total_wins,
            unlocked_difficulties=newly_unlocked,
        )
        self._notify(self._progress_callbacks, update)
        return update

    def get_unlock_progress(self) -> dict[Difficulty, UnlockRequirement]:
        """Progress towards every tier that is still locked."""
        return calculate_unlock_progress(self._progress)

    def reset(self) -> None:
        """Return to a new-game state."""
        self._progress = DifficultyProgress()
        logger.info("Difficulty progress reset")


__all__ = [
    "DIFFICULTY_PROFILES",
    "UNLOCK_DESCRIPTIONS",
    "round_half_up",
    "parse_difficulty",
    "get_difficulty_profile",
    "evaluate_unlocks",
    "calculate_unlock_progress",
    "select_ai_personality",
    "generate_opponent",
    "create_opponent",
    "DifficultyProgression",
]
