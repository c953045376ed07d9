"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Barcode Battler test suite.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator

    from barcode_battler.engine.battle_engine import BattleEngine
    from barcode_battler.engine.difficulty import DifficultyProgression
    from barcode_battler.models.creature import Creature


# =============================================================================
# Random Sources
# =============================================================================


class ScriptedRandom:
    """Random source that replays fixed values, then a default.

    Attributes:
        draws: Number of values handed out so far.
    """

    def __init__(self, values: Iterable[float] = (), default: float = 0.5) -> None:
        self._values = list(values)
        self._default = default
        self.draws = 0

    def push(self, *values: float) -> None:
        """Queue further values."""
        self._values.extend(values)

    def next(self) -> float:
        self.draws += 1
        if self._values:
            return self._values.pop(0)
        return self._default


@pytest.fixture
def scripted_random() -> ScriptedRandom:
    """Provide a scripted random source that always returns 0.5.

    Returns:
        ScriptedRandom with no queued values.
    """
    return ScriptedRandom()


@pytest.fixture
def make_random() -> type[ScriptedRandom]:
    """Provide the scripted random source class for custom scripts.

    Returns:
        The ScriptedRandom class.
    """
    return ScriptedRandom


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache and log context before and after each test."""
    from barcode_battler.core.config import clear_settings_cache
    from barcode_battler.core.logging import clear_context

    clear_settings_cache()
    yield
    clear_settings_cache()
    clear_context()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "BARCODE_BATTLER_DEBUG": "true",
        "BARCODE_BATTLER_LOG_LEVEL": "DEBUG",
        "BARCODE_BATTLER_GAME_SPECIAL_ATTACK_CAP": "2",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Creature Fixtures
# =============================================================================


@pytest.fixture
def ivarno() -> Creature:
    """Provide the creature generated from barcode 12345678.

    Returns:
        Level-1 creature with stats 80/80/48/48/53.
    """
    from barcode_battler.engine.creature_generator import generate_creature

    creature = generate_creature("12345678")
    if creature is None:
        pytest.fail("barcode 12345678 did not generate a creature")
    return creature


@pytest.fixture
def weak_creature() -> Creature:
    """Provide the creature generated from barcode 11112222.

    Returns:
        Level-1 creature with stats 80/80/37/30/28.
    """
    from barcode_battler.engine.creature_generator import generate_creature

    creature = generate_creature("11112222")
    if creature is None:
        pytest.fail("barcode 11112222 did not generate a creature")
    return creature


@pytest.fixture
def strong_creature() -> Creature:
    """Provide the creature generated from barcode 99998888.

    Returns:
        Level-1 creature with stats 111/111/66/57/50.
    """
    from barcode_battler.engine.creature_generator import generate_creature

    creature = generate_creature("99998888")
    if creature is None:
        pytest.fail("barcode 99998888 did not generate a creature")
    return creature


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def progression() -> DifficultyProgression:
    """Provide a fresh difficulty progression tracker."""
    from barcode_battler.engine.difficulty import DifficultyProgression

    return DifficultyProgression()


@pytest.fixture
def battle_engine(scripted_random: ScriptedRandom) -> BattleEngine:
    """Provide a battle engine driven by the scripted random source.

    Args:
        scripted_random: Random source shared with the test.
    """
    from barcode_battler.engine.battle_engine import BattleEngine

    return BattleEngine(random_source=scripted_random)
