"""Random number sources for generation, combat and AI decisions.

Creature generation uses :class:`SeededRandom`, a Park-Miller linear
congruential generator whose output is fully determined by the seed, so a
barcode yields the same creature in every implementation. Battles and the
AI opponent draw from any :class:`RandomSource`; live play uses
:class:`SystemRandomSource` while tests inject scripted sources.
"""

from __future__ import annotations

import random
from typing import Protocol, runtime_checkable

from barcode_battler.core.constants import LCG_MODULUS, LCG_MULTIPLIER
from barcode_battler.core.logging import get_logger


logger = get_logger(__name__)


@runtime_checkable
class RandomSource(Protocol):
    """A stream of uniform floats in [0, 1)."""

    def next(self) -> float:
        """Return the next float in [0, 1)."""
        ...


class SeededRandom:
    """Deterministic Park-Miller minimal standard generator.

    The state is normalized into ``[1, 2147483646]``; every call multiplies
    it by 16807 modulo ``2**31 - 1`` and maps it onto [0, 1).

    Example:
        >>> rng = SeededRandom(6324)
        >>> round(rng.next(), 6)
        0.049494
    """

    def __init__(self, seed: int) -> None:
        """Initialize the generator.

        Args:
            seed: Integer seed, reduced modulo the generator's range.
        """
        self._current = seed % LCG_MODULUS
        if self._current <= 0:
            self._current += LCG_MODULUS - 1

    @property
    def state(self) -> int:
        """Current internal state."""
        return self._current

    def next(self) -> float:
        """Advance the generator and return a float in [0, 1)."""
        self._current = (self._current * LCG_MULTIPLIER) % LCG_MODULUS
        return (self._current - 1) / (LCG_MODULUS - 1)


class SystemRandomSource:
    """Random source backed by :class:`random.Random` for live play.

    Example:
        >>> source = SystemRandomSource(seed=42)
        >>> 0.0 <= source.next() < 1.0
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the random source.

        Args:
            seed: Optional seed for reproducible sequences.
        """
        self._random = random.Random(seed)
        logger.debug("SystemRandomSource initialized", seeded=seed is not None)

    def next(self) -> float:
        """Return the next float in [0, 1)."""
        return self._random.random()


__all__ = [
    "RandomSource",
    "SeededRandom",
    "SystemRandomSource",
]
