"""Enumeration types for the Barcode Battler core.

These enums define the closed vocabularies shared by the battle engine,
the AI opponent and the difficulty model. All of them are StrEnums so they
serialize to their plain string values.
"""

from __future__ import annotations

from enum import StrEnum


class Difficulty(StrEnum):
    """Difficulty tiers, in unlock order."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def display_name(self) -> str:
        """Get the capitalized tier name.

        Returns:
            Display name (e.g., 'Hard' for HARD).
        """
        return self.value.capitalize()


class Side(StrEnum):
    """The two sides of a battle."""

    PLAYER = "player"
    OPPONENT = "opponent"

    @property
    def other(self) -> Side:
        """Get the opposing side.

        Returns:
            OPPONENT for PLAYER and PLAYER for OPPONENT.
        """
        return Side.OPPONENT if self is Side.PLAYER else Side.PLAYER


class ActionType(StrEnum):
    """Actions a creature can take on its turn."""

    ATTACK = "attack"
    SPECIAL = "special"
    DEFEND = "defend"


class BattleStatus(StrEnum):
    """Battle lifecycle states. WON and LOST are terminal."""

    ACTIVE = "active"
    WON = "won"
    LOST = "lost"


class LogEntryType(StrEnum):
    """Kinds of battle log entries."""

    BATTLE_START = "battle_start"
    ACTION = "action"
    BATTLE_END = "battle_end"


class HealthStatus(StrEnum):
    """Health buckets used by the AI's situational analysis."""

    HEALTHY = "healthy"
    WOUNDED = "wounded"
    CRITICAL = "critical"
    DESPERATE = "desperate"


class Strategy(StrEnum):
    """AI strategies, in tie-break order."""

    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    TACTICAL = "tactical"


class PersonalityName(StrEnum):
    """Named AI behavioral profiles."""

    AGGRESSIVE = "Aggressive"
    DEFENSIVE = "Defensive"
    TACTICAL = "Tactical"
    BERSERKER = "Berserker"
    CAUTIOUS = "Cautious"


class NameStyle(StrEnum):
    """Creature name length patterns."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


__all__ = [
    "Difficulty",
    "Side",
    "ActionType",
    "BattleStatus",
    "LogEntryType",
    "HealthStatus",
    "Strategy",
    "PersonalityName",
    "NameStyle",
]
