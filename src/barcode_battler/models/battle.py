"""Pydantic V2 schemas for battles.

A ``Battle`` owns working copies of both creatures and is mutated turn by
turn by the battle engine until its status leaves ``active``. Log entries
are frozen and only ever appended.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field

from barcode_battler.models.ai import AIInfo, BattleAnalysis
from barcode_battler.models.creature import Creature
from barcode_battler.models.enums import (
    ActionType,
    BattleStatus,
    Difficulty,
    LogEntryType,
    Side,
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ActionTracking(BaseModel):
    """Per-side action bookkeeping for one battle.

    Attributes:
        last_action: Most recent action taken by this side.
        consecutive_defends: Defends in a row, reset by any other action.
        special_attacks_used: Special attacks used so far this battle.
        last_damage_dealt: Damage dealt by this side's most recent attack or special.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    last_action: ActionType | None = None
    consecutive_defends: Annotated[int, Field(ge=0)] = 0
    special_attacks_used: Annotated[int, Field(ge=0)] = 0
    last_damage_dealt: Annotated[int, Field(ge=0)] = 0

    def record(self, action: ActionType, damage: int) -> None:
        """Record an executed action.

        Args:
            action: The action that was executed.
            damage: Damage it dealt (ignored for defend).
        """
        self.last_action = action
        if action == ActionType.DEFEND:
            self.consecutive_defends += 1
        else:
            self.consecutive_defends = 0
        if action == ActionType.SPECIAL:
            self.special_attacks_used += 1
        # A defend leaves the previous damage figure in place
        if action != ActionType.DEFEND:
            self.last_damage_dealt = damage


class BattleLogEntry(BaseModel):
    """Immutable battle log entry.

    Attributes:
        entry_type: Start, action or end marker.
        message: Human-readable description.
        timestamp: When the entry was written.
        actor: Side that acted (action entries only).
        action_type: Action executed (action entries only).
        damage: Damage dealt by the action.
        critical: Whether the action was a critical hit.
        healed: HP recovered by a defend.
        winner: Winning side (end entries only).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    entry_type: LogEntryType
    message: str
    timestamp: datetime = Field(default_factory=_utc_now)
    actor: Side | None = None
    action_type: ActionType | None = None
    damage: Annotated[int, Field(ge=0)] = 0
    critical: bool = False
    healed: Annotated[int, Field(ge=0)] = 0
    winner: Side | None = None


class Battle(BaseModel):
    """One combat session between a player creature and an AI opponent.

    Attributes:
        id: Unique battle identifier.
        player_creature: Working copy of the player's creature.
        opponent_creature: Working copy of the opponent creature.
        difficulty: Tier the battle is played at.
        current_turn: Side expected to act next.
        turn_count: Completed player turns.
        battle_log: Append-only log of entries.
        status: Lifecycle state.
        winner: Winning side once the battle has ended.
        player_actions: Player action tracking.
        opponent_actions: Opponent action tracking.
        ai_info: AI personality and parameters.
        start_time: When the battle started.
        end_time: When the battle ended.
        experience_reward: Experience awarded to the player, set at the end.
        ai_analysis: AI memory summary captured at the end.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: UUID = Field(default_factory=uuid4)
    player_creature: Creature
    opponent_creature: Creature
    difficulty: Difficulty
    current_turn: Side
    turn_count: Annotated[int, Field(ge=0)] = 0
    battle_log: list[BattleLogEntry] = Field(default_factory=list)
    status: BattleStatus = BattleStatus.ACTIVE
    winner: Side | None = None
    player_actions: ActionTracking = Field(default_factory=ActionTracking)
    opponent_actions: ActionTracking = Field(default_factory=ActionTracking)
    ai_info: AIInfo
    start_time: datetime = Field(default_factory=_utc_now)
    end_time: datetime | None = None
    experience_reward: int | None = Field(default=None, ge=0)
    ai_analysis: BattleAnalysis | None = None

    @property
    def is_active(self) -> bool:
        """Whether the battle still accepts actions."""
        return self.status == BattleStatus.ACTIVE

    @property
    def duration_seconds(self) -> float | None:
        """Elapsed seconds between start and end, None while active."""
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    def creature(self, side: Side) -> Creature:
        """Get the working creature for a side."""
        return self.player_creature if side == Side.PLAYER else self.opponent_creature

    def actions(self, side: Side) -> ActionTracking:
        """Get the action tracking for a side."""
        return self.player_actions if side == Side.PLAYER else self.opponent_actions


class ActionResult(BaseModel):
    """Outcome of one executed action, returned to the caller.

    Attributes:
        actor: Side that acted.
        action_type: Action actually executed.
        requested_action: Action that was asked for.
        special_capped: True when a special was downgraded past the cap.
        damage: Damage dealt.
        critical: Whether the hit was critical.
        healed: HP recovered by a defend.
        message: Log message written for the action.
        attacker_hp: Attacker HP after the action.
        defender_hp: Defender HP after the action.
        battle_ended: Whether this action ended the battle.
        winner: Winning side when the battle ended.
        experience_gained: Experience reward when the battle ended.
        unlocked_difficulties: Tiers unlocked by the result of this battle.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    actor: Side
    action_type: ActionType
    requested_action: ActionType
    special_capped: bool = False
    damage: Annotated[int, Field(ge=0)] = 0
    critical: bool = False
    healed: Annotated[int, Field(ge=0)] = 0
    message: str
    attacker_hp: Annotated[int, Field(ge=0)]
    defender_hp: Annotated[int, Field(ge=0)]
    battle_ended: bool = False
    winner: Side | None = None
    experience_gained: Annotated[int, Field(ge=0)] = 0
    unlocked_difficulties: list[Difficulty] = Field(default_factory=list)


class BattleStats(BaseModel):
    """Aggregate statistics over the engine's battle history."""

    model_config = ConfigDict(frozen=True)

    total_battles: int = 0
    wins: int = 0
    losses: int = 0
    average_duration: float = 0.0
    total_experience: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def win_rate(self) -> float:
        """Wins as a fraction of total battles."""
        if self.total_battles == 0:
            return 0.0
        return self.wins / self.total_battles


__all__ = [
    "ActionTracking",
    "BattleLogEntry",
    "Battle",
    "ActionResult",
    "BattleStats",
]
