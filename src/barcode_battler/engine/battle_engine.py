"""Turn-based battle state machine.

A battle moves from ``active`` to ``won`` or ``lost`` and accepts no
actions afterwards. The player and the AI opponent alternate strictly,
gated by ``current_turn``; only player actions advance ``turn_count``.

Every random draw (personality, turn order, damage variance, critical
hits and AI decisions) comes from the engine's :class:`RandomSource`, in
a fixed order, so a scripted source reproduces a battle log exactly.

Example:
    >>> engine = BattleEngine(random_source=SystemRandomSource(seed=7))
    >>> battle = engine.initiate_battle(player, opponent, Difficulty.MEDIUM)
    >>> while engine.get_current_battle().is_active:
    ...     if engine.get_current_battle().current_turn == Side.PLAYER:
    ...         engine.execute_player_action(ActionType.ATTACK)
    ...     else:
    ...         engine.execute_ai_action()
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from barcode_battler.core.config import Settings, get_settings
from barcode_battler.core.constants import (
    CRITICAL_HIT_BASE_CHANCE,
    CRITICAL_HIT_LEVEL_BONUS,
    CRITICAL_HIT_MULTIPLIER,
    DAMAGE_VARIANCE,
    DEFEND_DAMAGE_REDUCTION,
    DEFEND_HEAL_FRACTION,
    EXPERIENCE_BASE_REWARD,
    EXPERIENCE_LEVEL_GAP_BONUS,
    EXPERIENCE_LEVEL_MULTIPLIER,
    SPECIAL_ATTACK_MULTIPLIER,
    SPECIAL_CRITICAL_MODIFIER,
    SPEED_ADVANTAGE_THRESHOLD,
)
from barcode_battler.core.exceptions import (
    BattleError,
    InvalidBattleStateError,
    InvalidCreatureError,
    TurnOrderError,
    ValidationError,
)
from barcode_battler.core.logging import bind_context, clear_context, get_logger
from barcode_battler.engine.ai_opponent import AIOpponent
from barcode_battler.engine.creature_generator import validate_creature
from barcode_battler.engine.difficulty import (
    get_difficulty_profile,
    parse_difficulty,
    select_ai_personality,
)
from barcode_battler.engine.random_source import RandomSource, SystemRandomSource
from barcode_battler.models.battle import (
    ActionResult,
    Battle,
    BattleLogEntry,
    BattleStats,
)
from barcode_battler.models.creature import Creature
from barcode_battler.models.enums import (
    ActionType,
    BattleStatus,
    Difficulty,
    LogEntryType,
    Side,
)


if TYPE_CHECKING:
    from barcode_battler.engine.difficulty import DifficultyProgression


logger = get_logger(__name__)


class BattleEngine:
    """Runs one battle at a time and keeps the history of finished ones.

    Attributes:
        random_source: Source of every random draw in battle and AI.
        progression: Optional tracker that receives each battle result.
    """

    def __init__(
        self,
        *,
        random_source: RandomSource | None = None,
        progression: DifficultyProgression | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the battle engine.

        Args:
            random_source: Source of randomness, a fresh system source if None.
            progression: Tracker notified of wins and losses.
            settings: Application settings, the global settings if None.
        """
        self.random_source = random_source or SystemRandomSource()
        self.progression = progression
        self._settings = settings or get_settings()
        self._battle: Battle | None = None
        self._ai: AIOpponent | None = None
        self._history: list[Battle] = []

        logger.debug(
            "BattleEngine initialized",
            has_progression=progression is not None,
            special_attack_cap=self._settings.game.special_attack_cap,
        )

    @property
    def special_attack_cap(self) -> int:
        """Special attacks allowed per side per battle."""
        return self._settings.game.special_attack_cap

    # -------------------------------------------------------------------------
    # Battle Setup
    # -------------------------------------------------------------------------

    def initiate_battle(
        self,
        player: Creature,
        opponent: Creature,
        difficulty: Difficulty | str | None = None,
    ) -> Battle:
        """Start a new battle.

        The personality draw happens before the turn-order draw.

        Args:
            player: The player's creature (copied, not modified).
            opponent: The opponent creature (copied, not modified).
            difficulty: Tier to play at; defaults to the progression's
                selected tier, then to the configured default.

        Returns:
            Copy of the new battle.

        Raises:
            InvalidCreatureError: If either creature is structurally invalid.
            ValidationError: If the difficulty identifier is unknown.
        """
        if not isinstance(player, Creature) or not validate_creature(player):
            raise InvalidCreatureError("Invalid player creature", side=Side.PLAYER)
        if not isinstance(opponent, Creature) or not validate_creature(opponent):
            raise InvalidCreatureError("Invalid opponent creature", side=Side.OPPONENT)

        tier = self._resolve_difficulty(difficulty)

        if self._battle is not None and self._battle.is_active:
            logger.warning("Abandoning active battle", battle_id=str(self._battle.id))
            clear_context()

        personality = select_ai_personality(tier, self.random_source)
        self._ai = AIOpponent(
            tier,
            personality,
            self.random_source,
            special_attack_cap=self.special_attack_cap,
        )

        battle = Battle(
            player_creature=player.model_copy(deep=True),
            opponent_creature=opponent.model_copy(deep=True),
            difficulty=tier,
            current_turn=self.determine_turn_order(player, opponent),
            ai_info=self._ai.get_ai_info(),
        )
        self._battle = battle

        bind_context(battle_id=str(battle.id))
        battle.battle_log.append(
            BattleLogEntry(
                entry_type=LogEntryType.BATTLE_START,
                message=f"Battle begins! {player.name} vs {opponent.name}",
            )
        )
        logger.info(
            "Battle initiated",
            player=player.name,
            opponent=opponent.name,
            difficulty=tier,
            personality=personality,
            first_turn=battle.current_turn,
        )
        return battle.model_copy(deep=True)

    def _resolve_difficulty(self, difficulty: Difficulty | str | None) -> Difficulty:
        if difficulty is None:
            if self.progression is not None:
                return self.progression.current_difficulty
            return Difficulty(self._settings.game.default_difficulty)

        tier = parse_difficulty(difficulty)
        if tier is None:
            raise ValidationError(
                f"Unknown difficulty: {difficulty}",
                field_name="difficulty",
                invalid_value=difficulty,
            )
        return tier

    def determine_turn_order(self, player: Creature, opponent: Creature) -> Side:
        """Decide which side acts first.

        A side at least 1.2 times as fast as the other goes first. Otherwise
        one draw centred on zero plus the normalized speed difference decides.

        Returns:
            The side that acts first.
        """
        player_speed = player.stats.speed
        opponent_speed = opponent.stats.speed

        if player_speed >= opponent_speed * SPEED_ADVANTAGE_THRESHOLD:
            return Side.PLAYER
        if opponent_speed >= player_speed * SPEED_ADVANTAGE_THRESHOLD:
            return Side.OPPONENT

        bias = (player_speed - opponent_speed) / (player_speed + opponent_speed)
        roll = self.random_source.next() - 0.5
        return Side.PLAYER if roll + bias > 0 else Side.OPPONENT

    # -------------------------------------------------------------------------
    # Turns
    # -------------------------------------------------------------------------

    def execute_player_action(self, action: ActionType | str) -> ActionResult:
        """Execute the player's action for this turn.

        A special requested past the cap is downgraded to an attack and
        flagged on the result.

        Args:
            action: attack, special or defend.

        Returns:
            The action's result.

        Raises:
            InvalidBattleStateError: If no battle is active.
            TurnOrderError: If it is the opponent's turn.
            BattleError: If the action type is unknown.
        """
        battle = self._require_turn(Side.PLAYER)
        requested = self._parse_action(action, Side.PLAYER)

        executed = requested
        special_capped = False
        if (
            requested == ActionType.SPECIAL
            and battle.player_actions.special_attacks_used >= self.special_attack_cap
        ):
            logger.warning(
                "Special attack cap reached, attacking instead",
                special_attacks_used=battle.player_actions.special_attacks_used,
            )
            executed = ActionType.ATTACK
            special_capped = True

        return self._take_turn(battle, Side.PLAYER, requested, executed, special_capped)

    def execute_ai_action(self) -> ActionResult:
        """Let the AI opponent choose and execute its action.

        Returns:
            The action's result.

        Raises:
            InvalidBattleStateError: If no battle is active.
            TurnOrderError: If it is the player's turn.
        """
        battle = self._require_turn(Side.OPPONENT)
        if self._ai is None:
            raise InvalidBattleStateError("No AI opponent for the current battle")
        action = self._ai.make_decision(battle)
        return self._take_turn(battle, Side.OPPONENT, action, action, False)

    def _require_turn(self, side: Side) -> Battle:
        battle = self._battle
        if battle is None or not battle.is_active:
            raise InvalidBattleStateError(
                "No active battle",
                current_state=battle.status if battle else None,
                expected_states=[BattleStatus.ACTIVE],
            )
        if battle.current_turn != side:
            raise TurnOrderError(
                f"Not {side} turn",
                current_turn=battle.current_turn,
            )
        return battle

    def _parse_action(self, action: ActionType | str, side: Side) -> ActionType:
        try:
            return ActionType(action)
        except ValueError as exc:
            raise BattleError(
                f"Unknown action type: {action}",
                actor=side,
                turn_count=self._battle.turn_count if self._battle else None,
            ) from exc

    def _take_turn(
        self,
        battle: Battle,
        side: Side,
        requested: ActionType,
        executed: ActionType,
        special_capped: bool,
    ) -> ActionResult:
        damage, critical, healed, message = self._resolve_action(battle, side, executed)
        battle.actions(side).record(executed, damage)

        winner = self._check_winner(battle)
        experience = 0
        unlocked: list[Difficulty] = []
        if winner is not None:
            experience, unlocked = self._end_battle(battle, winner)
        elif side == Side.PLAYER:
            battle.current_turn = Side.OPPONENT
            battle.turn_count += 1
        else:
            battle.current_turn = Side.PLAYER

        return ActionResult(
            actor=side,
            action_type=executed,
            requested_action=requested,
            special_capped=special_capped,
            damage=damage,
            critical=critical,
            healed=healed,
            message=message,
            attacker_hp=battle.creature(side).stats.hp,
            defender_hp=battle.creature(side.other).stats.hp,
            battle_ended=winner is not None,
            winner=winner,
            experience_gained=experience,
            unlocked_difficulties=unlocked,
        )

    # -------------------------------------------------------------------------
    # Action Resolution
    # -------------------------------------------------------------------------

    def _resolve_action(
        self,
        battle: Battle,
        side: Side,
        action: ActionType,
    ) -> tuple[int, bool, int, str]:
        attacker = battle.creature(side)
        defender = battle.creature(side.other)

        damage = 0
        critical = False
        healed = 0

        if action == ActionType.DEFEND:
            healed = math.floor(attacker.stats.max_hp * DEFEND_HEAL_FRACTION)
            attacker.stats.hp = min(attacker.stats.max_hp, attacker.stats.hp + healed)
            if healed > 0:
                message = f"{attacker.name} defends and recovers {healed} HP!"
            else:
                message = f"{attacker.name} takes a defensive stance!"
        else:
            defender_defended = battle.actions(side.other).last_action == ActionType.DEFEND
            damage = self.calculate_damage(
                attacker,
                defender,
                action,
                defender_defended=defender_defended,
            )
            modifier = SPECIAL_CRITICAL_MODIFIER if action == ActionType.SPECIAL else 1.0
            critical = self.check_critical_hit(attacker, modifier)
            if critical:
                damage = math.floor(damage * CRITICAL_HIT_MULTIPLIER)
            defender.stats.hp = max(0, defender.stats.hp - damage)
            message = self._damage_message(attacker.name, action, damage, critical)

        battle.battle_log.append(
            BattleLogEntry(
                entry_type=LogEntryType.ACTION,
                message=message,
                actor=side,
                action_type=action,
                damage=damage,
                critical=critical,
                healed=healed,
            )
        )
        logger.debug(
            "Action resolved",
            actor=side,
            action=action,
            damage=damage,
            critical=critical,
            defender_hp=defender.stats.hp,
        )
        return damage, critical, healed, message

    @staticmethod
    def _damage_message(name: str, action: ActionType, damage: int, critical: bool) -> str:
        if action == ActionType.SPECIAL:
            if critical:
                return f"{name} unleashes a critical special attack for {damage} damage!"
            return f"{name} uses a special attack for {damage} damage!"
        if critical:
            return f"{name} lands a critical hit for {damage} damage!"
        return f"{name} attacks for {damage} damage!"

    def calculate_damage(
        self,
        attacker: Creature,
        defender: Creature,
        action: ActionType = ActionType.ATTACK,
        *,
        defender_defended: bool = False,
    ) -> int:
        """Calculate the damage of an attack or special, before criticals.

        Consumes one draw for the variance.

        Args:
            attacker: Attacking creature.
            defender: Defending creature.
            action: attack or special.
            defender_defended: Whether the defender's last action was defend.

        Returns:
            Damage, never less than 1.
        """
        attack = float(attacker.stats.attack)
        if action == ActionType.SPECIAL:
            attack *= SPECIAL_ATTACK_MULTIPLIER

        defense = float(defender.stats.defense)
        if defender_defended:
            defense *= 1 + DEFEND_DAMAGE_REDUCTION

        damage = max(1.0, attack - defense)
        variance = 1 + (self.random_source.next() - 0.5) * DAMAGE_VARIANCE * 2
        return max(1, math.floor(damage * variance))

    def check_critical_hit(self, attacker: Creature, modifier: float = 1.0) -> bool:
        """Roll for a critical hit.

        Consumes one draw. Scaled opponents use their tier's critical chance
        as the base instead of the default.

        Args:
            attacker: Attacking creature.
            modifier: Multiplier on the chance (0.5 for specials).

        Returns:
            True on a critical hit.
        """
        base_chance = CRITICAL_HIT_BASE_CHANCE
        if attacker.is_opponent and attacker.difficulty_bonuses is not None:
            base_chance = attacker.difficulty_bonuses.critical_hit_chance

        chance = (base_chance + attacker.level * CRITICAL_HIT_LEVEL_BONUS) * modifier
        return self.random_source.next() < chance

    # -------------------------------------------------------------------------
    # Battle End
    # -------------------------------------------------------------------------

    @staticmethod
    def _check_winner(battle: Battle) -> Side | None:
        if battle.player_creature.stats.hp <= 0:
            return Side.OPPONENT
        if battle.opponent_creature.stats.hp <= 0:
            return Side.PLAYER
        return None

    def calculate_experience_reward(self, battle: Battle, winner: Side) -> int:
        """Experience the player earns for a battle outcome.

        Returns:
            ``floor((50 + opp_level * 10 + gap * 20) * multiplier)`` on a
            win, where gap is how many levels the opponent is above the
            player; 0 on a loss.
        """
        if winner != Side.PLAYER:
            return 0

        opponent_level = battle.opponent_creature.level
        player_level = battle.player_creature.level
        experience = EXPERIENCE_BASE_REWARD + opponent_level * EXPERIENCE_LEVEL_MULTIPLIER
        if opponent_level > player_level:
            experience += (opponent_level - player_level) * EXPERIENCE_LEVEL_GAP_BONUS

        multiplier = get_difficulty_profile(battle.difficulty).experience_multiplier
        return math.floor(experience * multiplier)

    def _end_battle(self, battle: Battle, winner: Side) -> tuple[int, list[Difficulty]]:
        """Close the battle, write the reward and report it to the progression.

        Returns:
            Tuple of (experience reward, tiers unlocked by this result).
        """
        battle.status = BattleStatus.WON if winner == Side.PLAYER else BattleStatus.LOST
        battle.winner = winner
        battle.end_time = datetime.now(UTC)
        battle.experience_reward = self.calculate_experience_reward(battle, winner)

        battle.battle_log.append(
            BattleLogEntry(
                entry_type=LogEntryType.BATTLE_END,
                message=f"{battle.creature(winner).name} wins the battle!",
                winner=winner,
            )
        )

        if self._ai is not None:
            battle.ai_analysis = self._ai.get_battle_analysis()
            self._ai.reset_memory()

        unlocked: list[Difficulty] = []
        if self.progression is not None:
            update = self.progression.record_battle_result(
                winner == Side.PLAYER,
                battle.difficulty,
            )
            unlocked = update.unlocked_difficulties

        self._history.append(battle.model_copy(deep=True))
        limit = self._settings.game.battle_history_limit
        if len(self._history) > limit:
            del self._history[: len(self._history) - limit]

        logger.info(
            "Battle ended",
            winner=winner,
            turn_count=battle.turn_count,
            experience_reward=battle.experience_reward,
            unlocked=[str(d) for d in unlocked],
        )
        clear_context()
        return battle.experience_reward, unlocked

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_current_battle(self) -> Battle | None:
        """Copy of the current battle, None if there is none."""
        return self._battle.model_copy(deep=True) if self._battle else None

    def get_battle_history(self) -> list[Battle]:
        """Copies of the finished battles, oldest first."""
        return [battle.model_copy(deep=True) for battle in self._history]

    def reset_battle(self) -> None:
        """Discard the current battle and the AI's memory of it."""
        if self._ai is not None:
            self._ai.reset_memory()
        self._ai = None
        self._battle = None
        clear_context()

    def get_battle_stats(self) -> BattleStats:
        """Aggregate statistics over the battle history."""
        if not self._history:
            return BattleStats()

        durations = [b.duration_seconds or 0.0 for b in self._history]
        return BattleStats(
            total_battles=len(self._history),
            wins=sum(1 for b in self._history if b.status == BattleStatus.WON),
            losses=sum(1 for b in self._history if b.status == BattleStatus.LOST),
            average_duration=sum(durations) / len(durations),
            total_experience=sum(b.experience_reward or 0 for b in self._history),
        )


__all__ = [
    "BattleEngine",
]
