"""AI opponent decision engine.

Each decision runs the same pipeline: update the per-battle memory, analyse
the situation, score the three strategies, execute the winning strategy as
a weighted random choice, then apply the tier's noise (random mistakes on
easy, optimal play on hard). The special attack cap is enforced last, as a
hard constraint on whatever the pipeline produced.

All randomness comes from the injected :class:`RandomSource`, so a
scripted source reproduces a decision sequence exactly.
"""

from __future__ import annotations

import math
from collections import Counter, deque
from dataclasses import dataclass, field

from barcode_battler.core.config import get_settings
from barcode_battler.core.constants import AI_DECISION_LOG_SIZE, AI_PLAYER_ACTION_WINDOW
from barcode_battler.core.logging import get_logger
from barcode_battler.engine.random_source import RandomSource
from barcode_battler.models.ai import (
    AIBehaviorParams,
    AIDecision,
    AIInfo,
    BattleAnalysis,
    PersonalityTraits,
)
from barcode_battler.models.battle import Battle
from barcode_battler.models.enums import (
    ActionType,
    Difficulty,
    HealthStatus,
    PersonalityName,
    Strategy,
)


logger = get_logger(__name__)


# =============================================================================
# Static Tables
# =============================================================================

PERSONALITY_TRAITS: dict[PersonalityName, PersonalityTraits] = {
    PersonalityName.AGGRESSIVE: PersonalityTraits(
        attack_preference=0.7,
        special_attack_usage=0.4,
        risk_tolerance=0.8,
        adaptability=0.3,
    ),
    PersonalityName.DEFENSIVE: PersonalityTraits(
        attack_preference=0.3,
        special_attack_usage=0.2,
        risk_tolerance=0.2,
        adaptability=0.6,
    ),
    PersonalityName.TACTICAL: PersonalityTraits(
        attack_preference=0.5,
        special_attack_usage=0.6,
        risk_tolerance=0.4,
        adaptability=0.8,
    ),
    PersonalityName.BERSERKER: PersonalityTraits(
        attack_preference=0.9,
        special_attack_usage=0.7,
        risk_tolerance=0.9,
        adaptability=0.1,
    ),
    PersonalityName.CAUTIOUS: PersonalityTraits(
        attack_preference=0.4,
        special_attack_usage=0.3,
        risk_tolerance=0.3,
        adaptability=0.7,
    ),
}

BEHAVIOR_PARAMS: dict[Difficulty, AIBehaviorParams] = {
    Difficulty.EASY: AIBehaviorParams(
        decision_accuracy=0.6,
        strategy_consistency=0.4,
        adaptation_speed=0.3,
        mistake_chance=0.3,
        optimal_play_chance=0.2,
    ),
    Difficulty.MEDIUM: AIBehaviorParams(
        decision_accuracy=0.75,
        strategy_consistency=0.6,
        adaptation_speed=0.5,
        mistake_chance=0.15,
        optimal_play_chance=0.4,
    ),
    Difficulty.HARD: AIBehaviorParams(
        decision_accuracy=0.9,
        strategy_consistency=0.8,
        adaptation_speed=0.7,
        mistake_chance=0.05,
        optimal_play_chance=0.7,
    ),
}

RANDOM_ACTIONS: tuple[ActionType, ...] = (ActionType.ATTACK, ActionType.SPECIAL, ActionType.DEFEND)
ESCALATION: tuple[ActionType, ...] = (ActionType.ATTACK, ActionType.SPECIAL, ActionType.DEFEND)

PATTERN_CONFIDENCE_THRESHOLD = 0.6
STAT_ADVANTAGE_THRESHOLD = 10
HIGH_URGENCY = 0.7
CONSECUTIVE_DEFEND_LIMIT = 2

# Counter for a player who leans on one action
COUNTER_ACTIONS: dict[ActionType, ActionType] = {
    ActionType.ATTACK: ActionType.DEFEND,
    ActionType.SPECIAL: ActionType.ATTACK,
    ActionType.DEFEND: ActionType.SPECIAL,
}


# =============================================================================
# Memory and Analysis
# =============================================================================


@dataclass
class AIMemory:
    """Per-battle memory of the AI.

    Attributes:
        player_actions: Most recent observed player actions.
        decisions: Most recent decisions taken by the AI.
        damage_dealt: Cumulative damage recorded as dealt.
        damage_taken: Cumulative damage recorded as taken.
        turns_elapsed: Decisions requested so far.
    """

    player_actions: deque[ActionType] = field(
        default_factory=lambda: deque(maxlen=AI_PLAYER_ACTION_WINDOW)
    )
    decisions: deque[AIDecision] = field(
        default_factory=lambda: deque(maxlen=AI_DECISION_LOG_SIZE)
    )
    damage_dealt: int = 0
    damage_taken: int = 0
    turns_elapsed: int = 0

    @property
    def damage_ratio(self) -> float:
        """Damage dealt over damage taken, 1.0 before any damage is taken."""
        if self.damage_taken <= 0:
            return 1.0
        return self.damage_dealt / self.damage_taken


@dataclass(frozen=True)
class PlayerPattern:
    """Classification of the player's recent actions.

    Attributes:
        type: One of unknown, <action>_heavy, alternating, escalating, random.
        confidence: Share of the most common action.
        most_common: Most common action, None when unknown.
        action_counts: Count per observed action.
    """

    type: str
    confidence: float
    most_common: ActionType | None = None
    action_counts: dict[ActionType, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SituationAnalysis:
    """Snapshot of the battle from the AI's point of view."""

    ai_health: HealthStatus
    player_health: HealthStatus
    health_advantage: float
    attack_advantage: int
    defense_advantage: int
    speed_advantage: int
    turns_elapsed: int
    damage_ratio: float
    player_pattern: PlayerPattern
    urgency: float
    can_use_special: bool
    should_avoid_defend: bool


def health_status(fraction: float) -> HealthStatus:
    """Bucket an HP fraction into a health status."""
    if fraction > 0.75:
        return HealthStatus.HEALTHY
    if fraction > 0.5:
        return HealthStatus.WOUNDED
    if fraction > 0.25:
        return HealthStatus.CRITICAL
    return HealthStatus.DESPERATE


def calculate_urgency(ai_fraction: float, player_fraction: float) -> float:
    """Combine low own HP and player HP above 30% into a score in [0, 1].

    Args:
        ai_fraction: AI creature HP fraction.
        player_fraction: Player creature HP fraction.

    Returns:
        Urgency score.
    """
    hp_urgency = max(0.0, (0.5 - ai_fraction) * 2)
    threat_urgency = max(0.0, player_fraction - 0.3)
    return min(1.0, hp_urgency + threat_urgency)


def classify_pattern(actions: list[ActionType]) -> PlayerPattern:
    """Classify a sequence of player actions.

    Args:
        actions: Observed actions, oldest first.

    Returns:
        PlayerPattern; sequences shorter than 2 are ``unknown``.
    """
    if len(actions) < 2:
        return PlayerPattern(type="unknown", confidence=0.0)

    counts = Counter(actions)
    # most_common keeps first-seen order among equal counts
    most_common, top = counts.most_common(1)[0]
    confidence = top / len(actions)

    if confidence > PATTERN_CONFIDENCE_THRESHOLD:
        pattern_type = f"{most_common.value}_heavy"
    elif _is_alternating(actions):
        pattern_type = "alternating"
    elif _is_escalating(actions):
        pattern_type = "escalating"
    else:
        pattern_type = "random"

    return PlayerPattern(
        type=pattern_type,
        confidence=confidence,
        most_common=most_common,
        action_counts=dict(counts),
    )


def _is_alternating(actions: list[ActionType]) -> bool:
    if len(actions) < 4:
        return False
    return all(actions[i] == actions[i - 2] for i in range(2, len(actions)))


def _is_escalating(actions: list[ActionType]) -> bool:
    if len(actions) < 3:
        return False
    return tuple(actions[-3:]) == ESCALATION


# =============================================================================
# Decision Engine
# =============================================================================


class AIOpponent:
    """Decision engine driving the opponent side of one battle.

    Example:
        >>> ai = AIOpponent(Difficulty.MEDIUM, PersonalityName.TACTICAL, SystemRandomSource())
        >>> action = ai.make_decision(battle)
    """

    def __init__(
        self,
        difficulty: Difficulty,
        personality: PersonalityName,
        random_source: RandomSource,
        *,
        special_attack_cap: int | None = None,
    ) -> None:
        """Initialize the AI opponent.

        Args:
            difficulty: Tier the AI plays at.
            personality: Personality providing the strategy traits.
            random_source: Source of every random draw.
            special_attack_cap: Special attacks allowed per battle,
                defaults to the configured cap.
        """
        self.difficulty = difficulty
        self.personality = personality
        self.traits = PERSONALITY_TRAITS[personality]
        self.behavior = BEHAVIOR_PARAMS[difficulty]
        self._random = random_source
        self._special_cap = (
            special_attack_cap
            if special_attack_cap is not None
            else get_settings().game.special_attack_cap
        )
        self.memory = AIMemory()

        logger.debug(
            "AIOpponent initialized",
            difficulty=difficulty,
            personality=personality,
        )

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def make_decision(self, battle: Battle) -> ActionType:
        """Choose the opponent's next action.

        Args:
            battle: Current battle; the opponent side is the AI.

        Returns:
            The chosen action, never ``special`` once the cap is reached.
        """
        self.update_memory(battle)
        situation = self.analyze_situation(battle)
        strategy = self.determine_strategy(situation)
        action = self.execute_strategy(strategy, situation)
        action = self.apply_difficulty_modifications(action, situation)

        if action == ActionType.SPECIAL and not situation.can_use_special:
            logger.warning("Special attack cap reached, attacking instead")
            action = ActionType.ATTACK

        self.memory.decisions.append(
            AIDecision(
                turn=self.memory.turns_elapsed,
                strategy=strategy,
                action=action,
                player_pattern=situation.player_pattern.type,
            )
        )
        logger.debug(
            "AI decision",
            strategy=strategy,
            action=action,
            urgency=round(situation.urgency, 3),
            player_pattern=situation.player_pattern.type,
        )
        return action

    def update_memory(self, battle: Battle) -> None:
        """Record the latest player action and damage figures."""
        self.memory.turns_elapsed += 1

        last_player_action = battle.player_actions.last_action
        if last_player_action is not None:
            self.memory.player_actions.append(last_player_action)

        # Cumulative: the same last-damage figure is added on every decision
        if battle.player_actions.last_damage_dealt:
            self.memory.damage_taken += battle.player_actions.last_damage_dealt
        if battle.opponent_actions.last_damage_dealt:
            self.memory.damage_dealt += battle.opponent_actions.last_damage_dealt

    def analyze_player_pattern(self) -> PlayerPattern:
        """Classify the player actions currently in memory."""
        return classify_pattern(list(self.memory.player_actions))

    def analyze_situation(self, battle: Battle) -> SituationAnalysis:
        """Analyse the battle from the AI's side."""
        ai_stats = battle.opponent_creature.stats
        player_stats = battle.player_creature.stats
        ai_fraction = ai_stats.hp_fraction
        player_fraction = player_stats.hp_fraction

        return SituationAnalysis(
            ai_health=health_status(ai_fraction),
            player_health=health_status(player_fraction),
            health_advantage=ai_fraction - player_fraction,
            attack_advantage=ai_stats.attack - player_stats.attack,
            defense_advantage=ai_stats.defense - player_stats.defense,
            speed_advantage=ai_stats.speed - player_stats.speed,
            turns_elapsed=self.memory.turns_elapsed,
            damage_ratio=self.memory.damage_ratio,
            player_pattern=self.analyze_player_pattern(),
            urgency=calculate_urgency(ai_fraction, player_fraction),
            can_use_special=battle.opponent_actions.special_attacks_used < self._special_cap,
            should_avoid_defend=(
                battle.opponent_actions.consecutive_defends >= CONSECUTIVE_DEFEND_LIMIT
            ),
        )

    def strategy_scores(self, situation: SituationAnalysis) -> dict[Strategy, float]:
        """Score each strategy for a situation.

        Returns:
            Scores keyed by strategy, in tie-break order.
        """
        scores = {strategy: 0.0 for strategy in Strategy}

        if situation.ai_health == HealthStatus.DESPERATE:
            scores[Strategy.AGGRESSIVE] += 0.4
            scores[Strategy.DEFENSIVE] -= 0.2
        elif situation.ai_health == HealthStatus.CRITICAL:
            scores[Strategy.DEFENSIVE] += 0.3
            scores[Strategy.TACTICAL] += 0.2
        elif situation.ai_health == HealthStatus.HEALTHY:
            scores[Strategy.AGGRESSIVE] += 0.2

        if situation.attack_advantage > STAT_ADVANTAGE_THRESHOLD:
            scores[Strategy.AGGRESSIVE] += 0.3
        if situation.defense_advantage > STAT_ADVANTAGE_THRESHOLD:
            scores[Strategy.DEFENSIVE] += 0.2

        if situation.urgency > HIGH_URGENCY:
            scores[Strategy.AGGRESSIVE] += 0.4
            scores[Strategy.DEFENSIVE] -= 0.3

        if situation.player_pattern.type == "attack_heavy":
            scores[Strategy.DEFENSIVE] += 0.3
        elif situation.player_pattern.type == "defend_heavy":
            scores[Strategy.AGGRESSIVE] += 0.3

        scores[Strategy.AGGRESSIVE] += self.traits.attack_preference * 0.3
        scores[Strategy.DEFENSIVE] += (1 - self.traits.risk_tolerance) * 0.2
        scores[Strategy.TACTICAL] += self.traits.adaptability * 0.2
        return scores

    def determine_strategy(self, situation: SituationAnalysis) -> Strategy:
        """Pick the highest-scoring strategy; the first one wins ties."""
        scores = self.strategy_scores(situation)
        best = Strategy.AGGRESSIVE
        for strategy, score in scores.items():
            if score > scores[best]:
                best = strategy
        return best

    def execute_strategy(self, strategy: Strategy, situation: SituationAnalysis) -> ActionType:
        """Turn a strategy into an action."""
        if strategy == Strategy.AGGRESSIVE:
            return self._execute_aggressive(situation)
        if strategy == Strategy.DEFENSIVE:
            return self._execute_defensive(situation)
        return self._execute_tactical(situation)

    def _execute_aggressive(self, situation: SituationAnalysis) -> ActionType:
        if situation.can_use_special and self._random.next() < 0.6:
            return ActionType.SPECIAL
        if self._random.next() < 0.8:
            return ActionType.ATTACK
        return ActionType.DEFEND

    def _execute_defensive(self, situation: SituationAnalysis) -> ActionType:
        if situation.should_avoid_defend:
            return ActionType.ATTACK if self._random.next() < 0.7 else ActionType.SPECIAL
        if situation.ai_health == HealthStatus.CRITICAL and self._random.next() < 0.6:
            return ActionType.DEFEND
        if self._random.next() < 0.4:
            return ActionType.DEFEND
        if self._random.next() < 0.7:
            return ActionType.ATTACK
        return ActionType.SPECIAL

    def _execute_tactical(self, situation: SituationAnalysis) -> ActionType:
        pattern = situation.player_pattern
        if pattern.confidence > PATTERN_CONFIDENCE_THRESHOLD and pattern.most_common is not None:
            return COUNTER_ACTIONS[pattern.most_common]
        if situation.can_use_special and situation.urgency > 0.5 and self._random.next() < 0.4:
            return ActionType.SPECIAL

        roll = self._random.next()
        if roll < 0.5:
            return ActionType.ATTACK
        if roll < 0.75:
            return ActionType.DEFEND
        return ActionType.SPECIAL

    def apply_difficulty_modifications(
        self,
        action: ActionType,
        situation: SituationAnalysis,
    ) -> ActionType:
        """Apply the tier's mistakes (easy) or optimal play (hard)."""
        if self.difficulty == Difficulty.EASY and self._random.next() < self.behavior.mistake_chance:
            return RANDOM_ACTIONS[math.floor(self._random.next() * len(RANDOM_ACTIONS))]
        if (
            self.difficulty == Difficulty.HARD
            and self._random.next() < self.behavior.optimal_play_chance
        ):
            return self.get_optimal_action(situation)
        return action

    def get_optimal_action(self, situation: SituationAnalysis) -> ActionType:
        """Heuristically optimal action for a situation."""
        if situation.ai_health == HealthStatus.DESPERATE:
            return ActionType.SPECIAL if situation.can_use_special else ActionType.ATTACK
        if situation.player_health == HealthStatus.CRITICAL:
            return ActionType.ATTACK
        if situation.health_advantage < -0.3:
            return ActionType.DEFEND
        return ActionType.ATTACK

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def get_ai_info(self) -> AIInfo:
        """Describe the AI's configuration."""
        return AIInfo(
            personality=self.personality,
            difficulty=self.difficulty,
            traits=self.traits,
            behavior=self.behavior,
        )

    def get_battle_analysis(self) -> BattleAnalysis:
        """Summarize the AI's memory of the current battle."""
        return BattleAnalysis(
            personality=self.personality,
            difficulty=self.difficulty,
            turns_elapsed=self.memory.turns_elapsed,
            damage_dealt=self.memory.damage_dealt,
            damage_taken=self.memory.damage_taken,
            player_pattern=self.analyze_player_pattern().type,
            player_actions=list(self.memory.player_actions),
            recent_decisions=list(self.memory.decisions),
        )

    def reset_memory(self) -> None:
        """Forget everything observed in the current battle."""
        self.memory = AIMemory()


__all__ = [
    "PERSONALITY_TRAITS",
    "BEHAVIOR_PARAMS",
    "AIMemory",
    "PlayerPattern",
    "SituationAnalysis",
    "health_status",
    "calculate_urgency",
    "classify_pattern",
    "AIOpponent",
]
