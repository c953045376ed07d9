"""Integration tests for a full scan, battle and progression flow."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from barcode_battler.engine import (
    BattleEngine,
    CreatureCollection,
    DifficultyProgression,
    generate_creature,
)
from barcode_battler.models import (
    ActionType,
    BattleStatus,
    Creature,
    Difficulty,
    PersonalityName,
    Side,
)


if TYPE_CHECKING:
    from conftest import ScriptedRandom


def _scan(barcode: str) -> Creature:
    creature = generate_creature(barcode)
    if creature is None:
        pytest.fail(f"Could not generate a creature from {barcode}")
    return creature


class TestScriptedLoss:
    """A medium battle lost to a faster, stronger opponent."""

    def test_full_battle(self, make_random: type[ScriptedRandom]) -> None:
        """Test every step of a battle driven by a scripted source."""
        player = _scan("11112222")
        opponent = _scan("99998888")
        progression = DifficultyProgression()
        engine = BattleEngine(random_source=make_random([0.0]), progression=progression)

        battle = engine.initiate_battle(player, opponent, Difficulty.MEDIUM)

        assert battle.ai_info.personality == PersonalityName.AGGRESSIVE
        assert battle.current_turn == Side.OPPONENT
        assert battle.battle_log[0].message == f"Battle begins! {player.name} vs {opponent.name}"

        first = engine.execute_ai_action()
        assert first.action_type == ActionType.SPECIAL
        assert first.damage == 55
        assert first.defender_hp == 25

        second = engine.execute_player_action(ActionType.ATTACK)
        assert second.damage == 1
        assert second.defender_hp == 110

        third = engine.execute_ai_action()
        assert third.action_type == ActionType.SPECIAL
        assert third.damage == 55
        assert third.battle_ended is True
        assert third.winner == Side.OPPONENT
        assert third.experience_gained == 0

        final = engine.get_current_battle()
        assert final is not None
        assert final.status == BattleStatus.LOST
        assert final.turn_count == 1
        assert final.player_creature.stats.hp == 0
        assert [entry.message for entry in final.battle_log] == [
            f"Battle begins! {player.name} vs {opponent.name}",
            f"{opponent.name} uses a special attack for 55 damage!",
            f"{player.name} attacks for 1 damage!",
            f"{opponent.name} uses a special attack for 55 damage!",
            f"{opponent.name} wins the battle!",
        ]

        analysis = final.ai_analysis
        assert analysis is not None
        assert analysis.turns_elapsed == 2
        assert analysis.damage_dealt == 55
        assert analysis.damage_taken == 1
        assert analysis.player_actions == [ActionType.ATTACK]

        assert progression.records()[Difficulty.MEDIUM].losses == 1
        assert progression.total_wins == 0

    def test_inputs_untouched(self, make_random: type[ScriptedRandom]) -> None:
        """Test that the caller's creatures are not modified by the battle."""
        player = _scan("11112222")
        opponent = _scan("99998888")
        engine = BattleEngine(random_source=make_random([0.0]))

        engine.initiate_battle(player, opponent, Difficulty.MEDIUM)
        engine.execute_ai_action()

        assert player.stats.hp == 80
        assert opponent.stats.hp == 111


class TestCampaign:
    """Winning streaks feeding the collection and progression."""

    def _play(self, engine: BattleEngine) -> None:
        while True:
            battle = engine.get_current_battle()
            if battle is None or not battle.is_active:
                return
            if battle.current_turn == Side.PLAYER:
                engine.execute_player_action(ActionType.ATTACK)
            else:
                engine.execute_ai_action()

    def test_unlock_medium_and_level_up(
        self,
        make_random: type[ScriptedRandom],
        ivarno: Creature,
        weak_creature: Creature,
    ) -> None:
        """Test five easy wins unlocking medium and leveling the creature."""
        collection = CreatureCollection([ivarno])
        progression = DifficultyProgression()
        unlocked: list[Difficulty] = []
        progression.add_unlock_callback(unlocked.append)
        source = make_random()
        engine = BattleEngine(random_source=source, progression=progression)

        for _ in range(5):
            source.push(0.0)
            engine.initiate_battle(ivarno, weak_creature)
            self._play(engine)
            battle = engine.get_current_battle()
            assert battle is not None
            assert battle.status == BattleStatus.WON
            assert battle.experience_reward == 60
            assert collection.settle_battle(battle).success is True

        assert unlocked == [Difficulty.MEDIUM]
        assert progression.is_unlocked(Difficulty.MEDIUM) is True
        assert progression.set_difficulty(Difficulty.MEDIUM).success is True
        assert progression.set_difficulty(Difficulty.HARD).success is False

        stored = collection.get(ivarno.id)
        assert stored is not None
        assert stored.battles_won == 5
        assert stored.level == 3
        assert stored.experience == 50
        assert stored.experience_to_next == 225
        assert stored.stats.max_hp > ivarno.stats.max_hp

        stats = engine.get_battle_stats()
        assert stats.wins == 5
        assert stats.total_experience == 300

    def test_backup_restore(
        self,
        make_random: type[ScriptedRandom],
        ivarno: Creature,
        weak_creature: Creature,
    ) -> None:
        """Test that a settled collection survives an export and import."""
        collection = CreatureCollection([ivarno, weak_creature])
        engine = BattleEngine(random_source=make_random([0.0]))
        engine.initiate_battle(ivarno, weak_creature, Difficulty.MEDIUM)
        self._play(engine)
        battle = engine.get_current_battle()
        assert battle is not None
        collection.settle_battle(battle)

        restored = CreatureCollection()
        result = restored.import_json(collection.export_json())

        assert result.success is True
        assert result.imported == 2
        stored = restored.find_by_barcode(ivarno.barcode)
        assert stored is not None
        assert stored.battles_won == 1
        assert stored.experience == 72
        assert restored.stats().total_victories == 1
