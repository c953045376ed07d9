"""Tests for creature lifecycle operations and the creature collection."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from barcode_battler.engine.ai_opponent import AIOpponent
from barcode_battler.engine.creature_generator import generate_creature
from barcode_battler.engine.lifecycle import (
    CreatureCollection,
    award_experience,
    level_up_creature,
    settle_battle,
    update_battle_stats,
)
from barcode_battler.engine.random_source import SeededRandom
from barcode_battler.models.battle import Battle
from barcode_battler.models.enums import (
    BattleStatus,
    Difficulty,
    PersonalityName,
    Side,
)


if TYPE_CHECKING:
    from barcode_battler.models.creature import Creature


def _finished_battle(
    player: Creature,
    opponent: Creature,
    *,
    won: bool,
    reward: int,
) -> Battle:
    ai = AIOpponent(Difficulty.MEDIUM, PersonalityName.TACTICAL, SeededRandom(1))
    return Battle(
        player_creature=player.model_copy(deep=True),
        opponent_creature=opponent.model_copy(deep=True),
        difficulty=Difficulty.MEDIUM,
        current_turn=Side.PLAYER,
        ai_info=ai.get_ai_info(),
        status=BattleStatus.WON if won else BattleStatus.LOST,
        winner=Side.PLAYER if won else Side.OPPONENT,
        experience_reward=reward,
    )


# =============================================================================
# Per-creature operations
# =============================================================================


class TestAwardExperience:
    """Tests for awarding experience."""

    def test_zero_is_noop(self, ivarno: Creature) -> None:
        """Test that awarding zero experience changes nothing."""
        before = ivarno.model_copy(deep=True)

        result = award_experience(ivarno, 0)

        assert result.success is True
        assert result.leveled_up is False
        assert result.levels_gained == 0
        assert ivarno == before

    def test_level_up_result(self, ivarno: Creature) -> None:
        """Test the result of an award that levels up."""
        result = award_experience(ivarno, 100)

        assert result.success is True
        assert result.experience_gained == 100
        assert result.old_level == 1
        assert result.new_level == 2
        assert result.leveled_up is True
        assert result.stat_gains is not None
        assert result.stat_gains.max_hp == 5
        assert result.stat_gains.attack == 5
        assert result.stat_gains.defense == 5
        assert result.stat_gains.speed == 5
        assert result.capped is False

    @pytest.mark.parametrize("amount", [-1, 1.5, "100", True, None])
    def test_rejects_invalid_amount(self, ivarno: Creature, amount: object) -> None:
        """Test that negative and non-integer amounts fail without changes."""
        result = award_experience(ivarno, amount)  # type: ignore[arg-type]

        assert result.success is False
        assert result.reason == "Invalid experience amount"
        assert ivarno.experience == 0
        assert ivarno.level == 1

    def test_level_up_cap(self, ivarno: Creature) -> None:
        """Test that a huge award stops at the level-up cap."""
        result = award_experience(ivarno, 10**30, max_level_ups=50)

        assert result.success is True
        assert result.capped is True
        assert result.levels_gained == 50
        assert ivarno.level == 51

    def test_configured_cap(self, ivarno: Creature, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the cap defaults to the configured value."""
        monkeypatch.setenv("BARCODE_BATTLER_GAME_MAX_LEVEL_UPS_PER_AWARD", "3")

        result = award_experience(ivarno, 10**6)

        assert result.capped is True
        assert ivarno.level == 4

    def test_levels_never_decrease(self, ivarno: Creature) -> None:
        """Test that repeated awards only ever raise the level."""
        levels = []
        for amount in (30, 80, 0, 500, 10):
            award_experience(ivarno, amount)
            levels.append(ivarno.level)

        assert levels == sorted(levels)


class TestLevelUpCreature:
    """Tests for direct level-ups."""

    def test_levels_without_experience(self, ivarno: Creature) -> None:
        """Test raising the level directly."""
        ivarno.experience = 40

        result = level_up_creature(ivarno, 3)

        assert result.success is True
        assert result.levels_gained == 3
        assert ivarno.level == 4
        assert ivarno.experience == 40
        assert ivarno.experience_to_next == 337
        assert ivarno.stats.max_hp == 95

    @pytest.mark.parametrize("levels", [0, -2, 1.0])
    def test_rejects_invalid_levels(self, ivarno: Creature, levels: object) -> None:
        """Test that non-positive level counts fail."""
        result = level_up_creature(ivarno, levels)  # type: ignore[arg-type]

        assert result.success is False
        assert result.reason == "Invalid level amount"
        assert ivarno.level == 1


class TestBattleBookkeeping:
    """Tests for recording battle outcomes."""

    def test_win_with_experience(self, ivarno: Creature) -> None:
        """Test that a win counts and awards experience."""
        result = update_battle_stats(ivarno, True, 50)

        assert result.success is True
        assert ivarno.battles_won == 1
        assert ivarno.battles_lost == 0
        assert ivarno.experience == 50

    def test_loss(self, ivarno: Creature) -> None:
        """Test that a loss counts without experience."""
        update_battle_stats(ivarno, False)

        assert ivarno.battles_lost == 1
        assert ivarno.total_battles == 1
        assert ivarno.win_rate == 0.0

    def test_settle_won_battle(self, ivarno: Creature, strong_creature: Creature) -> None:
        """Test applying a won battle to the canonical creature."""
        battle = _finished_battle(ivarno, strong_creature, won=True, reward=120)

        result = settle_battle(battle, ivarno)

        assert result.success is True
        assert ivarno.battles_won == 1
        assert ivarno.level == 2
        assert ivarno.experience == 20

    def test_settle_active_battle_fails(
        self,
        ivarno: Creature,
        strong_creature: Creature,
    ) -> None:
        """Test that an active battle cannot be settled."""
        battle = _finished_battle(ivarno, strong_creature, won=True, reward=120)
        battle.status = BattleStatus.ACTIVE

        result = settle_battle(battle, ivarno)

        assert result.success is False
        assert result.reason == "Battle is still active"
        assert ivarno.battles_won == 0

    def test_settle_other_creature_fails(
        self,
        ivarno: Creature,
        weak_creature: Creature,
        strong_creature: Creature,
    ) -> None:
        """Test that a battle fought by another creature is rejected."""
        battle = _finished_battle(weak_creature, strong_creature, won=False, reward=0)

        result = settle_battle(battle, ivarno)

        assert result.success is False
        assert result.reason == "Creature did not fight this battle"


# =============================================================================
# Collection
# =============================================================================


@pytest.fixture
def collection(
    ivarno: Creature,
    weak_creature: Creature,
    strong_creature: Creature,
) -> CreatureCollection:
    """Provide a collection holding the three sample creatures."""
    return CreatureCollection([ivarno, weak_creature, strong_creature])


class TestCollectionMembership:
    """Tests for adding, finding and removing creatures."""

    def test_initial_contents(self, collection: CreatureCollection, ivarno: Creature) -> None:
        """Test that constructor creatures are added."""
        assert len(collection) == 3
        assert ivarno.id in collection

    def test_duplicate_barcode_rejected(self, collection: CreatureCollection) -> None:
        """Test that a second creature with the same barcode is rejected."""
        duplicate = generate_creature("12345678")
        assert duplicate is not None

        assert collection.add(duplicate) is False
        assert len(collection) == 3

    def test_invalid_creature_rejected(self) -> None:
        """Test that structurally invalid creatures are rejected."""
        collection = CreatureCollection()

        assert collection.add("not a creature") is False  # type: ignore[arg-type]
        assert len(collection) == 0

    def test_get_returns_copy(self, collection: CreatureCollection, ivarno: Creature) -> None:
        """Test that returned creatures do not alias stored ones."""
        copy = collection.get(ivarno.id)
        assert copy is not None
        copy.level = 10

        stored = collection.get(ivarno.id)
        assert stored is not None
        assert stored.level == 1

    def test_find_by_barcode(self, collection: CreatureCollection) -> None:
        """Test lookup by barcode."""
        found = collection.find_by_barcode("12345678")

        assert found is not None
        assert found.name == "Ivarno"
        assert collection.find_by_barcode("00000000") is None

    def test_remove(self, collection: CreatureCollection, ivarno: Creature) -> None:
        """Test removing by id."""
        assert collection.remove(ivarno.id) is True
        assert collection.remove(ivarno.id) is False
        assert len(collection) == 2

    def test_clear(self, collection: CreatureCollection) -> None:
        """Test removing every creature."""
        collection.clear()

        assert len(collection) == 0
        assert list(collection) == []


class TestCollectionMutations:
    """Tests for mutations routed through the collection."""

    def test_award_experience(self, collection: CreatureCollection, ivarno: Creature) -> None:
        """Test awarding experience to a stored creature."""
        result = collection.award_experience(ivarno.id, 150)

        assert result.success is True
        stored = collection.get(ivarno.id)
        assert stored is not None
        assert stored.level == 2
        assert stored.experience == 50

    def test_level_up(self, collection: CreatureCollection, ivarno: Creature) -> None:
        """Test leveling a stored creature directly."""
        collection.level_up(ivarno.id, 2)

        stored = collection.get(ivarno.id)
        assert stored is not None
        assert stored.level == 3

    def test_update_battle_stats(
        self,
        collection: CreatureCollection,
        weak_creature: Creature,
    ) -> None:
        """Test recording a battle on a stored creature."""
        collection.update_battle_stats(weak_creature.id, False)

        stored = collection.get(weak_creature.id)
        assert stored is not None
        assert stored.battles_lost == 1

    def test_settle_battle(
        self,
        collection: CreatureCollection,
        ivarno: Creature,
        strong_creature: Creature,
    ) -> None:
        """Test settling a battle against the stored player creature."""
        battle = _finished_battle(ivarno, strong_creature, won=True, reward=60)

        result = collection.settle_battle(battle)

        assert result.success is True
        stored = collection.get(ivarno.id)
        assert stored is not None
        assert stored.battles_won == 1
        assert stored.experience == 60

    @pytest.mark.parametrize("operation", ["award_experience", "level_up", "update_battle_stats"])
    def test_missing_creature(self, collection: CreatureCollection, operation: str) -> None:
        """Test that unknown ids fail with a reason."""
        args = {"award_experience": (10,), "level_up": (1,), "update_battle_stats": (True,)}

        result = getattr(collection, operation)(uuid4(), *args[operation])

        assert result.success is False
        assert result.reason == "Creature not found"


class TestCollectionQueries:
    """Tests for sorting, filtering and statistics."""

    def test_sort_by_level(self, collection: CreatureCollection, weak_creature: Creature) -> None:
        """Test sorting by level, highest first."""
        collection.level_up(weak_creature.id, 4)

        ordered = collection.sorted("level")

        assert ordered[0].barcode == "11112222"

    def test_sort_by_attack_ascending(self, collection: CreatureCollection) -> None:
        """Test ascending sort by attack."""
        ordered = collection.sorted("attack", descending=False)

        assert [c.stats.attack for c in ordered] == [37, 48, 66]

    def test_sort_by_name(self, collection: CreatureCollection) -> None:
        """Test case-insensitive name sort."""
        ordered = collection.sorted("name", descending=False)
        names = [c.name.lower() for c in ordered]

        assert names == sorted(names)

    def test_unknown_sort_keeps_order(self, collection: CreatureCollection) -> None:
        """Test that unknown criteria return insertion order."""
        ordered = collection.sorted("colour")  # type: ignore[arg-type]

        assert [c.barcode for c in ordered] == ["12345678", "11112222", "99998888"]

    def test_filter_by_level(self, collection: CreatureCollection, ivarno: Creature) -> None:
        """Test level range filters."""
        collection.level_up(ivarno.id, 5)

        assert [c.barcode for c in collection.filter(min_level=2)] == ["12345678"]
        assert len(collection.filter(max_level=1)) == 2

    def test_filter_by_name_and_barcode(self, collection: CreatureCollection) -> None:
        """Test substring filters."""
        assert [c.barcode for c in collection.filter(name="IVAR")] == ["12345678"]
        assert [c.barcode for c in collection.filter(barcode="8888")] == ["99998888"]

    def test_filter_has_battled(
        self,
        collection: CreatureCollection,
        strong_creature: Creature,
    ) -> None:
        """Test filtering to creatures that have fought."""
        collection.update_battle_stats(strong_creature.id, True, 0)

        assert [c.barcode for c in collection.filter(has_battled=True)] == ["99998888"]

    def test_stats(self, collection: CreatureCollection, ivarno: Creature) -> None:
        """Test aggregate statistics."""
        collection.level_up(ivarno.id, 1)
        collection.update_battle_stats(ivarno.id, True)
        collection.update_battle_stats(ivarno.id, False)

        stats = collection.stats()

        assert stats.total_creatures == 3
        assert stats.average_level == pytest.approx(1.3)
        assert stats.highest_level == 2
        assert stats.total_battles == 2
        assert stats.total_victories == 1
        assert stats.overall_win_rate == pytest.approx(0.5)
        assert stats.oldest_discovery is not None

    def test_empty_stats(self) -> None:
        """Test statistics of an empty collection."""
        stats = CreatureCollection().stats()

        assert stats.total_creatures == 0
        assert stats.overall_win_rate == 0.0


class TestCollectionBackup:
    """Tests for JSON export and import."""

    def test_export_import_replaces(self, collection: CreatureCollection) -> None:
        """Test that a plain import replaces the collection."""
        exported = collection.export_json()
        target = CreatureCollection()
        extra = generate_creature("55555555")
        assert extra is not None
        target.add(extra)

        result = target.import_json(exported)

        assert result.success is True
        assert result.imported == 3
        assert result.skipped == 0
        assert len(target) == 3
        assert target.find_by_barcode("55555555") is None

    def test_export_format(self, collection: CreatureCollection) -> None:
        """Test the export envelope."""
        data = json.loads(collection.export_json())

        assert data["version"] == "1.0"
        assert "export_date" in data
        assert len(data["creatures"]) == 3

    def test_merge_skips_duplicates(self, collection: CreatureCollection) -> None:
        """Test that merging skips ids and barcodes already present."""
        exported = collection.export_json()

        result = collection.import_json(exported, merge=True)

        assert result.success is True
        assert result.imported == 0
        assert result.skipped == 3
        assert len(collection) == 3

    def test_invalid_entries_skipped(self) -> None:
        """Test that invalid creature entries are counted as skipped."""
        payload = json.dumps({"creatures": [{"name": "Broken"}]})

        result = CreatureCollection().import_json(payload)

        assert result.success is True
        assert result.imported == 0
        assert result.skipped == 1
        assert result.total == 1

    @pytest.mark.parametrize("payload", ["not json", "{}", '{"creatures": "nope"}'])
    def test_invalid_format(self, collection: CreatureCollection, payload: str) -> None:
        """Test that malformed backups fail and leave the collection intact."""
        result = collection.import_json(payload)

        assert result.success is False
        assert result.reason == "Invalid import data format"
        assert len(collection) == 3
