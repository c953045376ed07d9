"""Tests for deterministic creature generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from barcode_battler.core.constants import (
    BASE_ATTACK_MAX,
    BASE_ATTACK_MIN,
    BASE_DEFENSE_MAX,
    BASE_DEFENSE_MIN,
    BASE_HP_MAX,
    BASE_HP_MIN,
    BASE_SPEED_MAX,
    BASE_SPEED_MIN,
)
from barcode_battler.engine.creature_generator import (
    SYLLABLES,
    calculate_stats,
    generate_creature,
    generate_creature_name,
    generate_random_barcode,
    generate_seed,
    get_generation_data,
    validate_barcode,
    validate_creature,
)
from barcode_battler.models.enums import NameStyle


if TYPE_CHECKING:
    from barcode_battler.models.creature import Creature
    from conftest import ScriptedRandom


class TestValidateBarcode:
    """Tests for barcode validation."""

    @pytest.mark.parametrize(
        "barcode",
        ["12345678", "00000000", "12345678901234567890", "012345678905"],
    )
    def test_accepts_valid(self, barcode: str) -> None:
        """Test that 8 to 20 digit strings are accepted."""
        assert validate_barcode(barcode) is True

    @pytest.mark.parametrize(
        "barcode",
        [
            "1234567",
            "123456789012345678901",
            "1234567a",
            "1234 5678",
            "",
            "１２３４５６７８",
        ],
    )
    def test_rejects_invalid_strings(self, barcode: str) -> None:
        """Test that short, long and non-digit strings are rejected."""
        assert validate_barcode(barcode) is False

    @pytest.mark.parametrize("value", [None, 12345678, 1.5, ["12345678"]])
    def test_rejects_non_strings(self, value: object) -> None:
        """Test that non-string values are rejected."""
        assert validate_barcode(value) is False


class TestGenerateSeed:
    """Tests for seed derivation."""

    @pytest.mark.parametrize(
        ("barcode", "seed"),
        [("12345678", 6324), ("11112222", 1922), ("99998888", 9238), ("00000000", 0)],
    )
    def test_known_seeds(self, barcode: str, seed: int) -> None:
        """Test seed values for known barcodes."""
        assert generate_seed(barcode) == seed

    def test_position_weighted(self) -> None:
        """Test that digit order changes the seed."""
        assert generate_seed("10000000") != generate_seed("00000001")


class TestCalculateStats:
    """Tests for stat derivation."""

    @pytest.mark.parametrize(
        ("barcode", "expected"),
        [
            ("12345678", (80, 48, 48, 53)),
            ("11112222", (80, 37, 30, 28)),
            ("99998888", (111, 66, 57, 50)),
        ],
    )
    def test_golden_stats(self, barcode: str, expected: tuple[int, int, int, int]) -> None:
        """Test stats for known barcodes."""
        stats = calculate_stats(barcode)

        assert (stats.max_hp, stats.attack, stats.defense, stats.speed) == expected
        assert stats.hp == stats.max_hp

    @pytest.mark.parametrize(
        "barcode",
        ["00000000", "99999999", "12345678901234567890", "50505050", "98765432"],
    )
    def test_stats_within_ranges(self, barcode: str) -> None:
        """Test that stats stay inside their base ranges."""
        stats = calculate_stats(barcode)

        assert BASE_HP_MIN <= stats.max_hp <= BASE_HP_MAX
        assert BASE_ATTACK_MIN <= stats.attack <= BASE_ATTACK_MAX
        assert BASE_DEFENSE_MIN <= stats.defense <= BASE_DEFENSE_MAX
        assert BASE_SPEED_MIN <= stats.speed <= BASE_SPEED_MAX

    def test_all_zero_barcode_near_bottom_of_range(self) -> None:
        """Test that zero digit channels stay near the bottom of the range."""
        stats = calculate_stats("00000000")

        assert stats.max_hp >= BASE_HP_MIN
        assert stats.max_hp <= BASE_HP_MIN + 10


class TestGenerateCreatureName:
    """Tests for procedural names."""

    def test_golden_name(self) -> None:
        """Test the name for barcode 12345678."""
        assert generate_creature_name("12345678") == "Ivarno"

    @pytest.mark.parametrize("barcode", ["11112222", "99998888", "12345678901234567890"])
    def test_name_is_repeatable(self, barcode: str) -> None:
        """Test that names are identical across calls."""
        assert generate_creature_name(barcode) == generate_creature_name(barcode)

    @pytest.mark.parametrize("barcode", ["00000000", "11112222", "31415926", "27182818"])
    def test_name_shape(self, barcode: str) -> None:
        """Test that names are capitalized letters with an optional apostrophe."""
        name = generate_creature_name(barcode)

        assert name
        assert name[0].isupper()
        assert name.replace("'", "").isalpha()
        assert name.count("'") <= 1

    def test_syllable_table_size(self) -> None:
        """Test that the syllable table keeps its 80 entries."""
        assert len(SYLLABLES) == 80


class TestGenerateCreature:
    """Tests for full creature generation."""

    def test_golden_creature(self) -> None:
        """Test the creature for barcode 12345678."""
        creature = generate_creature("12345678")

        assert creature is not None
        assert creature.name == "Ivarno"
        assert creature.barcode == "12345678"
        assert creature.level == 1
        assert creature.experience == 0
        assert creature.experience_to_next == 100
        assert creature.stats.hp == 80
        assert creature.stats.max_hp == 80
        assert creature.stats.attack == 48
        assert creature.stats.defense == 48
        assert creature.stats.speed == 53
        assert creature.battles_won == 0
        assert creature.battles_lost == 0
        assert creature.is_opponent is False

    def test_deterministic(self) -> None:
        """Test that two generations share stats and name but not identity."""
        first = generate_creature("99998888")
        second = generate_creature("99998888")

        assert first is not None
        assert second is not None
        assert first.stats == second.stats
        assert first.name == second.name
        assert first.id != second.id

    @pytest.mark.parametrize("barcode", ["1234567", "abcdefgh", None, 42])
    def test_invalid_barcode_returns_none(self, barcode: object) -> None:
        """Test that invalid input yields no creature."""
        assert generate_creature(barcode) is None

    @pytest.mark.parametrize("barcode", ["12345678", "12345678901234567890"])
    def test_length_bounds_accepted(self, barcode: str) -> None:
        """Test the shortest and longest accepted barcodes."""
        creature = generate_creature(barcode)

        assert creature is not None
        assert validate_creature(creature)


class TestGenerationData:
    """Tests for generation introspection."""

    def test_golden_generation_data(self) -> None:
        """Test intermediate values for barcode 12345678."""
        data = get_generation_data("12345678")

        assert data is not None
        assert data.seed == 6324
        assert data.pattern.style == NameStyle.SHORT
        assert data.name_length == 3
        assert data.syllables_used == ("iv", "ar", "no")
        assert data.name == "Ivarno"
        assert data.stats == calculate_stats("12345678")

    def test_invalid_barcode(self) -> None:
        """Test that invalid barcodes have no generation data."""
        assert get_generation_data("123") is None

    @pytest.mark.parametrize("barcode", ["11112222", "99998888", "55555555"])
    def test_matches_generated_name(self, barcode: str) -> None:
        """Test that the reported name equals the generated name."""
        data = get_generation_data(barcode)

        assert data is not None
        assert data.name == generate_creature_name(barcode)
        assert data.pattern.min_length <= data.name_length <= data.pattern.max_length


class TestValidateCreature:
    """Tests for structural creature validation."""

    def test_accepts_generated(self, ivarno: Creature) -> None:
        """Test that generated creatures are valid."""
        assert validate_creature(ivarno) is True

    def test_accepts_serialized(self, ivarno: Creature) -> None:
        """Test that a serialized creature validates."""
        assert validate_creature(ivarno.model_dump(mode="json")) is True

    def test_rejects_hp_above_max(self, ivarno: Creature) -> None:
        """Test that hp above max_hp is rejected."""
        data = ivarno.model_dump()
        data["stats"]["hp"] = data["stats"]["max_hp"] + 1

        assert validate_creature(data) is False

    def test_rejects_negative_stat(self, ivarno: Creature) -> None:
        """Test that negative stats are rejected."""
        data = ivarno.model_dump()
        data["stats"]["attack"] = -1

        assert validate_creature(data) is False

    def test_rejects_missing_fields(self) -> None:
        """Test that incomplete data is rejected."""
        assert validate_creature({"name": "Nobody"}) is False

    def test_rejects_non_mapping(self) -> None:
        """Test that arbitrary values are rejected."""
        assert validate_creature("not a creature") is False


class TestGenerateRandomBarcode:
    """Tests for random barcode generation."""

    def test_default_length_and_digits(self, scripted_random: ScriptedRandom) -> None:
        """Test a 12-digit barcode built from the draws."""
        barcode = generate_random_barcode(scripted_random)

        assert barcode == "5" * 12
        assert validate_barcode(barcode)

    def test_custom_length(self, make_random: type[ScriptedRandom]) -> None:
        """Test each draw maps to one digit."""
        source = make_random([0.0, 0.19, 0.99, 0.5, 0.3, 0.7, 0.8, 0.1])

        assert generate_random_barcode(source, length=8) == "01953781"
