"""Tests for Pythagorean expected wins."""

import pytest

from leaguehistory.pythagorean import (
    PythagoreanInput,
    build_ranks,
    calculate_expected_wins,
    career_expected_vs_actual,
    season_pythagorean_inputs,
)


class TestExpectedWins:
    """Tests for the expected wins formula."""

    def test_single_game(self):
        """Test 104.40 scored vs 66.70 allowed over one game."""
        expected = calculate_expected_wins(104.40, 66.70, 1)
        assert 0.74 < expected < 0.75

    def test_even_points_split(self):
        assert calculate_expected_wins(1200.0, 1200.0, 13) == pytest.approx(6.5)

    def test_zero_cases(self):
        """Test that no games or no points give zero expected wins."""
        assert calculate_expected_wins(104.40, 66.70, 0) == 0.0
        assert calculate_expected_wins(0.0, 0.0, 13) == 0.0
        assert calculate_expected_wins(-5.0, -3.0, 13) == 0.0

    def test_negative_points_clamped(self):
        assert calculate_expected_wins(100.0, -10.0, 2) == pytest.approx(2.0)

    def test_custom_exponent(self):
        assert calculate_expected_wins(3.0, 1.0, 1, exponent=1.0) == pytest.approx(0.75)


class TestRanks:
    """Tests for competition ranking."""

    def test_ties_share_rank(self):
        """Test that equal expected wins share a rank and the next rank skips."""
        ranks = build_ranks([
            PythagoreanInput('Alice', 1300.0, 1000.0, 13),
            PythagoreanInput('Bob', 1200.0, 1100.0, 13),
            PythagoreanInput('Carol', 1200.0, 1100.0, 13),
            PythagoreanInput('Dave', 900.0, 1400.0, 13),
        ])
        assert ranks == {'Alice': 1, 'Bob': 2, 'Carol': 2, 'Dave': 4}

    def test_empty(self):
        assert build_ranks([]) == {}


class TestCareerLuck:
    """Tests for career expected vs actual wins."""

    def test_season_inputs(self, store):
        rows = {row.owner_id: row for row in season_pythagorean_inputs(store, '2006')}
        assert rows['Bob'].games_played == 2
        assert rows['Carol'].points_for == pytest.approx(214.20)

    def test_luck_is_actual_minus_expected(self, store):
        rows = {row.owner_name: row for row in career_expected_vs_actual(store)}

        assert sorted(rows) == ['Alice', 'Bob', 'Carol', 'Dave']
        alice = rows['Alice']
        assert alice.actual_wins == 9
        expected = (
            calculate_expected_wins(1200.0, 1100.0, 13)
            + calculate_expected_wins(194.40, 162.20, 2)
        )
        assert alice.expected_wins == pytest.approx(expected)
        assert alice.career_luck == pytest.approx(9 - expected)
