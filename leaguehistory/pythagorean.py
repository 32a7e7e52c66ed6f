"""Pythagorean expected wins and luck."""

from typing import Iterable, NamedTuple

from .constants import PYTHAGOREAN_EXPONENT
from .data_store import LeagueDataStore
from .models import LuckRow


class PythagoreanInput(NamedTuple):
    owner_id: str
    points_for: float
    points_against: float
    games_played: int


def calculate_expected_wins(
    points_for: float,
    points_against: float,
    games_played: int,
    exponent: float = PYTHAGOREAN_EXPONENT,
) -> float:
    """
    Expected wins from points scored and allowed.

    games_played * PF^e / (PF^e + PA^e), with negative point totals
    clamped to zero.

    Args:
        points_for: Points scored
        points_against: Points allowed
        games_played: Games played
        exponent: Pythagorean exponent (default: 2.37)

    Returns:
        Expected wins; 0 with no games, no positive points, or a zero denominator

    Example:
        calculate_expected_wins(104.40, 66.70, 1)  # ~0.743
    """
    if games_played <= 0:
        return 0.0
    if points_for <= 0 and points_against <= 0:
        return 0.0

    pf_pow = max(points_for, 0.0) ** exponent
    pa_pow = max(points_against, 0.0) ** exponent
    denominator = pf_pow + pa_pow
    if denominator == 0:
        return 0.0
    return games_played * (pf_pow / denominator)


def build_ranks(
    rows: Iterable[PythagoreanInput],
    exponent: float = PYTHAGOREAN_EXPONENT,
) -> dict[str, int]:
    """
    Rank owners by expected wins, highest first.

    Equal values share a rank and the next distinct value resumes at its
    position (1, 2, 2, 4).
    """
    expected = [
        (row.owner_id, calculate_expected_wins(
            row.points_for, row.points_against, row.games_played, exponent
        ))
        for row in rows
    ]
    expected.sort(key=lambda item: item[1], reverse=True)

    ranks: dict[str, int] = {}
    current_rank = 0
    last_value = None
    for position, (owner_id, value) in enumerate(expected, start=1):
        if last_value is None or value != last_value:
            current_rank = position
            last_value = value
        ranks[owner_id] = current_rank
    return ranks


def season_pythagorean_inputs(store: LeagueDataStore, season_id) -> list[PythagoreanInput]:
    """One input row per standings entry of a season, keyed by owner id."""
    rows = []
    for owner_id, entry in (store.get_standings(season_id) or {}).items():
        record = entry.record
        rows.append(PythagoreanInput(
            owner_id=owner_id,
            points_for=entry.points.points_for,
            points_against=entry.points.points_against,
            games_played=record.win + record.loss + record.tie,
        ))
    return rows


def career_expected_vs_actual(
    store: LeagueDataStore,
    exponent: float = PYTHAGOREAN_EXPONENT,
) -> list[LuckRow]:
    """
    Sum each owner's per-season expected and actual wins from the standings.

    Luck is actual minus expected. Rows are sorted by owner name.
    """
    totals: dict[str, list[float]] = {}
    for season_id in store.standings_season_ids():
        for entry in store.get_standings(season_id).values():
            owner_name = entry.player_details.manager_name
            if not owner_name:
                continue
            record = entry.record
            expected = calculate_expected_wins(
                entry.points.points_for,
                entry.points.points_against,
                record.win + record.loss + record.tie,
                exponent,
            )
            current = totals.setdefault(owner_name, [0.0, 0])
            current[0] += expected
            current[1] += record.win

    return [
        LuckRow(
            owner_name=owner_name,
            expected_wins=expected,
            actual_wins=actual,
            career_luck=actual - expected,
        )
        for owner_name, (expected, actual) in sorted(totals.items())
    ]
