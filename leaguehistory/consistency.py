"""Scoring consistency: spread of an owner's weekly scores."""

import logging
import math
from typing import Optional, Sequence

from .data_store import LeagueDataStore
from .diagnostics import DiagnosticKind, DiagnosticLog
from .identity import build_index_from_standings
from .models import OwnerConsistencyIndex, TeamOwnerIndex
from .reconciliation import report_missing_season_data
from .utils import normalize_team_name, parse_score, week_key

logger = logging.getLogger('leaguehistory.consistency')


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """
    Linear-interpolated percentile of an ascending sequence.

    Uses rank r = (n - 1) * p and interpolates between floor(r) and ceil(r).

    Example:
        percentile([1, 2, 3, 4], 0.25)  # 1.75
    """
    n = len(sorted_values)
    if n == 0:
        return 0.0
    if n == 1:
        return sorted_values[0]
    r = (n - 1) * p
    lo = math.floor(r)
    hi = math.ceil(r)
    if lo == hi:
        return sorted_values[lo]
    return sorted_values[lo] + (r - lo) * (sorted_values[hi] - sorted_values[lo])


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation; 0 for fewer than two values."""
    if len(values) <= 1:
        return 0.0
    mean = sum(values) / len(values)
    variance = sum((value - mean) ** 2 for value in values) / len(values)
    return math.sqrt(variance)


def interquartile_range(values: Sequence[float]) -> float:
    ordered = sorted(values)
    return percentile(ordered, 0.75) - percentile(ordered, 0.25)


def _season_weekly_points(
    store: LeagueDataStore,
    season_id: str,
    index: TeamOwnerIndex,
    diagnostics: Optional[DiagnosticLog],
) -> dict[str, list[float]]:
    meta = store.get_season_meta(season_id)
    season = store.get_season_weeks(season_id)
    points_by_owner: dict[str, list[float]] = {}

    for week in range(1, meta.regular_season_end_week + 1):
        week_data = season.get(week_key(week))
        if not week_data:
            continue

        for entry in week_data.values():
            team_name = entry.matchup.team1_name if entry.matchup else None
            key = normalize_team_name(team_name)
            owner = index.owner_by_team.get(key)
            if owner is None:
                if diagnostics is not None:
                    kind = (
                        DiagnosticKind.AMBIGUOUS_TEAM_MAPPING if key in index.ambiguous_teams
                        else DiagnosticKind.BLANK_TEAM_NAME if not key
                        else DiagnosticKind.UNRESOLVED_OWNER
                    )
                    diagnostics.report(
                        kind, season_id, week, key,
                        f'Could not map team "{team_name}" in season {season_id} week {week}',
                    )
                continue

            points = parse_score(entry.team1_totals.total_points) if entry.team1_totals else None
            if points is None:
                continue
            points_by_owner.setdefault(owner, []).append(points)

    return points_by_owner


def build_career_consistency_index(
    store: LeagueDataStore,
    diagnostics: Optional[DiagnosticLog] = None,
) -> list[OwnerConsistencyIndex]:
    """
    Average per-season weekly IQR and standard deviation for each owner.

    Weekly scores are mapped to owners through each season's standings;
    a season without standings contributes nothing.

    Returns:
        One row per owner with usable data, sorted by owner name
    """
    metrics_by_owner: dict[str, list[tuple[float, float]]] = {}

    for season_id in store.weekly_season_ids():
        if not report_missing_season_data(store, season_id, diagnostics):
            continue
        index = build_index_from_standings(store.get_standings(season_id)) or TeamOwnerIndex()
        points_by_owner = _season_weekly_points(store, season_id, index, diagnostics)

        for owner, points in points_by_owner.items():
            if not points:
                continue
            metrics_by_owner.setdefault(owner, []).append(
                (interquartile_range(points), standard_deviation(points))
            )

    rows = []
    for owner, seasons in sorted(metrics_by_owner.items()):
        count = len(seasons)
        rows.append(OwnerConsistencyIndex(
            owner_name=owner,
            seasons_included=count,
            average_season_iqr=sum(iqr for iqr, _ in seasons) / count,
            average_ppg_std_dev=sum(std for _, std in seasons) / count,
        ))
    return rows
