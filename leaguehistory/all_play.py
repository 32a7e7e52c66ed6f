"""All-play records: every team against every other team, every week."""

import logging
from typing import Optional

from .constants import SCORE_EPSILON
from .data_store import LeagueDataStore
from .diagnostics import DiagnosticKind, DiagnosticLog
from .identity import season_resolver
from .models import (
    AllPlayCareerRecordRow,
    PairRecord,
    RecordMatrix,
    TeamOwnerIndex,
    WeeklyAllPlayWins,
)
from .reconciliation import report_missing_season_data
from .utils import compare_scores, normalize_team_name, parse_score, week_number, win_pct

logger = logging.getLogger('leaguehistory.all_play')


def regular_season_week_keys(store: LeagueDataStore, season_id) -> list[tuple[int, str]]:
    """(week number, week key) pairs present in the data, regular season only."""
    meta = store.get_season_meta(season_id)
    if meta is None:
        return []
    weeks = []
    for key in store.get_week_keys(season_id):
        number = week_number(key)
        if number is not None and 1 <= number <= meta.regular_season_end_week:
            weeks.append((number, key))
    return weeks


def accumulate_pair_records(
    weekly_scores: list[dict[str, float]],
    keys: list[str],
    epsilon: float = SCORE_EPSILON,
) -> dict[tuple[str, str], PairRecord]:
    """
    Compare every ordered pair of distinct keys in every week both scored.

    The diagonal is always an empty record.
    """
    records = {(row, col): PairRecord() for row in keys for col in keys}
    for scores in weekly_scores:
        present = [key for key in keys if key in scores]
        for row in present:
            for col in present:
                if row == col:
                    continue
                records[(row, col)].add_result(compare_scores(scores[row], scores[col], epsilon))
    return records


def order_by_total_wins(
    keys: list[str],
    records: dict[tuple[str, str], PairRecord],
    display_by_key: dict[str, str],
) -> list[str]:
    """Keys ordered by total wins descending, then display name ascending."""
    def total_wins(key: str) -> int:
        return sum(records[(key, other)].wins for other in keys if other != key)

    return sorted(
        keys,
        key=lambda key: (-total_wins(key), display_by_key[key].lower(), display_by_key[key]),
    )


def build_all_play_matrix(
    store: LeagueDataStore,
    season_id,
    diagnostics: Optional[DiagnosticLog] = None,
    epsilon: float = SCORE_EPSILON,
) -> Optional[RecordMatrix]:
    """
    Build one season's all-play matrix, keyed by team name.

    Teams are identified by normalized display name and shown under the
    first spelling seen. If a team has two entries in the same week, the
    first one with a usable score counts.

    Args:
        store: League data
        season_id: Season to build
        diagnostics: Optional diagnostic log
        epsilon: Score tie tolerance

    Returns:
        RecordMatrix, or None when the season has no usable week
    """
    if not report_missing_season_data(store, season_id, diagnostics):
        return None

    season = store.get_season_weeks(season_id)
    weekly_scores: list[dict[str, float]] = []
    display_by_key: dict[str, str] = {}

    for number, key in regular_season_week_keys(store, season_id):
        scores: dict[str, float] = {}
        for entry in season[key].values():
            name = entry.matchup.team1_name if entry.matchup else None
            team_key = normalize_team_name(name)
            if not team_key:
                if diagnostics is not None:
                    diagnostics.report(
                        DiagnosticKind.BLANK_TEAM_NAME, season_id, number, '',
                        f'Skipped all-play entry in season {season_id} week {number}: missing team name',
                    )
                continue
            score = parse_score(entry.team1_totals.total_points) if entry.team1_totals else None
            if score is None or team_key in scores:
                continue
            scores[team_key] = score
            display_by_key.setdefault(team_key, str(name).strip())

        if scores:
            weekly_scores.append(scores)

    if not weekly_scores:
        return None

    keys = list(display_by_key)
    records = accumulate_pair_records(weekly_scores, keys, epsilon)
    ordered = order_by_total_wins(keys, records, display_by_key)

    return RecordMatrix(
        team_names=[display_by_key[key] for key in ordered],
        weeks_count=len(weekly_scores),
        records=records,
        key_by_name={display_by_key[key]: key for key in ordered},
        normalize_keys=True,
    )


def build_career_all_play_matrix(
    store: LeagueDataStore,
    career_index: TeamOwnerIndex,
    diagnostics: Optional[DiagnosticLog] = None,
    epsilon: float = SCORE_EPSILON,
) -> Optional[RecordMatrix]:
    """
    Build the all-time all-play matrix, keyed by owner.

    Each week of each season is compared independently. Owners are
    labelled 'Name (N)' where N is their number of seasons; lookups accept
    the label or the bare owner name.

    Returns:
        RecordMatrix, or None when no season has a usable week
    """
    season_ids = store.weekly_season_ids()
    if not season_ids:
        return None

    weekly_scores: list[dict[str, float]] = []
    seen_owners: dict[str, None] = {}

    for season_id in season_ids:
        if not report_missing_season_data(store, season_id, diagnostics):
            continue
        resolver = season_resolver(store, season_id, career_index, diagnostics)
        season = store.get_season_weeks(season_id)

        for number, key in regular_season_week_keys(store, season_id):
            scores: dict[str, float] = {}
            for entry in season[key].values():
                owner = resolver.resolve(number, entry.matchup.team1_name if entry.matchup else None)
                score = parse_score(entry.team1_totals.total_points) if entry.team1_totals else None
                if owner is None or score is None or owner in scores:
                    continue
                scores[owner] = score
                seen_owners.setdefault(owner, None)

            if scores:
                weekly_scores.append(scores)

    if not weekly_scores:
        return None

    keys = list(seen_owners)
    records = accumulate_pair_records(weekly_scores, keys, epsilon)
    ordered = order_by_total_wins(keys, records, {key: key for key in keys})

    labels = {}
    for owner_id in ordered:
        owner = store.get_owner(owner_id)
        seasons = (len(owner.active_seasons) or owner.seasons_played) if owner else 0
        labels[owner_id] = f'{owner_id} ({seasons})'

    return RecordMatrix(
        team_names=[labels[owner_id] for owner_id in ordered],
        weeks_count=len(weekly_scores),
        records=records,
        key_by_name={label: owner_id for owner_id, label in labels.items()},
    )


def weekly_all_play_wins(
    store: LeagueDataStore,
    season_id,
    epsilon: float = SCORE_EPSILON,
) -> Optional[WeeklyAllPlayWins]:
    """
    Opponents outscored by each team in each regular-season week, plus the running total.

    A team with no score in a week gets 0 wins for it and isn't counted as
    an opponent that week.
    """
    weeks = regular_season_week_keys(store, season_id)
    season = store.get_season_weeks(season_id)
    if not weeks or season is None:
        return None

    display_by_key: dict[str, str] = {}
    scores_by_week: list[dict[str, float]] = []
    for _, key in weeks:
        scores: dict[str, float] = {}
        for entry in season[key].values():
            name = entry.matchup.team1_name if entry.matchup else None
            team_key = normalize_team_name(name)
            if not team_key:
                continue
            display_by_key.setdefault(team_key, str(name).strip())
            score = parse_score(entry.team1_totals.total_points) if entry.team1_totals else None
            if score is not None and team_key not in scores:
                scores[team_key] = score
        scores_by_week.append(scores)

    result = WeeklyAllPlayWins(
        week_numbers=[number for number, _ in weeks],
        team_names=list(display_by_key.values()),
    )
    for team_key, name in display_by_key.items():
        running = 0
        weekly, cumulative = [], []
        for scores in scores_by_week:
            wins = 0
            if team_key in scores:
                wins = sum(
                    1 for other, score in scores.items()
                    if other != team_key and compare_scores(scores[team_key], score, epsilon) > 0
                )
            running += wins
            weekly.append(wins)
            cumulative.append(running)
        result.weekly_wins_by_team[name] = weekly
        result.cumulative_by_team[name] = cumulative

    return result


def seasons_with_weekly_data(store: LeagueDataStore) -> list[str]:
    """Seasons with metadata and at least one non-empty regular-season week."""
    included = []
    for season_id in store.weekly_season_ids():
        meta = store.get_season_meta(season_id)
        if meta is None:
            continue
        if any(store.get_week(season_id, week) for week in range(1, meta.regular_season_end_week + 1)):
            included.append(season_id)
    return included


def all_play_career_records(
    store: LeagueDataStore,
    matrix: Optional[RecordMatrix],
) -> list[AllPlayCareerRecordRow]:
    """
    Career all-play win % next to actual win %, over seasons with weekly data.

    Actual records come from the standings of those seasons only, so both
    percentages cover the same years.
    """
    if matrix is None:
        return []

    actual: dict[str, PairRecord] = {}
    for season_id in seasons_with_weekly_data(store):
        for entry in (store.get_standings(season_id) or {}).values():
            owner_name = entry.player_details.manager_name
            if not owner_name:
                continue
            record = actual.setdefault(owner_name, PairRecord())
            record.add(PairRecord(entry.record.win, entry.record.loss, entry.record.tie))

    rows = []
    for label in matrix.team_names:
        owner_name = matrix.key_by_name.get(label, label)
        all_play = matrix.get_total_record(label)
        if all_play.games == 0:
            continue
        record = actual.get(owner_name, PairRecord())
        rows.append(AllPlayCareerRecordRow(
            owner_name=owner_name,
            all_play_win_pct=win_pct(all_play.wins, all_play.losses, all_play.ties),
            actual_win_pct=win_pct(record.wins, record.losses, record.ties),
        ))

    return sorted(rows, key=lambda row: row.owner_name)
