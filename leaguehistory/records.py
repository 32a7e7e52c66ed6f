"""All-time records, timelines, single-game/season bests and season trends."""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from .constants import (
    DEFAULT_RECORDS_LIMIT,
    MARGIN_BIN_WIDTH,
    PYTHAGOREAN_EXPONENT,
    SCORE_EPSILON,
    STARTER_SLOT,
)
from .data_store import LeagueDataStore
from .diagnostics import DiagnosticKind, DiagnosticLog
from .identity import OwnerResolver, season_resolver
from .models import (
    AllTimeRecordRow,
    ChampionTimelineEntry,
    HighLowPoints,
    MarginBin,
    OwnerRecordTotals,
    PointsScatter,
    PowerRankingRow,
    ScatterPoint,
    SeasonHighPointsEntry,
    StarterSeasonRecord,
    StarterSingleGameRecord,
    TeamOwnerIndex,
    WinPctOverTime,
    WinPctPoint,
    WinPctSeries,
)
from .pythagorean import calculate_expected_wins
from .reconciliation import (
    SeasonReconciliation,
    matchup_key,
    owner_has_complete_history,
    reconcile_season,
    report_season_mismatches,
)
from .schemas import SeasonStandingsEntry
from .utils import (
    compare_scores,
    normalize_team_name,
    parse_rank,
    parse_score,
    scores_equal,
    sorted_season_ids,
    week_key,
    week_number,
    win_pct,
)

logger = logging.getLogger('leaguehistory.records')


@dataclass(frozen=True)
class ColumnDef:
    """Display column for a records table."""
    key: str
    header: str
    width: int
    format: Optional[str] = None


# Formats: integer, percent2, decimal2, signedDecimal2, smartDecimal2
RECORDS_COLUMNS = (
    ColumnDef('owner_name', 'Owner Name', 22),
    ColumnDef('total_seasons', 'Seasons', 8, 'integer'),
    ColumnDef('wins', 'W', 6, 'integer'),
    ColumnDef('losses', 'L', 6, 'integer'),
    ColumnDef('ties', 'T', 6, 'integer'),
    ColumnDef('all_play_wins', 'All-Play W', 10, 'integer'),
    ColumnDef('all_play_losses', 'All-Play L', 10, 'integer'),
    ColumnDef('all_play_win_pct', 'All-Play Win %', 13, 'percent2'),
    ColumnDef('championships', 'Champs', 8, 'integer'),
    ColumnDef('gp', 'GP', 6, 'integer'),
    ColumnDef('win_pct', 'Win Pct%', 10, 'percent2'),
    ColumnDef('points_for', 'PF', 12, 'decimal2'),
    ColumnDef('avg_points_per_season', 'Avg Pts/Season', 13, 'decimal2'),
    ColumnDef('points_against', 'PA', 12, 'decimal2'),
    ColumnDef('points_diff', 'Diff', 12, 'signedDecimal2'),
    ColumnDef('ppg_avg', 'PPG Avg', 10, 'decimal2'),
    ColumnDef('high_points', 'High Pts', 9, 'smartDecimal2'),
    ColumnDef('low_points', 'Low Pts', 9, 'smartDecimal2'),
    ColumnDef('moves', 'Moves', 7, 'integer'),
    ColumnDef('trades', 'Trades', 7, 'integer'),
)


def _season_year(season_id) -> int:
    return parse_rank(season_id) or 0


def add_all_play_totals(
    store: LeagueDataStore,
    season_id,
    resolver: OwnerResolver,
    totals_by_owner: dict[str, OwnerRecordTotals],
    epsilon: float = SCORE_EPSILON,
) -> None:
    """
    Add a season's all-play wins/losses/ties into totals_by_owner.

    Weeks with fewer than two resolved scores are skipped.
    """
    meta = store.get_season_meta(season_id)
    season = store.get_season_weeks(season_id)
    if meta is None or season is None:
        return

    for week in range(1, meta.regular_season_end_week + 1):
        week_data = season.get(week_key(week))
        if not week_data:
            continue

        owner_scores: dict[str, float] = {}
        for entry in week_data.values():
            owner = resolver.resolve(week, entry.matchup.team1_name if entry.matchup else None)
            score = parse_score(entry.team1_totals.total_points) if entry.team1_totals else None
            if owner is None or score is None or owner in owner_scores:
                continue
            owner_scores[owner] = score

        if len(owner_scores) < 2:
            continue

        for owner, score in owner_scores.items():
            totals = totals_by_owner.setdefault(owner, OwnerRecordTotals())
            for opponent, opponent_score in owner_scores.items():
                if opponent == owner:
                    continue
                outcome = compare_scores(score, opponent_score, epsilon)
                if outcome > 0:
                    totals.all_play_wins += 1
                elif outcome < 0:
                    totals.all_play_losses += 1
                else:
                    totals.all_play_ties += 1


def reconcile_all_seasons(
    store: LeagueDataStore,
    career_index: TeamOwnerIndex,
    diagnostics: Optional[DiagnosticLog] = None,
    epsilon: float = SCORE_EPSILON,
) -> dict[str, SeasonReconciliation]:
    """Reconcile every season found in standings or weekly data, oldest first."""
    return {
        season_id: reconcile_season(
            store,
            season_id,
            season_resolver(store, season_id, career_index, diagnostics),
            diagnostics,
            epsilon,
        )
        for season_id in store.all_season_ids()
    }


def _build_row(owner, totals: OwnerRecordTotals) -> AllTimeRecordRow:
    total_seasons = len(owner.active_seasons) or owner.seasons_played or 0
    gp = totals.games
    return AllTimeRecordRow(
        owner_name=owner.manager_name,
        total_seasons=total_seasons,
        wins=totals.wins,
        losses=totals.losses,
        ties=totals.ties,
        all_play_wins=totals.all_play_wins,
        all_play_losses=totals.all_play_losses,
        all_play_win_pct=win_pct(totals.all_play_wins, totals.all_play_losses, totals.all_play_ties),
        championships=totals.championships,
        high_points=totals.high_points,
        low_points=totals.low_points,
        moves=totals.moves,
        trades=totals.trades,
        points_for=totals.points_for,
        avg_points_per_season=totals.points_for / total_seasons if total_seasons > 0 else 0.0,
        points_against=totals.points_against,
        points_diff=totals.points_for - totals.points_against,
        gp=gp,
        win_pct=win_pct(totals.wins, totals.losses, totals.ties),
        ppg_avg=totals.points_for / gp if gp > 0 else 0.0,
    )


def to_all_time_records_table(
    store: LeagueDataStore,
    career_index: TeamOwnerIndex,
    diagnostics: Optional[DiagnosticLog] = None,
    epsilon: float = SCORE_EPSILON,
    reconciliations: Optional[dict[str, SeasonReconciliation]] = None,
) -> list[AllTimeRecordRow]:
    """
    Career totals for every roster owner.

    Each season contributes its reconciled totals (weekly replay when
    available, standings otherwise) plus all-play totals from its weekly
    scores. Owners whose every active season was replayed from weekly data
    are cross-checked against their roster W/L/T; disagreements are
    reported, never corrected.

    Args:
        store: League data
        career_index: Career fallback index
        diagnostics: Optional diagnostic log
        epsilon: Score tie tolerance
        reconciliations: Pre-built season reconciliations to reuse

    Returns:
        Rows sorted by wins desc, losses asc, ties desc, owner name asc
    """
    owners = store.owners()
    if not owners:
        return []

    if reconciliations is None:
        reconciliations = reconcile_all_seasons(store, career_index, diagnostics, epsilon)

    complete = {
        owner.manager_name: owner_has_complete_history(
            owner.manager_name, owner.active_seasons, reconciliations
        )
        for owner in owners
    }

    all_time = {owner.manager_name: OwnerRecordTotals() for owner in owners}
    for season_id, reconciliation in reconciliations.items():
        for owner_id, totals in all_time.items():
            totals.add(reconciliation.owner_totals(owner_id))

        report_season_mismatches(
            reconciliation, lambda owner_id: complete.get(owner_id, False), diagnostics
        )

        all_play: dict[str, OwnerRecordTotals] = {}
        resolver = season_resolver(store, season_id, career_index, diagnostics)
        add_all_play_totals(store, season_id, resolver, all_play, epsilon)
        for owner_id, totals in all_play.items():
            if owner_id in all_time:
                all_time[owner_id].add(totals)

    rows = [_build_row(owner, all_time[owner.manager_name]) for owner in owners]
    rows.sort(key=lambda row: (-row.wins, row.losses, -row.ties, row.owner_name))

    for owner in owners:
        if not complete[owner.manager_name]:
            continue
        totals = all_time[owner.manager_name]
        if totals.record_matches(owner.wins, owner.losses, owner.ties):
            continue
        derived_record = f'{totals.wins}-{totals.losses}-{totals.ties}'
        roster_record = f'{owner.wins}-{owner.losses}-{owner.ties}'
        if diagnostics is not None:
            diagnostics.report(
                DiagnosticKind.WINS_MISMATCH, 'career', None,
                f'{owner.manager_name}|{derived_record}|{roster_record}',
                f'Owner totals mismatch for {owner.manager_name} '
                f'(derived={derived_record}, owners={roster_record})',
            )

    return rows


def champions_timeline(store: LeagueDataStore) -> list[ChampionTimelineEntry]:
    """Every season's champion (playoff rank 1), newest season first."""
    rows = []
    for season_id in store.standings_season_ids():
        champions = [
            ChampionTimelineEntry(
                year=season_id,
                owner_name=entry.player_details.manager_name or 'Unknown Owner',
                team_name=entry.player_details.team_name or 'Unknown Team',
            )
            for entry in store.get_standings(season_id).values()
            if parse_rank(entry.ranks.playoff_rank) == 1
        ]
        rows.extend(sorted(champions, key=lambda row: row.owner_name))
    return rows


def season_high_points_timeline(
    store: LeagueDataStore,
    epsilon: float = SCORE_EPSILON,
) -> list[SeasonHighPointsEntry]:
    """Each season's top points-for owner(s), newest season first. Ties are all listed."""
    rows = []
    for season_id in store.standings_season_ids():
        entries = list(store.get_standings(season_id).values())
        if not entries:
            continue
        top_points = max(entry.points.points_for for entry in entries)
        leaders = [
            SeasonHighPointsEntry(
                year=season_id,
                points=top_points,
                owner_name=entry.player_details.manager_name or 'Unknown Owner',
            )
            for entry in entries
            if scores_equal(entry.points.points_for, top_points, epsilon)
        ]
        rows.extend(sorted(leaders, key=lambda row: row.owner_name))
    return rows


def _iter_starters(
    store: LeagueDataStore,
    career_index: TeamOwnerIndex,
    diagnostics: Optional[DiagnosticLog],
):
    """Yield (owner, entry, season id, week number, starter) for every resolvable starter."""
    for season_id in store.weekly_season_ids():
        season = store.get_season_weeks(season_id)
        resolver = season_resolver(store, season_id, career_index, diagnostics)
        for key in store.get_week_keys(season_id):
            number = week_number(key)
            for entry in season[key].values():
                owner = resolver.resolve(number, entry.matchup.team1_name if entry.matchup else None)
                if owner is None:
                    continue
                for player in entry.team1_roster:
                    if player.slot == STARTER_SLOT:
                        yield owner, entry, season_id, number, player


def top_starter_single_game_records(
    store: LeagueDataStore,
    career_index: TeamOwnerIndex,
    limit: int = DEFAULT_RECORDS_LIMIT,
    diagnostics: Optional[DiagnosticLog] = None,
) -> list[StarterSingleGameRecord]:
    """Highest single-week scores by a started player."""
    rows = [
        StarterSingleGameRecord(
            owner_name=owner,
            player_name=player.player_name,
            points=player.points,
            year=entry.season if entry.season is not None else _season_year(season_id),
            week=entry.week if entry.week is not None else (number or 0),
        )
        for owner, entry, season_id, number, player in _iter_starters(store, career_index, diagnostics)
    ]
    rows.sort(key=lambda r: (-r.points, -r.year, -r.week, r.owner_name, r.player_name))
    return rows[:limit]


def top_starter_season_records(
    store: LeagueDataStore,
    career_index: TeamOwnerIndex,
    limit: int = DEFAULT_RECORDS_LIMIT,
    diagnostics: Optional[DiagnosticLog] = None,
) -> list[StarterSeasonRecord]:
    """Highest season totals by one player while started for one owner."""
    totals: dict[tuple[int, str, str], StarterSeasonRecord] = {}
    for owner, entry, season_id, _, player in _iter_starters(store, career_index, diagnostics):
        year = entry.season if entry.season is not None else _season_year(season_id)
        key = (year, owner, str(player.player_id))
        if key in totals:
            totals[key].points += player.points
        else:
            totals[key] = StarterSeasonRecord(
                owner_name=owner,
                player_name=player.player_name,
                points=player.points,
                year=year,
            )

    rows = sorted(totals.values(), key=lambda r: (-r.points, -r.year, r.owner_name, r.player_name))
    return rows[:limit]


def _competition_ranks(ordered_ids: list[str], values: dict[str, tuple]) -> dict[str, int]:
    ranks: dict[str, int] = {}
    current_rank = 0
    last = None
    for position, owner_id in enumerate(ordered_ids, start=1):
        if last is None or values[owner_id] != last:
            current_rank = position
            last = values[owner_id]
        ranks[owner_id] = current_rank
    return ranks


def season_power_rankings(
    standings: Optional[dict[str, SeasonStandingsEntry]],
) -> list[PowerRankingRow]:
    """
    Rank a season by playoff rank + regular-season rank + points-for rank.

    A blank regular-season rank is derived from wins, then points for.
    Rows without a playoff rank have no total and sort last.
    """
    if not standings:
        return []

    base = {}
    for owner_id, entry in standings.items():
        team_name = (entry.player_details.team_name or '').strip() or 'Unknown Team'
        base[owner_id] = (entry, team_name)

    points = {owner_id: (entry.points.points_for,) for owner_id, (entry, _) in base.items()}
    by_points = sorted(base, key=lambda owner_id: -points[owner_id][0])
    points_ranks = _competition_ranks(by_points, points)

    records = {
        owner_id: (entry.record.win, entry.points.points_for)
        for owner_id, (entry, _) in base.items()
    }
    by_record = sorted(base, key=lambda owner_id: (-records[owner_id][0], -records[owner_id][1]))
    record_ranks = _competition_ranks(by_record, records)

    rows = []
    for owner_id, (entry, team_name) in base.items():
        playoff_rank = parse_rank(entry.ranks.playoff_rank)
        regular_season_rank = parse_rank(entry.ranks.regular_season_rank)
        if regular_season_rank is None:
            regular_season_rank = record_ranks[owner_id]
        points_for_rank = points_ranks[owner_id]
        total = (
            playoff_rank + regular_season_rank + points_for_rank
            if playoff_rank is not None else None
        )
        rows.append(PowerRankingRow(
            owner_id=owner_id,
            team_name=team_name,
            manager_name=entry.player_details.manager_name or '',
            wins=entry.record.win,
            playoff_rank=playoff_rank,
            regular_season_rank=regular_season_rank,
            points_for=entry.points.points_for,
            points_for_rank=points_for_rank,
            total=total,
        ))

    def nullable(value):
        return (value is None, value if value is not None else 0)

    rows.sort(key=lambda r: (
        nullable(r.total),
        nullable(r.playoff_rank),
        nullable(r.regular_season_rank),
        r.points_for_rank,
        r.team_name,
    ))
    return rows


def margin_of_victory_distribution(
    store: LeagueDataStore,
    season_id,
    bin_width: int = MARGIN_BIN_WIDTH,
) -> Optional[list[MarginBin]]:
    """
    Histogram of regular-season winning margins for one season.

    Returns:
        Bins of bin_width points (the last one open-ended when it runs past
        the largest margin), [] when no game has scores, None without metadata
    """
    meta = store.get_season_meta(season_id)
    if meta is None:
        return None

    margins = []
    for week in range(1, meta.regular_season_end_week + 1):
        week_data = store.get_week(season_id, week)
        if not week_data:
            continue
        seen_games: set[str] = set()
        for entry in week_data.values():
            if entry.matchup is None:
                continue
            game_key = matchup_key(entry.matchup)
            if game_key is None or game_key in seen_games:
                continue
            seen_games.add(game_key)
            score1 = parse_score(entry.matchup.team1_score)
            score2 = parse_score(entry.matchup.team2_score)
            if score1 is None or score2 is None:
                continue
            margins.append(abs(score1 - score2))

    if not margins:
        return []

    max_margin = max(margins)
    bin_count = max(1, math.ceil((max_margin + 1) / bin_width))
    counts = [0] * bin_count
    for margin in margins:
        counts[min(int(margin // bin_width), bin_count - 1)] += 1

    bins = []
    for i, count in enumerate(counts):
        low = i * bin_width
        high = low + bin_width
        open_ended = i == bin_count - 1 and high > max_margin
        bins.append(MarginBin(
            label=f'{low}+' if open_ended else f'{low}-{high}',
            min=low,
            max=high,
            count=count,
        ))
    return bins


def win_pct_over_time(store: LeagueDataStore) -> Optional[WinPctOverTime]:
    """
    Season-by-season win % per owner from the standings, oldest season first.

    Each point carries the season's own record and the owner's running
    career record through that season. Owners are listed by name; seasons
    an owner missed hold None.
    """
    seasons = [
        season_id for season_id in sorted_season_ids(store.standings_season_ids())
        if parse_rank(season_id) is not None
    ]
    owner_names = sorted({
        entry.player_details.manager_name
        for season_id in seasons
        for entry in store.get_standings(season_id).values()
        if entry.player_details.manager_name
    })
    if not seasons or not owner_names:
        return None

    points_by_owner: dict[str, list[Optional[WinPctPoint]]] = {
        name: [None] * len(seasons) for name in owner_names
    }
    career = {name: [0, 0, 0] for name in owner_names}

    for position, season_id in enumerate(seasons):
        for entry in store.get_standings(season_id).values():
            name = entry.player_details.manager_name
            if not name:
                continue
            record = entry.record
            running = career[name]
            running[0] += record.win
            running[1] += record.loss
            running[2] += record.tie
            points_by_owner[name][position] = WinPctPoint(
                season=parse_rank(season_id),
                wins=record.win,
                losses=record.loss,
                ties=record.tie,
                win_pct=win_pct(record.win, record.loss, record.tie),
                career_wins=running[0],
                career_losses=running[1],
                career_ties=running[2],
                career_win_pct=win_pct(*running),
            )

    return WinPctOverTime(
        seasons=[parse_rank(season_id) for season_id in seasons],
        series=[WinPctSeries(name, points_by_owner[name]) for name in owner_names],
    )


def _regular_season_scores(store: LeagueDataStore, season_id):
    """Yield (entry, score) for every parsable regular-season weekly total."""
    meta = store.get_season_meta(season_id)
    if meta is None:
        return
    for week in range(1, meta.regular_season_end_week + 1):
        for entry in (store.get_week(season_id, week) or {}).values():
            score = parse_score(entry.team1_totals.total_points) if entry.team1_totals else None
            if score is not None:
                yield entry, score


def season_high_low_points(store: LeagueDataStore) -> list[HighLowPoints]:
    """Lowest and highest regular-season weekly team score of every season, oldest first."""
    rows = []
    for season_id in sorted_season_ids(store.weekly_season_ids()):
        scores = [score for _, score in _regular_season_scores(store, season_id)]
        if scores:
            rows.append(HighLowPoints(label=season_id, min_points=min(scores), max_points=max(scores)))
    return rows


def team_high_low_points(store: LeagueDataStore, season_id) -> Optional[list[HighLowPoints]]:
    """
    Each team's lowest and highest regular-season weekly score in one season.

    Team names are matched after normalization and shown with their first
    spelling. Entries with a blank team name are skipped.

    Returns:
        Rows sorted by team name, or None without metadata or weekly data
    """
    if store.get_season_meta(season_id) is None or store.get_season_weeks(season_id) is None:
        return None

    bounds: dict[str, HighLowPoints] = {}
    for entry, score in _regular_season_scores(store, season_id):
        team_name = (entry.matchup.team1_name or '').strip() if entry.matchup else ''
        key = normalize_team_name(team_name)
        if not key:
            continue
        found = bounds.get(key)
        if found is None:
            bounds[key] = HighLowPoints(label=team_name, min_points=score, max_points=score)
        else:
            found.min_points = min(found.min_points, score)
            found.max_points = max(found.max_points, score)

    return sorted(bounds.values(), key=lambda row: row.label)


def _scatter(rows: list[ScatterPoint]) -> Optional[PointsScatter]:
    if not rows:
        return None
    return PointsScatter(
        points=rows,
        avg_points_for=sum(row.points_for for row in rows) / len(rows),
        avg_points_against=sum(row.points_against for row in rows) / len(rows),
    )


def _scatter_point(name, points_for, points_against, wins, games, exponent) -> ScatterPoint:
    expected = calculate_expected_wins(points_for, points_against, games, exponent)
    return ScatterPoint(
        name=name,
        points_for=points_for,
        points_against=points_against,
        expected_wins=expected,
        actual_wins=wins,
        luck=wins - expected,
    )


def season_points_scatter(
    store: LeagueDataStore,
    season_id,
    exponent: float = PYTHAGOREAN_EXPONENT,
) -> Optional[PointsScatter]:
    """Points for vs against per team in one season's standings, by team name."""
    rows = []
    for entry in (store.get_standings(season_id) or {}).values():
        record = entry.record
        rows.append(_scatter_point(
            (entry.player_details.team_name or '').strip() or 'Unknown Team',
            entry.points.points_for,
            entry.points.points_against,
            record.win,
            record.win + record.loss + record.tie,
            exponent,
        ))
    return _scatter(sorted(rows, key=lambda row: row.name))


def career_points_scatter(
    store: LeagueDataStore,
    exponent: float = PYTHAGOREAN_EXPONENT,
) -> Optional[PointsScatter]:
    """
    Career points for vs against per owner, summed over every standings season.

    Expected wins come from the career point totals, not from summing
    per-season values as career luck does.
    """
    totals: dict[str, OwnerRecordTotals] = {}
    for season_id in store.standings_season_ids():
        for entry in store.get_standings(season_id).values():
            name = entry.player_details.manager_name
            if not name:
                continue
            current = totals.setdefault(name, OwnerRecordTotals())
            current.wins += entry.record.win
            current.losses += entry.record.loss
            current.ties += entry.record.tie
            current.points_for += entry.points.points_for
            current.points_against += entry.points.points_against

    return _scatter([
        _scatter_point(name, t.points_for, t.points_against, t.wins, t.games, exponent)
        for name, t in sorted(totals.items())
    ])
