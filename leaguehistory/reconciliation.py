"""Regular-season reconciliation of weekly matchups against season standings."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .constants import SCORE_EPSILON
from .data_store import LeagueDataStore
from .diagnostics import DiagnosticKind, DiagnosticLog
from .identity import OwnerResolver
from .models import DerivedSeasonTotals, OwnerRecordTotals
from .schemas import MatchupSummary
from .utils import compare_scores, normalize_team_name, parse_rank, parse_score, scores_equal, week_key

logger = logging.getLogger('leaguehistory.reconciliation')


def matchup_key(matchup: MatchupSummary) -> Optional[str]:
    """
    Key shared by both sides' entries for the same game.

    Uses the sorted pair of team ids, falling back to normalized team
    names where an id is absent.

    Returns:
        'left|right' key, or None when either side can't be identified
    """
    left = str(matchup.team1_id).strip() if matchup.team1_id is not None else ''
    right = str(matchup.team2_id).strip() if matchup.team2_id is not None else ''
    left = left or normalize_team_name(matchup.team1_name)
    right = right or normalize_team_name(matchup.team2_name)
    if not left or not right:
        return None
    return '|'.join(sorted((left, right)))


def report_missing_season_data(
    store: LeagueDataStore,
    season_id,
    diagnostics: Optional[DiagnosticLog],
) -> bool:
    """
    Report a season that lacks metadata or weekly data.

    Returns:
        True if the season can be replayed week by week
    """
    if store.get_season_meta(season_id) is None:
        if diagnostics is not None:
            diagnostics.report(
                DiagnosticKind.MISSING_SEASON_METADATA, season_id, None, '',
                f'Season {season_id} has no metadata; weekly data is not used',
            )
        return False
    if store.get_season_weeks(season_id) is None:
        if diagnostics is not None:
            diagnostics.report(
                DiagnosticKind.MISSING_WEEKLY_DATA, season_id, None, '',
                f'Season {season_id} has no weekly matchups; using standings only',
            )
        return False
    return True


def derive_season_totals(
    store: LeagueDataStore,
    season_id,
    resolver: OwnerResolver,
    diagnostics: Optional[DiagnosticLog] = None,
    epsilon: float = SCORE_EPSILON,
) -> DerivedSeasonTotals:
    """
    Replay a season's regular-season games into per-owner totals.

    Each scheduled game is counted once per week. A game is skipped if
    either score is unparsable, either side can't be resolved, or both
    sides resolve to the same owner. Every owner whose weekly score ties
    the week's best (or worst) resolved score gets a high (or low) points
    count.

    Args:
        store: League data
        season_id: Season to replay
        resolver: Owner resolver for this season
        diagnostics: Optional diagnostic log
        epsilon: Score tie tolerance

    Returns:
        DerivedSeasonTotals; has_regular_season_history is True iff at
        least one game was counted
    """
    result = DerivedSeasonTotals()
    if not report_missing_season_data(store, season_id, diagnostics):
        return result

    meta = store.get_season_meta(season_id)
    season = store.get_season_weeks(season_id)
    totals_by_owner = result.totals_by_owner

    for week in range(1, meta.regular_season_end_week + 1):
        week_data = season.get(week_key(week))
        if not week_data:
            continue

        weekly_scores: list[tuple[str, float]] = []
        seen_games: set[str] = set()

        for entry in week_data.values():
            matchup = entry.matchup

            owner = resolver.resolve(week, matchup.team1_name if matchup else None)
            score = parse_score(entry.team1_totals.total_points) if entry.team1_totals else None
            if owner is not None and score is not None:
                weekly_scores.append((owner, score))

            if matchup is None:
                continue
            game_key = matchup_key(matchup)
            if game_key is None or game_key in seen_games:
                continue
            seen_games.add(game_key)

            score1 = parse_score(matchup.team1_score)
            score2 = parse_score(matchup.team2_score)
            if score1 is None or score2 is None:
                continue

            owner1 = resolver.resolve(week, matchup.team1_name)
            owner2 = resolver.resolve(week, matchup.team2_name)
            if owner1 is None or owner2 is None or owner1 == owner2:
                continue

            result.games_counted += 1
            totals1 = totals_by_owner.setdefault(owner1, OwnerRecordTotals())
            totals2 = totals_by_owner.setdefault(owner2, OwnerRecordTotals())

            outcome = compare_scores(score1, score2, epsilon)
            if outcome > 0:
                totals1.wins += 1
                totals2.losses += 1
            elif outcome < 0:
                totals1.losses += 1
                totals2.wins += 1
            else:
                totals1.ties += 1
                totals2.ties += 1

            totals1.points_for += score1
            totals1.points_against += score2
            totals2.points_for += score2
            totals2.points_against += score1

        if weekly_scores:
            top_score = max(score for _, score in weekly_scores)
            low_score = min(score for _, score in weekly_scores)
            for owner, score in weekly_scores:
                totals = totals_by_owner.setdefault(owner, OwnerRecordTotals())
                if scores_equal(score, top_score, epsilon):
                    totals.high_points += 1
                if scores_equal(score, low_score, epsilon):
                    totals.low_points += 1

    result.has_regular_season_history = result.games_counted > 0
    logger.debug(
        f'Season {season_id}: replayed {result.games_counted} games for '
        f'{len(totals_by_owner)} owners'
    )
    return result


def fallback_season_totals(
    store: LeagueDataStore,
    season_id,
    resolver: OwnerResolver,
) -> dict[str, OwnerRecordTotals]:
    """
    Season totals taken directly from the standings, with no weekly replay.

    A playoff rank of 1 counts as a championship.
    """
    totals_by_owner: dict[str, OwnerRecordTotals] = {}
    standings = store.get_standings(season_id)
    if not standings:
        return totals_by_owner

    for entry in standings.values():
        owner = resolver.resolve(None, entry.player_details.team_name)
        if owner is None:
            continue

        totals = totals_by_owner.setdefault(owner, OwnerRecordTotals())
        totals.wins += entry.record.win
        totals.losses += entry.record.loss
        totals.ties += entry.record.tie
        if parse_rank(entry.ranks.playoff_rank) == 1:
            totals.championships += 1
        totals.high_points += entry.points.high_points
        totals.low_points += entry.points.low_points or 0
        totals.moves += entry.transactions.moves
        totals.trades += entry.transactions.trades
        totals.points_for += entry.points.points_for
        totals.points_against += entry.points.points_against

    return totals_by_owner


def compose_owner_season_totals(
    owner_id: str,
    derived: DerivedSeasonTotals,
    fallback: dict[str, OwnerRecordTotals],
) -> OwnerRecordTotals:
    """
    Final season totals for one owner.

    Weekly-derived totals win whenever the season has any weekly history
    and the owner appears in it; championships, moves and trades still come
    from the standings. Otherwise the standings totals are used, and an
    owner in neither source gets zeros.
    """
    totals = OwnerRecordTotals()
    fallback_totals = fallback.get(owner_id)

    if derived.has_regular_season_history and owner_id in derived.totals_by_owner:
        totals.add(derived.totals_by_owner[owner_id])
        if fallback_totals is not None:
            totals.add_standings_only(fallback_totals)
    elif fallback_totals is not None:
        totals.add(fallback_totals)

    return totals


@dataclass
class SeasonReconciliation:
    """Both sources for one season and the rule for combining them."""
    season_id: str
    derived: DerivedSeasonTotals
    fallback: dict[str, OwnerRecordTotals] = field(default_factory=dict)

    @property
    def has_regular_season_history(self) -> bool:
        return self.derived.has_regular_season_history

    def owner_ids(self) -> list[str]:
        return sorted(set(self.derived.totals_by_owner) | set(self.fallback))

    def owner_totals(self, owner_id: str) -> OwnerRecordTotals:
        return compose_owner_season_totals(owner_id, self.derived, self.fallback)

    def totals_by_owner(self) -> dict[str, OwnerRecordTotals]:
        return {owner_id: self.owner_totals(owner_id) for owner_id in self.owner_ids()}

    def record_mismatches(self) -> list[tuple[str, OwnerRecordTotals, OwnerRecordTotals]]:
        """Owners whose weekly-derived W/L/T disagrees with the standings."""
        if not self.has_regular_season_history:
            return []

        mismatches = []
        for owner_id, derived_totals in sorted(self.derived.totals_by_owner.items()):
            standings_totals = self.fallback.get(owner_id)
            if standings_totals is None:
                continue
            if not derived_totals.record_matches(
                standings_totals.wins, standings_totals.losses, standings_totals.ties
            ):
                mismatches.append((owner_id, derived_totals, standings_totals))
        return mismatches


def reconcile_season(
    store: LeagueDataStore,
    season_id,
    resolver: OwnerResolver,
    diagnostics: Optional[DiagnosticLog] = None,
    epsilon: float = SCORE_EPSILON,
) -> SeasonReconciliation:
    """Replay a season and pair it with its standings fallback."""
    return SeasonReconciliation(
        season_id=str(season_id),
        derived=derive_season_totals(store, season_id, resolver, diagnostics, epsilon),
        fallback=fallback_season_totals(store, season_id, resolver),
    )


def owner_has_complete_history(
    owner_id: str,
    active_seasons,
    reconciliations: dict[str, SeasonReconciliation],
) -> bool:
    """
    Check that every active season of an owner was replayed from weekly data.

    An owner with no active seasons trivially has complete history.
    """
    for season in active_seasons:
        reconciliation = reconciliations.get(str(season))
        if reconciliation is None or not reconciliation.has_regular_season_history:
            return False
        if owner_id not in reconciliation.derived.totals_by_owner:
            return False
    return True


def report_season_mismatches(
    reconciliation: SeasonReconciliation,
    is_complete,
    diagnostics: Optional[DiagnosticLog],
) -> int:
    """
    Report season W/L/T disagreements for owners with complete weekly history.

    Args:
        reconciliation: Season to check
        is_complete: Callable owner_id -> bool
        diagnostics: Diagnostic log to report into

    Returns:
        Number of mismatches found (reported or not)
    """
    found = 0
    for owner_id, derived_totals, standings_totals in reconciliation.record_mismatches():
        if not is_complete(owner_id):
            continue
        found += 1
        if diagnostics is not None:
            derived_record = f'{derived_totals.wins}-{derived_totals.losses}-{derived_totals.ties}'
            standings_record = (
                f'{standings_totals.wins}-{standings_totals.losses}-{standings_totals.ties}'
            )
            diagnostics.report(
                DiagnosticKind.WINS_MISMATCH, reconciliation.season_id, None,
                f'{owner_id}|{derived_record}|{standings_record}',
                f'Season {reconciliation.season_id} record mismatch for {owner_id} '
                f'(weekly={derived_record}, standings={standings_record}); keeping weekly',
            )
    return found
