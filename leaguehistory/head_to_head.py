"""Head-to-head records from scheduled games only."""

import logging
from typing import Optional

from .constants import SCORE_EPSILON
from .data_store import LeagueDataStore
from .diagnostics import DiagnosticLog
from .identity import season_resolver
from .models import PairRecord, RecordMatrix, TeamOwnerIndex
from .reconciliation import matchup_key, report_missing_season_data
from .utils import compare_scores, parse_score, week_key

logger = logging.getLogger('leaguehistory.head_to_head')


def build_head_to_head_matrix(
    store: LeagueDataStore,
    career_index: TeamOwnerIndex,
    diagnostics: Optional[DiagnosticLog] = None,
    epsilon: float = SCORE_EPSILON,
) -> Optional[RecordMatrix]:
    """
    Build the all-time head-to-head matrix between owners.

    Every regular-season game is counted once per week, whichever side's
    entry is seen first. Team names are resolved with the season's
    standings index when the season has standings, else with the career
    index. Games with an unresolved side, a self-pairing or an
    unparsable score are skipped.

    Args:
        store: League data
        career_index: Career fallback index
        diagnostics: Optional diagnostic log
        epsilon: Score tie tolerance

    Returns:
        RecordMatrix over every roster owner in name order, or None when
        there are no owners or no weekly data
    """
    owner_names = sorted(owner.manager_name for owner in store.owners())
    season_ids = store.weekly_season_ids()
    if not owner_names or not season_ids:
        return None

    records = {(row, col): PairRecord() for row in owner_names for col in owner_names}
    weeks_count = 0
    games_count = 0

    for season_id in season_ids:
        if not report_missing_season_data(store, season_id, diagnostics):
            continue
        meta = store.get_season_meta(season_id)
        season = store.get_season_weeks(season_id)
        resolver = season_resolver(store, season_id, career_index, diagnostics)

        for week in range(1, meta.regular_season_end_week + 1):
            week_data = season.get(week_key(week))
            if not week_data:
                continue

            seen_games: set[str] = set()
            counted_any = False

            for entry in week_data.values():
                matchup = entry.matchup
                if matchup is None:
                    continue
                game_key = matchup_key(matchup)
                if game_key is None or game_key in seen_games:
                    continue
                seen_games.add(game_key)

                owner1 = resolver.resolve(week, matchup.team1_name)
                owner2 = resolver.resolve(week, matchup.team2_name)
                if owner1 is None or owner2 is None or owner1 == owner2:
                    continue

                score1 = parse_score(matchup.team1_score)
                score2 = parse_score(matchup.team2_score)
                if score1 is None or score2 is None:
                    continue

                outcome = compare_scores(score1, score2, epsilon)
                records.setdefault((owner1, owner2), PairRecord()).add_result(outcome)
                records.setdefault((owner2, owner1), PairRecord()).add_result(-outcome)
                counted_any = True
                games_count += 1

            if counted_any:
                weeks_count += 1

    logger.debug(f'Head-to-head: {games_count} games over {weeks_count} weeks')
    return RecordMatrix(team_names=owner_names, weeks_count=weeks_count, records=records)
