"""Query facade over league history with memoized derived results."""

import logging
from pathlib import Path
from typing import Optional

from . import all_play, consistency, head_to_head, pythagorean, records, reconciliation, validators
from .cache import derived
from .config import (
    get_data_dir,
    get_data_files,
    get_league_name,
    get_pythagorean_exponent,
    get_records_limit,
    get_score_epsilon,
)
from .constants import (
    ALL_SOURCES,
    DEFAULT_RECORDS_LIMIT,
    PYTHAGOREAN_EXPONENT,
    SCORE_EPSILON,
    SOURCE_METADATA,
    SOURCE_OWNERS,
    SOURCE_STANDINGS,
    SOURCE_WEEKLY,
)
from .data_store import LeagueDataStore
from .diagnostics import DiagnosticLog
from .identity import OwnerResolver, build_index_from_owners, build_index_from_standings
from .models import (
    AllPlayCareerRecordRow,
    AllTimeRecordRow,
    ChampionTimelineEntry,
    DerivedSeasonTotals,
    HighLowPoints,
    LuckRow,
    MarginBin,
    OwnerConsistencyIndex,
    OwnerRecordTotals,
    PointsScatter,
    PowerRankingRow,
    RecordMatrix,
    SeasonHighPointsEntry,
    StarterSeasonRecord,
    StarterSingleGameRecord,
    TeamOwnerIndex,
    WeeklyAllPlayWins,
    WinPctOverTime,
)

logger = logging.getLogger('leaguehistory.league')

WEEKLY_SOURCES = (SOURCE_WEEKLY, SOURCE_METADATA)


class LeagueHistory:
    """
    Read-only queries over one league's history.

    Every derived result is cached until one of the store sources it
    reads is replaced, then rebuilt from scratch. Diagnostics are shared
    for the life of the object, so a rebuild never repeats a warning.

    Example:
        history = LeagueHistory.from_directory('data')
        for row in history.all_time_records():
            print(row.owner_name, row.wins, row.losses)
    """

    def __init__(
        self,
        store: LeagueDataStore,
        diagnostics: Optional[DiagnosticLog] = None,
        epsilon: float = SCORE_EPSILON,
        exponent: float = PYTHAGOREAN_EXPONENT,
        records_limit: int = DEFAULT_RECORDS_LIMIT,
    ):
        self.store = store
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self.epsilon = epsilon
        self.exponent = exponent
        self.records_limit = records_limit

    @classmethod
    def from_directory(cls, data_dir: Optional[Path | str] = None) -> 'LeagueHistory':
        """
        Load league data using configured file names and tolerances.

        Args:
            data_dir: Data directory (default: configured data_dir)
        """
        data_dir = Path(data_dir) if data_dir else get_data_dir()
        store = LeagueDataStore.from_directory(data_dir, files=get_data_files())
        logger.info(f'Building history for {get_league_name()} from {data_dir}')
        return cls(
            store,
            epsilon=get_score_epsilon(),
            exponent=get_pythagorean_exponent(),
            records_limit=get_records_limit(),
        )

    # Identity

    @derived(SOURCE_OWNERS)
    def career_index(self) -> TeamOwnerIndex:
        return build_index_from_owners(self.store.owners())

    @derived(SOURCE_STANDINGS)
    def season_index(self, season_id) -> Optional[TeamOwnerIndex]:
        return build_index_from_standings(self.store.get_standings(season_id))

    def resolver(self, season_id) -> OwnerResolver:
        return OwnerResolver(
            season_id, self.career_index(), self.season_index(str(season_id)), self.diagnostics
        )

    def resolve_owner(self, season_id, week: Optional[int], team_name) -> Optional[str]:
        """Owner id for a team name in a season, or None if it can't be resolved safely."""
        return self.resolver(season_id).resolve(week, team_name)

    # Reconciliation

    @derived(*ALL_SOURCES)
    def reconciliations(self) -> dict[str, reconciliation.SeasonReconciliation]:
        return records.reconcile_all_seasons(
            self.store, self.career_index(), self.diagnostics, self.epsilon
        )

    def derive_season_totals(self, season_id) -> DerivedSeasonTotals:
        """Weekly-replayed totals for a season (empty when there is no weekly history)."""
        found = self.reconciliations().get(str(season_id))
        return found.derived if found else DerivedSeasonTotals()

    def season_totals(self, season_id) -> dict[str, OwnerRecordTotals]:
        """Final per-owner totals for a season: weekly replay when present, standings otherwise."""
        found = self.reconciliations().get(str(season_id))
        return found.totals_by_owner() if found else {}

    # Matrices

    @derived(*WEEKLY_SOURCES)
    def all_play_matrix(self, season_id) -> Optional[RecordMatrix]:
        return all_play.build_all_play_matrix(self.store, season_id, self.diagnostics, self.epsilon)

    @derived(*ALL_SOURCES)
    def career_all_play_matrix(self) -> Optional[RecordMatrix]:
        return all_play.build_career_all_play_matrix(
            self.store, self.career_index(), self.diagnostics, self.epsilon
        )

    @derived(*ALL_SOURCES)
    def head_to_head_matrix(self) -> Optional[RecordMatrix]:
        return head_to_head.build_head_to_head_matrix(
            self.store, self.career_index(), self.diagnostics, self.epsilon
        )

    @derived(*WEEKLY_SOURCES)
    def weekly_all_play_wins(self, season_id) -> Optional[WeeklyAllPlayWins]:
        return all_play.weekly_all_play_wins(self.store, season_id, self.epsilon)

    def all_play_career_records(self) -> list[AllPlayCareerRecordRow]:
        return all_play.all_play_career_records(self.store, self.career_all_play_matrix())

    # Records

    @derived(*ALL_SOURCES)
    def all_time_records(self) -> list[AllTimeRecordRow]:
        return records.to_all_time_records_table(
            self.store,
            self.career_index(),
            self.diagnostics,
            self.epsilon,
            reconciliations=self.reconciliations(),
        )

    @derived(SOURCE_STANDINGS)
    def champions_timeline(self) -> list[ChampionTimelineEntry]:
        return records.champions_timeline(self.store)

    @derived(SOURCE_STANDINGS)
    def season_high_points_timeline(self) -> list[SeasonHighPointsEntry]:
        return records.season_high_points_timeline(self.store, self.epsilon)

    @derived(*ALL_SOURCES)
    def top_starter_single_game_records(self, limit: Optional[int] = None) -> list[StarterSingleGameRecord]:
        if limit is None:
            limit = self.records_limit
        return records.top_starter_single_game_records(self.store, self.career_index(), limit, self.diagnostics)

    @derived(*ALL_SOURCES)
    def top_starter_season_records(self, limit: Optional[int] = None) -> list[StarterSeasonRecord]:
        if limit is None:
            limit = self.records_limit
        return records.top_starter_season_records(self.store, self.career_index(), limit, self.diagnostics)

    @derived(SOURCE_STANDINGS)
    def season_power_rankings(self, season_id) -> list[PowerRankingRow]:
        return records.season_power_rankings(self.store.get_standings(season_id))

    @derived(*WEEKLY_SOURCES)
    def margin_of_victory_distribution(self, season_id) -> Optional[list[MarginBin]]:
        return records.margin_of_victory_distribution(self.store, season_id)

    # Season trends

    @derived(SOURCE_STANDINGS)
    def win_pct_over_time(self) -> Optional[WinPctOverTime]:
        return records.win_pct_over_time(self.store)

    @derived(*WEEKLY_SOURCES)
    def season_high_low_points(self) -> list[HighLowPoints]:
        return records.season_high_low_points(self.store)

    @derived(*WEEKLY_SOURCES)
    def team_high_low_points(self, season_id) -> Optional[list[HighLowPoints]]:
        return records.team_high_low_points(self.store, season_id)

    @derived(SOURCE_STANDINGS)
    def season_points_scatter(self, season_id) -> Optional[PointsScatter]:
        return records.season_points_scatter(self.store, season_id, self.exponent)

    @derived(SOURCE_STANDINGS)
    def career_points_scatter(self) -> Optional[PointsScatter]:
        return records.career_points_scatter(self.store, self.exponent)

    # Expected wins and consistency

    def expected_wins(self, points_for: float, points_against: float, games_played: int) -> float:
        return pythagorean.calculate_expected_wins(
            points_for, points_against, games_played, self.exponent
        )

    @derived(SOURCE_STANDINGS)
    def expected_win_ranks(self, season_id) -> dict[str, int]:
        """Competition ranks of a season's owners by expected wins."""
        return pythagorean.build_ranks(
            pythagorean.season_pythagorean_inputs(self.store, season_id), self.exponent
        )

    @derived(SOURCE_STANDINGS)
    def career_luck(self) -> list[LuckRow]:
        return pythagorean.career_expected_vs_actual(self.store, self.exponent)

    @derived(SOURCE_STANDINGS, *WEEKLY_SOURCES)
    def career_consistency_index(self) -> list[OwnerConsistencyIndex]:
        return consistency.build_career_consistency_index(self.store, self.diagnostics)

    # Data quality

    def data_quality_report(self) -> dict[str, list[str]]:
        """Validation messages grouped by check."""
        report = {
            'season_metadata': validators.validate_season_metadata(self.store),
            'team_names': validators.validate_team_names(self.career_index()),
            'weekly_pairs': [],
            'standings_vs_weekly': [],
        }
        for season_id in self.store.weekly_season_ids():
            report['weekly_pairs'].extend(validators.validate_weekly_entry_pairs(self.store, season_id))
        for found in self.reconciliations().values():
            report['standings_vs_weekly'].extend(validators.validate_standings_vs_weekly(found))
        return report
