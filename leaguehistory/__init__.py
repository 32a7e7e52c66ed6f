from .models import (
    PairRecord,
    OwnerRecordTotals,
    TeamOwnerIndex,
    DerivedSeasonTotals,
    RecordMatrix,
    AllTimeRecordRow,
    OwnerConsistencyIndex,
)
from .diagnostics import DiagnosticKind, DiagnosticLog
from .data_store import LeagueDataStore
from .identity import (
    build_index_from_owners,
    build_index_from_standings,
    resolve_owner,
    OwnerResolver,
)
from .reconciliation import (
    derive_season_totals,
    fallback_season_totals,
    compose_owner_season_totals,
    reconcile_season,
)
from .all_play import build_all_play_matrix, build_career_all_play_matrix
from .head_to_head import build_head_to_head_matrix
from .pythagorean import calculate_expected_wins, build_ranks
from .consistency import percentile, standard_deviation, build_career_consistency_index
from .records import (
    to_all_time_records_table,
    RECORDS_COLUMNS,
    win_pct_over_time,
    season_high_low_points,
    team_high_low_points,
    season_points_scatter,
    career_points_scatter,
)
from .excel_export import export_history_workbook
from .league import LeagueHistory

__all__ = [
    # Models
    'PairRecord',
    'OwnerRecordTotals',
    'TeamOwnerIndex',
    'DerivedSeasonTotals',
    'RecordMatrix',
    'AllTimeRecordRow',
    'OwnerConsistencyIndex',
    # Diagnostics
    'DiagnosticKind',
    'DiagnosticLog',
    # Source data
    'LeagueDataStore',
    # Identity resolution
    'build_index_from_owners',
    'build_index_from_standings',
    'resolve_owner',
    'OwnerResolver',
    # Reconciliation
    'derive_season_totals',
    'fallback_season_totals',
    'compose_owner_season_totals',
    'reconcile_season',
    # Matrices
    'build_all_play_matrix',
    'build_career_all_play_matrix',
    'build_head_to_head_matrix',
    # Expected wins and consistency
    'calculate_expected_wins',
    'build_ranks',
    'percentile',
    'standard_deviation',
    'build_career_consistency_index',
    # Records
    'to_all_time_records_table',
    'RECORDS_COLUMNS',
    'win_pct_over_time',
    'season_high_low_points',
    'team_high_low_points',
    'season_points_scatter',
    'career_points_scatter',
    'export_history_workbook',
    # Facade
    'LeagueHistory',
]
