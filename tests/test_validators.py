"""Unit tests for data-quality validation functions."""

from leaguehistory.data_store import LeagueDataStore
from leaguehistory.identity import build_index_from_owners, season_resolver
from leaguehistory.models import OwnerRecordTotals
from leaguehistory.reconciliation import reconcile_season
from leaguehistory.utils import save_json
from leaguehistory.validators import (
    validate_data_files,
    validate_season_metadata,
    validate_standings_vs_weekly,
    validate_team_names,
    validate_weekly_entry_pairs,
)
from payloads import DESI, HEDD, game, season_meta, side, team_entry, week_of


class TestSeasonMetadataValidation:
    """Tests for season metadata checks."""

    def test_valid_metadata(self, store):
        """Test that the sample league passes all checks."""
        assert validate_season_metadata(store) == []

    def test_regular_season_after_season_end(self):
        store = LeagueDataStore.from_payloads(
            standings={'2006': {}},
            metadata={'seasons': {'2006': season_meta(14, 13)}},
        )
        errors = validate_season_metadata(store)
        assert len(errors) == 1
        assert '2006 regular season ends week 14 after season end week 13' in errors[0]

    def test_weekly_without_metadata(self, weekly_payload):
        store = LeagueDataStore.from_payloads(weekly=weekly_payload)
        errors = validate_season_metadata(store)
        assert errors == ['2006 has weekly matchups but no season metadata']

    def test_week_beyond_season_end(self, weekly_payload):
        weekly_payload['2006']['week5'] = {}
        weekly_payload['2006']['bonus'] = {}
        store = LeagueDataStore.from_payloads(
            weekly=weekly_payload,
            metadata={'seasons': {'2006': season_meta(2, 3)}},
        )
        errors = validate_season_metadata(store)
        assert len(errors) == 2
        assert any('week5 after season end week 3' in error for error in errors)
        assert any('malformed week key "bonus"' in error for error in errors)


class TestWeeklyPairValidation:
    """Tests for checks across both entries of a game."""

    def test_consistent_pairs(self, store):
        assert validate_weekly_entry_pairs(store, '2006') == []

    def test_sides_disagree_on_score(self):
        """Test that two entries of one game reporting different scores are flagged."""
        week = week_of(game(2006, 1, side(HEDD, 104.40), side(DESI, 66.70)))
        week['teamId-2']['matchup']['team1Score'] = '70.00'
        store = LeagueDataStore.from_payloads(
            weekly={'2006': {'week1': week}},
            metadata={'seasons': {'2006': season_meta(13, 16)}},
        )
        errors = validate_weekly_entry_pairs(store, '2006')
        assert len(errors) == 1
        assert 'report different scores' in errors[0]

    def test_scheduled_against_itself(self):
        store = LeagueDataStore.from_payloads(
            weekly={'2006': {'week1': {
                'teamId-1': team_entry(2006, 1, side(HEDD, 100.0), ('9', 'hedd hunters', 90.0)),
            }}},
            metadata={'seasons': {'2006': season_meta(13, 16)}},
        )
        errors = validate_weekly_entry_pairs(store, '2006')
        assert errors == ['2006 week1 teamId-1 is scheduled against itself']

    def test_missing_matchup(self):
        store = LeagueDataStore.from_payloads(
            weekly={'2006': {'week1': {'teamId-1': {'season': 2006, 'week': 1, 'teamId': '1'}}}},
            metadata={'seasons': {'2006': season_meta(13, 16)}},
        )
        assert validate_weekly_entry_pairs(store, '2006') == ['2006 week1 teamId-1 has no matchup']


class TestStandingsVsWeekly:
    """Tests for the standings cross-check."""

    def test_agreeing_sources(self, store):
        resolver = season_resolver(store, '2006', build_index_from_owners(store.owners()))
        assert validate_standings_vs_weekly(reconcile_season(store, '2006', resolver)) == []

    def test_disagreeing_sources(self, store):
        resolver = season_resolver(store, '2006', build_index_from_owners(store.owners()))
        reconciliation = reconcile_season(store, '2006', resolver)
        reconciliation.fallback['Carol'] = OwnerRecordTotals(wins=1, losses=1)

        warnings = validate_standings_vs_weekly(reconciliation)
        assert warnings == ['2006 Carol: weekly 2-0 vs standings 1-1']


class TestTeamNameValidation:
    """Tests for ambiguous team name reporting."""

    def test_ambiguous_names(self, store):
        warnings = validate_team_names(build_index_from_owners(store.owners()))
        assert len(warnings) == 1
        assert '"big dogs"' in warnings[0]


class TestDataFileValidation:
    """Tests for schema checks on the source files."""

    def test_valid_files(self, tmp_path, owners_payload, metadata_payload):
        """Test that present files pass and missing files are not reported."""
        save_json(tmp_path / 'owners-data.json', owners_payload)
        save_json(tmp_path / 'league-metadata.json', metadata_payload)
        assert validate_data_files(tmp_path) == []

    def test_malformed_and_invalid_files(self, tmp_path):
        (tmp_path / 'owners-data.json').write_text('{"Alice": [')
        save_json(tmp_path / 'league-metadata.json', {
            'seasons': {'2006': {'regularSeasonEndWeek': 19, 'seasonEndWeek': 20}},
        })

        errors = validate_data_files(tmp_path)

        assert len(errors) == 2
        assert errors[0].startswith('owners-data.json: Invalid JSON')
        assert errors[1].startswith('league-metadata.json: Schema validation failed')

    def test_configured_file_names(self, tmp_path):
        (tmp_path / 'rosters.json').write_text('not json')
        errors = validate_data_files(tmp_path, {'owners': 'rosters.json'})
        assert len(errors) == 1
        assert errors[0].startswith('rosters.json:')
