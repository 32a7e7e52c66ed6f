"""Tests for the in-memory league data store and diagnostics log."""

import pytest

from leaguehistory.constants import SOURCE_OWNERS, SOURCE_STANDINGS, SOURCE_WEEKLY
from leaguehistory.data_store import LeagueDataStore
from leaguehistory.diagnostics import DiagnosticKind, DiagnosticLog
from leaguehistory.schemas import LeagueMetadata


class TestLeagueDataStore:
    """Tests for source access and versioning."""

    def test_season_ids(self, store):
        assert store.standings_season_ids() == ['2006', '2005']
        assert store.weekly_season_ids() == ['2006']
        assert store.all_season_ids() == ['2005', '2006']

    def test_week_keys_sorted_numerically(self, weekly_payload):
        weekly_payload['2006']['week10'] = {}
        store = LeagueDataStore.from_payloads(weekly=weekly_payload)
        assert store.get_week_keys('2006') == ['week1', 'week2', 'week3', 'week10']

    def test_get_week(self, store):
        week = store.get_week('2006', 1)
        assert set(week) == {'teamId-1', 'teamId-2', 'teamId-3', 'teamId-4'}
        assert store.get_week('2006', 9) is None
        assert store.get_week('2005', 1) is None

    def test_metadata(self, store):
        meta = store.get_season_meta(2006)
        assert meta.regular_season_end_week == 2
        assert meta.has_full_historical_details
        assert store.current_season_id == 2006

    def test_versions_bump_per_source(self, store):
        before = store.versions((SOURCE_OWNERS, SOURCE_STANDINGS, SOURCE_WEEKLY))
        store.set_metadata(LeagueMetadata(name='Renamed'))
        assert store.versions((SOURCE_OWNERS, SOURCE_STANDINGS, SOURCE_WEEKLY)) == before

        store.set_owners({})
        assert store.version(SOURCE_OWNERS) == before[0] + 1
        assert store.owners() == []

    def test_invalid_payload(self):
        """Test that a roster slot outside starter/bench is rejected."""
        weekly = {'2006': {'week1': {'teamId-1': {
            'team1Roster': [{'playerId': 'p1', 'slot': 'flex'}],
        }}}}
        with pytest.raises(ValueError, match='Invalid league payload'):
            LeagueDataStore.from_payloads(weekly=weekly)

    def test_metadata_week_out_of_range(self):
        with pytest.raises(ValueError):
            LeagueDataStore.from_payloads(
                metadata={'seasons': {'2006': {'regularSeasonEndWeek': 19, 'seasonEndWeek': 20}}}
            )

    def test_null_team_names(self):
        store = LeagueDataStore.from_payloads(owners={'Zed': {'managerName': 'Zed', 'teamNames': None}})
        assert store.get_owner('Zed').team_names == []


class TestDiagnosticLog:
    """Tests for diagnostic deduplication."""

    def test_deduplicates_by_season_week_reason_name(self):
        log = DiagnosticLog()
        assert log.report(DiagnosticKind.UNRESOLVED_OWNER, '2006', 3, 'big dogs', 'first')
        assert not log.report(DiagnosticKind.UNRESOLVED_OWNER, 2006, 3, 'big dogs', 'again')
        assert log.report(DiagnosticKind.UNRESOLVED_OWNER, '2006', 4, 'big dogs', 'next week')
        assert log.report(DiagnosticKind.AMBIGUOUS_TEAM_MAPPING, '2006', 3, 'big dogs', 'other reason')
        assert len(log) == 3

    def test_summary(self):
        log = DiagnosticLog()
        log.report(DiagnosticKind.BLANK_TEAM_NAME, '2006', 1, '', 'blank')
        log.report(DiagnosticKind.BLANK_TEAM_NAME, '2006', 2, '', 'blank')
        log.report(DiagnosticKind.MISSING_WEEKLY_DATA, '2005', None, '', 'no weekly')
        assert log.summary() == {'blank': 2, 'missing-weekly': 1}
