"""Tests for weekly replay and standings reconciliation."""

import pytest

from leaguehistory.data_store import LeagueDataStore
from leaguehistory.diagnostics import DiagnosticKind, DiagnosticLog
from leaguehistory.identity import build_index_from_owners, season_resolver
from leaguehistory.models import DerivedSeasonTotals, OwnerRecordTotals
from leaguehistory.reconciliation import (
    compose_owner_season_totals,
    derive_season_totals,
    fallback_season_totals,
    matchup_key,
    owner_has_complete_history,
    reconcile_season,
    report_season_mismatches,
)
from leaguehistory.schemas import LeagueMetadata, MatchupSummary
from payloads import DESI, HEDD, game, owner, season_meta, side, standings_entry, week_of


def resolver_for(store, season_id, diagnostics=None):
    career = build_index_from_owners(store.owners())
    return season_resolver(store, season_id, career, diagnostics)


class TestMatchupKey:
    """Tests for the per-game dedup key."""

    def test_same_key_from_both_sides(self):
        first = MatchupSummary(team1_id='1', team1_name='A', team2_id='2', team2_name='B')
        second = MatchupSummary(team1_id='2', team1_name='B', team2_id='1', team2_name='A')
        assert matchup_key(first) == matchup_key(second) == '1|2'

    def test_falls_back_to_names(self):
        matchup = MatchupSummary(team1_name='Hedd Hunters ', team2_name='desi pride')
        assert matchup_key(matchup) == 'desi pride|hedd hunters'

    def test_unidentifiable_side(self):
        assert matchup_key(MatchupSummary(team1_id='1')) is None


class TestDeriveSeasonTotals:
    """Tests for replaying weekly games."""

    def test_replays_regular_season_only(self, store):
        """Test that the playoff week is not counted."""
        derived = derive_season_totals(store, '2006', resolver_for(store, '2006'))

        assert derived.has_regular_season_history
        assert derived.games_counted == 4
        alice = derived.totals_by_owner['Alice']
        assert (alice.wins, alice.losses, alice.ties) == (1, 1, 0)
        assert alice.points_for == pytest.approx(194.40)
        assert alice.points_against == pytest.approx(162.20)

    def test_each_game_counted_once(self, store):
        """Test that both entries of a game produce one win and one loss."""
        derived = derive_season_totals(store, '2006', resolver_for(store, '2006'))
        carol = derived.totals_by_owner['Carol']
        dave = derived.totals_by_owner['Dave']
        assert (carol.wins, carol.losses) == (2, 0)
        assert (dave.wins, dave.losses, dave.ties) == (0, 1, 1)

    def test_high_and_low_points_share_ties(self, store):
        """Test that owners tied for the week's best score each get a high points week."""
        totals = derive_season_totals(store, '2006', resolver_for(store, '2006')).totals_by_owner
        assert totals['Carol'].high_points == 1
        assert totals['Bob'].high_points == 1
        assert totals['Dave'].high_points == 1
        assert totals['Alice'].high_points == 0
        assert totals['Bob'].low_points == 1
        assert totals['Alice'].low_points == 1

    def test_epsilon_tie(self):
        """Test that scores within epsilon count as a tie for both owners."""
        store = LeagueDataStore.from_payloads(
            owners={
                'Alice': owner('Alice', ['Hedd Hunters'], [2006], 0, 0, 1),
                'Bob': owner('Bob', ['Desi Pride'], [2006], 0, 0, 1),
            },
            weekly={'2006': {'week1': week_of(
                game(2006, 1, side(HEDD, '100.0000001'), side(DESI, '100.00')),
            )}},
            metadata={'seasons': {'2006': season_meta(13, 16)}},
        )
        derived = derive_season_totals(store, '2006', resolver_for(store, '2006'))
        assert derived.totals_by_owner['Alice'].ties == 1
        assert derived.totals_by_owner['Bob'].ties == 1

    def test_missing_metadata(self, store):
        """Test that a season without metadata has no weekly history."""
        diagnostics = DiagnosticLog()
        store.set_metadata(LeagueMetadata(name='Original Owners League'))

        derived = derive_season_totals(store, '2006', resolver_for(store, '2006'), diagnostics)
        assert not derived.has_regular_season_history
        assert derived.totals_by_owner == {}
        assert len(diagnostics.by_kind(DiagnosticKind.MISSING_SEASON_METADATA)) == 1

    def test_missing_weekly(self, store):
        diagnostics = DiagnosticLog()
        derived = derive_season_totals(store, '2005', resolver_for(store, '2005'), diagnostics)
        assert not derived.has_regular_season_history
        assert len(diagnostics.by_kind(DiagnosticKind.MISSING_WEEKLY_DATA)) == 1

    def test_unparsable_scores_skip_game(self):
        store = LeagueDataStore.from_payloads(
            owners={
                'Alice': owner('Alice', ['Hedd Hunters'], [2006], 0, 0),
                'Bob': owner('Bob', ['Desi Pride'], [2006], 0, 0),
            },
            weekly={'2006': {'week1': week_of(
                game(2006, 1, side(HEDD, ''), side(DESI, '88.10')),
            )}},
            metadata={'seasons': {'2006': season_meta(13, 16)}},
        )
        derived = derive_season_totals(store, '2006', resolver_for(store, '2006'))
        assert derived.games_counted == 0
        assert not derived.has_regular_season_history


class TestFallbackAndComposition:
    """Tests for standings fallback and the composition rule."""

    def test_fallback_matches_standings(self, store):
        fallback = fallback_season_totals(store, '2005', resolver_for(store, '2005'))
        alice = fallback['Alice']
        assert (alice.wins, alice.losses) == (8, 5)
        assert alice.championships == 0
        assert fallback['Bob'].championships == 1
        assert fallback['Bob'].moves == 4
        assert fallback['Bob'].trades == 3
        assert alice.high_points == 3

    def test_weekly_wins_with_standings_only_fields(self, store):
        """Test that weekly totals are used and championships/moves/trades come from standings."""
        reconciliation = reconcile_season(store, '2006', resolver_for(store, '2006'))
        alice = reconciliation.owner_totals('Alice')

        assert (alice.wins, alice.losses) == (1, 1)
        assert alice.high_points == 0
        assert alice.championships == 1
        assert alice.moves == 5
        assert alice.trades == 1

    def test_owner_absent_from_weekly_uses_standings(self):
        derived = DerivedSeasonTotals(
            has_regular_season_history=True,
            totals_by_owner={'Alice': OwnerRecordTotals(wins=3)},
        )
        fallback = {'Bob': OwnerRecordTotals(wins=7, losses=6, moves=2)}

        bob = compose_owner_season_totals('Bob', derived, fallback)
        assert (bob.wins, bob.losses, bob.moves) == (7, 6, 2)

    def test_owner_in_neither_source(self):
        totals = compose_owner_season_totals('Zed', DerivedSeasonTotals(), {})
        assert totals == OwnerRecordTotals()

    def test_season_without_weekly_equals_standings(self, store):
        """Test that a standings-only season reproduces the standings exactly."""
        diagnostics = DiagnosticLog()
        reconciliation = reconcile_season(store, '2005', resolver_for(store, '2005'), diagnostics)

        bob = reconciliation.owner_totals('Bob')
        assert (bob.wins, bob.losses, bob.ties) == (5, 8, 0)
        assert bob.points_for == pytest.approx(1100.0)
        assert reconciliation.record_mismatches() == []
        assert diagnostics.by_kind(DiagnosticKind.WINS_MISMATCH) == []


class TestMismatches:
    """Tests for season-level record mismatch reporting."""

    def test_mismatch_reported_for_complete_owner(self, standings_payload, weekly_payload):
        """Test that a disagreeing standings record is reported but weekly totals are kept."""
        standings_payload['2006']['Carol'] = standings_entry('Carol', 'Da Squad', 1, 1)
        store = LeagueDataStore.from_payloads(
            owners={'Carol': owner('Carol', ['Da Squad'], [2006], 2, 0)},
            standings=standings_payload,
            weekly=weekly_payload,
            metadata={'seasons': {'2006': season_meta(2, 3)}},
        )
        diagnostics = DiagnosticLog()
        reconciliation = reconcile_season(store, '2006', resolver_for(store, '2006'), diagnostics)
        reconciliations = {'2006': reconciliation}

        found = report_season_mismatches(
            reconciliation,
            lambda owner_id: owner_has_complete_history(owner_id, [2006], reconciliations),
            diagnostics,
        )

        assert found == 1
        mismatches = diagnostics.by_kind(DiagnosticKind.WINS_MISMATCH)
        assert len(mismatches) == 1
        assert 'Carol' in mismatches[0].message
        assert reconciliation.owner_totals('Carol').wins == 2

    def test_incomplete_owner_not_reported(self, store):
        reconciliation = reconcile_season(store, '2006', resolver_for(store, '2006'))
        reconciliation.fallback['Alice'] = OwnerRecordTotals(wins=9)
        diagnostics = DiagnosticLog()

        found = report_season_mismatches(reconciliation, lambda owner_id: False, diagnostics)
        assert found == 0
        assert len(diagnostics) == 0

    def test_complete_history(self, store):
        reconciliations = {
            season_id: reconcile_season(store, season_id, resolver_for(store, season_id))
            for season_id in ('2005', '2006')
        }
        assert owner_has_complete_history('Carol', [2006], reconciliations)
        assert not owner_has_complete_history('Alice', [2005, 2006], reconciliations)
        assert owner_has_complete_history('Nobody', [], reconciliations)
