"""Shared fixtures: a small two-season league.

2005 has standings only. 2006 has standings and weekly matchups for two
regular-season weeks plus one playoff week:

    week 1: Hedd Hunters 104.40 - Desi Pride 66.70
            Da Squad 118.70 - Cleveland Steamers 113.00
    week 2: Hedd Hunters 90.00 - Da Squad 95.50
            Desi Pride 100.00 - Cleveland Steamers 100.00
    week 3: Hedd Hunters 150.00 - Da Squad 80.00 (playoffs)

"Big Dogs" was used by both Alice and Bob, so it is ambiguous career-wide.
"""

import pytest

from leaguehistory.data_store import LeagueDataStore
from leaguehistory.league import LeagueHistory
from payloads import DESI, HEDD, SQUAD, STEAMERS, game, owner, side, standings_entry, starter, week_of


@pytest.fixture
def owners_payload():
    return {
        'Alice': owner('Alice', ['Hedd Hunters', 'Big Dogs'], [2005, 2006], 9, 6),
        'Bob': owner('Bob', ['Desi Pride', 'Big Dogs'], [2005, 2006], 5, 9, 1),
        'Carol': owner('Carol', ['Da Squad'], [2006], 2, 0),
        'Dave': owner('Dave', ['Cleveland Steamers'], [2006], 0, 1, 1),
    }


@pytest.fixture
def standings_payload():
    return {
        '2005': {
            'Alice': standings_entry(
                'Alice', 'Big Dogs', 8, 5, playoff_rank='2', regular_rank='1',
                points_for=1200.0, points_against=1100.0, high_points=3, low_points=1,
                moves=10, trades=0,
            ),
            'Bob': standings_entry(
                'Bob', 'Desi Pride', 5, 8, playoff_rank='1', regular_rank='2',
                points_for=1100.0, points_against=1200.0, high_points=1, low_points=4,
                moves=4, trades=3,
            ),
        },
        '2006': {
            'Alice': standings_entry(
                'Alice', 'Hedd Hunters', 1, 1, playoff_rank='1', regular_rank='2',
                points_for=194.40, points_against=162.20, high_points=9, moves=5, trades=1,
            ),
            'Bob': standings_entry(
                'Bob', 'Desi Pride', 0, 1, 1, playoff_rank='4',
                points_for=166.70, points_against=204.40, moves=2, trades=0,
            ),
            'Carol': standings_entry(
                'Carol', 'Da Squad', 2, 0, playoff_rank='2', regular_rank='1',
                points_for=214.20, points_against=203.00, moves=7, trades=2,
            ),
            'Dave': standings_entry(
                'Dave', 'Cleveland Steamers', 0, 1, 1, playoff_rank='3',
                points_for=213.00, points_against=218.70, moves=1, trades=1,
            ),
        },
    }


@pytest.fixture
def weekly_payload():
    return {
        '2006': {
            'week1': week_of(
                game(
                    2006, 1, side(HEDD, 104.40), side(DESI, 66.70),
                    home_roster=[
                        starter('p1', 'Peyton Manning', 32.5),
                        starter('p2', 'Bench Guy', 40.0, slot='bench'),
                    ],
                ),
                game(
                    2006, 1, side(SQUAD, 118.70), side(STEAMERS, 113.00),
                    home_roster=[starter('p3', 'LaDainian Tomlinson', 41.0)],
                ),
            ),
            'week2': week_of(
                game(
                    2006, 2, side(HEDD, 90.00), side(SQUAD, 95.50),
                    home_roster=[starter('p1', 'Peyton Manning', 20.0)],
                ),
                game(2006, 2, side(DESI, 100.00), side(STEAMERS, 100.00)),
            ),
            'week3': week_of(
                game(
                    2006, 3, side(HEDD, 150.00), side(SQUAD, 80.00),
                    home_roster=[starter('p1', 'Peyton Manning', 15.0)],
                ),
            ),
        },
    }


@pytest.fixture
def metadata_payload():
    return {
        'name': 'Original Owners League',
        'currentSeasonId': 2006,
        'seasons': {
            '2005': {'regularSeasonEndWeek': 13, 'seasonEndWeek': 16},
            '2006': {
                'regularSeasonEndWeek': 2,
                'seasonEndWeek': 3,
                'hasFullHistoricalDetails': True,
            },
        },
    }


@pytest.fixture
def store(owners_payload, standings_payload, weekly_payload, metadata_payload):
    return LeagueDataStore.from_payloads(
        owners=owners_payload,
        standings=standings_payload,
        weekly=weekly_payload,
        metadata=metadata_payload,
    )


@pytest.fixture
def history(store):
    return LeagueHistory(store)
