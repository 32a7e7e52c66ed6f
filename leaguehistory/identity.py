"""Team name -> owner identity resolution."""

import logging
from typing import Iterable, Optional

from .data_store import LeagueDataStore
from .diagnostics import DiagnosticKind, DiagnosticLog
from .models import TeamOwnerIndex
from .schemas import Owner, SeasonStandingsEntry
from .utils import normalize_team_name

logger = logging.getLogger('leaguehistory.identity')


def build_index_from_owners(owners: Iterable[Owner]) -> TeamOwnerIndex:
    """
    Build the career-wide fallback index from every team name an owner used.

    Args:
        owners: Owner roster

    Returns:
        TeamOwnerIndex; names used by more than one owner are quarantined
    """
    index = TeamOwnerIndex()
    for owner in owners:
        for team_name in owner.team_names:
            index.add(team_name, owner.manager_name)

    if index.ambiguous_teams:
        logger.debug(f'Career index has {len(index.ambiguous_teams)} ambiguous team names')
    return index


def build_index_from_standings(
    standings: Optional[dict[str, SeasonStandingsEntry]],
) -> Optional[TeamOwnerIndex]:
    """
    Build a season-scoped index from one season's standings.

    Entries missing either a team name or a manager name are skipped.

    Returns:
        TeamOwnerIndex, or None when the season has no standings
    """
    if standings is None:
        return None

    index = TeamOwnerIndex()
    for entry in standings.values():
        manager_name = entry.player_details.manager_name
        if not manager_name:
            continue
        index.add(entry.player_details.team_name, manager_name)
    return index


def resolve_owner(
    season_id,
    week: Optional[int],
    team_name,
    index: TeamOwnerIndex,
    diagnostics: Optional[DiagnosticLog] = None,
) -> Optional[str]:
    """
    Resolve a team display name to an owner id.

    Blank, ambiguous and unmapped names resolve to None, and a diagnostic
    is reported once per (season, week, reason, name).

    Args:
        season_id: Season the name appeared in
        week: Week number, or None for season-level data such as standings
        team_name: Raw team display name
        index: Index to resolve against
        diagnostics: Optional diagnostic log

    Returns:
        Owner id, or None if the name can't be resolved safely
    """
    key = normalize_team_name(team_name)
    where = f'season {season_id}' if week is None else f'season {season_id} week {week}'

    if not key:
        if diagnostics is not None:
            diagnostics.report(
                DiagnosticKind.BLANK_TEAM_NAME, season_id, week, '',
                f'Skipped entry in {where}: missing team name',
            )
        return None

    if key in index.ambiguous_teams:
        if diagnostics is not None:
            diagnostics.report(
                DiagnosticKind.AMBIGUOUS_TEAM_MAPPING, season_id, week, key,
                f'Skipped entry in {where}: ambiguous team name "{team_name}"',
            )
        return None

    owner = index.owner_by_team.get(key)
    if owner is None:
        if diagnostics is not None:
            diagnostics.report(
                DiagnosticKind.UNRESOLVED_OWNER, season_id, week, key,
                f'Skipped entry in {where}: no owner found for team "{team_name}"',
            )
        return None

    return owner


class OwnerResolver:
    """
    Resolves team names for one season.

    The season-scoped index is used when the season has standings, since a
    display name can belong to different owners in different years;
    otherwise the career fallback index is used.
    """

    def __init__(
        self,
        season_id,
        career_index: TeamOwnerIndex,
        season_index: Optional[TeamOwnerIndex] = None,
        diagnostics: Optional[DiagnosticLog] = None,
    ):
        self.season_id = str(season_id)
        self.career_index = career_index
        self.season_index = season_index
        self.diagnostics = diagnostics

    @property
    def active_index(self) -> TeamOwnerIndex:
        return self.season_index if self.season_index is not None else self.career_index

    def resolve(self, week: Optional[int], team_name) -> Optional[str]:
        return resolve_owner(self.season_id, week, team_name, self.active_index, self.diagnostics)


def season_resolver(
    store: LeagueDataStore,
    season_id,
    career_index: TeamOwnerIndex,
    diagnostics: Optional[DiagnosticLog] = None,
) -> OwnerResolver:
    """Build the resolver for a season from its standings and the career index."""
    season_index = build_index_from_standings(store.get_standings(season_id))
    return OwnerResolver(season_id, career_index, season_index, diagnostics)
