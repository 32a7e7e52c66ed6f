"""In-memory source data for one session, with per-source version counters."""

import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from .constants import (
    ALL_SOURCES,
    LEAGUE_METADATA_FILE,
    OWNERS_FILE,
    SOURCE_METADATA,
    SOURCE_OWNERS,
    SOURCE_STANDINGS,
    SOURCE_WEEKLY,
    STANDINGS_FILE,
    WEEKLY_MATCHUPS_FILE,
)
from .schemas import (
    LeagueMetadata,
    Owner,
    OwnersFile,
    SeasonMetadata,
    SeasonStandingsEntry,
    SeasonStandingsFile,
    WeeklyMatchupEntry,
    WeeklyMatchupsFile,
)
from .utils import load_json_safe, sorted_season_ids, week_key, week_number

logger = logging.getLogger('leaguehistory.data_store')

SeasonStandings = dict[str, SeasonStandingsEntry]
WeekMatchups = dict[str, WeeklyMatchupEntry]
SeasonWeeks = dict[str, WeekMatchups]

DEFAULT_FILE_NAMES = {
    SOURCE_OWNERS: OWNERS_FILE,
    SOURCE_STANDINGS: STANDINGS_FILE,
    SOURCE_WEEKLY: WEEKLY_MATCHUPS_FILE,
    SOURCE_METADATA: LEAGUE_METADATA_FILE,
}

SOURCE_SCHEMAS = {
    SOURCE_OWNERS: OwnersFile,
    SOURCE_STANDINGS: SeasonStandingsFile,
    SOURCE_WEEKLY: WeeklyMatchupsFile,
    SOURCE_METADATA: LeagueMetadata,
}


class LeagueDataStore:
    """
    Read-only league payloads held in memory.

    Replacing a source bumps its version; derived results compare versions
    to decide when to rebuild.

    Example:
        store = LeagueDataStore.from_directory('data')
        meta = store.get_season_meta('2006')
        week = store.get_week('2006', 14)
    """

    def __init__(
        self,
        owners: Optional[dict[str, Owner]] = None,
        standings: Optional[dict[str, SeasonStandings]] = None,
        weekly: Optional[dict[str, SeasonWeeks]] = None,
        metadata: Optional[LeagueMetadata] = None,
    ):
        self._owners: dict[str, Owner] = {}
        self._standings: dict[str, SeasonStandings] = {}
        self._weekly: dict[str, SeasonWeeks] = {}
        self._metadata = LeagueMetadata()
        self._versions = {source: 0 for source in ALL_SOURCES}

        if owners is not None:
            self.set_owners(owners)
        if standings is not None:
            self.set_standings(standings)
        if weekly is not None:
            self.set_weekly(weekly)
        if metadata is not None:
            self.set_metadata(metadata)

    # Loading

    @classmethod
    def from_payloads(
        cls,
        owners: Optional[dict[str, Any]] = None,
        standings: Optional[dict[str, Any]] = None,
        weekly: Optional[dict[str, Any]] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> 'LeagueDataStore':
        """
        Build a store from raw JSON-shaped payloads.

        Raises:
            ValueError: If a payload doesn't match its schema
        """
        try:
            return cls(
                owners=OwnersFile.model_validate(owners).root if owners is not None else None,
                standings=(
                    SeasonStandingsFile.model_validate(standings).root
                    if standings is not None else None
                ),
                weekly=WeeklyMatchupsFile.model_validate(weekly).root if weekly is not None else None,
                metadata=LeagueMetadata.model_validate(metadata) if metadata is not None else None,
            )
        except ValidationError as e:
            logger.error(f'Invalid league payload: {e}')
            raise ValueError(f'Invalid league payload:\n{e}') from e

    @classmethod
    def from_directory(
        cls,
        data_dir: Path | str,
        files: Optional[dict[str, str]] = None,
    ) -> 'LeagueDataStore':
        """
        Load every source file found in data_dir.

        A missing file leaves that source empty. Malformed files raise.

        Args:
            data_dir: Directory holding the JSON payloads
            files: Optional file names keyed by source ('owners', 'standings',
                'weekly', 'metadata'); defaults to the standard names
        """
        data_dir = Path(data_dir)
        names = {**DEFAULT_FILE_NAMES, **(files or {})}

        logger.info(f'Loading league data from {data_dir}')

        loaded = {
            source: load_json_safe(data_dir / names[source], schema=schema)
            for source, schema in SOURCE_SCHEMAS.items()
        }
        owners = loaded[SOURCE_OWNERS]
        standings = loaded[SOURCE_STANDINGS]
        weekly = loaded[SOURCE_WEEKLY]
        metadata = loaded[SOURCE_METADATA]

        store = cls(
            owners=owners.root if owners is not None else None,
            standings=standings.root if standings is not None else None,
            weekly=weekly.root if weekly is not None else None,
            metadata=metadata,
        )
        logger.info(
            f'Loaded {len(store._owners)} owners, {len(store._standings)} standings seasons, '
            f'{len(store._weekly)} weekly seasons'
        )
        return store

    # Mutation (replaces a whole source)

    def set_owners(self, owners: dict[str, Owner]) -> None:
        self._owners = dict(owners)
        self._bump(SOURCE_OWNERS)

    def set_standings(self, standings: dict[str, SeasonStandings]) -> None:
        self._standings = {str(season_id): dict(entries) for season_id, entries in standings.items()}
        self._bump(SOURCE_STANDINGS)

    def set_weekly(self, weekly: dict[str, SeasonWeeks]) -> None:
        self._weekly = {str(season_id): dict(weeks) for season_id, weeks in weekly.items()}
        self._bump(SOURCE_WEEKLY)

    def set_metadata(self, metadata: LeagueMetadata) -> None:
        self._metadata = metadata
        self._bump(SOURCE_METADATA)

    def _bump(self, source: str) -> None:
        self._versions[source] += 1
        logger.debug(f'Source {source} replaced (version {self._versions[source]})')

    def version(self, source: str) -> int:
        return self._versions[source]

    def versions(self, sources) -> tuple[int, ...]:
        return tuple(self._versions[source] for source in sources)

    # Queries

    @property
    def league_name(self) -> str:
        return self._metadata.name

    @property
    def current_season_id(self) -> Optional[int]:
        return self._metadata.current_season_id

    def owners(self) -> list[Owner]:
        return list(self._owners.values())

    def get_owner(self, owner_id: str) -> Optional[Owner]:
        return self._owners.get(owner_id)

    def standings_season_ids(self) -> list[str]:
        """Season ids with standings, newest first."""
        return sorted_season_ids(self._standings, descending=True)

    def weekly_season_ids(self) -> list[str]:
        """Season ids with weekly matchups, newest first."""
        return sorted_season_ids(self._weekly, descending=True)

    def all_season_ids(self) -> list[str]:
        """Union of standings and weekly season ids, oldest first."""
        return sorted_season_ids(set(self._standings) | set(self._weekly))

    def get_standings(self, season_id) -> Optional[SeasonStandings]:
        return self._standings.get(str(season_id))

    def get_season_weeks(self, season_id) -> Optional[SeasonWeeks]:
        return self._weekly.get(str(season_id))

    def get_week(self, season_id, week: int) -> Optional[WeekMatchups]:
        season = self.get_season_weeks(season_id)
        if season is None:
            return None
        return season.get(week_key(week))

    def get_week_keys(self, season_id) -> list[str]:
        """Week keys for a season ordered by week number; malformed keys are dropped."""
        season = self.get_season_weeks(season_id)
        if not season:
            return []
        keyed = [(week_number(key), key) for key in season]
        return [key for number, key in sorted((n, k) for n, k in keyed if n is not None)]

    def get_season_meta(self, season_id) -> Optional[SeasonMetadata]:
        return self._metadata.seasons.get(str(season_id))
