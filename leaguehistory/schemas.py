"""Pydantic schemas for league history JSON payloads."""

from pydantic import BaseModel, Field, RootModel, field_validator


class Owner(BaseModel):
    """Career-wide owner record, keyed by manager name in owners-data.json."""

    manager_name: str = Field(..., min_length=1, alias='managerName')
    real_name: str = Field('', alias='realName')
    seasons_played: int = Field(0, ge=0, alias='seasonsPlayed')
    wins: int = Field(0, ge=0)
    losses: int = Field(0, ge=0)
    ties: int = Field(0, ge=0)
    points_for: float = Field(0.0, alias='pointsFor')
    points_against: float = Field(0.0, alias='pointsAgainst')
    moves: int = 0
    trades: int = 0
    playoff_appearances: int = Field(0, alias='playoffAppearances')
    championships: int = 0
    team_names: list[str] = Field(default_factory=list, alias='teamNames')
    active_seasons: list[int] = Field(default_factory=list, alias='activeSeasons')

    @field_validator('team_names', mode='before')
    @classmethod
    def drop_null_team_names(cls, v):
        """Treat a null team name list as empty."""
        return v or []

    class Config:
        extra = 'ignore'
        populate_by_name = True


class PlayerDetails(BaseModel):
    """Who managed a team in a season and what it was called."""

    manager_name: str | None = Field(None, alias='managerName')
    team_name: str | None = Field(None, alias='teamName')

    class Config:
        extra = 'ignore'
        populate_by_name = True


class Record(BaseModel):
    """Season win/loss/tie totals."""

    win: int = Field(0, ge=0)
    loss: int = Field(0, ge=0)
    tie: int = Field(0, ge=0)

    class Config:
        extra = 'ignore'


class Points(BaseModel):
    """Season scoring totals."""

    points_for: float = Field(0.0, alias='pointsFor')
    points_against: float = Field(0.0, alias='pointsAgainst')
    high_points: float = Field(0.0, alias='highPoints')
    low_points: float | None = Field(None, alias='lowPoints')

    class Config:
        extra = 'ignore'
        populate_by_name = True


class Ranks(BaseModel):
    """Season ranks. Kept as raw strings since the payload leaves them blank."""

    playoff_rank: str | int | None = Field('', alias='playoffRank')
    regular_season_rank: str | int | None = Field('', alias='regularSeasonRank')
    made_playoffs: str | bool | None = Field('', alias='madePlayoffs')

    class Config:
        extra = 'ignore'
        populate_by_name = True


class Transactions(BaseModel):
    """Season roster moves and trades."""

    moves: int = 0
    trades: int = 0

    class Config:
        extra = 'ignore'


class SeasonStandingsEntry(BaseModel):
    """One owner's end-of-season standings row."""

    player_details: PlayerDetails = Field(default_factory=PlayerDetails, alias='playerDetails')
    season: str | int | None = None
    record: Record = Field(default_factory=Record)
    ranks: Ranks = Field(default_factory=Ranks)
    points: Points = Field(default_factory=Points)
    transactions: Transactions = Field(default_factory=Transactions)

    class Config:
        extra = 'ignore'
        populate_by_name = True


class MatchupSummary(BaseModel):
    """Both sides of a scheduled game. Scores arrive as decimal strings."""

    team1_id: str | int | None = Field(None, alias='team1Id')
    team1_name: str | None = Field(None, alias='team1Name')
    team1_score: str | float | None = Field(None, alias='team1Score')
    team2_id: str | int | None = Field(None, alias='team2Id')
    team2_name: str | None = Field(None, alias='team2Name')
    team2_score: str | float | None = Field(None, alias='team2Score')

    class Config:
        extra = 'ignore'
        populate_by_name = True


class TeamTotals(BaseModel):
    """Point totals for the team that owns a weekly entry."""

    total_points: float | str | None = Field(None, alias='totalPoints')
    total_projected: float | str | None = Field(None, alias='totalProjected')
    bench_points: float | str | None = Field(None, alias='benchPoints')
    bench_projected: float | str | None = Field(None, alias='benchProjected')

    class Config:
        extra = 'ignore'
        populate_by_name = True


class RosterPlayer(BaseModel):
    """One player row in a weekly roster."""

    player_id: str | int = Field(..., alias='playerId')
    player_name: str = Field('', alias='playerName')
    position: str = ''
    nfl_team: str = Field('', alias='nflTeam')
    points: float = 0.0
    slot: str = Field(..., pattern=r'^(starter|bench)$')

    class Config:
        extra = 'ignore'
        populate_by_name = True


class WeeklyMatchupEntry(BaseModel):
    """One team's view of one week's game."""

    season: int | None = None
    week: int | None = None
    team_id: str | int | None = Field(None, alias='teamId')
    matchup: MatchupSummary | None = None
    team1_totals: TeamTotals | None = Field(None, alias='team1Totals')
    team1_roster: list[RosterPlayer] = Field(default_factory=list, alias='team1Roster')

    @field_validator('team1_roster', mode='before')
    @classmethod
    def drop_null_roster(cls, v):
        """Treat a null roster as empty."""
        return v or []

    class Config:
        extra = 'ignore'
        populate_by_name = True


class SeasonMetadata(BaseModel):
    """Week boundaries for one season."""

    regular_season_end_week: int = Field(..., ge=0, le=18, alias='regularSeasonEndWeek')
    season_end_week: int = Field(..., ge=0, le=18, alias='seasonEndWeek')
    has_full_historical_details: bool = Field(False, alias='hasFullHistoricalDetails')

    class Config:
        extra = 'ignore'
        populate_by_name = True


class LeagueMetadata(BaseModel):
    """Complete league-metadata.json file structure."""

    name: str = ''
    current_season_id: int | None = Field(None, alias='currentSeasonId')
    seasons: dict[str, SeasonMetadata] = Field(default_factory=dict)

    class Config:
        extra = 'ignore'
        populate_by_name = True


class OwnersFile(RootModel[dict[str, Owner]]):
    """Complete owners-data.json file structure: manager name -> owner."""


class SeasonStandingsFile(RootModel[dict[str, dict[str, SeasonStandingsEntry]]]):
    """Complete season_standings-data.json: season id -> owner id -> entry."""


class WeeklyMatchupsFile(RootModel[dict[str, dict[str, dict[str, WeeklyMatchupEntry]]]]):
    """Complete weekly_matchups-data.json: season id -> week key -> team key -> entry."""


class LeagueConfig(BaseModel):
    """League history configuration settings."""

    league_name: str = Field('League History', min_length=1)
    data_dir: str = 'data'
    owners_file: str = 'owners-data.json'
    standings_file: str = 'season_standings-data.json'
    weekly_matchups_file: str = 'weekly_matchups-data.json'
    league_metadata_file: str = 'league-metadata.json'
    score_epsilon: float = Field(1e-6, gt=0, le=0.01)
    pythagorean_exponent: float = Field(2.37, gt=0, le=10)
    records_limit: int = Field(10, ge=1, le=100)
    log_dir: str = 'logs'

    @field_validator('owners_file', 'standings_file', 'weekly_matchups_file', 'league_metadata_file')
    @classmethod
    def validate_json_file_name(cls, v):
        """Ensure source files are JSON."""
        if not v.endswith('.json'):
            raise ValueError(f'Data file must be a .json file, got {v}')
        return v

    class Config:
        extra = 'forbid'
