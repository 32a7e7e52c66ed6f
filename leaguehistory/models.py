"""Derived data models for league history."""

from dataclasses import dataclass, field

from .utils import normalize_team_name


@dataclass
class PairRecord:
    """Win/loss/tie record from one identity's perspective against another."""
    wins: int = 0
    losses: int = 0
    ties: int = 0

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.ties

    def add_result(self, result: int) -> None:
        """Apply a comparison result (1 win, -1 loss, 0 tie)."""
        if result > 0:
            self.wins += 1
        elif result < 0:
            self.losses += 1
        else:
            self.ties += 1

    def add(self, other: 'PairRecord') -> None:
        self.wins += other.wins
        self.losses += other.losses
        self.ties += other.ties

    def flipped(self) -> 'PairRecord':
        """The same record seen from the opponent's side."""
        return PairRecord(wins=self.losses, losses=self.wins, ties=self.ties)

    def copy(self) -> 'PairRecord':
        return PairRecord(self.wins, self.losses, self.ties)


@dataclass
class OwnerRecordTotals:
    """Accumulated totals for one owner over one or more seasons."""
    wins: int = 0
    losses: int = 0
    ties: int = 0
    all_play_wins: int = 0
    all_play_losses: int = 0
    all_play_ties: int = 0
    championships: int = 0
    high_points: float = 0
    low_points: float = 0
    moves: int = 0
    trades: int = 0
    points_for: float = 0.0
    points_against: float = 0.0

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def all_play_games(self) -> int:
        return self.all_play_wins + self.all_play_losses + self.all_play_ties

    def add(self, other: 'OwnerRecordTotals') -> None:
        """Add every counter from another totals object."""
        self.wins += other.wins
        self.losses += other.losses
        self.ties += other.ties
        self.all_play_wins += other.all_play_wins
        self.all_play_losses += other.all_play_losses
        self.all_play_ties += other.all_play_ties
        self.championships += other.championships
        self.high_points += other.high_points
        self.low_points += other.low_points
        self.moves += other.moves
        self.trades += other.trades
        self.points_for += other.points_for
        self.points_against += other.points_against

    def add_standings_only(self, other: 'OwnerRecordTotals') -> None:
        """Add the fields that only season standings carry."""
        self.championships += other.championships
        self.moves += other.moves
        self.trades += other.trades

    def record_matches(self, wins: int, losses: int, ties: int) -> bool:
        return self.wins == wins and self.losses == losses and self.ties == ties


@dataclass
class TeamOwnerIndex:
    """Normalized team name -> owner id, plus names quarantined as ambiguous."""
    owner_by_team: dict[str, str] = field(default_factory=dict)
    ambiguous_teams: set[str] = field(default_factory=set)

    def add(self, team_name, owner_id: str) -> None:
        """
        Record that owner_id used team_name.

        A name claimed by a second, different owner is removed from the map
        and quarantined; it never resolves again for this index.
        """
        key = normalize_team_name(team_name)
        if not key or not owner_id:
            return
        if key in self.ambiguous_teams:
            return

        existing = self.owner_by_team.get(key)
        if existing is not None and existing != owner_id:
            del self.owner_by_team[key]
            self.ambiguous_teams.add(key)
            return

        self.owner_by_team[key] = owner_id

    def __len__(self) -> int:
        return len(self.owner_by_team)


@dataclass
class DerivedSeasonTotals:
    """Season totals replayed from weekly matchups."""
    has_regular_season_history: bool = False
    totals_by_owner: dict[str, OwnerRecordTotals] = field(default_factory=dict)
    games_counted: int = 0


@dataclass
class RecordMatrix:
    """
    Pairwise records between teams (or owners).

    team_names is the display order. Lookups accept a display name; names
    are mapped to internal keys through key_by_name, and when
    normalize_keys is set any spelling of a team name is accepted.
    """
    team_names: list[str]
    weeks_count: int
    records: dict[tuple[str, str], PairRecord] = field(default_factory=dict)
    key_by_name: dict[str, str] = field(default_factory=dict)
    normalize_keys: bool = False

    def _key(self, name: str) -> str:
        if name in self.key_by_name:
            return self.key_by_name[name]
        return normalize_team_name(name) if self.normalize_keys else name

    @property
    def team_keys(self) -> list[str]:
        return [self._key(name) for name in self.team_names]

    def get_record(self, row: str, col: str) -> PairRecord:
        """Record of the row team against the column team."""
        record = self.records.get((self._key(row), self._key(col)))
        return record.copy() if record else PairRecord()

    def get_total_record(self, team: str) -> PairRecord:
        """Sum of the team's records against every other team."""
        key = self._key(team)
        total = PairRecord()
        for other in self.team_keys:
            if other == key:
                continue
            record = self.records.get((key, other))
            if record:
                total.add(record)
        return total


@dataclass
class AllTimeRecordRow:
    """One owner's row in the all-time records table."""
    owner_name: str
    total_seasons: int
    wins: int
    losses: int
    ties: int
    all_play_wins: int
    all_play_losses: int
    all_play_win_pct: float
    championships: int
    high_points: float
    low_points: float
    moves: int
    trades: int
    points_for: float
    avg_points_per_season: float
    points_against: float
    points_diff: float
    gp: int
    win_pct: float
    ppg_avg: float


@dataclass
class OwnerConsistencyIndex:
    """Career average of per-season weekly scoring spread."""
    owner_name: str
    seasons_included: int
    average_season_iqr: float
    average_ppg_std_dev: float


@dataclass
class ChampionTimelineEntry:
    year: str
    owner_name: str
    team_name: str


@dataclass
class SeasonHighPointsEntry:
    year: str
    points: float
    owner_name: str


@dataclass
class StarterSingleGameRecord:
    owner_name: str
    player_name: str
    points: float
    year: int
    week: int


@dataclass
class StarterSeasonRecord:
    owner_name: str
    player_name: str
    points: float
    year: int


@dataclass
class LuckRow:
    """Career actual wins against Pythagorean expected wins."""
    owner_name: str
    expected_wins: float
    actual_wins: int
    career_luck: float


@dataclass
class AllPlayCareerRecordRow:
    owner_name: str
    all_play_win_pct: float
    actual_win_pct: float


@dataclass
class WeeklyAllPlayWins:
    """Per-week all-play wins (opponents outscored) for each team in a season."""
    week_numbers: list[int]
    team_names: list[str]
    weekly_wins_by_team: dict[str, list[int]] = field(default_factory=dict)
    cumulative_by_team: dict[str, list[int]] = field(default_factory=dict)


@dataclass
class MarginBin:
    label: str
    min: int
    max: int
    count: int


@dataclass
class PowerRankingRow:
    """Season power ranking: playoff + regular season + points-for ranks."""
    owner_id: str
    team_name: str
    manager_name: str
    wins: int
    playoff_rank: int | None
    regular_season_rank: int | None
    points_for: float
    points_for_rank: int
    total: int | None


@dataclass
class WinPctPoint:
    """One owner's season record plus running career record through that season."""
    season: int
    wins: int
    losses: int
    ties: int
    win_pct: float
    career_wins: int
    career_losses: int
    career_ties: int
    career_win_pct: float

    @property
    def games_played(self) -> int:
        return self.wins + self.losses + self.ties


@dataclass
class WinPctSeries:
    owner_name: str
    points: list[WinPctPoint | None]


@dataclass
class WinPctOverTime:
    """Per-owner win % by season; a None point means the owner sat that season out."""
    seasons: list[int]
    series: list[WinPctSeries]


@dataclass
class HighLowPoints:
    """Lowest and highest regular-season weekly score for a season or a team."""
    label: str
    min_points: float
    max_points: float


@dataclass
class ScatterPoint:
    """Points for vs points against for one team (season) or owner (career)."""
    name: str
    points_for: float
    points_against: float
    expected_wins: float
    actual_wins: int
    luck: float

    @property
    def points_diff(self) -> float:
        return self.points_for - self.points_against


@dataclass
class PointsScatter:
    points: list[ScatterPoint]
    avg_points_for: float
    avg_points_against: float
