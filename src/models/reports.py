"""Request and result records for leaderboards, comparisons and trends."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

DEFAULT_COMPARISON_CATEGORIES: tuple[str, ...] = (
    "gamesPlayed",
    "goals",
    "assists",
    "points",
    "shots",
    "shootingPercentage",
    "pointsPerGame",
    "penaltyMinutes",
)

MAX_COMPARISON_PLAYERS = 6


@dataclass(frozen=True)
class LeaderboardQuery:
    team_id: str
    season: str
    category: str = "points"
    position: str = "all"  # "all", "F", "D", "G"
    limit: int = 10
    min_games: int = 5
    recalculate: bool = False


@dataclass
class LeaderboardEntry:
    player_id: str
    player_name: str
    jersey_number: int | None
    position: str
    value: float
    games_played: int
    goals: int = 0
    assists: int = 0
    points: int = 0
    shooting_percentage: float | None = None
    save_percentage: float | None = None


@dataclass
class Leaderboard:
    category: str
    position: str
    min_games: int
    leaders: list[LeaderboardEntry] = field(default_factory=list)
    excluded: list[str] = field(default_factory=list)  # player ids whose stats failed
    last_updated: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class ComparisonRequest:
    player_ids: tuple[str, ...]
    team_id: str
    season: str
    categories: tuple[str, ...] | None = None


@dataclass
class ComparisonEntry:
    player_id: str
    player_name: str
    jersey_number: int | None
    position: str
    values: dict[str, float | None] = field(default_factory=dict)
    ranks: dict[str, int | None] = field(default_factory=dict)


@dataclass
class Comparison:
    comparisons: list[ComparisonEntry]
    team_averages: dict[str, float]
    team_id: str
    season: str
    categories: list[str]
    excluded: list[str] = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def player_count(self) -> int:
        return len(self.comparisons)


class TrendDirection(StrEnum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


@dataclass
class TrendPoint:
    game_id: str
    date: str
    value: float
    opponent: str
    running_average: float


@dataclass
class Trend:
    player_id: str
    stat: str
    games: list[TrendPoint] = field(default_factory=list)
    overall_trend: TrendDirection = TrendDirection.STABLE
    trend_percentage: float = 0.0


@dataclass
class TeamRankings:
    """A player's 1-based rank within the active roster per category."""

    goals: int
    assists: int
    points: int
    plus_minus: int
    penalty_minutes: int
