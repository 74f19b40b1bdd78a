from src.models.event import Event, EventType, Strength
from src.models.game import Game
from src.models.options import DateRange, HomeAway, SituationalStrength, StatsOptions
from src.models.player import Player, Position
from src.models.reports import (
    Comparison,
    ComparisonEntry,
    ComparisonRequest,
    Leaderboard,
    LeaderboardEntry,
    LeaderboardQuery,
    TeamRankings,
    Trend,
    TrendDirection,
    TrendPoint,
)
from src.models.stats import (
    AdvancedMetrics,
    BasePlayerStats,
    DerivedStats,
    GameLogEntry,
    GoalieStats,
    PlayerStatsComplete,
    SkaterStats,
    SkillStats,
)
from src.models.team import Team, TeamStats

__all__ = [
    "AdvancedMetrics",
    "BasePlayerStats",
    "Comparison",
    "ComparisonEntry",
    "ComparisonRequest",
    "DateRange",
    "DerivedStats",
    "Event",
    "EventType",
    "Game",
    "GameLogEntry",
    "GoalieStats",
    "HomeAway",
    "Leaderboard",
    "LeaderboardEntry",
    "LeaderboardQuery",
    "Player",
    "PlayerStatsComplete",
    "Position",
    "SituationalStrength",
    "SkaterStats",
    "SkillStats",
    "StatsOptions",
    "Strength",
    "Team",
    "TeamRankings",
    "TeamStats",
    "Trend",
    "TrendDirection",
    "TrendPoint",
]
