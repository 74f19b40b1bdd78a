from dataclasses import dataclass, field
from datetime import datetime

from src.models.player import Player


@dataclass
class BasePlayerStats:
    """Counting stats for one player, team and season.

    games_played counts completed games where the player recorded an event
    or appears in the game lineup. Without lineup data, a player who dressed
    but recorded nothing in a game is not credited with that game.
    """

    player_id: str
    team_id: str
    season: str
    games_played: int = 0
    goals: int = 0
    assists: int = 0
    points: int = 0
    shots: int = 0
    shots_on_goal: int = 0
    penalty_minutes: int = 0
    plus_minus: int = 0  # approximate: needs players_on_ice on goal events, no shift data
    faceoffs_won: int = 0
    faceoffs_lost: int = 0
    hits: int = 0
    blocked: int = 0
    giveaways: int = 0
    takeaways: int = 0


@dataclass
class SkaterStats:
    """Position-specific stats for forwards and defense."""

    player_id: str
    time_on_ice: float = 0.0  # minutes
    power_play_goals: int = 0
    power_play_assists: int = 0
    short_handed_goals: int = 0
    short_handed_assists: int = 0
    game_winning_goals: int = 0
    overtime_goals: int = 0


@dataclass
class GoalieStats:
    """Position-specific stats for goaltenders."""

    player_id: str
    games_started: int = 0
    saves: int = 0
    shots_against: int = 0
    goals_against: int = 0
    shutouts: int = 0
    wins: int = 0
    losses: int = 0
    overtime_losses: int = 0
    time_on_ice: float = 0.0  # minutes


SkillStats = SkaterStats | GoalieStats


@dataclass
class DerivedStats:
    """Rates and percentages. A field is None when its denominator is zero
    or it does not apply to the player's position."""

    points_per_game: float | None = None
    penalty_minutes_per_game: float | None = None

    # Skaters
    shooting_percentage: float | None = None
    shots_per_game: float | None = None
    hits_per_game: float | None = None
    blocked_per_game: float | None = None
    plus_minus_per_game: float | None = None
    time_on_ice_per_game: float | None = None
    power_play_points: int | None = None
    short_handed_points: int | None = None
    faceoff_percentage: float | None = None

    # Goalies
    save_percentage: float | None = None
    goals_against_average: float | None = None
    shutout_percentage: float | None = None
    win_percentage: float | None = None
    shots_against_per_game: float | None = None
    saves_per_game: float | None = None


@dataclass
class AdvancedMetrics:
    """Shot-quality and per-sixty metrics for a player-season."""

    player_id: str
    season: str
    expected_goals: float = 0.0
    actual_goals: int = 0
    goals_difference: float = 0.0
    even_strength_goals: int = 0
    even_strength_assists: int = 0
    primary_assist_percentage: float | None = None
    individual_shot_attempts: int = 0
    points_per_sixty: float | None = None
    shots_blocked_per_sixty: float | None = None
    hits_per_sixty: float | None = None
    takeaways_per_sixty: float | None = None
    giveaways_per_sixty: float | None = None


@dataclass
class PlayerStatsComplete:
    """Everything computed for a player in one call."""

    player: Player
    base_stats: BasePlayerStats
    skill_stats: SkillStats
    derived_stats: DerivedStats
    advanced_metrics: AdvancedMetrics | None = None  # only when requested
    last_updated: datetime = field(default_factory=datetime.now)


@dataclass
class GameLogEntry:
    """One row of a player's game-by-game log."""

    game_id: str
    date: str
    opponent: str
    is_home: bool
    team_score: int
    opponent_score: int
    goals: int = 0
    assists: int = 0
    points: int = 0
    shots: int = 0
    penalty_minutes: int = 0
    plus_minus: int = 0
    time_on_ice: float = 0.0  # minutes
    saves: int = 0
    shots_against: int = 0
    goals_against: int = 0
