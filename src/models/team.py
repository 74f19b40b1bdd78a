from dataclasses import dataclass

# Penalties at or above this length (misconducts) don't create a power play
POWER_PLAY_PENALTY_LIMIT = 10


@dataclass
class Team:
    """A team in a given season."""

    team_id: str
    name: str
    season: str
    division: str | None = None


@dataclass
class TeamStats:
    """Season record and rates for a team, computed from its completed games."""

    team_id: str
    season: str
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    overtime_losses: int = 0
    points: int = 0  # standings points: 2 per win, 1 per OT/SO loss
    goals_for: int = 0
    goals_against: int = 0
    goal_differential: int = 0
    power_play_goals: int = 0
    power_play_opportunities: int = 0
    penalty_kill_goals_against: int = 0
    penalty_kill_opportunities: int = 0
    shots_for: int = 0
    shots_against: int = 0
    faceoff_wins: int = 0
    faceoff_losses: int = 0

    win_percentage: float | None = None
    points_percentage: float | None = None
    points_per_game: float | None = None
    goals_for_per_game: float | None = None
    goals_against_per_game: float | None = None
    power_play_percentage: float | None = None
    penalty_kill_percentage: float | None = None
    shot_differential: int = 0
    faceoff_percentage: float | None = None
