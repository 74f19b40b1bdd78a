from dataclasses import dataclass, field
from datetime import date

COMPLETED_STATUS = "completed"
REGULATION_PERIODS = 3
REGULATION_MINUTES = 60.0
OVERTIME_MINUTES = 5.0


@dataclass
class Game:
    """A scheduled or played game between two teams."""

    game_id: str
    season: str
    game_date: date
    home_team_id: str
    away_team_id: str
    home_score: int | None = None
    away_score: int | None = None
    status: str = "scheduled"  # "scheduled", "in_progress", "completed"
    overtime: bool = False
    shootout: bool = False
    lineup: frozenset[str] | None = field(default=None)  # player ids who dressed, when recorded

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED_STATUS

    @property
    def length_minutes(self) -> float:
        return REGULATION_MINUTES + (OVERTIME_MINUTES if self.overtime or self.shootout else 0.0)

    def involves(self, team_id: str) -> bool:
        return team_id in (self.home_team_id, self.away_team_id)

    def is_home(self, team_id: str) -> bool:
        return self.home_team_id == team_id

    def opponent_of(self, team_id: str) -> str:
        return self.away_team_id if self.is_home(team_id) else self.home_team_id

    def scores_for(self, team_id: str) -> tuple[int, int]:
        """Return (team score, opponent score), treating missing scores as 0."""
        home = self.home_score or 0
        away = self.away_score or 0
        return (home, away) if self.is_home(team_id) else (away, home)
