from dataclasses import dataclass
from enum import StrEnum


class Position(StrEnum):
    """Season-long position classification. Forwards and defense share the skater shape."""

    FORWARD = "F"
    DEFENSE = "D"
    GOALIE = "G"

    @property
    def is_skater(self) -> bool:
        return self is not Position.GOALIE


@dataclass
class Player:
    """A rostered player on an amateur team."""

    player_id: str
    team_id: str
    first_name: str
    last_name: str
    position: Position
    jersey_number: int | None = None
    active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_goalie(self) -> bool:
        return self.position is Position.GOALIE
