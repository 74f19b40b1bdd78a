from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class EventType(StrEnum):
    """Closed set of play-by-play event types recorded during a game."""

    GOAL = "goal"
    ASSIST = "assist"
    SHOT = "shot"
    SHOT_BLOCKED = "shot_blocked"
    HIT = "hit"
    TAKEAWAY = "takeaway"
    GIVEAWAY = "giveaway"
    FACEOFF_WIN = "faceoff_win"
    FACEOFF_LOSS = "faceoff_loss"
    PENALTY = "penalty"
    PENALTY_SHOT = "penalty_shot"
    SAVE = "save"
    GOAL_AGAINST = "goal_against"


class Strength(StrEnum):
    """Manpower situation attached to an event's details."""

    EVEN = "even"
    POWER_PLAY = "power_play"
    SHORT_HANDED = "short_handed"

    @classmethod
    def parse(cls, value: object) -> "Strength":
        """Parse a strength detail, accepting legacy spellings. Missing means even."""
        if value is None or value == "":
            return cls.EVEN
        key = str(value).strip().lower()
        return _STRENGTH_ALIASES.get(key, cls.EVEN)


_STRENGTH_ALIASES: dict[str, Strength] = {
    "even": Strength.EVEN,
    "ev": Strength.EVEN,
    "power_play": Strength.POWER_PLAY,
    "powerplay": Strength.POWER_PLAY,
    "pp": Strength.POWER_PLAY,
    "short_handed": Strength.SHORT_HANDED,
    "shorthanded": Strength.SHORT_HANDED,
    "sh": Strength.SHORT_HANDED,
}


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass(frozen=True)
class Event:
    """A single immutable play-by-play row."""

    game_id: str
    player_id: str
    team_id: str
    event_type: EventType
    period: int = 1
    time_in_period: str | None = None  # "MM:SS" elapsed
    details: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)
    created_at: datetime | None = None

    def detail(self, key: str, default: Any = None) -> Any:
        """Read a details value by snake_case key, falling back to camelCase."""
        if key in self.details:
            return self.details[key]
        return self.details.get(_camel(key), default)

    @property
    def strength(self) -> Strength:
        return Strength.parse(self.detail("strength"))
