"""Filter options accepted by every stats computation."""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum

from src.models.event import Strength


class SituationalStrength(StrEnum):
    ALL = "all"
    EVEN = "even"
    POWERPLAY = "powerplay"
    PENALTY_KILL = "penalty_kill"

    def matches(self, strength: Strength) -> bool:
        if self is SituationalStrength.ALL:
            return True
        return _STRENGTH_FOR_SITUATION[self] is strength


_STRENGTH_FOR_SITUATION: dict[SituationalStrength, Strength] = {
    SituationalStrength.EVEN: Strength.EVEN,
    SituationalStrength.POWERPLAY: Strength.POWER_PLAY,
    SituationalStrength.PENALTY_KILL: Strength.SHORT_HANDED,
}


class HomeAway(StrEnum):
    HOME = "home"
    AWAY = "away"


@dataclass(frozen=True)
class DateRange:
    """Inclusive game-date window."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class StatsOptions:
    """Event filters. The default instance applies no filtering."""

    situational_strength: SituationalStrength = SituationalStrength.ALL
    home_away_only: HomeAway | None = None
    date_range: DateRange | None = None
    opponents: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_default(self) -> bool:
        return self == StatsOptions()

    def cache_token(self) -> str:
        """Stable string form used in cache keys."""
        parts = [
            self.situational_strength.value,
            self.home_away_only.value if self.home_away_only else "-",
            f"{self.date_range.start}:{self.date_range.end}" if self.date_range else "-",
            ",".join(sorted(self.opponents)) or "-",
        ]
        return "|".join(parts)
