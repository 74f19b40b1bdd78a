"""Position, event type and game status normalization for store rows."""

from src.models.event import EventType
from src.models.game import COMPLETED_STATUS
from src.models.player import Position

_POSITIONS: dict[str, Position] = {
    "F": Position.FORWARD,
    "C": Position.FORWARD,
    "L": Position.FORWARD,
    "R": Position.FORWARD,
    "LW": Position.FORWARD,
    "RW": Position.FORWARD,
    "W": Position.FORWARD,
    "D": Position.DEFENSE,
    "LD": Position.DEFENSE,
    "RD": Position.DEFENSE,
    "G": Position.GOALIE,
}

# Older rows used these names before the event set was fixed
_LEGACY_EVENT_TYPES: dict[str, EventType] = {
    "blocked_shot": EventType.SHOT_BLOCKED,
    "blocked": EventType.SHOT_BLOCKED,
    "faceoff_won": EventType.FACEOFF_WIN,
    "faceoff_lost": EventType.FACEOFF_LOSS,
    "ga": EventType.GOAL_AGAINST,
}

_COMPLETED_STATES = {"completed", "final", "off"}


def normalize_position(position: str | None) -> Position:
    """Map raw position codes (C, LW, RD, ...) onto F/D/G.

    Raises:
        ValueError: If the code isn't a known position.
    """
    key = (position or "").strip().upper()
    if key not in _POSITIONS:
        raise ValueError(f"Unknown position code: {position!r}")
    return _POSITIONS[key]


def normalize_event_type(event_type: str) -> EventType | None:
    """Map a raw event type onto the closed set, or None if it isn't a stat event."""
    key = event_type.strip().lower()
    try:
        return EventType(key)
    except ValueError:
        return _LEGACY_EVENT_TYPES.get(key)


def normalize_game_status(status: str | None) -> str:
    """Collapse the various 'game is over' spellings to the completed status."""
    key = (status or "").strip().lower()
    if key in _COMPLETED_STATES:
        return COMPLETED_STATUS
    return key or "scheduled"
