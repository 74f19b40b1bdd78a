"""JSON-ready payloads from result dataclasses, with camelCase keys."""

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any


def to_camel(key: str) -> str:
    """'games_played' -> 'gamesPlayed'. Keys without underscores pass through."""
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _convert(value: Any) -> Any:
    if isinstance(value, dict):
        return {to_camel(str(k)): _convert(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_convert(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, float) and value != value:  # NaN
        return None
    return value


def to_payload(obj: Any) -> Any:
    """Convert a dataclass (or list of them) to plain JSON-compatible data.

    Derived properties the dataclass exposes aren't fields, so callers add
    them explicitly (see player_payload).
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return _convert(asdict(obj))
    if isinstance(obj, (list, tuple)):
        return [to_payload(o) for o in obj]
    return _convert(obj)


def player_payload(stats: Any) -> dict[str, Any]:
    """PlayerStatsComplete with the player's full name and position flattened in."""
    payload = to_payload(stats)
    payload["player"]["fullName"] = stats.player.full_name
    return payload
