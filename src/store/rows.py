"""Convert raw store rows (SQL or PostgREST JSON) into model dataclasses."""

import json
import logging
from datetime import date, datetime
from typing import Any

from src.models.event import Event
from src.models.game import Game
from src.models.player import Player
from src.models.team import Team
from src.transform.clean import normalize_player_name
from src.transform.normalize import normalize_event_type, normalize_game_status, normalize_position

logger = logging.getLogger(__name__)


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _as_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _as_int(value: Any) -> int | None:
    if value is None:
        return None
    return int(value)


def player_from_row(row: dict[str, Any]) -> Player:
    return Player(
        player_id=str(row["id"]),
        team_id=str(row["team_id"]),
        first_name=normalize_player_name(row.get("first_name") or ""),
        last_name=normalize_player_name(row.get("last_name") or ""),
        position=normalize_position(row.get("position")),
        jersey_number=_as_int(row.get("jersey_number")),
        active=bool(row.get("active", True)),
    )


def team_from_row(row: dict[str, Any]) -> Team:
    return Team(
        team_id=str(row["id"]),
        name=row.get("name") or "",
        season=str(row.get("season") or ""),
        division=row.get("division"),
    )


def game_from_row(row: dict[str, Any], lineup: frozenset[str] | None = None) -> Game:
    return Game(
        game_id=str(row["id"]),
        season=str(row["season"]),
        game_date=_as_date(row["game_date"]),
        home_team_id=str(row["home_team_id"]),
        away_team_id=str(row["away_team_id"]),
        home_score=_as_int(row.get("home_score")),
        away_score=_as_int(row.get("away_score")),
        status=normalize_game_status(row.get("status")),
        overtime=bool(row.get("overtime") or False),
        shootout=bool(row.get("shootout") or False),
        lineup=lineup,
    )


def event_from_row(row: dict[str, Any]) -> Event | None:
    """Build an Event, or None for rows that aren't stat events (e.g. legacy shifts)."""
    event_type = normalize_event_type(str(row["event_type"]))
    if event_type is None:
        logger.debug("Skipping non-stat event type %r", row["event_type"])
        return None

    details = row.get("event_details") or row.get("details") or {}
    if isinstance(details, str):
        details = json.loads(details)

    return Event(
        game_id=str(row["game_id"]),
        player_id=str(row["player_id"]),
        team_id=str(row["team_id"]),
        event_type=event_type,
        period=_as_int(row.get("period")) or 1,
        time_in_period=row.get("time_in_period"),
        details=details,
        created_at=_as_datetime(row.get("created_at")),
    )
