"""PostgreSQL event store.

Reads the application's players, teams, games and game_events tables with
parameterised SQL and pandas. Driver errors surface as
UpstreamUnavailableError.
"""

import logging
import os
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import pandas as pd
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from src.models.event import Event
from src.models.game import Game
from src.models.player import Player, Position
from src.models.team import Team
from src.stats.errors import UpstreamUnavailableError
from src.store.rows import event_from_row, game_from_row, player_from_row, team_from_row

logger = logging.getLogger(__name__)

PLAYER_COLUMNS = "id, team_id, first_name, last_name, jersey_number, position, active"
GAME_COLUMNS = (
    "id, season, game_date, home_team_id, away_team_id, "
    "home_score, away_score, status, overtime, shootout"
)
EVENT_COLUMNS = (
    "game_id, player_id, team_id, event_type, period, time_in_period, "
    "event_details, created_at"
)


def _build_connection_string() -> str:
    """Build a PostgreSQL connection string from environment variables."""
    host = os.getenv("POSTGRES_HOST", "localhost")
    port = os.getenv("POSTGRES_PORT", "5432")
    db = os.getenv("POSTGRES_DB", "hockey")
    user = os.getenv("POSTGRES_USER", "hockey")
    password = os.getenv("POSTGRES_PASSWORD", "hockey")
    return f"postgresql://{user}:{password}@{host}:{port}/{db}"


def get_engine(connection_string: str | None = None) -> Engine:
    """Create a SQLAlchemy engine."""
    return create_engine(connection_string or _build_connection_string())


def _records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """DataFrame rows as dicts, with NaN turned into None."""
    clean = df.astype(object).where(df.notna(), None)
    return clean.to_dict(orient="records")  # type: ignore[return-value]


def _in_clause(prefix: str, values: Sequence[str]) -> tuple[str, dict[str, str]]:
    placeholders = ", ".join(f":{prefix}{i}" for i in range(len(values)))
    params = {f"{prefix}{i}": v for i, v in enumerate(values)}
    return placeholders, params


class PostgresEventStore:
    """EventStore over the application database."""

    def __init__(self, engine: Engine | None = None, lineup_table: str | None = None) -> None:
        self.engine = engine or get_engine()
        self.lineup_table = lineup_table or os.getenv("STATS_LINEUP_TABLE") or None

    @contextmanager
    def _query(self, description: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error("Event store query failed (%s): %s", description, e)
            raise UpstreamUnavailableError(f"Event store unavailable while reading {description}") from e

    def _read(self, sql: str, params: dict[str, Any], description: str) -> list[dict[str, Any]]:
        with self._query(description), self.engine.connect() as conn:
            df = pd.read_sql(text(sql), conn, params=params)
        return _records(df)

    def get_player(self, player_id: str) -> Player | None:
        rows = self._read(
            f"SELECT {PLAYER_COLUMNS} FROM players WHERE id = :player_id",  # noqa: S608
            {"player_id": player_id},
            "player",
        )
        return player_from_row(rows[0]) if rows else None

    def get_team(self, team_id: str) -> Team | None:
        rows = self._read(
            "SELECT id, name, season, division FROM teams WHERE id = :team_id",
            {"team_id": team_id},
            "team",
        )
        return team_from_row(rows[0]) if rows else None

    def get_roster(self, team_id: str, position: Position | None = None) -> list[Player]:
        sql = f"SELECT {PLAYER_COLUMNS} FROM players WHERE team_id = :team_id AND active"  # noqa: S608
        params: dict[str, Any] = {"team_id": team_id}
        if position is not None:
            sql += " AND position = :position"
            params["position"] = position.value
        sql += " ORDER BY jersey_number"
        return [player_from_row(r) for r in self._read(sql, params, "roster")]

    def _lineups(self, game_ids: list[str]) -> dict[str, frozenset[str]]:
        if not self.lineup_table or not game_ids:
            return {}
        placeholders, params = _in_clause("g", game_ids)
        rows = self._read(
            f"SELECT game_id, player_id FROM {self.lineup_table} "  # noqa: S608
            f"WHERE game_id IN ({placeholders})",
            params,
            "lineups",
        )
        lineups: dict[str, set[str]] = {}
        for row in rows:
            lineups.setdefault(str(row["game_id"]), set()).add(str(row["player_id"]))
        return {game_id: frozenset(ids) for game_id, ids in lineups.items()}

    def get_games(self, team_id: str, season: str) -> list[Game]:
        rows = self._read(
            f"SELECT {GAME_COLUMNS} FROM games "  # noqa: S608
            "WHERE season = :season AND (home_team_id = :team_id OR away_team_id = :team_id) "
            "ORDER BY game_date",
            {"season": season, "team_id": team_id},
            "games",
        )
        lineups = self._lineups([str(r["id"]) for r in rows])
        return [game_from_row(r, lineups.get(str(r["id"]))) for r in rows]

    def get_events(self, game_ids: Sequence[str]) -> list[Event]:
        if not game_ids:
            return []
        placeholders, params = _in_clause("g", list(game_ids))
        rows = self._read(
            f"SELECT {EVENT_COLUMNS} FROM game_events "  # noqa: S608
            f"WHERE game_id IN ({placeholders}) ORDER BY game_id, period, time_in_period",
            params,
            "events",
        )
        events = (event_from_row(r) for r in rows)
        return [e for e in events if e is not None]
