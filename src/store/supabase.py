"""Supabase (PostgREST) event store client.

Talks to the project's REST endpoint at {SUPABASE_URL}/rest/v1 with the
service key. Transient failures are retried with exponential backoff;
once retries run out the error surfaces as UpstreamUnavailableError.
"""

import logging
import os
import time
from collections.abc import Sequence
from typing import Any

import httpx

from src.models.event import Event
from src.models.game import Game
from src.models.player import Player, Position
from src.models.team import Team
from src.stats.errors import UpstreamUnavailableError
from src.store.rows import event_from_row, game_from_row, player_from_row, team_from_row

logger = logging.getLogger(__name__)

# Retry configuration
MAX_RETRIES = 3
RETRY_BACKOFF_SECONDS = 2

PLAYER_SELECT = "id,team_id,first_name,last_name,jersey_number,position,active"
GAME_SELECT = (
    "id,season,game_date,home_team_id,away_team_id,home_score,away_score,"
    "status,overtime,shootout"
)
EVENT_SELECT = "game_id,player_id,team_id,event_type,period,time_in_period,event_details,created_at"


def _in_list(values: Sequence[str]) -> str:
    return "in.(" + ",".join(values) + ")"


class SupabaseEventStore:
    """EventStore over Supabase's REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        backoff_seconds: float = RETRY_BACKOFF_SECONDS,
        transport: httpx.BaseTransport | None = None,
        lineup_table: str | None = None,
    ) -> None:
        self.backoff_seconds = backoff_seconds
        self.lineup_table = lineup_table or os.getenv("STATS_LINEUP_TABLE") or None
        self.client = httpx.Client(
            base_url=base_url.rstrip("/") + "/rest/v1",
            timeout=timeout,
            headers={
                "Accept": "application/json",
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            },
            transport=transport,
        )

    @classmethod
    def from_env(cls) -> "SupabaseEventStore":
        url = os.getenv("SUPABASE_URL")
        key = os.getenv("SUPABASE_KEY")
        if not url or not key:
            raise UpstreamUnavailableError("SUPABASE_URL and SUPABASE_KEY must be set")
        return cls(url, key)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "SupabaseEventStore":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _get(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        """GET rows from a table with retry on transport errors and 5xx responses."""
        last_exception: Exception | None = None

        for attempt in range(MAX_RETRIES):
            try:
                response = self.client.get(f"/{table}", params=params)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                if e.response.status_code < 500:
                    raise UpstreamUnavailableError(
                        f"Event store rejected query on {table}: {e.response.status_code}"
                    ) from e
                last_exception = e
            except httpx.TransportError as e:
                last_exception = e

            if attempt == MAX_RETRIES - 1:
                break
            wait = self.backoff_seconds * (2**attempt)
            logger.warning(
                "Request to %s failed (attempt %d/%d): %s. Retrying in %ss.",
                table,
                attempt + 1,
                MAX_RETRIES,
                last_exception,
                wait,
            )
            time.sleep(wait)

        raise UpstreamUnavailableError(f"Event store unavailable while reading {table}") from last_exception

    def get_player(self, player_id: str) -> Player | None:
        rows = self._get("players", {"select": PLAYER_SELECT, "id": f"eq.{player_id}"})
        return player_from_row(rows[0]) if rows else None

    def get_team(self, team_id: str) -> Team | None:
        rows = self._get("teams", {"select": "id,name,season,division", "id": f"eq.{team_id}"})
        return team_from_row(rows[0]) if rows else None

    def get_roster(self, team_id: str, position: Position | None = None) -> list[Player]:
        params = {
            "select": PLAYER_SELECT,
            "team_id": f"eq.{team_id}",
            "active": "eq.true",
            "order": "jersey_number",
        }
        if position is not None:
            params["position"] = f"eq.{position.value}"
        return [player_from_row(r) for r in self._get("players", params)]

    def _lineups(self, game_ids: list[str]) -> dict[str, frozenset[str]]:
        if not self.lineup_table or not game_ids:
            return {}
        rows = self._get(self.lineup_table, {"select": "game_id,player_id", "game_id": _in_list(game_ids)})
        lineups: dict[str, set[str]] = {}
        for row in rows:
            lineups.setdefault(str(row["game_id"]), set()).add(str(row["player_id"]))
        return {game_id: frozenset(ids) for game_id, ids in lineups.items()}

    def get_games(self, team_id: str, season: str) -> list[Game]:
        rows = self._get("games", {
            "select": GAME_SELECT,
            "season": f"eq.{season}",
            "or": f"(home_team_id.eq.{team_id},away_team_id.eq.{team_id})",
            "order": "game_date",
        })
        lineups = self._lineups([str(r["id"]) for r in rows])
        return [game_from_row(r, lineups.get(str(r["id"]))) for r in rows]

    def get_events(self, game_ids: Sequence[str]) -> list[Event]:
        if not game_ids:
            return []
        rows = self._get("game_events", {
            "select": EVENT_SELECT,
            "game_id": _in_list(game_ids),
            "order": "game_id,period,time_in_period",
        })
        events = (event_from_row(r) for r in rows)
        return [e for e in events if e is not None]
