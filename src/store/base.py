"""Event store interface and backend selector."""

import os
from collections.abc import Sequence
from typing import Protocol

from src.models.event import Event
from src.models.game import Game
from src.models.player import Player, Position
from src.models.team import Team


class EventStore(Protocol):
    """Read-only access to players, teams, games and their events.

    Implementations raise UpstreamUnavailableError when the backing store fails.
    """

    def get_player(self, player_id: str) -> Player | None: ...

    def get_team(self, team_id: str) -> Team | None: ...

    def get_roster(self, team_id: str, position: Position | None = None) -> list[Player]:
        """Active players on the team, optionally of one position."""
        ...

    def get_games(self, team_id: str, season: str) -> list[Game]:
        """Every game of the team in the season, any status."""
        ...

    def get_events(self, game_ids: Sequence[str]) -> list[Event]:
        """All events, both teams, of the given games."""
        ...


def get_store(backend: str | None = None) -> EventStore:
    """Return the event store for the configured backend.

    Args:
        backend: 'postgres', 'supabase' or 'memory'. Falls back to the
                 STATS_BACKEND env var, then defaults to 'postgres'.

    Returns:
        A ready-to-use store instance.
    """
    if backend is None:
        backend = os.environ.get("STATS_BACKEND", "postgres")

    if backend == "supabase":
        from src.store.supabase import SupabaseEventStore
        return SupabaseEventStore.from_env()
    if backend == "memory":
        from src.store.memory import InMemoryEventStore
        return InMemoryEventStore()

    from src.store.postgres import PostgresEventStore
    return PostgresEventStore()
