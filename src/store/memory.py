"""In-memory event store, for tests and embedding the engine without a database."""

from collections.abc import Iterable, Sequence

from src.models.event import Event
from src.models.game import Game
from src.models.player import Player, Position
from src.models.team import Team


class InMemoryEventStore:
    """EventStore backed by plain lists. Counts queries so callers can assert on them."""

    def __init__(
        self,
        players: Iterable[Player] = (),
        teams: Iterable[Team] = (),
        games: Iterable[Game] = (),
        events: Iterable[Event] = (),
    ) -> None:
        self.players: dict[str, Player] = {p.player_id: p for p in players}
        self.teams: dict[str, Team] = {t.team_id: t for t in teams}
        self.games: dict[str, Game] = {g.game_id: g for g in games}
        self.events: list[Event] = list(events)
        self.query_count = 0

    def get_player(self, player_id: str) -> Player | None:
        self.query_count += 1
        return self.players.get(player_id)

    def get_team(self, team_id: str) -> Team | None:
        self.query_count += 1
        return self.teams.get(team_id)

    def get_roster(self, team_id: str, position: Position | None = None) -> list[Player]:
        self.query_count += 1
        return [
            p for p in self.players.values()
            if p.team_id == team_id and p.active and (position is None or p.position is position)
        ]

    def get_games(self, team_id: str, season: str) -> list[Game]:
        self.query_count += 1
        return [g for g in self.games.values() if g.season == season and g.involves(team_id)]

    def get_events(self, game_ids: Sequence[str]) -> list[Event]:
        self.query_count += 1
        wanted = set(game_ids)
        return [e for e in self.events if e.game_id in wanted]
