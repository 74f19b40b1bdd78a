"""Tests for row decoding and the event store backends."""

import json
from datetime import date

import httpx
import pytest
from sqlalchemy import create_engine, text

from src.models.event import EventType
from src.models.player import Position
from src.stats.errors import UpstreamUnavailableError
from src.store.base import get_store
from src.store.memory import InMemoryEventStore
from src.store.postgres import PostgresEventStore
from src.store.rows import event_from_row, game_from_row, player_from_row
from src.store.supabase import SupabaseEventStore

PLAYER_ROW = {
    "id": "p1", "team_id": "t1", "first_name": " Zoé ", "last_name": "Lavoie",
    "jersey_number": 17, "position": "LW", "active": True,
}
GAME_ROW = {
    "id": "g1", "season": "2024-25", "game_date": "2025-01-04", "home_team_id": "t1",
    "away_team_id": "t2", "home_score": 3, "away_score": 2, "status": "final",
    "overtime": False, "shootout": None,
}
EVENT_ROW = {
    "game_id": "g1", "player_id": "p1", "team_id": "t1", "event_type": "goal", "period": 2,
    "time_in_period": "05:12", "event_details": {"shotType": "wrist", "strength": "pp"},
    "created_at": "2025-01-04T19:30:00Z",
}


class TestRows:
    def test_player_row(self) -> None:
        player = player_from_row(PLAYER_ROW)
        assert player.full_name == "Zoe Lavoie"
        assert player.position is Position.FORWARD

    def test_game_row(self) -> None:
        game = game_from_row(GAME_ROW)
        assert game.is_completed
        assert game.game_date == date(2025, 1, 4)
        assert game.shootout is False

    def test_event_row_with_camel_case_details(self) -> None:
        event = event_from_row(EVENT_ROW)
        assert event.event_type is EventType.GOAL
        assert event.detail("shot_type") == "wrist"
        assert event.strength.value == "power_play"
        assert event.created_at.year == 2025

    def test_event_details_as_json_string(self) -> None:
        event = event_from_row({**EVENT_ROW, "event_details": json.dumps({"on_goal": True})})
        assert event.detail("on_goal") is True

    def test_non_stat_event_skipped(self) -> None:
        assert event_from_row({**EVENT_ROW, "event_type": "shift"}) is None


class TestGetStore:
    def test_memory_backend(self) -> None:
        assert isinstance(get_store("memory"), InMemoryEventStore)

    def test_supabase_requires_credentials(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_KEY", raising=False)
        with pytest.raises(UpstreamUnavailableError):
            get_store("supabase")


def _make_sqlite_store(tmp_path, lineup_table: str | None = None) -> PostgresEventStore:
    engine = create_engine(f"sqlite:///{tmp_path / 'stats.db'}")
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE players (id TEXT, team_id TEXT, first_name TEXT, last_name TEXT, "
            "jersey_number INTEGER, position TEXT, active BOOLEAN)"
        ))
        conn.execute(text("CREATE TABLE teams (id TEXT, name TEXT, season TEXT, division TEXT)"))
        conn.execute(text(
            "CREATE TABLE games (id TEXT, season TEXT, game_date TEXT, home_team_id TEXT, "
            "away_team_id TEXT, home_score INTEGER, away_score INTEGER, status TEXT, "
            "overtime BOOLEAN, shootout BOOLEAN)"
        ))
        conn.execute(text(
            "CREATE TABLE game_events (game_id TEXT, player_id TEXT, team_id TEXT, event_type TEXT, "
            "period INTEGER, time_in_period TEXT, event_details TEXT, created_at TEXT)"
        ))
        conn.execute(text("CREATE TABLE game_lineups (game_id TEXT, player_id TEXT)"))
        conn.execute(text(
            "INSERT INTO players VALUES "
            "('p1', 't1', 'Ada', 'Lind', 9, 'C', 1), ('p2', 't1', 'Bo', 'Berg', NULL, 'D', 0), "
            "('p3', 't1', 'Cy', 'Dahl', 30, 'G', 1)"
        ))
        conn.execute(text("INSERT INTO teams VALUES ('t1', 'Ice Hawks', '2024-25', NULL)"))
        conn.execute(text(
            "INSERT INTO games VALUES "
            "('g1', '2024-25', '2025-01-04', 't1', 't2', 3, 2, 'completed', 0, 0), "
            "('g2', '2024-25', '2025-01-11', 't3', 't1', NULL, NULL, 'scheduled', 0, 0)"
        ))
        conn.execute(text(
            "INSERT INTO game_events VALUES "
            "('g1', 'p1', 't1', 'goal', 1, '04:00', '{\"shot_type\": \"snap\"}', NULL), "
            "('g1', 'p1', 't1', 'shift', 1, '05:00', NULL, NULL)"
        ))
        conn.execute(text("INSERT INTO game_lineups VALUES ('g1', 'p1'), ('g1', 'p3')"))
    return PostgresEventStore(engine=engine, lineup_table=lineup_table)


class TestPostgresEventStore:
    def test_get_player_and_team(self, tmp_path) -> None:
        store = _make_sqlite_store(tmp_path)
        assert store.get_player("p1").jersey_number == 9
        assert store.get_player("nobody") is None
        assert store.get_team("t1").name == "Ice Hawks"

    def test_roster_is_active_only(self, tmp_path) -> None:
        store = _make_sqlite_store(tmp_path)
        assert [p.player_id for p in store.get_roster("t1")] == ["p1", "p3"]
        assert [p.player_id for p in store.get_roster("t1", Position.GOALIE)] == ["p3"]

    def test_games_home_and_away(self, tmp_path) -> None:
        store = _make_sqlite_store(tmp_path, lineup_table="game_lineups")
        games = store.get_games("t1", "2024-25")
        assert [g.game_id for g in games] == ["g1", "g2"]
        assert games[0].lineup == frozenset({"p1", "p3"})
        assert games[1].home_score is None

    def test_events_skip_non_stat_rows(self, tmp_path) -> None:
        events = _make_sqlite_store(tmp_path).get_events(["g1"])
        assert len(events) == 1
        assert events[0].detail("shot_type") == "snap"

    def test_driver_error_wrapped(self, tmp_path) -> None:
        store = _make_sqlite_store(tmp_path, lineup_table="missing_table")
        with pytest.raises(UpstreamUnavailableError):
            store.get_games("t1", "2024-25")


def _make_supabase(handler, **kwargs) -> SupabaseEventStore:
    return SupabaseEventStore(
        "https://example.supabase.co",
        "service-key",
        backoff_seconds=0,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestSupabaseEventStore:
    def test_headers_and_filters(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[PLAYER_ROW])

        with _make_supabase(handler) as store:
            player = store.get_player("p1")

        assert player.player_id == "p1"
        request = seen[0]
        assert request.url.path == "/rest/v1/players"
        assert request.url.params["id"] == "eq.p1"
        assert request.headers["apikey"] == "service-key"
        assert request.headers["Authorization"] == "Bearer service-key"

    def test_games_filter_either_side(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["or"] == "(home_team_id.eq.t1,away_team_id.eq.t1)"
            return httpx.Response(200, json=[GAME_ROW])

        with _make_supabase(handler) as store:
            assert [g.game_id for g in store.get_games("t1", "2024-25")] == ["g1"]

    def test_events_in_filter(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["game_id"] == "in.(g1,g2)"
            return httpx.Response(200, json=[EVENT_ROW, {**EVENT_ROW, "event_type": "shift"}])

        with _make_supabase(handler) as store:
            assert len(store.get_events(["g1", "g2"])) == 1

    def test_no_games_no_request(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("unexpected request")

        with _make_supabase(handler) as store:
            assert store.get_events([]) == []

    def test_retries_server_errors(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503)
            return httpx.Response(200, json=[])

        with _make_supabase(handler) as store:
            assert store.get_player("p1") is None
        assert len(calls) == 3

    def test_gives_up_after_retries(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("refused", request=request)

        with _make_supabase(handler) as store, pytest.raises(UpstreamUnavailableError):
            store.get_team("t1")
        assert len(calls) == 3

    def test_client_error_not_retried(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(401, json={"message": "bad key"})

        with _make_supabase(handler) as store, pytest.raises(UpstreamUnavailableError):
            store.get_roster("t1")
        assert len(calls) == 1

    def test_lineups_read_from_lineup_table(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/rest/v1/game_lineups":
                assert request.url.params["game_id"] == "in.(g1)"
                return httpx.Response(200, json=[
                    {"game_id": "g1", "player_id": "p1"},
                    {"game_id": "g1", "player_id": "p3"},
                ])
            return httpx.Response(200, json=[GAME_ROW])

        with _make_supabase(handler, lineup_table="game_lineups") as store:
            games = store.get_games("t1", "2024-25")
        assert games[0].lineup == frozenset({"p1", "p3"})

    def test_no_sleep_after_last_attempt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        waits: list[float] = []
        monkeypatch.setattr("src.store.supabase.time.sleep", waits.append)

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502)

        store = SupabaseEventStore(
            "https://example.supabase.co",
            "service-key",
            backoff_seconds=1,
            transport=httpx.MockTransport(handler),
        )
        with store, pytest.raises(UpstreamUnavailableError):
            store.get_player("p1")
        assert waits == [1, 2]
