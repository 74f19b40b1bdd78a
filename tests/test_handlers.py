"""Tests for the API handlers and payload serialization."""

from dataclasses import dataclass
from datetime import date

import pytest

from src.api import handlers
from src.api.serialize import to_camel, to_payload
from src.models.options import HomeAway, SituationalStrength
from src.stats.engine import StatisticsEngine
from src.stats.errors import InvalidRequestError
from tests.factories import SEASON, TEAM, make_league


def _make_engine() -> StatisticsEngine:
    return StatisticsEngine(make_league(), max_workers=2)


def _scope(**params) -> dict[str, str]:
    return {"teamId": TEAM, "season": SEASON, **params}


class TestSerialize:
    def test_to_camel(self) -> None:
        assert to_camel("games_played") == "gamesPlayed"
        assert to_camel("points") == "points"

    def test_nested_payload(self) -> None:
        @dataclass
        class Row:
            game_date: date
            per_game: dict
            values: list

        payload = to_payload(Row(date(2025, 1, 2), {"plus_minus": float("nan")}, [SituationalStrength.EVEN]))
        assert payload == {"gameDate": "2025-01-02", "perGame": {"plusMinus": None}, "values": ["even"]}


class TestParseOptions:
    def test_defaults(self) -> None:
        assert handlers.parse_options({}).is_default

    def test_all_filters(self) -> None:
        options = handlers.parse_options({
            "strength": "powerplay",
            "homeAway": "home",
            "startDate": "2025-01-01",
            "endDate": "2025-01-31",
            "opponents": "t2,t3",
        })
        assert options.situational_strength is SituationalStrength.POWERPLAY
        assert options.home_away_only is HomeAway.HOME
        assert options.date_range.end == date(2025, 1, 31)
        assert options.opponents == frozenset({"t2", "t3"})

    def test_unknown_strength(self) -> None:
        with pytest.raises(InvalidRequestError) as exc:
            handlers.parse_options({"strength": "four_on_four"})
        assert exc.value.field == "strength"

    def test_half_open_date_range(self) -> None:
        with pytest.raises(InvalidRequestError):
            handlers.parse_options({"startDate": "2025-01-01"})

    def test_reversed_date_range(self) -> None:
        with pytest.raises(InvalidRequestError):
            handlers.parse_options({"startDate": "2025-02-01", "endDate": "2025-01-01"})


class TestHandlers:
    def test_player_stats(self) -> None:
        status, payload = handlers.player_stats(_make_engine(), _scope(playerId="p1", advanced="true"))
        assert status == 200
        assert payload["baseStats"]["gamesPlayed"] == 6
        assert payload["player"]["fullName"] == "Ada Lind"
        assert payload["advancedMetrics"]["actualGoals"] == 6

    def test_player_not_found(self) -> None:
        status, payload = handlers.player_stats(_make_engine(), _scope(playerId="nobody"))
        assert status == 404
        assert payload["code"] == "not_found"

    def test_missing_param(self) -> None:
        status, payload = handlers.player_stats(_make_engine(), {"playerId": "p1", "teamId": TEAM})
        assert status == 400
        assert payload == {"error": "season is required", "code": "invalid_request", "field": "season"}

    def test_bad_boolean(self) -> None:
        status, _ = handlers.player_stats(_make_engine(), _scope(playerId="p1", recalculate="maybe"))
        assert status == 400

    def test_leaderboard_defaults(self) -> None:
        status, payload = handlers.leaderboard(_make_engine(), _scope())
        assert status == 200
        assert payload["category"] == "points"
        assert payload["minGames"] == 5
        assert [e["playerId"] for e in payload["leaders"]] == ["p1", "p2", "gk"]

    def test_leaderboard_bad_limit(self) -> None:
        status, payload = handlers.leaderboard(_make_engine(), _scope(limit="ten"))
        assert status == 400
        assert payload["field"] == "limit"

    def test_compare_body(self) -> None:
        body = {"playerIds": ["p1", "p2"], "teamId": TEAM, "season": SEASON, "categories": ["goals"]}
        status, payload = handlers.compare(_make_engine(), body)
        assert status == 200
        assert payload["playerCount"] == 2
        assert payload["comparisons"][0]["ranks"] == {"goals": 1}

    def test_compare_too_many(self) -> None:
        body = {"playerIds": [f"p{i}" for i in range(7)], "teamId": TEAM, "season": SEASON}
        status, payload = handlers.compare(_make_engine(), body)
        assert status == 400
        assert payload["code"] == "invalid_request"

    def test_trends(self) -> None:
        status, payload = handlers.trends(_make_engine(), _scope(playerId="p1", gameCount="3"))
        assert status == 200
        assert payload["overallTrend"] == "stable"
        assert [g["gameId"] for g in payload["games"]] == ["g4", "g5", "g6"]
        assert "runningAverage" in payload["games"][0]

    def test_team_stats_and_players(self) -> None:
        engine = _make_engine()
        status, payload = handlers.team_stats(engine, _scope())
        assert status == 200
        assert payload["points"] == 12

        status, payload = handlers.team_players(engine, _scope(position="G"))
        assert status == 200
        assert payload["count"] == 1

    def test_player_games(self) -> None:
        status, payload = handlers.player_games(_make_engine(), _scope(playerId="p1"))
        assert status == 200
        assert payload["count"] == 6
        assert payload["games"][0]["isHome"] is True

    def test_unexpected_error_is_500(self) -> None:
        class Broken:
            def get_team_stats(self, *args, **kwargs):
                raise RuntimeError("boom")

        status, payload = handlers.team_stats(Broken(), _scope())
        assert status == 500
        assert payload["code"] == "internal_error"


class TestBuildEngine:
    def test_memory_backend_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STATS_CACHE_ENABLED", "false")
        monkeypatch.setenv("STATS_MAX_WORKERS", "3")
        engine = handlers.build_statistics_engine("memory")
        assert engine.cache is None
        assert engine.max_workers == 3
