"""Tests for skater and goalie skill stats."""

from datetime import date

import pytest

from src.models.event import Event, EventType
from src.models.game import Game
from src.models.player import Position
from src.models.stats import GoalieStats, SkaterStats
from src.stats.aggregate import aggregate_base_stats
from src.stats.derived import calculate_derived_stats
from src.stats.position import (
    calculate_goalie_stats,
    calculate_skater_stats,
    calculate_skill_stats,
    goalie_game_lines,
    time_on_ice_by_game,
)

TEAM = "t1"
OPP = "t2"
SEASON = "2024-25"


def _make_game(game_id: str, home_score: int, away_score: int, **kwargs) -> Game:
    return Game(
        game_id=game_id,
        season=SEASON,
        game_date=date(2025, 2, 1),
        home_team_id=TEAM,
        away_team_id=OPP,
        home_score=home_score,
        away_score=away_score,
        status="completed",
        **kwargs,
    )


def _make_event(game_id: str, event_type: EventType, player_id: str, team_id: str = TEAM, period: int = 1, **details) -> Event:
    return Event(
        game_id=game_id,
        player_id=player_id,
        team_id=team_id,
        event_type=event_type,
        period=period,
        details=details,
    )


def _opponent_shots(game_id: str, saves: int, goals: int, goalie: str = "gk") -> list[Event]:
    events = [
        _make_event(game_id, EventType.SHOT, "x1", OPP, on_goal=True, saved_by=goalie)
        for _ in range(saves)
    ]
    events += [_make_event(game_id, EventType.GOAL, "x1", OPP, goalie_id=goalie) for _ in range(goals)]
    return events


class TestSkaterStats:
    def test_special_teams_split(self) -> None:
        """Goals and assists split by strength."""
        events = [
            _make_event("g1", EventType.GOAL, "p1", strength="power_play"),
            _make_event("g1", EventType.GOAL, "p1", strength="short_handed"),
            _make_event("g1", EventType.ASSIST, "p1", strength="pp"),
            _make_event("g1", EventType.GOAL, "p1"),
        ]
        stats = calculate_skater_stats("p1", events)
        assert stats.power_play_goals == 1
        assert stats.short_handed_goals == 1
        assert stats.power_play_assists == 1

    def test_clutch_goals(self) -> None:
        """Game-winning flag and overtime period are counted."""
        events = [
            _make_event("g1", EventType.GOAL, "p1", period=4, game_winning=True),
            _make_event("g2", EventType.GOAL, "p1", overtime=True),
        ]
        stats = calculate_skater_stats("p1", events)
        assert stats.game_winning_goals == 1
        assert stats.overtime_goals == 2

    def test_time_on_ice_uses_max_per_game(self) -> None:
        """The largest time_on_ice detail in each game is that game's ice time."""
        events = [
            _make_event("g1", EventType.SHOT, "p1", time_on_ice="10:00"),
            _make_event("g1", EventType.HIT, "p1", time_on_ice="15:30"),
            _make_event("g2", EventType.HIT, "p1", time_on_ice=12),
        ]
        assert time_on_ice_by_game(events) == {"g1": 15.5, "g2": 12.0}
        assert calculate_skater_stats("p1", events).time_on_ice == 27.5


class TestGoalieStats:
    def test_save_percentage_scenario(self) -> None:
        """30 shots against with 27 saves is a .900 game and 3 goals against."""
        games = {"g1": _make_game("g1", 2, 3)}
        events = _opponent_shots("g1", saves=27, goals=3)
        goalie = calculate_goalie_stats("gk", TEAM, events, games)
        assert goalie.shots_against == 30
        assert goalie.saves == 27
        assert goalie.goals_against == 3

        base = aggregate_base_stats("gk", TEAM, SEASON, events, games, ["g1"])
        derived = calculate_derived_stats(base, goalie)
        assert derived.save_percentage == pytest.approx(90.0)
        assert derived.goals_against_average == pytest.approx(3.0)

    def test_own_save_events(self) -> None:
        """Saves and goals against recorded on the goalie's own events count too."""
        games = {"g1": _make_game("g1", 4, 1)}
        events = [_make_event("g1", EventType.SAVE, "gk") for _ in range(5)]
        events.append(_make_event("g1", EventType.GOAL_AGAINST, "gk"))
        goalie = calculate_goalie_stats("gk", TEAM, events, games)
        assert (goalie.saves, goalie.shots_against, goalie.goals_against) == (5, 6, 1)
        assert goalie.wins == 1

    def test_shutout_and_decisions(self) -> None:
        """A game with shots and no goals is a shutout; OT losses are split out."""
        games = {
            "g1": _make_game("g1", 2, 0),
            "g2": _make_game("g2", 1, 2, overtime=True),
            "g3": _make_game("g3", 0, 4),
        }
        events = (
            _opponent_shots("g1", saves=20, goals=0)
            + _opponent_shots("g2", saves=25, goals=2)
            + _opponent_shots("g3", saves=18, goals=4)
        )
        goalie = calculate_goalie_stats("gk", TEAM, events, games)
        assert goalie.games_started == 3
        assert goalie.shutouts == 1
        assert (goalie.wins, goalie.losses, goalie.overtime_losses) == (1, 1, 1)
        assert goalie.time_on_ice == 185.0

    def test_other_goalie_not_credited(self) -> None:
        """Shots saved by the backup are not charged to the starter."""
        events = _opponent_shots("g1", saves=10, goals=1, goalie="backup")
        assert goalie_game_lines("gk", TEAM, events) == {}

    def test_dispatch_by_position(self) -> None:
        games = {"g1": _make_game("g1", 1, 0)}
        assert isinstance(calculate_skill_stats(Position.GOALIE, "gk", TEAM, [], games), GoalieStats)
        assert isinstance(calculate_skill_stats(Position.DEFENSE, "p1", TEAM, [], games), SkaterStats)
