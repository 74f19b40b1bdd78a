"""Shared builders for engine and handler tests.

make_league() returns an in-memory store with one team playing six home
wins (3-1) against a single opponent:

    p1  F  goal in every game, assists in g1 and g2       GP 6, 6G 2A
    p2  F  assist in g1-g5, goal in g6, 2 PIM in g1       GP 6, 1G 5A
    p3  D  hit in g1-g3, goal in g3                        GP 3, 1G
    gk  G  faces 10 saved shots and 1 goal every game      SA 66, SV 60
    p9  F  on the opponent's roster
"""

from datetime import date

from src.models.event import Event, EventType
from src.models.game import Game
from src.models.player import Player, Position
from src.models.team import Team
from src.store.memory import InMemoryEventStore

TEAM = "t1"
OPP = "t2"
SEASON = "2024-25"
GAME_IDS = [f"g{i}" for i in range(1, 7)]


def make_event(game_id: str, event_type: EventType, player_id: str, team_id: str = TEAM, **details) -> Event:
    return Event(game_id=game_id, player_id=player_id, team_id=team_id, event_type=event_type, details=details)


def make_players() -> list[Player]:
    return [
        Player("p1", TEAM, "Ada", "Lind", Position.FORWARD, 9),
        Player("p2", TEAM, "Bo", "Berg", Position.FORWARD, 12),
        Player("p3", TEAM, "Cy", "Dahl", Position.DEFENSE, 4),
        Player("gk", TEAM, "Di", "Holm", Position.GOALIE, 30),
        Player("p9", OPP, "Ed", "Rask", Position.FORWARD, 19),
    ]


def make_events() -> list[Event]:
    events: list[Event] = []
    for i, game_id in enumerate(GAME_IDS, start=1):
        events.append(make_event(game_id, EventType.GOAL, "p1"))
        if i <= 2:
            events.append(make_event(game_id, EventType.ASSIST, "p1"))
        if i <= 5:
            events.append(make_event(game_id, EventType.ASSIST, "p2"))
        else:
            events.append(make_event(game_id, EventType.GOAL, "p2"))
        if i <= 3:
            events.append(make_event(game_id, EventType.HIT, "p3"))
        if i == 3:
            events.append(make_event(game_id, EventType.GOAL, "p3"))
        if i == 1:
            events.append(make_event(game_id, EventType.PENALTY, "p2", penalty_minutes=2))
        events += [
            make_event(game_id, EventType.SHOT, "p9", OPP, on_goal=True, saved_by="gk")
            for _ in range(10)
        ]
        events.append(make_event(game_id, EventType.GOAL, "p9", OPP, goalie_id="gk"))
    return events


def make_league() -> InMemoryEventStore:
    games = [
        Game(game_id, SEASON, date(2025, 1, i), TEAM, OPP, 3, 1, "completed")
        for i, game_id in enumerate(GAME_IDS, start=1)
    ]
    games.append(Game("g7", SEASON, date(2025, 1, 20), TEAM, OPP, status="scheduled"))
    return InMemoryEventStore(
        players=make_players(),
        teams=[Team(TEAM, "Ice Hawks", SEASON), Team(OPP, "Rivals", SEASON)],
        games=games,
        events=make_events(),
    )
