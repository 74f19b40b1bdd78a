"""Position-specific skill stats for skaters and goalies."""

from collections.abc import Iterable
from dataclasses import dataclass

from src.models.event import Event, EventType, Strength
from src.models.game import REGULATION_PERIODS, Game
from src.models.player import Position
from src.models.stats import GoalieStats, SkaterStats, SkillStats
from src.transform.clean import toi_minutes

_SHOT_TYPES = (EventType.SHOT, EventType.PENALTY_SHOT)


def _is_overtime(event: Event) -> bool:
    return bool(event.detail("overtime")) or event.period > REGULATION_PERIODS


def time_on_ice_by_game(player_events: Iterable[Event]) -> dict[str, float]:
    """Largest time_on_ice detail per game, in minutes. Games without one are absent."""
    per_game: dict[str, float] = {}
    for event in player_events:
        raw = event.detail("time_on_ice")
        if raw is None:
            continue
        minutes = toi_minutes(raw)
        if minutes > per_game.get(event.game_id, 0.0):
            per_game[event.game_id] = minutes
    return per_game


def calculate_skater_stats(player_id: str, player_events: Iterable[Event]) -> SkaterStats:
    """Special-teams, clutch-goal and ice-time stats from the player's own events."""
    player_events = list(player_events)
    stats = SkaterStats(player_id=player_id)

    for event in player_events:
        strength = event.strength
        if event.event_type is EventType.GOAL:
            if strength is Strength.POWER_PLAY:
                stats.power_play_goals += 1
            elif strength is Strength.SHORT_HANDED:
                stats.short_handed_goals += 1
            if event.detail("game_winning"):
                stats.game_winning_goals += 1
            if _is_overtime(event):
                stats.overtime_goals += 1
        elif event.event_type is EventType.ASSIST:
            if strength is Strength.POWER_PLAY:
                stats.power_play_assists += 1
            elif strength is Strength.SHORT_HANDED:
                stats.short_handed_assists += 1

    stats.time_on_ice = sum(time_on_ice_by_game(player_events).values())
    return stats


@dataclass
class GoalieGameLine:
    """What one goalie faced in one game."""

    game_id: str
    saves: int = 0
    shots_against: int = 0
    goals_against: int = 0
    played: bool = False  # the goalie recorded an event of their own

    @property
    def credited(self) -> bool:
        return self.played or self.shots_against > 0


def goalie_game_lines(player_id: str, team_id: str, events: Iterable[Event]) -> dict[str, GoalieGameLine]:
    """Attribute saves, shots and goals against to the goalie, game by game.

    Opponent shots and goals are matched through saved_by / goalie_id. The
    goalie's own save and goal_against events count the same way.
    """
    lines: dict[str, GoalieGameLine] = {}

    def line(game_id: str) -> GoalieGameLine:
        if game_id not in lines:
            lines[game_id] = GoalieGameLine(game_id=game_id)
        return lines[game_id]

    for event in events:
        if event.player_id == player_id:
            gl = line(event.game_id)
            gl.played = True
            if event.event_type is EventType.SAVE:
                gl.saves += 1
                gl.shots_against += 1
            elif event.event_type is EventType.GOAL_AGAINST:
                gl.goals_against += 1
                gl.shots_against += 1
            continue

        if event.team_id == team_id:
            continue

        if event.event_type in _SHOT_TYPES:
            if event.detail("saved_by") == player_id:
                gl = line(event.game_id)
                gl.saves += 1
                gl.shots_against += 1
            elif event.detail("goalie_id") == player_id and event.detail("on_goal"):
                line(event.game_id).shots_against += 1
        elif event.event_type is EventType.GOAL and event.detail("goalie_id") == player_id:
            gl = line(event.game_id)
            gl.goals_against += 1
            gl.shots_against += 1

    return {game_id: gl for game_id, gl in lines.items() if gl.credited}


def calculate_goalie_stats(
    player_id: str,
    team_id: str,
    events: Iterable[Event],
    games: dict[str, Game],
) -> GoalieStats:
    """Goalie totals and decisions over the credited games.

    Args:
        player_id: The goalie.
        team_id: The goalie's team; shots by the other side count against.
        events: Filtered events for every player in the selected games.
        games: Selected games keyed by id.
    """
    events = list(events)
    lines = goalie_game_lines(player_id, team_id, events)
    own_toi = time_on_ice_by_game(e for e in events if e.player_id == player_id)

    stats = GoalieStats(player_id=player_id)
    for game_id, gl in lines.items():
        game = games.get(game_id)
        stats.games_started += 1
        stats.saves += gl.saves
        stats.shots_against += gl.shots_against
        stats.goals_against += gl.goals_against
        if gl.goals_against == 0 and gl.shots_against > 0:
            stats.shutouts += 1

        if game is None:
            continue
        stats.time_on_ice += own_toi.get(game_id, game.length_minutes)

        team_score, opp_score = game.scores_for(team_id)
        if team_score > opp_score:
            stats.wins += 1
        elif team_score < opp_score:
            if game.overtime or game.shootout:
                stats.overtime_losses += 1
            else:
                stats.losses += 1

    return stats


def calculate_skill_stats(
    position: Position,
    player_id: str,
    team_id: str,
    events: Iterable[Event],
    games: dict[str, Game],
) -> SkillStats:
    """Dispatch on position: goalies get GoalieStats, everyone else SkaterStats."""
    if position is Position.GOALIE:
        return calculate_goalie_stats(player_id, team_id, events, games)
    return calculate_skater_stats(player_id, (e for e in events if e.player_id == player_id))

