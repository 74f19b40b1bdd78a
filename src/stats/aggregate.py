"""Base stats aggregation: fold a player's events into counting stats.

Everything here is a pure function of (events, games, options). Callers
fetch rows from the event store and pass them in; nothing is cached or
mutated between calls.
"""

from collections.abc import Iterable

from src.models.event import Event, EventType, Strength
from src.models.game import Game
from src.models.options import StatsOptions
from src.models.stats import BasePlayerStats

# Simple one-for-one counters
_COUNTERS: dict[EventType, str] = {
    EventType.ASSIST: "assists",
    EventType.HIT: "hits",
    EventType.SHOT_BLOCKED: "blocked",
    EventType.GIVEAWAY: "giveaways",
    EventType.TAKEAWAY: "takeaways",
    EventType.FACEOFF_WIN: "faceoffs_won",
    EventType.FACEOFF_LOSS: "faceoffs_lost",
}

# Scoring-side strengths at which plus/minus is charged
_PLUS_MINUS_STRENGTHS = {Strength.EVEN, Strength.SHORT_HANDED}


def select_games(
    games: Iterable[Game],
    team_id: str,
    season: str,
    options: StatsOptions | None = None,
) -> dict[str, Game]:
    """Completed games of the team and season that pass the game-level filters.

    Returns:
        Games keyed by game_id.
    """
    options = options or StatsOptions()
    selected: dict[str, Game] = {}
    for game in games:
        if not game.is_completed or game.season != season or not game.involves(team_id):
            continue
        if options.date_range and not options.date_range.contains(game.game_date):
            continue
        if options.home_away_only is not None:
            wants_home = options.home_away_only == "home"
            if game.is_home(team_id) != wants_home:
                continue
        if options.opponents and game.opponent_of(team_id) not in options.opponents:
            continue
        selected[game.game_id] = game
    return selected


def perspective_strength(event: Event, team_id: str) -> Strength:
    """Strength of an event as seen by team_id. An opponent power play is our kill."""
    strength = event.strength
    if event.team_id == team_id:
        return strength
    if strength is Strength.POWER_PLAY:
        return Strength.SHORT_HANDED
    if strength is Strength.SHORT_HANDED:
        return Strength.POWER_PLAY
    return strength


def filter_events(
    events: Iterable[Event],
    games: dict[str, Game],
    team_id: str,
    options: StatsOptions | None = None,
) -> list[Event]:
    """Keep events from the selected games that match the situational filter."""
    options = options or StatsOptions()
    situation = options.situational_strength
    return [
        e for e in events
        if e.game_id in games and situation.matches(perspective_strength(e, team_id))
    ]


def games_played(
    player_id: str,
    player_events: Iterable[Event],
    games: dict[str, Game],
    credited_game_ids: Iterable[str] = (),
) -> int:
    """Distinct games with an event by the player, games credited to them
    (a goalie facing shots) and games whose lineup lists them."""
    played = {e.game_id for e in player_events}
    played.update(g for g in credited_game_ids if g in games)
    played.update(
        game_id for game_id, game in games.items()
        if game.lineup is not None and player_id in game.lineup
    )
    return len(played)


def _penalty_minutes(event: Event) -> int:
    return int(event.detail("penalty_minutes", 0) or 0)


def plus_minus(player_id: str, team_id: str, events: Iterable[Event]) -> int:
    """Approximate plus/minus from goal events that list players_on_ice.

    Power-play goals aren't charged. Without on-ice data for a goal the
    player gets nothing for it, so this is not an authoritative value.
    """
    total = 0
    for event in events:
        if event.event_type is not EventType.GOAL:
            continue
        if event.strength not in _PLUS_MINUS_STRENGTHS:
            continue
        on_ice = event.detail("players_on_ice") or ()
        if player_id not in on_ice:
            continue
        total += 1 if event.team_id == team_id else -1
    return total


def fold_player_events(stats: BasePlayerStats, player_events: Iterable[Event]) -> BasePlayerStats:
    """Add the player's own events into stats, in place."""
    for event in player_events:
        etype = event.event_type
        if etype is EventType.GOAL:
            stats.goals += 1
            if event.detail("shot_type"):
                stats.shots += 1
                stats.shots_on_goal += 1
        elif etype in (EventType.SHOT, EventType.PENALTY_SHOT):
            stats.shots += 1
            if event.detail("on_goal"):
                stats.shots_on_goal += 1
        elif etype is EventType.PENALTY:
            stats.penalty_minutes += _penalty_minutes(event)
        elif etype in _COUNTERS:
            attr = _COUNTERS[etype]
            setattr(stats, attr, getattr(stats, attr) + 1)

    stats.points = stats.goals + stats.assists
    return stats


def aggregate_base_stats(
    player_id: str,
    team_id: str,
    season: str,
    events: Iterable[Event],
    games: dict[str, Game],
    credited_game_ids: Iterable[str] = (),
) -> BasePlayerStats:
    """Build BasePlayerStats from already-filtered events of the team's games.

    Args:
        player_id: Player to aggregate.
        team_id: The player's team. Decides which goals count as plus or minus.
        season: Season label copied into the result.
        events: Filtered events for every player in the selected games.
        games: Selected games keyed by id (see select_games).
        credited_game_ids: Games credited without an own event, e.g. a goalie
            whose saves are recorded on the shooter's events.

    Returns:
        Counting stats. All zero when the player has no qualifying events.
    """
    events = list(events)
    own = [e for e in events if e.player_id == player_id]

    stats = BasePlayerStats(player_id=player_id, team_id=team_id, season=season)
    fold_player_events(stats, own)
    stats.games_played = games_played(player_id, own, games, credited_game_ids)
    stats.plus_minus = plus_minus(player_id, team_id, events)
    return stats
