"""Advanced metrics: expected goals and per-sixty rates."""

from collections.abc import Iterable

from src.models.event import Event, EventType, Strength
from src.models.stats import AdvancedMetrics
from src.stats.position import time_on_ice_by_game

# Base scoring probability by shot type
SHOT_TYPE_XG: dict[str, float] = {
    "wrist": 0.08,
    "slap": 0.06,
    "snap": 0.09,
    "tip": 0.15,
    "wrap": 0.12,
    "backhand": 0.05,
}
DEFAULT_XG = 0.08

# Multipliers applied on top of the shot-type rate
LOCATION_MULTIPLIERS: tuple[tuple[str, float], ...] = (
    ("slot", 2.5),
    ("close", 1.8),
    ("far", 0.6),
)
STRENGTH_MULTIPLIERS: dict[Strength, float] = {
    Strength.POWER_PLAY: 1.3,
    Strength.SHORT_HANDED: 0.7,
}

_SHOT_ATTEMPTS = (EventType.SHOT, EventType.PENALTY_SHOT, EventType.GOAL)


def expected_goal(event: Event) -> float:
    """Scoring probability of one shot from its type, location and strength. Capped at 1."""
    xg = SHOT_TYPE_XG.get(str(event.detail("shot_type") or "").lower(), DEFAULT_XG)

    location = str(event.detail("location") or "").lower()
    for marker, multiplier in LOCATION_MULTIPLIERS:
        if marker in location:
            xg *= multiplier
            break

    xg *= STRENGTH_MULTIPLIERS.get(event.strength, 1.0)
    return min(xg, 1.0)


def _per_sixty(count: int, minutes: float) -> float | None:
    if minutes <= 0:
        return None
    return count / minutes * 60


def calculate_advanced_metrics(
    player_id: str,
    season: str,
    player_events: Iterable[Event],
    include_rates: bool = True,
) -> AdvancedMetrics:
    """Compute AdvancedMetrics from the player's own filtered events.

    Args:
        player_id: Player the events belong to.
        season: Season label copied into the result.
        player_events: The player's events in the selected games.
        include_rates: False for goalies, where per-sixty skater rates don't apply.
    """
    player_events = list(player_events)
    metrics = AdvancedMetrics(player_id=player_id, season=season)

    assists = primary = hits = blocked = takeaways = giveaways = 0
    for event in player_events:
        etype = event.event_type
        if etype in _SHOT_ATTEMPTS:
            metrics.individual_shot_attempts += 1
            metrics.expected_goals += expected_goal(event)
        if etype is EventType.GOAL:
            metrics.actual_goals += 1
            if event.strength is Strength.EVEN:
                metrics.even_strength_goals += 1
        elif etype is EventType.ASSIST:
            assists += 1
            if event.strength is Strength.EVEN:
                metrics.even_strength_assists += 1
            if event.detail("assist_type") == "primary":
                primary += 1
        elif etype is EventType.HIT:
            hits += 1
        elif etype is EventType.SHOT_BLOCKED:
            blocked += 1
        elif etype is EventType.TAKEAWAY:
            takeaways += 1
        elif etype is EventType.GIVEAWAY:
            giveaways += 1

    metrics.goals_difference = metrics.actual_goals - metrics.expected_goals
    if assists:
        metrics.primary_assist_percentage = primary / assists * 100

    if include_rates:
        minutes = sum(time_on_ice_by_game(player_events).values())
        metrics.points_per_sixty = _per_sixty(metrics.actual_goals + assists, minutes)
        metrics.shots_blocked_per_sixty = _per_sixty(blocked, minutes)
        metrics.hits_per_sixty = _per_sixty(hits, minutes)
        metrics.takeaways_per_sixty = _per_sixty(takeaways, minutes)
        metrics.giveaways_per_sixty = _per_sixty(giveaways, minutes)

    return metrics
