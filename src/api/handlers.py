"""Request handlers for the stats API.

Each handler takes the engine and a dict of string params (a parsed
query string, or a JSON body for compare) and returns (status, payload).
Engine errors map to their status; anything unexpected is logged and
reported as a 500.
"""

import functools
import logging
import os
from collections.abc import Callable
from datetime import date
from typing import Any

from src.api.serialize import player_payload, to_payload
from src.models.options import DateRange, HomeAway, SituationalStrength, StatsOptions
from src.models.reports import ComparisonRequest, LeaderboardQuery
from src.stats.cache import StatsCache
from src.stats.engine import DEFAULT_MAX_WORKERS, StatisticsEngine
from src.stats.errors import InvalidRequestError, StatsError
from src.store.base import get_store

logger = logging.getLogger(__name__)

Params = dict[str, Any]
Response = tuple[int, Any]

_TRUE = {"true", "1", "yes"}
_FALSE = {"false", "0", "no", ""}


def build_statistics_engine(backend: str | None = None) -> StatisticsEngine:
    """Build the engine for the configured backend.

    STATS_CACHE_ENABLED (default true) turns the in-process cache on and
    STATS_MAX_WORKERS (default 8) sizes the per-player thread pool.
    """
    cache_enabled = os.getenv("STATS_CACHE_ENABLED", "true").strip().lower() in _TRUE
    max_workers = int(os.getenv("STATS_MAX_WORKERS", str(DEFAULT_MAX_WORKERS)))
    return StatisticsEngine(
        get_store(backend),
        cache=StatsCache() if cache_enabled else None,
        max_workers=max_workers,
    )


# ── Param parsing ─────────────────────────────────────────────────


def _str(params: Params, name: str, required: bool = True) -> str | None:
    value = params.get(name)
    if value is None or str(value).strip() == "":
        if required:
            raise InvalidRequestError(f"{name} is required", field=name)
        return None
    return str(value).strip()


def _bool(params: Params, name: str) -> bool:
    value = params.get(name)
    if isinstance(value, bool):
        return value
    key = str(value or "").strip().lower()
    if key in _TRUE:
        return True
    if key in _FALSE:
        return False
    raise InvalidRequestError(f"{name} must be true or false", field=name)


def _int(params: Params, name: str, default: int) -> int:
    value = params.get(name)
    if value is None or str(value).strip() == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidRequestError(f"{name} must be an integer", field=name) from e


def _date(params: Params, name: str) -> date | None:
    value = _str(params, name, required=False)
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidRequestError(f"{name} must be an ISO date (YYYY-MM-DD)", field=name) from e


def parse_options(params: Params) -> StatsOptions:
    """Build StatsOptions from strength, homeAway, startDate, endDate and opponents."""
    strength = _str(params, "strength", required=False) or SituationalStrength.ALL.value
    try:
        situation = SituationalStrength(strength)
    except ValueError as e:
        raise InvalidRequestError(f"Unknown strength: {strength!r}", field="strength") from e

    home_away = None
    raw_home_away = _str(params, "homeAway", required=False)
    if raw_home_away is not None:
        try:
            home_away = HomeAway(raw_home_away)
        except ValueError as e:
            raise InvalidRequestError(f"Unknown homeAway: {raw_home_away!r}", field="homeAway") from e

    start, end = _date(params, "startDate"), _date(params, "endDate")
    date_range = None
    if start or end:
        if not (start and end):
            raise InvalidRequestError("startDate and endDate must be given together", field="startDate")
        if start > end:
            raise InvalidRequestError("startDate is after endDate", field="startDate")
        date_range = DateRange(start, end)

    opponents = params.get("opponents") or ()
    if isinstance(opponents, str):
        opponents = [o for o in opponents.split(",") if o.strip()]

    return StatsOptions(
        situational_strength=situation,
        home_away_only=home_away,
        date_range=date_range,
        opponents=frozenset(o.strip() for o in opponents),
    )


# ── Handlers ──────────────────────────────────────────────────────


def handler(func: Callable[[StatisticsEngine, Params], Any]) -> Callable[[StatisticsEngine, Params], Response]:
    """Run func and turn its result or error into (status, payload)."""

    @functools.wraps(func)
    def wrapper(engine: StatisticsEngine, params: Params) -> Response:
        try:
            return 200, func(engine, params)
        except StatsError as e:
            if e.status >= 500:
                logger.error("%s failed: %s", func.__name__, e)
            return e.status, e.to_dict()
        except Exception:
            logger.exception("Unhandled error in %s", func.__name__)
            return 500, {"error": "Internal server error", "code": "internal_error"}

    return wrapper


@handler
def player_stats(engine: StatisticsEngine, params: Params) -> Any:
    stats = engine.get_player_stats(
        _str(params, "playerId"),
        _str(params, "teamId"),
        _str(params, "season"),
        options=parse_options(params),
        recalculate=_bool(params, "recalculate"),
        include_advanced=_bool(params, "advanced"),
    )
    return player_payload(stats)


@handler
def player_games(engine: StatisticsEngine, params: Params) -> Any:
    log = engine.get_player_game_log(
        _str(params, "playerId"), _str(params, "teamId"), _str(params, "season"),
    )
    return {"games": to_payload(log), "count": len(log)}


@handler
def team_stats(engine: StatisticsEngine, params: Params) -> Any:
    stats = engine.get_team_stats(
        _str(params, "teamId"), _str(params, "season"), recalculate=_bool(params, "recalculate"),
    )
    return to_payload(stats)


@handler
def team_players(engine: StatisticsEngine, params: Params) -> Any:
    players = engine.get_team_player_stats(
        _str(params, "teamId"),
        _str(params, "season"),
        position=_str(params, "position", required=False),
        min_games=_int(params, "minGames", 0),
        sort_by=_str(params, "sortBy", required=False) or "points",
        sort_order=_str(params, "sortOrder", required=False) or "desc",
    )
    return {"players": [player_payload(s) for s in players], "count": len(players)}


@handler
def leaderboard(engine: StatisticsEngine, params: Params) -> Any:
    query = LeaderboardQuery(
        team_id=_str(params, "teamId"),
        season=_str(params, "season"),
        category=_str(params, "category", required=False) or "points",
        position=_str(params, "position", required=False) or "all",
        limit=_int(params, "limit", 10),
        min_games=_int(params, "minGames", 5),
        recalculate=_bool(params, "recalculate"),
    )
    return to_payload(engine.get_leaderboard(query))


@handler
def compare(engine: StatisticsEngine, body: Params) -> Any:
    player_ids = body.get("playerIds")
    if isinstance(player_ids, str):
        player_ids = [p for p in player_ids.split(",") if p]
    if not isinstance(player_ids, (list, tuple)):
        raise InvalidRequestError("playerIds must be a list", field="playerIds")

    categories = body.get("categories")
    if isinstance(categories, str):
        categories = [c for c in categories.split(",") if c]

    request = ComparisonRequest(
        player_ids=tuple(str(p) for p in player_ids),
        team_id=_str(body, "teamId"),
        season=_str(body, "season"),
        categories=tuple(categories) if categories else None,
    )
    comparison = engine.compare_players(request)
    payload = to_payload(comparison)
    payload["playerCount"] = comparison.player_count
    return payload


@handler
def trends(engine: StatisticsEngine, params: Params) -> Any:
    trend = engine.get_player_trend(
        _str(params, "playerId"),
        _str(params, "teamId"),
        _str(params, "season"),
        stat=_str(params, "stat", required=False) or "points",
        game_count=_int(params, "gameCount", 10),
        recalculate=_bool(params, "recalculate"),
    )
    return to_payload(trend)


HANDLERS: dict[str, Callable[[StatisticsEngine, Params], Response]] = {
    "player-stats": player_stats,
    "player-games": player_games,
    "team-stats": team_stats,
    "team-players": team_players,
    "leaderboard": leaderboard,
    "compare": compare,
    "trends": trends,
}
