"""Leaderboard building and roster sorting over computed player stats."""

from collections.abc import Iterable

from src.models.reports import Leaderboard, LeaderboardEntry, LeaderboardQuery
from src.models.stats import PlayerStatsComplete
from src.stats.categories import StatCategory, resolve_category, stat_value
from src.stats.errors import InvalidRequestError

POSITION_FILTERS = {"all", "F", "D", "G"}


def validate_query(query: LeaderboardQuery) -> StatCategory:
    """Check a leaderboard query and resolve its category.

    Raises:
        InvalidRequestError: On missing team/season, unknown category or position,
            a limit below 1 or a negative min_games.
    """
    if not query.team_id or not query.season:
        raise InvalidRequestError("teamId and season are required", field="teamId")
    if query.position not in POSITION_FILTERS:
        raise InvalidRequestError(f"Unknown position filter: {query.position!r}", field="position")
    if query.limit < 1:
        raise InvalidRequestError("limit must be at least 1", field="limit")
    if query.min_games < 0:
        raise InvalidRequestError("minGames cannot be negative", field="minGames")
    return resolve_category(query.category)


def _entry(stats: PlayerStatsComplete, value: float) -> LeaderboardEntry:
    player = stats.player
    return LeaderboardEntry(
        player_id=player.player_id,
        player_name=player.full_name,
        jersey_number=player.jersey_number,
        position=player.position.value,
        value=value,
        games_played=stats.base_stats.games_played,
        goals=stats.base_stats.goals,
        assists=stats.base_stats.assists,
        points=stats.base_stats.points,
        shooting_percentage=stats.derived_stats.shooting_percentage,
        save_percentage=stats.derived_stats.save_percentage,
    )


def build_leaderboard(
    query: LeaderboardQuery,
    category: StatCategory,
    player_stats: Iterable[PlayerStatsComplete],
    excluded: Iterable[str] = (),
) -> Leaderboard:
    """Rank computed stats for one category.

    Players below min_games, outside the position filter, or without an
    applicable value are left out. Sorting is stable, so ties keep roster order.
    """
    entries: list[LeaderboardEntry] = []
    for stats in player_stats:
        if query.position != "all" and stats.player.position.value != query.position:
            continue
        if stats.base_stats.games_played < query.min_games:
            continue
        value = stat_value(stats, category)
        if value is None:
            continue
        entries.append(_entry(stats, value))

    entries.sort(key=lambda e: e.value, reverse=not category.lower_is_better)

    return Leaderboard(
        category=category.value,
        position=query.position,
        min_games=query.min_games,
        leaders=entries[: query.limit],
        excluded=list(excluded),
    )


def sort_player_stats(
    player_stats: Iterable[PlayerStatsComplete],
    category: StatCategory,
    descending: bool = True,
) -> list[PlayerStatsComplete]:
    """Sort complete stats by a category. Players without a value go last."""
    with_value: list[tuple[float, PlayerStatsComplete]] = []
    without: list[PlayerStatsComplete] = []
    for stats in player_stats:
        value = stat_value(stats, category)
        if value is None:
            without.append(stats)
        else:
            with_value.append((value, stats))
    with_value.sort(key=lambda pair: pair[0], reverse=descending)
    return [stats for _, stats in with_value] + without
