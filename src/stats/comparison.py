"""Side-by-side player comparison with ranks inside the compared group."""

from collections.abc import Iterable, Sequence

from src.models.reports import (
    DEFAULT_COMPARISON_CATEGORIES,
    MAX_COMPARISON_PLAYERS,
    Comparison,
    ComparisonEntry,
    ComparisonRequest,
)
from src.models.stats import PlayerStatsComplete
from src.stats.categories import StatCategory, resolve_category, sort_values, stat_value
from src.stats.errors import InvalidRequestError


def validate_request(request: ComparisonRequest) -> list[StatCategory]:
    """Validate a comparison request before any stats are computed.

    Returns:
        The resolved categories, defaults when none were given.

    Raises:
        InvalidRequestError: No player ids, more than six, missing team/season,
            or an unknown category.
    """
    if not request.player_ids:
        raise InvalidRequestError("playerIds is required", field="playerIds")
    if len(request.player_ids) > MAX_COMPARISON_PLAYERS:
        raise InvalidRequestError(
            f"Maximum {MAX_COMPARISON_PLAYERS} players can be compared at once",
            field="playerIds",
        )
    if not request.team_id or not request.season:
        raise InvalidRequestError("teamId and season are required", field="teamId")
    names = request.categories or DEFAULT_COMPARISON_CATEGORIES
    return [resolve_category(name, field="categories") for name in names]


def group_rank(value: float | None, group_values: Sequence[float | None], category: StatCategory) -> int | None:
    """1-based rank of value within the group. Tied values share the first rank."""
    if value is None:
        return None
    ordered = sort_values([v for v in group_values if v is not None], category)
    return ordered.index(value) + 1


def team_averages(
    roster_stats: Iterable[PlayerStatsComplete],
    categories: Sequence[StatCategory],
) -> dict[str, float]:
    """Mean of each category over players with an applicable value."""
    roster_stats = list(roster_stats)
    averages: dict[str, float] = {}
    for category in categories:
        values = [v for v in (stat_value(s, category) for s in roster_stats) if v is not None]
        if values:
            averages[category.value] = sum(values) / len(values)
    return averages


def build_comparison(
    request: ComparisonRequest,
    categories: Sequence[StatCategory],
    player_stats: Sequence[PlayerStatsComplete],
    roster_stats: Iterable[PlayerStatsComplete],
    excluded: Iterable[str] = (),
) -> Comparison:
    """Assemble the comparison from stats of the players that resolved.

    Raises:
        InvalidRequestError: If none of the requested players resolved.
    """
    if not player_stats:
        raise InvalidRequestError("No valid player data found", field="playerIds")

    entries: list[ComparisonEntry] = []
    for stats in player_stats:
        player = stats.player
        entries.append(ComparisonEntry(
            player_id=player.player_id,
            player_name=player.full_name,
            jersey_number=player.jersey_number,
            position=player.position.value,
            values={c.value: stat_value(stats, c) for c in categories},
        ))

    for category in categories:
        group = [e.values[category.value] for e in entries]
        for entry in entries:
            entry.ranks[category.value] = group_rank(entry.values[category.value], group, category)

    return Comparison(
        comparisons=entries,
        team_averages=team_averages(roster_stats, categories),
        team_id=request.team_id,
        season=request.season,
        categories=[c.value for c in categories],
        excluded=list(excluded),
    )
