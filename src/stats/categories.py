"""Closed set of stat categories and how to read each one.

Every category name a caller can ask for (leaderboards, comparisons,
trends, roster sorting) resolves to a StatCategory. Each category is
bound to one section of PlayerStatsComplete and one attribute there, so
there is no probing of loosely-typed maps by string key.
"""

from collections.abc import Callable
from enum import StrEnum

from src.models.stats import GoalieStats, PlayerStatsComplete, SkaterStats
from src.stats.errors import InvalidRequestError


class StatSource(StrEnum):
    BASE = "base"
    SKATER = "skater"
    GOALIE = "goalie"
    DERIVED = "derived"
    ADVANCED = "advanced"


class StatCategory(StrEnum):
    # Base counting stats
    GAMES_PLAYED = "gamesPlayed"
    GOALS = "goals"
    ASSISTS = "assists"
    POINTS = "points"
    SHOTS = "shots"
    SHOTS_ON_GOAL = "shotsOnGoal"
    PENALTY_MINUTES = "penaltyMinutes"
    PLUS_MINUS = "plusMinus"
    FACEOFFS_WON = "faceoffsWon"
    FACEOFFS_LOST = "faceoffsLost"
    HITS = "hits"
    BLOCKED = "blocked"
    GIVEAWAYS = "giveaways"
    TAKEAWAYS = "takeaways"

    # Skill stats
    TIME_ON_ICE = "timeOnIce"
    POWER_PLAY_GOALS = "powerPlayGoals"
    POWER_PLAY_ASSISTS = "powerPlayAssists"
    SHORT_HANDED_GOALS = "shortHandedGoals"
    SHORT_HANDED_ASSISTS = "shortHandedAssists"
    GAME_WINNING_GOALS = "gameWinningGoals"
    OVERTIME_GOALS = "overtimeGoals"
    GAMES_STARTED = "gamesStarted"
    SAVES = "saves"
    SHOTS_AGAINST = "shotsAgainst"
    GOALS_AGAINST = "goalsAgainst"
    SHUTOUTS = "shutouts"
    WINS = "wins"
    LOSSES = "losses"
    OVERTIME_LOSSES = "overtimeLosses"

    # Derived rates
    POINTS_PER_GAME = "pointsPerGame"
    PENALTY_MINUTES_PER_GAME = "penaltyMinutesPerGame"
    SHOOTING_PERCENTAGE = "shootingPercentage"
    SHOTS_PER_GAME = "shotsPerGame"
    HITS_PER_GAME = "hitsPerGame"
    BLOCKED_PER_GAME = "blockedPerGame"
    PLUS_MINUS_PER_GAME = "plusMinusPerGame"
    TIME_ON_ICE_PER_GAME = "timeOnIcePerGame"
    POWER_PLAY_POINTS = "powerPlayPoints"
    SHORT_HANDED_POINTS = "shortHandedPoints"
    FACEOFF_PERCENTAGE = "faceoffPercentage"
    SAVE_PERCENTAGE = "savePercentage"
    GOALS_AGAINST_AVERAGE = "goalsAgainstAverage"
    SHUTOUT_PERCENTAGE = "shutoutPercentage"
    WIN_PERCENTAGE = "winPercentage"
    SHOTS_AGAINST_PER_GAME = "shotsAgainstPerGame"
    SAVES_PER_GAME = "savesPerGame"

    # Advanced metrics (computed on request)
    EXPECTED_GOALS = "expectedGoals"
    GOALS_DIFFERENCE = "goalsDifference"
    EVEN_STRENGTH_GOALS = "evenStrengthGoals"
    EVEN_STRENGTH_ASSISTS = "evenStrengthAssists"
    PRIMARY_ASSIST_PERCENTAGE = "primaryAssistPercentage"
    INDIVIDUAL_SHOT_ATTEMPTS = "individualShotAttempts"
    POINTS_PER_SIXTY = "pointsPerSixty"
    SHOTS_BLOCKED_PER_SIXTY = "shotsBlockedPerSixty"
    HITS_PER_SIXTY = "hitsPerSixty"
    TAKEAWAYS_PER_SIXTY = "takeawaysPerSixty"
    GIVEAWAYS_PER_SIXTY = "giveawaysPerSixty"

    @property
    def source(self) -> StatSource:
        return _BINDINGS[self][0]

    @property
    def lower_is_better(self) -> bool:
        return self in LOWER_IS_BETTER


LOWER_IS_BETTER: frozenset[StatCategory] = frozenset({
    StatCategory.GOALS_AGAINST_AVERAGE,
    StatCategory.PENALTY_MINUTES,
    StatCategory.PENALTY_MINUTES_PER_GAME,
    StatCategory.GIVEAWAYS,
    StatCategory.GIVEAWAYS_PER_SIXTY,
})

# snake_case names accepted from older clients
ALIASES: dict[str, StatCategory] = {
    "points_per_game": StatCategory.POINTS_PER_GAME,
    "shooting_percentage": StatCategory.SHOOTING_PERCENTAGE,
    "save_percentage": StatCategory.SAVE_PERCENTAGE,
    "goals_against_average": StatCategory.GOALS_AGAINST_AVERAGE,
    "penalty_minutes_per_game": StatCategory.PENALTY_MINUTES_PER_GAME,
    "time_on_ice_per_game": StatCategory.TIME_ON_ICE_PER_GAME,
    "power_play_points": StatCategory.POWER_PLAY_POINTS,
    "short_handed_points": StatCategory.SHORT_HANDED_POINTS,
    "games_played": StatCategory.GAMES_PLAYED,
    "penalty_minutes": StatCategory.PENALTY_MINUTES,
    "plus_minus": StatCategory.PLUS_MINUS,
    "shots_against": StatCategory.SHOTS_AGAINST,
    "goals_against": StatCategory.GOALS_AGAINST,
    "time_on_ice": StatCategory.TIME_ON_ICE,
}


def _snake(name: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in name)


_C = StatCategory

_SOURCE_MEMBERS: dict[StatSource, tuple[StatCategory, ...]] = {
    StatSource.BASE: (
        _C.GAMES_PLAYED, _C.GOALS, _C.ASSISTS, _C.POINTS, _C.SHOTS,
        _C.SHOTS_ON_GOAL, _C.PENALTY_MINUTES, _C.PLUS_MINUS, _C.FACEOFFS_WON,
        _C.FACEOFFS_LOST, _C.HITS, _C.BLOCKED, _C.GIVEAWAYS, _C.TAKEAWAYS,
    ),
    # time on ice is carried by both skill variants and read directly
    StatSource.SKATER: (
        _C.TIME_ON_ICE, _C.POWER_PLAY_GOALS, _C.POWER_PLAY_ASSISTS,
        _C.SHORT_HANDED_GOALS, _C.SHORT_HANDED_ASSISTS, _C.GAME_WINNING_GOALS,
        _C.OVERTIME_GOALS,
    ),
    StatSource.GOALIE: (
        _C.GAMES_STARTED, _C.SAVES, _C.SHOTS_AGAINST, _C.GOALS_AGAINST,
        _C.SHUTOUTS, _C.WINS, _C.LOSSES, _C.OVERTIME_LOSSES,
    ),
    StatSource.DERIVED: (
        _C.POINTS_PER_GAME, _C.PENALTY_MINUTES_PER_GAME, _C.SHOOTING_PERCENTAGE,
        _C.SHOTS_PER_GAME, _C.HITS_PER_GAME, _C.BLOCKED_PER_GAME,
        _C.PLUS_MINUS_PER_GAME, _C.TIME_ON_ICE_PER_GAME, _C.POWER_PLAY_POINTS,
        _C.SHORT_HANDED_POINTS, _C.FACEOFF_PERCENTAGE, _C.SAVE_PERCENTAGE,
        _C.GOALS_AGAINST_AVERAGE, _C.SHUTOUT_PERCENTAGE, _C.WIN_PERCENTAGE,
        _C.SHOTS_AGAINST_PER_GAME, _C.SAVES_PER_GAME,
    ),
    StatSource.ADVANCED: (
        _C.EXPECTED_GOALS, _C.GOALS_DIFFERENCE, _C.EVEN_STRENGTH_GOALS,
        _C.EVEN_STRENGTH_ASSISTS, _C.PRIMARY_ASSIST_PERCENTAGE,
        _C.INDIVIDUAL_SHOT_ATTEMPTS, _C.POINTS_PER_SIXTY,
        _C.SHOTS_BLOCKED_PER_SIXTY, _C.HITS_PER_SIXTY, _C.TAKEAWAYS_PER_SIXTY,
        _C.GIVEAWAYS_PER_SIXTY,
    ),
}

_BINDINGS: dict[StatCategory, tuple[StatSource, str]] = {
    category: (source, _snake(category.value))
    for source, members in _SOURCE_MEMBERS.items()
    for category in members
}


def _section(stats: PlayerStatsComplete, source: StatSource) -> object | None:
    if source is StatSource.BASE:
        return stats.base_stats
    if source is StatSource.SKATER:
        return stats.skill_stats if isinstance(stats.skill_stats, SkaterStats) else None
    if source is StatSource.GOALIE:
        return stats.skill_stats if isinstance(stats.skill_stats, GoalieStats) else None
    if source is StatSource.DERIVED:
        return stats.derived_stats
    return stats.advanced_metrics


def _accessor(category: StatCategory) -> Callable[[PlayerStatsComplete], float | None]:
    source, attr = _BINDINGS[category]

    def read(stats: PlayerStatsComplete) -> float | None:
        if category is StatCategory.TIME_ON_ICE:
            return stats.skill_stats.time_on_ice
        section = _section(stats, source)
        if section is None:
            return None
        return getattr(section, attr)

    return read


ACCESSORS: dict[StatCategory, Callable[[PlayerStatsComplete], float | None]] = {
    c: _accessor(c) for c in StatCategory
}


def resolve_category(name: str | StatCategory, field: str = "category") -> StatCategory:
    """Resolve a canonical name or alias to a StatCategory.

    Raises:
        InvalidRequestError: If the name is neither a category nor a known alias.
    """
    if isinstance(name, StatCategory):
        return name
    key = (name or "").strip()
    try:
        return StatCategory(key)
    except ValueError:
        pass
    if key in ALIASES:
        return ALIASES[key]
    raise InvalidRequestError(f"Unknown stat category: {name!r}", field=field)


def stat_value(stats: PlayerStatsComplete, category: StatCategory) -> float | None:
    """Read one category from a complete stats record. None means not applicable."""
    return ACCESSORS[category](stats)


def sort_values(values: list[float], category: StatCategory) -> list[float]:
    """Order values best-first for the category's direction. The sort is stable."""
    return sorted(values, reverse=not category.lower_is_better)
