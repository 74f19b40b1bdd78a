"""Statistics engine service.

Wires the event store to the pure stats functions. Single-entity calls
validate, look up the player or team, fetch the season's games and
events once, and fold them. Batch calls (leaderboards, comparisons,
roster views) fan out per player on a thread pool; a player whose stats
fail is logged and left out instead of failing the batch.
"""

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any

from src.models.event import Event
from src.models.game import Game
from src.models.options import StatsOptions
from src.models.player import Player, Position
from src.models.reports import (
    Comparison,
    ComparisonRequest,
    Leaderboard,
    LeaderboardQuery,
    TeamRankings,
    Trend,
)
from src.models.stats import AdvancedMetrics, GameLogEntry, GoalieStats, PlayerStatsComplete
from src.models.team import TeamStats
from src.stats import cache as cache_kinds
from src.stats.advanced import calculate_advanced_metrics
from src.stats.aggregate import aggregate_base_stats, filter_events, select_games
from src.stats.cache import StatsCache
from src.stats.categories import StatCategory, StatSource, resolve_category, stat_value
from src.stats.comparison import build_comparison, group_rank, validate_request
from src.stats.derived import calculate_derived_stats
from src.stats.errors import InvalidRequestError, NotFoundError, PartialFailure
from src.stats.leaderboard import POSITION_FILTERS, build_leaderboard, sort_player_stats, validate_query
from src.stats.position import calculate_skill_stats, goalie_game_lines
from src.stats.team import calculate_team_stats
from src.stats.trends import DEFAULT_GAME_COUNT, GameValue, build_trend
from src.store.base import EventStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8
UNKNOWN_OPPONENT = "Unknown"

_RANKING_CATEGORIES = (
    StatCategory.GOALS,
    StatCategory.ASSISTS,
    StatCategory.POINTS,
    StatCategory.PLUS_MINUS,
    StatCategory.PENALTY_MINUTES,
)


def _require(**params: str | None) -> None:
    for name, value in params.items():
        if not value:
            raise InvalidRequestError(f"{name} is required", field=name)


def _position_filter(position: str | None) -> Position | None:
    if position is None or position == "all":
        return None
    if position not in POSITION_FILTERS:
        raise InvalidRequestError(f"Unknown position filter: {position!r}", field="position")
    return Position(position)


def compute_player_stats(
    player: Player,
    team_id: str,
    season: str,
    games: dict[str, Game],
    events: Sequence[Event],
    include_advanced: bool = False,
) -> PlayerStatsComplete:
    """Run the base, skill and derived pipeline over already-selected games and events."""
    credited: Iterable[str] = ()
    if player.is_goalie:
        credited = goalie_game_lines(player.player_id, team_id, events).keys()

    base = aggregate_base_stats(player.player_id, team_id, season, events, games, credited)
    skill = calculate_skill_stats(player.position, player.player_id, team_id, events, games)
    derived = calculate_derived_stats(base, skill)

    advanced = None
    if include_advanced:
        advanced = calculate_advanced_metrics(
            player.player_id,
            season,
            (e for e in events if e.player_id == player.player_id),
            include_rates=player.position.is_skater,
        )
    return PlayerStatsComplete(
        player=player,
        base_stats=base,
        skill_stats=skill,
        derived_stats=derived,
        advanced_metrics=advanced,
    )


class StatisticsEngine:
    """Stateless stats service over an EventStore, with an optional cache."""

    def __init__(
        self,
        store: EventStore,
        cache: StatsCache | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self.store = store
        self.cache = cache
        self.max_workers = max(1, max_workers)

    # ── Cache helpers ─────────────────────────────────────────────

    def _cached(self, key: str, recalculate: bool) -> Any | None:
        if self.cache is None or recalculate:
            return None
        return self.cache.get(key)

    def _remember(self, key: str, value: Any, player_id: str | None = None, team_id: str | None = None) -> None:
        if self.cache is not None:
            self.cache.set(key, value, player_id=player_id, team_id=team_id)

    def invalidate_player(self, player_id: str) -> None:
        if self.cache is not None:
            self.cache.invalidate_player(player_id)

    def invalidate_team(self, team_id: str) -> None:
        if self.cache is not None:
            self.cache.invalidate_team(team_id)

    # ── Store helpers ─────────────────────────────────────────────

    def _load_player(self, player_id: str, team_id: str) -> Player:
        player = self.store.get_player(player_id)
        if player is None or player.team_id != team_id:
            raise NotFoundError(f"Player {player_id} not found on team {team_id}")
        return player

    def _season(
        self,
        team_id: str,
        season: str,
        options: StatsOptions | None = None,
    ) -> tuple[dict[str, Game], list[Event]]:
        """Selected games of the season and their filtered events."""
        games = select_games(self.store.get_games(team_id, season), team_id, season, options)
        if not games:
            return games, []
        events = self.store.get_events(list(games))
        return games, filter_events(events, games, team_id, options)

    def _team_names(self, team_ids: Iterable[str]) -> dict[str, str]:
        names: dict[str, str] = {}
        for team_id in set(team_ids):
            team = self.store.get_team(team_id)
            names[team_id] = team.name if team is not None and team.name else UNKNOWN_OPPONENT
        return names

    def _fan_out(
        self,
        player_ids: Sequence[str],
        compute: Callable[[str], PlayerStatsComplete],
    ) -> tuple[list[PlayerStatsComplete], list[str]]:
        """Compute stats per player concurrently.

        Returns:
            (results, excluded), both in the order of player_ids. Sorting of
            results is left to the caller, after every future has settled.
        """
        results: dict[str, PlayerStatsComplete] = {}
        failed: set[str] = set()

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {pool.submit(compute, pid): pid for pid in player_ids}
            for future in as_completed(futures):
                pid = futures[future]
                try:
                    results[pid] = future.result()
                except Exception as e:
                    failure = PartialFailure(pid, e)
                    logger.warning("%s; excluding from batch", failure.message)
                    failed.add(pid)

        ordered = [results[pid] for pid in player_ids if pid in results]
        excluded = [pid for pid in player_ids if pid in failed]
        return ordered, excluded

    def _roster_stats(
        self,
        team_id: str,
        season: str,
        position: Position | None = None,
        recalculate: bool = False,
        include_advanced: bool = False,
    ) -> tuple[list[PlayerStatsComplete], list[str]]:
        roster = self.store.get_roster(team_id, position)
        logger.info("Computing stats for %d players of team %s", len(roster), team_id)
        return self._fan_out(
            [p.player_id for p in roster],
            lambda pid: self.get_player_stats(
                pid, team_id, season,
                recalculate=recalculate,
                include_advanced=include_advanced,
            ),
        )

    # ── Player ────────────────────────────────────────────────────

    def get_player_stats(
        self,
        player_id: str,
        team_id: str,
        season: str,
        options: StatsOptions | None = None,
        recalculate: bool = False,
        include_advanced: bool = False,
    ) -> PlayerStatsComplete:
        """Complete stats for one player in one team-season.

        Args:
            player_id: The player.
            team_id: Team the player must belong to.
            season: Season label, e.g. '2024-25'.
            options: Event filters; None applies none.
            recalculate: Skip the cache read. The fresh result is still cached.
            include_advanced: Also compute AdvancedMetrics.

        Raises:
            InvalidRequestError: On a missing id or season.
            NotFoundError: If the player doesn't exist or isn't on the team.
            UpstreamUnavailableError: If the store fails.
        """
        _require(playerId=player_id, teamId=team_id, season=season)
        options = options or StatsOptions()

        key = StatsCache.make_key(
            cache_kinds.PLAYER_STATS, player_id, team_id, season, options.cache_token(), include_advanced,
        )
        cached = self._cached(key, recalculate)
        if cached is not None:
            return cached

        player = self._load_player(player_id, team_id)
        games, events = self._season(team_id, season, options)
        stats = compute_player_stats(player, team_id, season, games, events, include_advanced)

        self._remember(key, stats, player_id=player_id, team_id=team_id)
        return stats

    def calculate_advanced_metrics(
        self,
        player_id: str,
        team_id: str,
        season: str,
        position: Position | None = None,
        options: StatsOptions | None = None,
    ) -> AdvancedMetrics:
        """Expected goals and per-sixty rates for one player.

        Per-sixty rates are skipped for goalies. position overrides the
        player's stored position when given.
        """
        _require(playerId=player_id, teamId=team_id, season=season)
        player = self._load_player(player_id, team_id)
        position = position or player.position

        _, events = self._season(team_id, season, options)
        return calculate_advanced_metrics(
            player_id,
            season,
            (e for e in events if e.player_id == player_id),
            include_rates=position.is_skater,
        )

    def _per_game(
        self,
        player: Player,
        team_id: str,
        season: str,
        include_advanced: bool = False,
    ) -> Iterator[tuple[Game, PlayerStatsComplete]]:
        """Stats of each completed game the player took part in, oldest first."""
        games, events = self._season(team_id, season)
        by_game: dict[str, list[Event]] = {}
        for event in events:
            by_game.setdefault(event.game_id, []).append(event)

        for game in sorted(games.values(), key=lambda g: g.game_date):
            stats = compute_player_stats(
                player,
                team_id,
                season,
                {game.game_id: game},
                by_game.get(game.game_id, []),
                include_advanced=include_advanced,
            )
            if stats.base_stats.games_played:
                yield game, stats

    def get_player_trend(
        self,
        player_id: str,
        team_id: str,
        season: str,
        stat: str = "points",
        game_count: int = DEFAULT_GAME_COUNT,
        recalculate: bool = False,
    ) -> Trend:
        """Per-game values of one stat over the player's most recent games.

        Raises:
            InvalidRequestError: On an unknown stat or a game_count below 1.
            NotFoundError: If the player isn't on the team.
        """
        _require(playerId=player_id, teamId=team_id, season=season)
        category = resolve_category(stat, field="stat")
        if game_count < 1:
            raise InvalidRequestError("gameCount must be at least 1", field="gameCount")

        key = StatsCache.make_key(cache_kinds.TREND, player_id, team_id, season, category.value, game_count)
        cached = self._cached(key, recalculate)
        if cached is not None:
            return cached

        player = self._load_player(player_id, team_id)
        include_advanced = category.source is StatSource.ADVANCED
        played = list(self._per_game(player, team_id, season, include_advanced))
        names = self._team_names(game.opponent_of(team_id) for game, _ in played)

        values: list[GameValue] = []
        for game, stats in played:
            value = stat_value(stats, category)
            if value is None:
                continue
            values.append(GameValue(
                game_id=game.game_id,
                game_date=game.game_date,
                opponent=names[game.opponent_of(team_id)],
                value=float(value),
            ))

        trend = build_trend(player_id, category.value, values, game_count)
        self._remember(key, trend, player_id=player_id, team_id=team_id)
        return trend

    def get_player_game_log(self, player_id: str, team_id: str, season: str) -> list[GameLogEntry]:
        """One row per game the player took part in, newest first."""
        _require(playerId=player_id, teamId=team_id, season=season)
        player = self._load_player(player_id, team_id)
        played = list(self._per_game(player, team_id, season))
        names = self._team_names(game.opponent_of(team_id) for game, _ in played)

        log: list[GameLogEntry] = []
        for game, stats in played:
            base = stats.base_stats
            skill = stats.skill_stats
            team_score, opp_score = game.scores_for(team_id)
            entry = GameLogEntry(
                game_id=game.game_id,
                date=game.game_date.isoformat(),
                opponent=names[game.opponent_of(team_id)],
                is_home=game.is_home(team_id),
                team_score=team_score,
                opponent_score=opp_score,
                goals=base.goals,
                assists=base.assists,
                points=base.points,
                shots=base.shots,
                penalty_minutes=base.penalty_minutes,
                plus_minus=base.plus_minus,
                time_on_ice=skill.time_on_ice,
            )
            if isinstance(skill, GoalieStats):
                entry.saves = skill.saves
                entry.shots_against = skill.shots_against
                entry.goals_against = skill.goals_against
            log.append(entry)

        log.reverse()
        return log

    # ── Team ──────────────────────────────────────────────────────

    def get_team_stats(self, team_id: str, season: str, recalculate: bool = False) -> TeamStats:
        """Season record and special-teams rates for a team.

        Raises:
            NotFoundError: If the store has no such team.
        """
        _require(teamId=team_id, season=season)
        key = StatsCache.make_key(cache_kinds.TEAM_STATS, team_id, season)
        cached = self._cached(key, recalculate)
        if cached is not None:
            return cached

        if self.store.get_team(team_id) is None:
            raise NotFoundError(f"Team {team_id} not found")

        games, events = self._season(team_id, season)
        stats = calculate_team_stats(team_id, season, games, events)
        self._remember(key, stats, team_id=team_id)
        return stats

    def get_team_player_stats(
        self,
        team_id: str,
        season: str,
        position: str | None = None,
        min_games: int = 0,
        sort_by: str = "points",
        sort_order: str = "desc",
        recalculate: bool = False,
    ) -> list[PlayerStatsComplete]:
        """Complete stats for the active roster, sorted by any category."""
        _require(teamId=team_id, season=season)
        category = resolve_category(sort_by, field="sortBy")
        if sort_order not in ("asc", "desc"):
            raise InvalidRequestError(f"Unknown sort order: {sort_order!r}", field="sortOrder")
        if min_games < 0:
            raise InvalidRequestError("minGames cannot be negative", field="minGames")
        position_filter = _position_filter(position)

        stats, _ = self._roster_stats(
            team_id, season, position_filter,
            recalculate=recalculate,
            include_advanced=category.source is StatSource.ADVANCED,
        )
        eligible = [s for s in stats if s.base_stats.games_played >= min_games]
        return sort_player_stats(eligible, category, descending=sort_order == "desc")

    def get_team_rankings(self, player_id: str, team_id: str, season: str) -> TeamRankings:
        """The player's rank within the active roster for the headline categories."""
        _require(playerId=player_id, teamId=team_id, season=season)
        player_stats = self.get_player_stats(player_id, team_id, season)
        roster, _ = self._roster_stats(team_id, season)
        if all(s.player.player_id != player_id for s in roster):
            roster.append(player_stats)

        ranks: dict[str, int] = {}
        for category in _RANKING_CATEGORIES:
            group = [stat_value(s, category) for s in roster]
            ranks[category.name.lower()] = group_rank(stat_value(player_stats, category), group, category) or 0
        return TeamRankings(**ranks)

    # ── Reports ───────────────────────────────────────────────────

    def get_leaderboard(self, query: LeaderboardQuery) -> Leaderboard:
        """Top players of the roster in one category.

        Raises:
            InvalidRequestError: If the query is malformed (no store calls are made).
            UpstreamUnavailableError: If the roster lookup fails.
        """
        category = validate_query(query)

        key = StatsCache.make_key(
            cache_kinds.LEADERBOARD,
            query.team_id, query.season, category.value, query.position, query.limit, query.min_games,
        )
        cached = self._cached(key, query.recalculate)
        if cached is not None:
            return cached

        stats, excluded = self._roster_stats(
            query.team_id,
            query.season,
            _position_filter(query.position),
            recalculate=query.recalculate,
            include_advanced=category.source is StatSource.ADVANCED,
        )
        leaderboard = build_leaderboard(query, category, stats, excluded)
        self._remember(key, leaderboard, team_id=query.team_id)
        return leaderboard

    def compare_players(self, request: ComparisonRequest) -> Comparison:
        """Side-by-side stats of up to six players plus roster averages.

        Raises:
            InvalidRequestError: If the request is malformed (no store calls are
                made) or none of the players resolve.
        """
        categories = validate_request(request)
        include_advanced = any(c.source is StatSource.ADVANCED for c in categories)

        compared, excluded = self._fan_out(
            list(dict.fromkeys(request.player_ids)),
            lambda pid: self.get_player_stats(
                pid, request.team_id, request.season, include_advanced=include_advanced,
            ),
        )
        roster, _ = self._roster_stats(request.team_id, request.season, include_advanced=include_advanced)
        return build_comparison(request, categories, compared, roster, excluded)
