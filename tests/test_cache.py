"""Tests for the TTL stats cache."""

from src.stats.cache import LEADERBOARD, PLAYER_STATS, TEAM_STATS, StatsCache


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestStatsCache:
    def test_hit_and_miss(self) -> None:
        cache = StatsCache()
        key = StatsCache.make_key(PLAYER_STATS, "p1", "t1")
        assert cache.get(key) is None
        cache.set(key, "value")
        assert cache.get(key) == "value"
        assert cache.stats() == {"size": 1, "hits": 1, "misses": 1}

    def test_entries_expire_by_kind(self) -> None:
        """Player entries live five minutes, leaderboards fifteen."""
        clock = _FakeClock()
        cache = StatsCache(clock=clock)
        player_key = StatsCache.make_key(PLAYER_STATS, "p1")
        board_key = StatsCache.make_key(LEADERBOARD, "t1")
        cache.set(player_key, 1)
        cache.set(board_key, 2)

        clock.now = 6 * 60
        assert cache.get(player_key) is None
        assert cache.get(board_key) == 2

        clock.now = 16 * 60
        assert cache.get(board_key) is None

    def test_oldest_entry_evicted(self) -> None:
        cache = StatsCache(max_entries=2)
        for i in range(3):
            cache.set(StatsCache.make_key(TEAM_STATS, i), i)
        assert cache.get(StatsCache.make_key(TEAM_STATS, 0)) is None
        assert cache.get(StatsCache.make_key(TEAM_STATS, 2)) == 2

    def test_invalidate_player(self) -> None:
        cache = StatsCache()
        cache.set("player_stats:p1:a", 1, player_id="p1", team_id="t1")
        cache.set("player_stats:p1:b", 2, player_id="p1", team_id="t1")
        cache.set("player_stats:p2:a", 3, player_id="p2", team_id="t1")
        assert cache.invalidate_player("p1") == 2
        assert cache.get("player_stats:p2:a") == 3

    def test_invalidate_team(self) -> None:
        cache = StatsCache()
        cache.set("player_stats:p1", 1, player_id="p1", team_id="t1")
        cache.set("leaderboard:t1", 2, team_id="t1")
        cache.set("leaderboard:t2", 3, team_id="t2")
        assert cache.invalidate_team("t1") == 2
        assert cache.stats()["size"] == 1

    def test_invalidate_single_key(self) -> None:
        cache = StatsCache()
        cache.set("team_stats:t1", 1)
        cache.invalidate("team_stats:t1")
        assert cache.get("team_stats:t1") is None

    def test_clear(self) -> None:
        cache = StatsCache()
        cache.set("trend:p1", 1)
        cache.clear()
        assert cache.get("trend:p1") is None
