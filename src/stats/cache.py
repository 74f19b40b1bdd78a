"""In-process TTL cache for computed stats.

Entries are keyed by kind plus the call's arguments. A kind's TTL decides
how long its entries live; the oldest entries are evicted once the cache
is full. Callers that pass recalculate=True skip the read but still store
the fresh result.
"""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

PLAYER_STATS = "player_stats"
TEAM_STATS = "team_stats"
LEADERBOARD = "leaderboard"
TREND = "trend"

DEFAULT_TTLS: dict[str, float] = {
    PLAYER_STATS: 5 * 60,
    TEAM_STATS: 10 * 60,
    LEADERBOARD: 15 * 60,
    TREND: 5 * 60,
}
MAX_ENTRIES = 1000


@dataclass
class _Entry:
    value: Any
    expires_at: float
    player_id: str | None
    team_id: str | None


class StatsCache:
    """Thread-safe TTL cache shared by one StatisticsEngine."""

    def __init__(
        self,
        ttls: dict[str, float] | None = None,
        max_entries: int = MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttls = {**DEFAULT_TTLS, **(ttls or {})}
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(kind: str, *parts: object) -> str:
        return ":".join([kind, *(str(p) for p in parts)])

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                self.misses += 1
                return None
            self.hits += 1
            return entry.value

    def set(
        self,
        key: str,
        value: Any,
        player_id: str | None = None,
        team_id: str | None = None,
    ) -> None:
        kind = key.split(":", 1)[0]
        ttl = self.ttls.get(kind, DEFAULT_TTLS[PLAYER_STATS])
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = _Entry(value, self._clock() + ttl, player_id, team_id)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cache entry %s", evicted)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def invalidate_player(self, player_id: str) -> int:
        """Drop every entry computed for the player. Returns the number removed."""
        return self._invalidate_where(lambda e: e.player_id == player_id)

    def invalidate_team(self, team_id: str) -> int:
        """Drop every entry tied to the team, including its players' entries."""
        return self._invalidate_where(lambda e: e.team_id == team_id)

    def _invalidate_where(self, predicate: Callable[[_Entry], bool]) -> int:
        with self._lock:
            doomed = [k for k, e in self._entries.items() if predicate(e)]
            for key in doomed:
                del self._entries[key]
        if doomed:
            logger.info("Invalidated %d cache entries", len(doomed))
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict[str, int]:
        with self._lock:
            size = len(self._entries)
        return {"size": size, "hits": self.hits, "misses": self.misses}
