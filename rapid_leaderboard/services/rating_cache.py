"""
TTL cache in front of the rating fetcher.

Keys are normalized Chess.com usernames. Unrated results are cached too, so
a missing or failing account is not re-requested on every refresh inside
the freshness window. Concurrent misses for the same key share one fetch.
"""

import asyncio
import time
import logging
from typing import Callable, Dict, Optional, Tuple

from rapid_leaderboard.config import Config
from rapid_leaderboard.data_models.leaderboard import RatingLookup, normalize_username

logger = logging.getLogger(__name__)


class RatingCache:
    """Wrapper for a rating fetcher with TTL-based caching."""

    def __init__(self, fetcher, ttl: float = None, clock: Callable[[], float] = time.monotonic):
        self.fetcher = fetcher
        self.ttl = Config.RATING_CACHE_TTL_SECONDS if ttl is None else ttl
        self._clock = clock
        self._cache: Dict[str, Tuple[float, Optional[int]]] = {}  # username -> (fetched_at, rating)
        self._in_flight: Dict[str, asyncio.Task] = {}

    async def _fetch(self, norm: str) -> Optional[int]:
        logger.debug(f"Rating cache miss for {norm}, fetching")
        rating = await self.fetcher.fetch(norm)
        self._cache[norm] = (self._clock(), rating)
        return rating

    async def get(self, username: str) -> RatingLookup:
        """Rating for ``username``, served from cache while the entry is younger than the TTL."""
        norm = normalize_username(username)
        if not norm:
            return RatingLookup(rating=None, from_cache=False)

        entry = self._cache.get(norm)
        if entry is not None:
            fetched_at, rating = entry
            if self._clock() - fetched_at < self.ttl:
                logger.debug(f"Rating cache hit for {norm}")
                return RatingLookup(rating=rating, from_cache=True)

        task = self._in_flight.get(norm)
        if task is None:
            task = asyncio.ensure_future(self._fetch(norm))
            self._in_flight[norm] = task
            task.add_done_callback(lambda _task, key=norm: self._in_flight.pop(key, None))
        else:
            logger.debug(f"Joining in-flight rating fetch for {norm}")

        # One waiter being cancelled must not cancel the fetch the others share
        rating = await asyncio.shield(task)
        return RatingLookup(rating=rating, from_cache=False)
