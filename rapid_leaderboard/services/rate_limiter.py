"""
Cooldown gate for user-triggered leaderboard refreshes.

Two independent thresholds: a global interval between any two on-demand
refreshes, and a per-user interval between one user's refreshes. State is
in memory only and resets on restart.
"""

import time
import asyncio
from typing import Callable, Dict, Optional
import logging

from rapid_leaderboard.config import Config

logger = logging.getLogger(__name__)

class RefreshCooldownGate:
    """Global plus per-user cooldown with check-and-set semantics."""

    def __init__(
        self,
        global_cooldown: float = None,
        user_cooldown: float = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.global_cooldown = Config.GLOBAL_COOLDOWN_SECONDS if global_cooldown is None else global_cooldown
        self.user_cooldown = Config.USER_COOLDOWN_SECONDS if user_cooldown is None else user_cooldown
        self._clock = clock
        self._global_last: Optional[float] = None
        self._user_last: Dict[int, float] = {}  # Grows with unique users; bounded by guild size
        self._lock = asyncio.Lock()

    async def try_acquire(self, user_id: int) -> bool:
        """Return True and stamp both cooldowns if neither is active, else False."""
        async with self._lock:
            now = self._clock()
            if self._global_last is not None and now - self._global_last < self.global_cooldown:
                logger.debug(f"Global refresh cooldown active, rejecting user {user_id}")
                return False

            user_last = self._user_last.get(user_id)
            if user_last is not None and now - user_last < self.user_cooldown:
                logger.debug(f"User refresh cooldown active for {user_id}")
                return False

            self._global_last = now
            self._user_last[user_id] = now
            return True

