"""
Leaderboard refresh orchestration.

One refresh: load snapshot and roster, resolve ratings through the cache
(concurrently), rank, render, write the Discord message, then persist the
new snapshot. Nothing is persisted unless the message write succeeded.

Refreshes are single-flight: an ``asyncio.Lock`` serializes them so a
scheduled refresh and an on-demand refresh never interleave their
snapshot read-modify-write.
"""

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Set

from rapid_leaderboard.services.rate_limiter import RefreshCooldownGate
from rapid_leaderboard.utils.embeds import build_leaderboard_embed
from rapid_leaderboard.utils.leaderboard_exceptions import ChannelUnavailableError
from rapid_leaderboard.utils.ranking import rank_participants, ratings_by_username

logger = logging.getLogger(__name__)


class RefreshOutcome(Enum):
    REFRESHED = "refreshed"
    BUSY = "busy"          # Rejected by the cooldown gate
    FAILED = "failed"


class LeaderboardRefreshService:
    """Runs leaderboard refreshes for the startup, weekly and on-demand triggers."""

    def __init__(
        self,
        registry,
        snapshot_store,
        rating_cache,
        reconciler,
        cooldown_gate: RefreshCooldownGate,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.registry = registry
        self.snapshot_store = snapshot_store
        self.rating_cache = rating_cache
        self.reconciler = reconciler
        self.cooldown_gate = cooldown_gate
        self._now = now
        self._refresh_lock = asyncio.Lock()
        self._background_tasks: Set[asyncio.Task] = set()

    async def _resolve_ratings(self, roster):
        lookups = await asyncio.gather(
            *(self.rating_cache.get(participant.chess_username) for participant in roster)
        )
        cached = sum(1 for lookup in lookups if lookup.from_cache)
        logger.debug(f"Resolved {len(lookups)} ratings ({cached} from cache)")
        return ratings_by_username(roster, [lookup.rating for lookup in lookups])

    async def refresh(self, channel_id: int, set_weekly_baseline: bool = False) -> bool:
        """
        Refresh the leaderboard message in ``channel_id``.

        Returns:
            False if the channel could not be reached (snapshot untouched),
            True once the message is written and the snapshot saved.
        """
        async with self._refresh_lock:
            snapshot = await self.snapshot_store.load()
            roster = await self.registry.load_roster()
            ratings = await self._resolve_ratings(roster)

            rows = rank_participants(roster, ratings, snapshot)
            embed = build_leaderboard_embed(rows)

            try:
                message_id = await self.reconciler.reconcile(channel_id, snapshot, embed)
            except ChannelUnavailableError as e:
                logger.error(f"Leaderboard refresh aborted: {e}")
                return False

            next_snapshot = snapshot.with_message(channel_id, message_id).advance(
                rows, set_weekly_baseline=set_weekly_baseline, now=self._now()
            )
            await self.snapshot_store.save(next_snapshot)

        logger.info(
            f"Leaderboard refreshed in channel {channel_id}: {len(rows)} players"
            + (" (weekly baseline set)" if set_weekly_baseline else "")
        )
        return True

    async def refresh_on_demand(
        self,
        user_id: int,
        channel_id: int,
        on_accepted: Optional[Callable[[], Awaitable[Any]]] = None,
    ) -> RefreshOutcome:
        """
        User-triggered refresh, gated by the global and per-user cooldowns.

        ``on_accepted`` runs once the gate lets the call through, before the
        refresh starts (the cog uses it to defer the interaction).
        """
        if not await self.cooldown_gate.try_acquire(user_id):
            return RefreshOutcome.BUSY
        try:
            if on_accepted is not None:
                await on_accepted()
            refreshed = await self.refresh(channel_id)
        except Exception as e:
            logger.error(f"On-demand leaderboard refresh for user {user_id} failed: {e}", exc_info=True)
            return RefreshOutcome.FAILED
        return RefreshOutcome.REFRESHED if refreshed else RefreshOutcome.FAILED

    async def run_supervised(self, channel_id: Optional[int], reason: str, set_weekly_baseline: bool = False) -> bool:
        """
        System-initiated refresh whose failures are logged and never propagated.

        Without a configured channel the refresh targets the channel of the
        existing leaderboard message, and is skipped if there is none yet.
        """
        if not channel_id:
            channel_id = (await self.snapshot_store.load()).channel_id
        if not channel_id:
            logger.warning(f"Skipping {reason} leaderboard refresh: no leaderboard channel configured")
            return False
        try:
            return await self.refresh(channel_id, set_weekly_baseline=set_weekly_baseline)
        except Exception as e:
            logger.error(f"{reason.capitalize()} leaderboard refresh failed: {e}", exc_info=True)
            return False

    def spawn(self, channel_id: Optional[int], reason: str, set_weekly_baseline: bool = False) -> asyncio.Task:
        """Fire-and-forget supervised refresh, tracked until it completes."""
        task = asyncio.create_task(
            self.run_supervised(channel_id, reason, set_weekly_baseline=set_weekly_baseline)
        )
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def cleanup(self):
        """Wait for in-flight background refreshes during shutdown."""
        if self._background_tasks:
            logger.info(f"Waiting for {len(self._background_tasks)} background refreshes to complete...")
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
            self._background_tasks.clear()
