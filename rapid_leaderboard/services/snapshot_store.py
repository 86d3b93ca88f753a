"""
Snapshot store for the leaderboard message state.

The snapshot lives in a single ``leaderboard_state`` row. It is read in full
at the start of a refresh and replaced in full at the end. A missing,
unreadable or corrupt row loads as an empty snapshot so a bad state file
never stops the leaderboard from rendering.
"""

import json
import logging

from sqlalchemy.exc import SQLAlchemyError

from rapid_leaderboard.data_models.leaderboard import LeaderboardSnapshot
from rapid_leaderboard.database.models import LeaderboardState
from rapid_leaderboard.services.base import BaseService

logger = logging.getLogger(__name__)


class SnapshotStore(BaseService):
    """Loads and saves the persisted LeaderboardSnapshot."""

    async def load(self) -> LeaderboardSnapshot:
        try:
            async with self.get_session() as session:
                state = await session.get(LeaderboardState, LeaderboardState.SINGLETON_ID)
                if state is None:
                    return LeaderboardSnapshot()
                record = {
                    "channel_id": state.channel_id,
                    "message_id": state.message_id,
                    "last_ratings": json.loads(state.last_ratings or "{}"),
                    "last_ranks": json.loads(state.last_ranks or "{}"),
                    "weekly_baseline_ratings": json.loads(state.weekly_baseline_ratings or "{}"),
                    "weekly_baseline_at": state.weekly_baseline_at,
                }
        except (SQLAlchemyError, ValueError, TypeError) as e:
            logger.warning(f"Could not read leaderboard state, starting from an empty snapshot: {e}")
            return LeaderboardSnapshot()

        return LeaderboardSnapshot.from_record(record)

    async def save(self, snapshot: LeaderboardSnapshot) -> None:
        """Replace the stored snapshot with ``snapshot``."""
        async def _save():
            async with self.get_session() as session:
                state = await session.get(LeaderboardState, LeaderboardState.SINGLETON_ID)
                if state is None:
                    state = LeaderboardState(id=LeaderboardState.SINGLETON_ID)
                    session.add(state)
                state.channel_id = snapshot.channel_id
                state.message_id = snapshot.message_id
                state.last_ratings = json.dumps(snapshot.last_ratings, sort_keys=True)
                state.last_ranks = json.dumps(snapshot.last_ranks, sort_keys=True)
                state.weekly_baseline_ratings = json.dumps(snapshot.weekly_baseline_ratings, sort_keys=True)
                state.weekly_baseline_at = snapshot.weekly_baseline_at

        await self.execute_with_retry(_save, "save leaderboard snapshot")
        logger.debug(
            f"Saved leaderboard snapshot: message {snapshot.message_id} in channel {snapshot.channel_id}, "
            f"{len(snapshot.last_ranks)} ranked players"
        )
