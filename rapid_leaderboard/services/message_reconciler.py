"""
Find-or-create logic for the single leaderboard message.

The snapshot remembers where the leaderboard message lives. If that message
can still be fetched it is edited in place; otherwise a placeholder is sent,
its id is persisted straight away, and the placeholder is then filled. A
stale pointer is simply replaced, the old message is never deleted.
"""

import logging
from typing import Optional

import discord

from rapid_leaderboard.data_models.leaderboard import LeaderboardSnapshot
from rapid_leaderboard.utils.embeds import PLACEHOLDER_TEXT
from rapid_leaderboard.utils.leaderboard_exceptions import ChannelUnavailableError

logger = logging.getLogger(__name__)


class MessageReconciler:
    """Keeps exactly one leaderboard message per channel up to date."""

    def __init__(self, client: discord.Client, snapshot_store):
        self.client = client
        self.snapshot_store = snapshot_store

    async def fetch_channel(self, channel_id: int) -> Optional[discord.abc.Messageable]:
        channel = self.client.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self.client.fetch_channel(channel_id)
            except (discord.NotFound, discord.Forbidden, discord.HTTPException) as e:
                logger.warning(f"Could not fetch leaderboard channel {channel_id}: {e}")
                return None
        if not isinstance(channel, discord.abc.Messageable):
            logger.warning(f"Leaderboard channel {channel_id} is not a text channel")
            return None
        return channel

    async def fetch_existing(
        self, channel: discord.abc.Messageable, channel_id: int, snapshot: LeaderboardSnapshot
    ) -> Optional[discord.Message]:
        """The message the snapshot points at, if it is in this channel and still exists."""
        if not snapshot.message_id or snapshot.channel_id != channel_id:
            return None
        try:
            return await channel.fetch_message(snapshot.message_id)
        except (discord.NotFound, discord.Forbidden, discord.HTTPException) as e:
            logger.info(f"Previous leaderboard message {snapshot.message_id} unavailable, creating a new one: {e}")
            return None

    async def get_or_create(self, channel_id: int, snapshot: LeaderboardSnapshot) -> discord.Message:
        """
        Existing leaderboard message, or a freshly created placeholder.

        Raises:
            ChannelUnavailableError: If the channel cannot be fetched
        """
        channel = await self.fetch_channel(channel_id)
        if channel is None:
            raise ChannelUnavailableError(channel_id)

        message = await self.fetch_existing(channel, channel_id, snapshot)
        if message is not None:
            return message

        message = await channel.send(PLACEHOLDER_TEXT)
        await self.snapshot_store.save(snapshot.with_message(channel_id, message.id))
        logger.info(f"Created leaderboard message {message.id} in channel {channel_id}")
        return message

    async def reconcile(self, channel_id: int, snapshot: LeaderboardSnapshot, embed: discord.Embed) -> int:
        """Write ``embed`` into the leaderboard message and return the message id."""
        message = await self.get_or_create(channel_id, snapshot)
        await message.edit(content=None, embed=embed)
        return message.id
