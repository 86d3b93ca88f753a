"""
Player registry service.

Maps Discord users to Chess.com usernames. One row per Discord user; saving
again overwrites the previous mapping.
"""

import logging
from typing import List, Optional

from sqlalchemy import select

from rapid_leaderboard.data_models.leaderboard import Participant, normalize_username
from rapid_leaderboard.database.models import Player
from rapid_leaderboard.services.base import BaseService
from rapid_leaderboard.utils.leaderboard_exceptions import InvalidChessUsernameError

logger = logging.getLogger(__name__)

# Matches the width of players.chess_username
MAX_USERNAME_LENGTH = 50


class PlayerRegistryService(BaseService):
    """Stores and loads the leaderboard roster."""

    @staticmethod
    def _to_participant(player: Player) -> Participant:
        return Participant(
            discord_id=player.discord_id,
            display_name=player.display_name,
            chess_username=player.chess_username,
        )

    async def load_roster(self) -> List[Participant]:
        """Every registered player, in registration-key order."""
        async with self.get_session() as session:
            result = await session.execute(select(Player).order_by(Player.discord_id))
            return [self._to_participant(player) for player in result.scalars().all()]

    async def get_participant(self, discord_id: int) -> Optional[Participant]:
        async with self.get_session() as session:
            player = await session.get(Player, discord_id)
            return self._to_participant(player) if player else None

    async def save_participant(self, discord_id: int, display_name: str, chess_username: str) -> Participant:
        """
        Create or overwrite the mapping for a Discord user.

        The username is trimmed but keeps its casing for display.

        Raises:
            InvalidChessUsernameError: If the username is empty after trimming
                or longer than MAX_USERNAME_LENGTH
        """
        username = (chess_username or "").strip()
        if not normalize_username(username) or len(username) > MAX_USERNAME_LENGTH:
            raise InvalidChessUsernameError(chess_username)

        async def _save():
            async with self.get_session() as session:
                player = await session.get(Player, discord_id)
                if player is None:
                    player = Player(discord_id=discord_id, display_name=display_name, chess_username=username)
                    session.add(player)
                else:
                    player.display_name = display_name
                    player.chess_username = username
                return self._to_participant(player)

        participant = await self.execute_with_retry(_save, "save participant")
        logger.info(f"Registered {display_name} ({discord_id}) as Chess.com user {username}")
        return participant
