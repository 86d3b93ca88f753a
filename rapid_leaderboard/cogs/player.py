"""
Player registration commands.

/setchess saves the caller's Chess.com username, /mychess shows it and
/chessplayers lists everyone on the leaderboard.
"""

import discord
from discord.ext import commands
from discord import app_commands

from rapid_leaderboard.config import Config
from rapid_leaderboard.utils.embeds import build_player_list_embed
from rapid_leaderboard.utils.error_embeds import ErrorEmbeds
from rapid_leaderboard.utils.leaderboard_exceptions import InvalidChessUsernameError
import logging

logger = logging.getLogger(__name__)


class PlayerCog(commands.Cog):
    """Chess.com username registration"""

    def __init__(self, bot):
        self.bot = bot
        self.registry = bot.registry
        self.refresh_service = bot.refresh_service

    @app_commands.command(name="setchess", description="Set your Chess.com username")
    @app_commands.describe(username="Your Chess.com username")
    async def setchess(self, interaction: discord.Interaction, username: str):
        """Register or replace the caller's Chess.com username."""
        display_name = str(interaction.user)
        try:
            participant = await self.registry.save_participant(interaction.user.id, display_name, username)
        except InvalidChessUsernameError as e:
            await interaction.response.send_message(embed=ErrorEmbeds.invalid_input(e.user_message), ephemeral=True)
            return

        await interaction.response.send_message(
            f"Saved: **{participant.display_name}** -> **{participant.chess_username}**",
            ephemeral=True
        )

        # New players show up without waiting for the next refresh
        self.refresh_service.spawn(
            Config.get_leaderboard_channel_id(interaction.channel_id), "registration"
        )

    @app_commands.command(name="mychess", description="Show your saved Chess.com username")
    async def mychess(self, interaction: discord.Interaction):
        participant = await self.registry.get_participant(interaction.user.id)
        if participant is None:
            await interaction.response.send_message(embed=ErrorEmbeds.not_registered(), ephemeral=True)
            return

        await interaction.response.send_message(
            f"Your saved Chess.com username is: **{participant.chess_username}**",
            ephemeral=True
        )

    @app_commands.command(name="chessplayers", description="List everyone registered on the leaderboard")
    async def chessplayers(self, interaction: discord.Interaction):
        try:
            roster = await self.registry.load_roster()
        except Exception as e:
            logger.error(f"Error loading roster for /chessplayers: {e}", exc_info=True)
            await interaction.response.send_message(
                embed=ErrorEmbeds.command_error("Could not load registered players."), ephemeral=True
            )
            return

        await interaction.response.send_message(embed=build_player_list_embed(roster), ephemeral=True)


async def setup(bot):
    await bot.add_cog(PlayerCog(bot))
