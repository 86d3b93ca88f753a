"""
Centralized error embeds for consistent ephemeral error replies.
"""

import discord


class ErrorEmbeds:
    """Centralized error embed factory."""

    @staticmethod
    def not_registered() -> discord.Embed:
        return discord.Embed(
            title="Not Registered",
            description="You are not registered yet. Use `/setchess <username>`.",
            color=discord.Color.orange()
        )

    @staticmethod
    def invalid_input(message: str) -> discord.Embed:
        """Create embed for invalid user input."""
        return discord.Embed(
            title="Invalid Input",
            description=message,
            color=discord.Color.red()
        )

    @staticmethod
    def command_error(error: str) -> discord.Embed:
        """Create embed for general command errors."""
        return discord.Embed(
            title="Command Error",
            description=f"An error occurred: {error}\n\nPlease try again or contact an administrator.",
            color=discord.Color.red()
        )

    @staticmethod
    def refresh_failed() -> discord.Embed:
        return discord.Embed(
            title="Refresh Failed",
            description="The leaderboard could not be refreshed. Please try again later.",
            color=discord.Color.red()
        )

    @staticmethod
    def no_channel() -> discord.Embed:
        return discord.Embed(
            title="No Leaderboard Channel",
            description="No leaderboard channel is configured and this command was not used in a channel.",
            color=discord.Color.red()
        )
