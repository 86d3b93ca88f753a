"""
Leaderboard Cog - /leaderboard command and background refreshes

Runs a best-effort refresh once the bot is ready, sets the weekly baseline
on the configured calendar trigger, and lets users refresh on demand
behind the cooldown gate.
"""

from datetime import datetime, timezone

import discord
from discord import app_commands
from discord.ext import commands, tasks

from rapid_leaderboard.config import Config
from rapid_leaderboard.services.leaderboard_refresh import RefreshOutcome
from rapid_leaderboard.utils.error_embeds import ErrorEmbeds
from rapid_leaderboard.utils.logger import setup_logger
from rapid_leaderboard.utils.schedule import WeeklySchedule

logger = setup_logger(__name__)

REFRESHING_MESSAGE = "Leaderboard is refreshing. Try again shortly."


class LeaderboardCog(commands.Cog):
    """Keeps the rapid leaderboard message up to date"""

    def __init__(self, bot):
        self.bot = bot
        self.refresh_service = bot.refresh_service
        self.schedule = WeeklySchedule.from_config()
        self._startup_refresh_done = False

    @commands.Cog.listener()
    async def on_ready(self):
        """Kick off the startup refresh and the weekly task (once per process)"""
        if self._startup_refresh_done:
            return
        self._startup_refresh_done = True

        self.refresh_service.spawn(Config.get_leaderboard_channel_id(), "startup")
        if not self.weekly_baseline_refresh.is_running():
            self.weekly_baseline_refresh.start()
        logger.info(f"LeaderboardCog: startup refresh queued, weekly baseline {self.schedule}")

    def cog_unload(self):
        """Stop background tasks when cog is unloaded"""
        self.weekly_baseline_refresh.cancel()

    @tasks.loop()
    async def weekly_baseline_refresh(self):
        """Sleep until the next weekly trigger, then refresh and freeze the baseline"""
        next_run = self.schedule.next_run_after(datetime.now(timezone.utc))
        logger.info(f"Next weekly baseline refresh at {next_run.isoformat()}")
        await discord.utils.sleep_until(next_run)
        await self.refresh_service.run_supervised(
            Config.get_leaderboard_channel_id(), "weekly", set_weekly_baseline=True
        )

    @weekly_baseline_refresh.before_loop
    async def before_weekly_baseline_refresh(self):
        await self.bot.wait_until_ready()

    @app_commands.command(name="leaderboard", description="Refresh or show the Rapid Chess.com leaderboard")
    async def leaderboard(self, interaction: discord.Interaction):
        """Refresh the leaderboard message, subject to the refresh cooldowns."""
        channel_id = Config.get_leaderboard_channel_id(interaction.channel_id)
        if not channel_id:
            await interaction.response.send_message(embed=ErrorEmbeds.no_channel(), ephemeral=True)
            return

        outcome = await self.refresh_service.refresh_on_demand(
            interaction.user.id,
            channel_id,
            on_accepted=lambda: interaction.response.defer(ephemeral=True, thinking=True),
        )

        if outcome is RefreshOutcome.BUSY:
            await interaction.response.send_message(REFRESHING_MESSAGE, ephemeral=True)
        elif outcome is RefreshOutcome.REFRESHED:
            await interaction.delete_original_response()
        elif interaction.response.is_done():
            await interaction.followup.send(embed=ErrorEmbeds.refresh_failed(), ephemeral=True)
        else:
            await interaction.response.send_message(embed=ErrorEmbeds.refresh_failed(), ephemeral=True)


async def setup(bot):
    await bot.add_cog(LeaderboardCog(bot))
