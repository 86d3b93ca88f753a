import asyncio
import logging
import traceback
from typing import Optional

import discord
from discord.ext import commands
from discord import app_commands

from rapid_leaderboard.config import Config
from rapid_leaderboard.database.database import Database
from rapid_leaderboard.services.leaderboard_refresh import LeaderboardRefreshService
from rapid_leaderboard.services.message_reconciler import MessageReconciler
from rapid_leaderboard.services.player_registry import PlayerRegistryService
from rapid_leaderboard.services.rate_limiter import RefreshCooldownGate
from rapid_leaderboard.services.rating_cache import RatingCache
from rapid_leaderboard.services.rating_fetcher import ChessComRatingFetcher
from rapid_leaderboard.services.snapshot_store import SnapshotStore
from rapid_leaderboard.utils.error_embeds import ErrorEmbeds
from rapid_leaderboard.utils.logger import setup_logger

class LeaderboardBot(commands.Bot):
    def __init__(self):
        intents = discord.Intents.default()
        intents.guilds = True

        super().__init__(
            command_prefix=Config.COMMAND_PREFIX,
            intents=intents,
            help_command=None
        )

        self.tree.on_error = self.on_app_command_error

        self.db: Optional[Database] = None
        self.registry: Optional[PlayerRegistryService] = None
        self.snapshot_store: Optional[SnapshotStore] = None
        self.rating_fetcher: Optional[ChessComRatingFetcher] = None
        self.refresh_service: Optional[LeaderboardRefreshService] = None
        # Process-wide throttling state; resets on restart
        self.cooldown_gate = RefreshCooldownGate()
        self.logger = setup_logger(__name__)

    async def setup_hook(self):
        """Called when the bot is starting up"""
        self.logger.info("Setting up Rapid Leaderboard Bot...")

        self.db = Database()
        await self.db.initialize()

        self.registry = PlayerRegistryService(self.db.session_factory)
        self.snapshot_store = SnapshotStore(self.db.session_factory)
        self.rating_fetcher = ChessComRatingFetcher()
        self.refresh_service = LeaderboardRefreshService(
            registry=self.registry,
            snapshot_store=self.snapshot_store,
            rating_cache=RatingCache(self.rating_fetcher),
            reconciler=MessageReconciler(self, self.snapshot_store),
            cooldown_gate=self.cooldown_gate,
        )

        await self.load_cogs()
        await self._sync_commands()

        self.logger.info("Rapid Leaderboard Bot setup complete!")

    async def load_cogs(self):
        """Load all cogs"""
        cogs_to_load = [
            'rapid_leaderboard.cogs.player',
            'rapid_leaderboard.cogs.leaderboard',
        ]

        for cog in cogs_to_load:
            try:
                await self.load_extension(cog)
                self.logger.info(f"Loaded cog: {cog}")
            except Exception as e:
                self.logger.error(f"Failed to load cog {cog}: {e}", exc_info=True)

    async def _sync_commands(self):
        """Sync slash commands with Discord"""
        if not self.tree.get_commands():
            self.logger.warning("No application commands found to sync. Check for cog loading errors.")
            return

        try:
            guild_ids = Config.get_guild_ids()

            if guild_ids:
                # Guild-specific sync (instant updates)
                for guild_id in guild_ids:
                    try:
                        guild = discord.Object(id=guild_id)
                        self.tree.copy_global_to(guild=guild)
                        synced = await self.tree.sync(guild=guild)
                        self.logger.info(f"Synced {len(synced)} command(s) to guild {guild_id}")
                    except discord.errors.Forbidden:
                        self.logger.error(f"Permission error syncing to guild {guild_id}. Ensure the bot has the 'applications.commands' scope.", exc_info=True)
                    except discord.errors.HTTPException as e:
                        self.logger.error(f"HTTP error syncing to guild {guild_id}. Status: {e.status}, Response: {e.text}", exc_info=True)
            else:
                # Global sync (can take up to 1 hour)
                self.logger.info("Syncing commands globally... (Note: This can take up to an hour to propagate)")
                synced = await self.tree.sync()
                self.logger.info(f"Synced {len(synced)} command(s) globally")
        except Exception as e:
            self.logger.error(f"Failed to sync commands: {e}", exc_info=True)
            # Don't raise - existing registrations keep working

    async def on_ready(self):
        """Called when the bot is ready"""
        self.logger.info(f'{self.user} has connected to Discord!')
        self.logger.info(f'Bot is in {len(self.guilds)} guilds')

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Global error handler for slash commands"""
        command_name = interaction.command.name if interaction.command else 'Unknown'
        self.logger.error(f"Error in app command '{command_name}': {error}", exc_info=True)

        embed = ErrorEmbeds.command_error("Something went wrong while processing your command.")
        try:
            if interaction.response.is_done():
                await interaction.followup.send(embed=embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=embed, ephemeral=True)
        except discord.HTTPException as e:
            self.logger.error(f"Failed to send error response: {e}")

    async def close(self):
        """Cleanup when bot is shutting down"""
        self.logger.info("Shutting down Rapid Leaderboard Bot...")

        if self.refresh_service:
            await self.refresh_service.cleanup()
        if self.rating_fetcher:
            await self.rating_fetcher.close()
        if self.db:
            await self.db.close()

        await super().close()

async def main():
    """Main entry point"""
    Config.validate()

    bot = LeaderboardBot()

    try:
        await bot.start(Config.DISCORD_TOKEN)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        traceback.print_exc()
    finally:
        await bot.close()

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()
