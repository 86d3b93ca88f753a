import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Bot configuration settings"""

    # Discord settings
    DISCORD_TOKEN = os.getenv('DISCORD_TOKEN')
    DISCORD_GUILD_ID = int(os.getenv('DISCORD_GUILD_ID', 0))
    DISCORD_GUILD_IDS = os.getenv('DISCORD_GUILD_IDS', '')  # Comma-separated for multi-guild support
    LEADERBOARD_CHANNEL_ID = int(os.getenv('LEADERBOARD_CHANNEL_ID', 0))  # 0 = use the invoking channel

    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///leaderboard.db')

    # Bot settings
    COMMAND_PREFIX = os.getenv('COMMAND_PREFIX', '!')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'

    # Chess.com public API
    CHESS_API_URL_TEMPLATE = os.getenv(
        'CHESS_API_URL_TEMPLATE',
        'https://api.chess.com/pub/player/{username}/stats'
    )
    CHESS_API_USER_AGENT = os.getenv('CHESS_API_USER_AGENT', 'RapidChessLeaderboardBot/1.0')
    CHESS_API_TIMEOUT = float(os.getenv('CHESS_API_TIMEOUT', 10))

    # Refresh throttling
    RATING_CACHE_TTL_SECONDS = float(os.getenv('RATING_CACHE_TTL_SECONDS', 5 * 60))
    USER_COOLDOWN_SECONDS = float(os.getenv('USER_COOLDOWN_SECONDS', 60))
    GLOBAL_COOLDOWN_SECONDS = float(os.getenv('GLOBAL_COOLDOWN_SECONDS', 15))

    # Leaderboard message
    LEADERBOARD_MAX_LENGTH = 3800  # Embed description limit is 4096

    # Weekly baseline (Monday 19:00 Chicago time by default)
    WEEKLY_BASELINE_WEEKDAY = int(os.getenv('WEEKLY_BASELINE_WEEKDAY', 0))
    WEEKLY_BASELINE_HOUR = int(os.getenv('WEEKLY_BASELINE_HOUR', 19))
    WEEKLY_BASELINE_MINUTE = int(os.getenv('WEEKLY_BASELINE_MINUTE', 0))
    WEEKLY_BASELINE_TIMEZONE = os.getenv('WEEKLY_BASELINE_TIMEZONE', 'America/Chicago')

    @classmethod
    def get_guild_ids(cls):
        """Get list of guild IDs for command syncing"""
        if cls.DISCORD_GUILD_IDS:
            # Multi-guild support: comma-separated IDs
            try:
                return [int(guild_id.strip()) for guild_id in cls.DISCORD_GUILD_IDS.split(',') if guild_id.strip()]
            except ValueError:
                raise ValueError("DISCORD_GUILD_IDS must be comma-separated integers")
        elif cls.DISCORD_GUILD_ID:
            return [cls.DISCORD_GUILD_ID]
        else:
            # Global sync
            return []

    @classmethod
    def get_leaderboard_channel_id(cls, fallback=None):
        """Configured leaderboard channel, or the fallback (usually the invoking channel)."""
        return cls.LEADERBOARD_CHANNEL_ID or fallback

    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")
        if not 0 <= cls.WEEKLY_BASELINE_WEEKDAY <= 6:
            raise ValueError("WEEKLY_BASELINE_WEEKDAY must be between 0 (Monday) and 6 (Sunday)")
        if cls.RATING_CACHE_TTL_SECONDS < 0:
            raise ValueError("RATING_CACHE_TTL_SECONDS must not be negative")
