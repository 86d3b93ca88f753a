"""
Services package for the rapid leaderboard bot.

Rating lookup, cooldowns, persistence and the refresh orchestration.
"""

from .base import BaseService
from .leaderboard_refresh import LeaderboardRefreshService, RefreshOutcome
from .rate_limiter import RefreshCooldownGate
from .rating_cache import RatingCache

__all__ = [
    'BaseService',
    'LeaderboardRefreshService',
    'RefreshOutcome',
    'RefreshCooldownGate',
    'RatingCache',
]
