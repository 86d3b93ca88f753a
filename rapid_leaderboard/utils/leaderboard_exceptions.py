"""
Custom exceptions for the leaderboard bot with user-friendly error messages.
"""

class LeaderboardException(Exception):
    """Base exception for leaderboard-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class ChannelUnavailableError(LeaderboardException):
    """Raised when the leaderboard channel cannot be fetched or is not text based."""
    def __init__(self, channel_id: int):
        self.channel_id = channel_id
        super().__init__(
            f"Leaderboard channel {channel_id} is unavailable",
            "❌ I can't reach the leaderboard channel. Check my permissions there."
        )

class InvalidChessUsernameError(LeaderboardException):
    """Raised when a Chess.com username is empty after normalization or too long."""
    def __init__(self, username: str):
        super().__init__(
            f"Invalid Chess.com username: {username!r}",
            "❌ Please provide a valid Chess.com username."
        )
