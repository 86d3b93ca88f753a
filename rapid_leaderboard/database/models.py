from sqlalchemy import Column, Integer, String, DateTime, Text, BigInteger
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

class Player(Base):
    __tablename__ = 'players'

    discord_id = Column(BigInteger, primary_key=True, autoincrement=False)
    display_name = Column(String(100), nullable=False)
    chess_username = Column(String(50), nullable=False)  # Stored as typed; normalized at lookup time

    # Metadata
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Player(discord_id={self.discord_id}, chess_username='{self.chess_username}')>"

class LeaderboardState(Base):
    """Single-row table holding the persisted leaderboard snapshot."""
    __tablename__ = 'leaderboard_state'

    SINGLETON_ID = 1

    id = Column(Integer, primary_key=True, autoincrement=False)
    channel_id = Column(BigInteger, nullable=True)
    message_id = Column(BigInteger, nullable=True)

    # JSON-encoded maps keyed by normalized Chess.com username
    last_ratings = Column(Text, nullable=False, default='{}')
    last_ranks = Column(Text, nullable=False, default='{}')
    weekly_baseline_ratings = Column(Text, nullable=False, default='{}')
    weekly_baseline_at = Column(DateTime, nullable=True)

    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<LeaderboardState(channel_id={self.channel_id}, message_id={self.message_id})>"
