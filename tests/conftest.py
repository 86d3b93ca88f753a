"""
Shared fakes for the leaderboard tests.

Discord, aiohttp and the clock are replaced with small in-memory stand-ins so
the refresh engine can be exercised without network access.
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import discord
import pytest

from rapid_leaderboard.data_models.leaderboard import LeaderboardSnapshot, Participant
from rapid_leaderboard.database.database import Database
from rapid_leaderboard.services.leaderboard_refresh import LeaderboardRefreshService
from rapid_leaderboard.services.message_reconciler import MessageReconciler
from rapid_leaderboard.services.rate_limiter import RefreshCooldownGate
from rapid_leaderboard.services.rating_cache import RatingCache

CHANNEL_ID = 42
BASELINE_TIME = datetime(2026, 10, 12, 19, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeFetcher:
    """Rating source keyed by normalized username; records every call."""

    def __init__(self, ratings=None):
        self.ratings = dict(ratings or {})
        self.calls = []

    async def fetch(self, username):
        self.calls.append(username)
        return self.ratings.get(username)


class FakeRegistry:
    def __init__(self, participants=None):
        self.participants = list(participants or [])

    async def load_roster(self):
        return list(self.participants)


class FakeSnapshotStore:
    def __init__(self, snapshot: LeaderboardSnapshot = None):
        self.snapshot = snapshot or LeaderboardSnapshot()
        self.saves = []

    async def load(self):
        return self.snapshot

    async def save(self, snapshot):
        self.saves.append(snapshot)
        self.snapshot = snapshot


def not_found(text="Unknown"):
    return discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), text)


class FakeMessage:
    def __init__(self, message_id: int, content=None):
        self.id = message_id
        self.content = content
        self.embed = None
        self.edits = 0

    async def edit(self, content=None, embed=None):
        self.content = content
        self.embed = embed
        self.edits += 1


class FakeChannel(discord.abc.Messageable):
    def __init__(self, channel_id: int):
        self.id = channel_id
        self.messages = {}
        self.sent = []
        self._next_id = channel_id * 100

    async def send(self, content=None, **kwargs):
        self._next_id += 1
        message = FakeMessage(self._next_id, content)
        self.messages[message.id] = message
        self.sent.append(message)
        return message

    async def fetch_message(self, message_id):
        if message_id not in self.messages:
            raise not_found("Unknown Message")
        return self.messages[message_id]


class FakeClient:
    """Only the channel lookups the reconciler uses."""

    def __init__(self, *channels):
        self.channels = {channel.id: channel for channel in channels}

    def get_channel(self, channel_id):
        return None

    async def fetch_channel(self, channel_id):
        if channel_id not in self.channels:
            raise not_found("Unknown Channel")
        return self.channels[channel_id]


class Harness:
    """Refresh service wired to fakes, with a zero-TTL cache so every refresh sees new ratings."""

    def __init__(self, roster, clock, ratings=None, snapshot=None, store=None, registry=None):
        self.channel = FakeChannel(CHANNEL_ID)
        self.fetcher = FakeFetcher(ratings)
        self.store = store or FakeSnapshotStore(snapshot)
        self.cooldown_gate = RefreshCooldownGate(global_cooldown=15, user_cooldown=60, clock=clock)
        self.service = LeaderboardRefreshService(
            registry=registry or FakeRegistry(roster),
            snapshot_store=self.store,
            rating_cache=RatingCache(self.fetcher, ttl=0, clock=clock),
            reconciler=MessageReconciler(FakeClient(self.channel), self.store),
            cooldown_gate=self.cooldown_gate,
            now=lambda: BASELINE_TIME,
        )

    @property
    def lines(self):
        return self.channel.sent[0].embed.description.split("\n")


@pytest.fixture
def clock():
    return FakeClock(1000.0)


@pytest.fixture
def roster():
    return [
        Participant(discord_id=1, display_name="A", chess_username="alice"),
        Participant(discord_id=2, display_name="B", chess_username="bob"),
    ]


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'leaderboard_test.db'}")
    await db.initialize()
    yield db
    await db.close()
