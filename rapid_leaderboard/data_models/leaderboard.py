"""
Leaderboard data models.

Provides immutable data transfer objects shared by the rating cache, the
ranking engine, the renderer and the snapshot store.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional


def normalize_username(username: Optional[str]) -> str:
    """Trimmed, lower-cased Chess.com username; the key for every cache and snapshot map."""
    return str(username or "").strip().lower()


@dataclass(frozen=True)
class Participant:
    """A registered player as read from the registry."""
    discord_id: int
    display_name: str
    chess_username: str

    @property
    def normalized_username(self) -> str:
        return normalize_username(self.chess_username)


@dataclass(frozen=True)
class RatingLookup:
    """Result of a rating cache lookup. ``rating`` is None when unrated."""
    rating: Optional[int]
    from_cache: bool


@dataclass(frozen=True)
class LeaderboardRow:
    """Single ranked leaderboard row with its movement signals."""
    rank: int
    display_name: str
    chess_username: str
    rating: Optional[int]
    rank_move: Optional[int] = None
    rating_delta: Optional[int] = None
    weekly_delta: Optional[int] = None

    @property
    def normalized_username(self) -> str:
        return normalize_username(self.chess_username)


def _int_map(raw: Any) -> Dict[str, int]:
    """Coerce a deserialized mapping to ``{str: int}``, dropping anything else."""
    if not isinstance(raw, dict):
        return {}
    return {
        str(key): value
        for key, value in raw.items()
        if isinstance(value, int) and not isinstance(value, bool)
    }


def _optional_int(raw: Any) -> Optional[int]:
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class LeaderboardSnapshot:
    """
    Persisted state of the most recently rendered leaderboard.

    ``last_ratings`` and ``last_ranks`` describe the last refresh that made it
    all the way to the Discord message. ``weekly_baseline_ratings`` only
    changes on a weekly baseline refresh.
    """
    channel_id: Optional[int] = None
    message_id: Optional[int] = None
    last_ratings: Dict[str, int] = field(default_factory=dict)
    last_ranks: Dict[str, int] = field(default_factory=dict)
    weekly_baseline_ratings: Dict[str, int] = field(default_factory=dict)
    weekly_baseline_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Optional[Dict[str, Any]]) -> "LeaderboardSnapshot":
        """Build a snapshot from a loosely typed record, defaulting missing or malformed fields."""
        if not isinstance(record, dict):
            return cls()

        baseline_at = record.get("weekly_baseline_at")
        if isinstance(baseline_at, str):
            try:
                baseline_at = datetime.fromisoformat(baseline_at)
            except ValueError:
                baseline_at = None
        elif not isinstance(baseline_at, datetime):
            baseline_at = None

        return cls(
            channel_id=_optional_int(record.get("channel_id")),
            message_id=_optional_int(record.get("message_id")),
            last_ratings=_int_map(record.get("last_ratings")),
            last_ranks=_int_map(record.get("last_ranks")),
            weekly_baseline_ratings=_int_map(record.get("weekly_baseline_ratings")),
            weekly_baseline_at=baseline_at,
        )

    def with_message(self, channel_id: int, message_id: int) -> "LeaderboardSnapshot":
        return replace(self, channel_id=channel_id, message_id=message_id)

    def advance(
        self,
        rows: List[LeaderboardRow],
        set_weekly_baseline: bool = False,
        now: Optional[datetime] = None,
    ) -> "LeaderboardSnapshot":
        """
        Snapshot after ``rows`` have been rendered.

        Ratings only keep rated players; ranks keep everyone. The weekly
        baseline is replaced by the current ratings only when requested,
        otherwise it is carried forward untouched.
        """
        next_ratings = {}
        next_ranks = {}
        for row in rows:
            norm = row.normalized_username
            if not norm:
                continue
            next_ranks[norm] = row.rank
            if row.rating is not None:
                next_ratings[norm] = row.rating

        updated = replace(self, last_ratings=next_ratings, last_ranks=next_ranks)
        if set_weekly_baseline:
            updated = replace(
                updated,
                weekly_baseline_ratings=dict(next_ratings),
                weekly_baseline_at=now,
            )
        return updated
