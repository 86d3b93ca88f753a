"""
Ranking and movement utilities for the rapid leaderboard.

Ordering: rated players before unrated ones, higher rating first, and
display name (ascending) as the tie-break, so identical inputs always give
an identical order and rank movement reflects real changes only.
"""

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from rapid_leaderboard.data_models.leaderboard import (
    LeaderboardRow,
    LeaderboardSnapshot,
    Participant,
    normalize_username,
)


class RankingUtility:
    """Shared ranking logic for the leaderboard refresh."""

    @staticmethod
    def sort_key(display_name: str, rating: Optional[int]) -> Tuple[bool, int, str]:
        return (rating is None, -(rating or 0), display_name)

    @staticmethod
    def delta(current: Optional[int], previous: Optional[int]) -> Optional[int]:
        """Difference ``current - previous`` when both sides are known, else None."""
        if current is None or previous is None:
            return None
        return current - previous


def rank_participants(
    roster: Sequence[Participant],
    ratings: Mapping[str, Optional[int]],
    snapshot: LeaderboardSnapshot,
) -> List[LeaderboardRow]:
    """
    Rank ``roster`` by rating and annotate each row against ``snapshot``.

    Args:
        roster: Registered players
        ratings: Current rating per normalized username (None = unrated)
        snapshot: Previously rendered state used as the movement baseline

    Returns:
        Rows in rank order with 1-based ranks. ``rating_delta``, ``rank_move``
        and ``weekly_delta`` are None whenever either side is unknown; a
        player missing from the snapshot therefore has no deltas at all.
    """
    rated: List[Tuple[Participant, Optional[int]]] = [
        (participant, ratings.get(normalize_username(participant.chess_username)))
        for participant in roster
    ]
    rated.sort(key=lambda item: RankingUtility.sort_key(item[0].display_name, item[1]))

    rows = []
    for rank, (participant, rating) in enumerate(rated, start=1):
        norm = participant.normalized_username
        previous_rank = snapshot.last_ranks.get(norm)
        rows.append(LeaderboardRow(
            rank=rank,
            display_name=participant.display_name,
            chess_username=participant.chess_username,
            rating=rating,
            rank_move=previous_rank - rank if previous_rank is not None else None,
            rating_delta=RankingUtility.delta(rating, snapshot.last_ratings.get(norm)),
            weekly_delta=RankingUtility.delta(rating, snapshot.weekly_baseline_ratings.get(norm)),
        ))
    return rows


def ratings_by_username(roster: Sequence[Participant], ratings: Sequence[Optional[int]]) -> Dict[str, Optional[int]]:
    """Zip gathered ratings back onto normalized usernames."""
    return {
        participant.normalized_username: rating
        for participant, rating in zip(roster, ratings)
    }
