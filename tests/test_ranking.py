"""
Tests for leaderboard ordering and movement deltas.
"""

from rapid_leaderboard.data_models.leaderboard import LeaderboardSnapshot, Participant
from rapid_leaderboard.utils.ranking import rank_participants, ratings_by_username


def _participant(discord_id, name, username):
    return Participant(discord_id=discord_id, display_name=name, chess_username=username)


class TestOrdering:
    def test_higher_rating_first(self):
        roster = [_participant(1, "A", "a"), _participant(2, "B", "b"), _participant(3, "C", "c")]
        rows = rank_participants(roster, {"a": 1200, "b": 1800, "c": 1500}, LeaderboardSnapshot())

        assert [row.display_name for row in rows] == ["B", "C", "A"]
        assert [row.rank for row in rows] == [1, 2, 3]

    def test_unrated_sorts_after_every_rated_player(self):
        roster = [_participant(1, "Aaron", "aaron"), _participant(2, "Zed", "zed")]
        rows = rank_participants(roster, {"aaron": None, "zed": 100}, LeaderboardSnapshot())

        assert [row.display_name for row in rows] == ["Zed", "Aaron"]
        assert rows[1].rating is None

    def test_ties_break_by_display_name(self):
        roster = [
            _participant(1, "Carol", "carol"),
            _participant(2, "Alice", "alice"),
            _participant(3, "Bob", "bob"),
            _participant(4, "Yuri", "yuri"),
            _participant(5, "Xena", "xena"),
        ]
        ratings = {"carol": 1500, "alice": 1500, "bob": 1500}
        rows = rank_participants(roster, ratings, LeaderboardSnapshot())

        assert [row.display_name for row in rows] == ["Alice", "Bob", "Carol", "Xena", "Yuri"]

    def test_ranking_is_deterministic(self):
        roster = [_participant(i, f"P{i % 3}", f"user{i}") for i in range(9)]
        ratings = {f"user{i}": (1000 + (i % 2) * 100 if i % 4 else None) for i in range(9)}
        snapshot = LeaderboardSnapshot(last_ranks={"user1": 3}, last_ratings={"user1": 1000})

        first = rank_participants(roster, ratings, snapshot)
        second = rank_participants(list(roster), dict(ratings), snapshot)

        assert first == second

    def test_ratings_are_looked_up_by_normalized_username(self):
        roster = [_participant(1, "A", "  Alice ")]
        rows = rank_participants(roster, {"alice": 1600}, LeaderboardSnapshot())

        assert rows[0].rating == 1600
        assert rows[0].chess_username == "  Alice "

    def test_empty_roster(self):
        assert rank_participants([], {}, LeaderboardSnapshot()) == []


class TestDeltas:
    def test_first_appearance_has_no_deltas(self):
        rows = rank_participants([_participant(1, "A", "alice")], {"alice": 1500}, LeaderboardSnapshot())

        assert rows[0].rating_delta is None
        assert rows[0].rank_move is None
        assert rows[0].weekly_delta is None

    def test_exact_differences_against_snapshot(self):
        roster = [_participant(1, "A", "alice"), _participant(2, "B", "bob")]
        snapshot = LeaderboardSnapshot(
            last_ratings={"alice": 1500, "bob": 1600},
            last_ranks={"alice": 2, "bob": 1},
            weekly_baseline_ratings={"alice": 1450},
        )
        rows = rank_participants(roster, {"alice": 1620, "bob": 1590}, snapshot)
        by_name = {row.display_name: row for row in rows}

        assert by_name["A"].rating_delta == 120
        assert by_name["A"].rank_move == 1
        assert by_name["A"].weekly_delta == 170
        assert by_name["B"].rating_delta == -10
        assert by_name["B"].rank_move == -1
        assert by_name["B"].weekly_delta is None

    def test_unchanged_rating_is_zero_not_none(self):
        snapshot = LeaderboardSnapshot(last_ratings={"alice": 1500}, last_ranks={"alice": 1})
        rows = rank_participants([_participant(1, "A", "alice")], {"alice": 1500}, snapshot)

        assert rows[0].rating_delta == 0
        assert rows[0].rank_move == 0

    def test_unrated_now_has_no_rating_deltas_but_keeps_rank_move(self):
        roster = [_participant(1, "A", "alice"), _participant(2, "B", "bob")]
        snapshot = LeaderboardSnapshot(
            last_ratings={"bob": 1500},
            last_ranks={"alice": 2, "bob": 1},
            weekly_baseline_ratings={"bob": 1400},
        )
        rows = rank_participants(roster, {"alice": 1300, "bob": None}, snapshot)
        bob = rows[1]

        assert bob.display_name == "B"
        assert bob.rating_delta is None
        assert bob.weekly_delta is None
        assert bob.rank_move == -1


def test_ratings_by_username_zips_in_roster_order():
    roster = [_participant(1, "A", "Alice"), _participant(2, "B", "BOB ")]

    assert ratings_by_username(roster, [1500, None]) == {"alice": 1500, "bob": None}
