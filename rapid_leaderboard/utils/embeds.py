"""
Embed builders for the rapid leaderboard message.

The leaderboard body is plain text (one line per player) so it can be
length-checked before it goes into the embed description.
"""

from typing import List, Optional, Sequence

import discord

from rapid_leaderboard.config import Config
from rapid_leaderboard.data_models.leaderboard import LeaderboardRow, Participant

EMPTY_LEADERBOARD_TEXT = "No one is registered yet. Use `/setchess <username>`."
FOOTER_TEXT = "Data from Chess.com public API"
PLACEHOLDER_TEXT = "Creating leaderboard..."

MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


def rank_prefix(rank: int) -> str:
    return MEDALS.get(rank, f"{rank}.")


def format_rank_move(move: Optional[int]) -> str:
    if not move:
        return ""
    return f"⬆️{move}" if move > 0 else f"⬇️{abs(move)}"


def format_rating_delta(delta: Optional[int]) -> str:
    if not delta:
        return ""
    return f"⬆️ +{delta}" if delta > 0 else f"⬇️ {delta}"


def format_weekly_delta(delta: Optional[int]) -> str:
    if not delta:
        return ""
    return f"wk +{delta}" if delta > 0 else f"wk {delta}"


def format_row(row: LeaderboardRow) -> str:
    rating_text = row.rating if row.rating is not None else "unrated"
    parts = [
        part for part in (
            format_rank_move(row.rank_move),
            format_rating_delta(row.rating_delta),
            format_weekly_delta(row.weekly_delta),
        )
        if part
    ]
    suffix = f" · {' · '.join(parts)}" if parts else ""
    return f"{rank_prefix(row.rank)} **{row.display_name}** -> {row.chess_username} (**{rating_text}**){suffix}"


def truncate_lines(lines: Sequence[str], max_length: int) -> str:
    """
    Join ``lines`` with newlines, dropping whole trailing lines to stay within ``max_length``.

    A first line that alone exceeds the limit is cut at the limit so the
    output is never empty while there are lines to show.
    """
    kept = []
    length = 0
    for line in lines:
        added = len(line) + (1 if kept else 0)
        if length + added > max_length:
            if not kept:
                kept.append(line[:max_length])
            break
        kept.append(line)
        length += added
    return "\n".join(kept)


def render_leaderboard(rows: Sequence[LeaderboardRow], max_length: int = None) -> str:
    """Leaderboard text in rank order, never longer than ``max_length`` characters."""
    if max_length is None:
        max_length = Config.LEADERBOARD_MAX_LENGTH
    if not rows:
        return EMPTY_LEADERBOARD_TEXT
    return truncate_lines([format_row(row) for row in rows], max_length)


def build_leaderboard_embed(rows: Sequence[LeaderboardRow]) -> discord.Embed:
    embed = discord.Embed(
        title="Rapid Chess Leaderboard",
        description=render_leaderboard(rows),
        color=discord.Color.gold()
    )
    embed.set_footer(text=FOOTER_TEXT)
    return embed


def render_player_list(participants: List[Participant], max_length: int = None) -> str:
    """Registered players sorted by display name, for /chessplayers."""
    if max_length is None:
        max_length = Config.LEADERBOARD_MAX_LENGTH
    if not participants:
        return EMPTY_LEADERBOARD_TEXT
    ordered = sorted(participants, key=lambda p: (p.display_name, p.discord_id))
    return truncate_lines([f"**{p.display_name}** -> {p.chess_username}" for p in ordered], max_length)


def build_player_list_embed(participants: List[Participant]) -> discord.Embed:
    return discord.Embed(
        title=f"Registered Players ({len(participants)})",
        description=render_player_list(participants),
        color=discord.Color.blue()
    )
