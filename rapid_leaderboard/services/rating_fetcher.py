"""
Chess.com rapid rating fetcher.

One GET per lookup against the public stats endpoint. Every failure mode
(network error, timeout, non-200 status, malformed JSON, missing field)
resolves to None so a leaderboard can always be rendered.
"""

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import quote

import aiohttp

from rapid_leaderboard.config import Config
from rapid_leaderboard.data_models.leaderboard import normalize_username

logger = logging.getLogger(__name__)


def extract_rapid_rating(payload: Any) -> Optional[int]:
    """Pull ``chess_rapid.last.rating`` out of a stats payload, or None."""
    if not isinstance(payload, dict):
        return None
    rapid = payload.get("chess_rapid")
    if not isinstance(rapid, dict):
        return None
    last = rapid.get("last")
    if not isinstance(last, dict):
        return None
    rating = last.get("rating")
    if isinstance(rating, bool) or not isinstance(rating, (int, float)):
        return None
    return int(rating)


class ChessComRatingFetcher:
    """Fetches a player's current rapid rating from the Chess.com public API."""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        url_template: str = None,
        user_agent: str = None,
        timeout: float = None,
    ):
        self.session = session
        self._owns_session = session is None
        self.url_template = url_template or Config.CHESS_API_URL_TEMPLATE
        self.user_agent = user_agent or Config.CHESS_API_USER_AGENT
        self.timeout = aiohttp.ClientTimeout(total=timeout or Config.CHESS_API_TIMEOUT)

    def build_url(self, username: str) -> str:
        return self.url_template.format(username=quote(normalize_username(username), safe=""))

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
            self._owns_session = True
        return self.session

    async def fetch(self, username: str) -> Optional[int]:
        """Current rapid rating for ``username``, or None when unrated or unreachable."""
        if not normalize_username(username):
            return None

        url = self.build_url(username)
        session = await self._get_session()
        try:
            async with session.get(url, headers={"User-Agent": self.user_agent}, timeout=self.timeout) as resp:
                if resp.status != 200:
                    logger.warning(f"Chess.com returned HTTP {resp.status} for {username!r}")
                    return None
                payload = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Chess.com request failed for {username!r}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Chess.com sent malformed JSON for {username!r}: {e}")
            return None

        rating = extract_rapid_rating(payload)
        if rating is None:
            logger.debug(f"No rapid rating for {username!r}")
        return rating

    async def close(self):
        """Close the HTTP session if this fetcher created it."""
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
