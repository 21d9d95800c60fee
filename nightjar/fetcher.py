"""
HTTP fetcher for Launch libraries, HTML pages and remote custom code.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

import aiohttp

from nightjar.utils.errors import NetworkError
from nightjar.utils.logging import get_logger

logger = get_logger(__name__)


class BaseFetcher(ABC):
    """Retrieves text from a URL."""

    @abstractmethod
    async def fetch(self, url: str) -> str:
        """
        Fetch a URL as text.

        Args:
            url: Absolute URL

        Returns:
            Response body decoded as text

        Raises:
            NetworkError: On any transport or HTTP status failure
        """
        pass


class HttpFetcher(BaseFetcher):
    """aiohttp-backed fetcher. One client session per request."""

    def __init__(self, timeout: Optional[float] = None, user_agent: str = "nightjar/0.1"):
        """
        Initialize the fetcher.

        Args:
            timeout: Total request timeout in seconds; None waits indefinitely
            user_agent: User-Agent header sent with every request
        """
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = {"User-Agent": user_agent}

    async def fetch(self, url: str) -> str:
        logger.debug(f"Fetching {url}")
        try:
            async with aiohttp.ClientSession(timeout=self.timeout, headers=self.headers) as session:
                async with session.get(url) as response:
                    response.raise_for_status()
                    text = await response.text(errors="replace")
        except aiohttp.ClientResponseError as e:
            raise NetworkError(url, f"HTTP {e.status} {e.message}") from e
        except asyncio.TimeoutError as e:
            raise NetworkError(url, "request timed out") from e
        except (aiohttp.ClientError, ValueError) as e:
            raise NetworkError(url, str(e) or type(e).__name__) from e

        logger.debug(f"Fetched {len(text)} characters from {url}")
        return text
