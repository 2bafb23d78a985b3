"""Async page fetcher for episode pages."""

import asyncio
import logging
from typing import AsyncIterator, Optional

import aiohttp
from aiohttp import ClientTimeout, ClientError
from tenacity import AsyncRetrying, RetryError, stop_after_attempt, wait_exponential, retry_if_exception_type

from ..config import Settings, get_settings
from .exceptions import RetrievalError

logger = logging.getLogger(__name__)


class PageFetcher:
    """
    Fetch page markup with a timeout and retries on transport errors.

    HTTP error statuses are not retried; they become a RetrievalError
    carrying the upstream status code.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.session: Optional[aiohttp.ClientSession] = None
        self.timeout = ClientTimeout(total=self.settings.fetch_timeout, connect=10)

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self):
        """Start the HTTP client session."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={'User-Agent': self.settings.fetch_user_agent}
            )

    async def close(self):
        """Close the HTTP client session."""
        if self.session and not self.session.closed:
            await self.session.close()

    async def _get_text(self, url: str) -> str:
        async with self.session.get(url, allow_redirects=True) as response:
            if response.status >= 400:
                raise RetrievalError(
                    f"Failed to fetch webpage: {response.status}",
                    status_code=response.status,
                    url=url
                )
            # Undecodable bytes in a mislabelled charset become U+FFFD
            return await response.text(errors='replace')

    async def fetch_text(self, url: str) -> str:
        """Fetch URL and return text content.

        Raises:
            RetrievalError: on HTTP error status, timeout, connection failure
                or a body that cannot be decoded
        """
        if not self.session or self.session.closed:
            await self.start()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.settings.fetch_retries + 1),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type((ClientError, asyncio.TimeoutError)),
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    return await self._get_text(url)
        except RetrievalError:
            raise
        except asyncio.TimeoutError as e:
            logger.warning(f"Timed out fetching {url[:80]}")
            raise RetrievalError("Timed out fetching webpage", url=url) from e
        except (ClientError, RetryError) as e:
            logger.warning(f"Failed to fetch {url[:80]}: {e}")
            raise RetrievalError(f"Failed to fetch webpage: {e}", url=url) from e
        except (UnicodeDecodeError, LookupError) as e:
            logger.warning(f"Could not decode {url[:80]}: {e}")
            raise RetrievalError(f"Failed to decode webpage: {e}", url=url) from e


async def get_page_fetcher() -> AsyncIterator[PageFetcher]:
    """FastAPI dependency yielding a fetcher bound to one request."""
    async with PageFetcher() as fetcher:
        yield fetcher
