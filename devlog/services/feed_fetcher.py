import asyncio
import logging
import time
from pathlib import Path

import httpx

from devlog.config import settings
from devlog.errors import FeedFetchError

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


def is_remote(location: str) -> bool:
    return location.startswith(("http://", "https://"))


class FeedFetcher:
    """
    Fetches the raw devlog CSV. Remote feeds go through httpx with a
    timestamp query parameter so intermediate caches always miss; local
    paths are read from disk.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        timeout: float | None = None,
        cache_bust: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url or settings.FEED_URL
        self.cache_bust = settings.CACHE_BUST if cache_bust is None else cache_bust
        self._client = httpx.AsyncClient(
            timeout=timeout or settings.FETCH_TIMEOUT_SECONDS,
            headers=NO_CACHE_HEADERS,
            follow_redirects=True,
            transport=transport,
        )

    async def fetch(self) -> str:
        if is_remote(self.url):
            text = await self._fetch_remote()
        else:
            text = await self._read_local()
        logger.debug("Feed content loaded (%d chars): %s", len(text), text)
        return text

    async def _fetch_remote(self) -> str:
        url = httpx.URL(self.url)
        if self.cache_bust:
            # Merged into whatever query the feed URL already carries
            url = url.copy_merge_params({"v": str(int(time.time() * 1000))})
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise FeedFetchError(f"Feed request failed: {exc}") from exc
        if not response.is_success:
            raise FeedFetchError(
                f"Feed response was not ok. Status: {response.status_code}"
            )
        return response.text

    async def _read_local(self) -> str:
        path = Path(self.url)
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, path.read_text, "utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FeedFetchError(f"Cannot read feed file {path}: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()
