"""Async HTTP client with retry logic."""
import asyncio
import json
import logging
from typing import Optional, Any, Dict
import aiohttp

logger = logging.getLogger(__name__)


class HttpClient:
    """Async HTTP client with retry logic and bounded concurrency."""

    def __init__(self, timeout: int = 25, concurrency: int = 12, retries: int = 2):
        self.timeout = timeout
        self.retries = retries
        self.semaphore = asyncio.Semaphore(concurrency)
        self.session: Optional[aiohttp.ClientSession] = None
        self.default_headers = {
            "User-Agent": "matchday-odds/1.0",
            "Accept": "application/json",
        }

    async def __aenter__(self):
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        self.session = aiohttp.ClientSession(timeout=timeout, headers=self.default_headers)
        return self

    async def __aexit__(self, *exc):
        if self.session:
            await self.session.close()

    async def _decode(self, resp: aiohttp.ClientResponse) -> Optional[Any]:
        text = await resp.text()
        try:
            return json.loads(text)
        except ValueError:
            logger.warning(f"Non-JSON response from {resp.url}")
            return None

    async def _request_with_retry(self, method: str, url: str, **kwargs) -> Optional[Any]:
        """
        Execute an HTTP request, retrying transport errors and 5xx responses.

        Returns decoded JSON, or None when the resource is absent or every
        attempt failed.
        """
        headers = dict(self.default_headers)
        if kwargs.get("headers"):
            headers.update(kwargs["headers"])
        kwargs["headers"] = headers

        for attempt in range(self.retries + 1):
            try:
                async with self.semaphore:
                    async with self.session.request(method, url, **kwargs) as resp:
                        if resp.status == 200:
                            return await self._decode(resp)
                        if resp.status in (204, 304, 404):
                            return None
                        if resp.status < 500:
                            # Client errors (bad key, quota) will not fix themselves
                            logger.warning(f"{method} {url} returned HTTP {resp.status}")
                            return None
                        logger.debug(f"{method} {url} returned HTTP {resp.status} (attempt {attempt + 1})")
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.debug(f"Request failed (attempt {attempt + 1}): {e}")
            if attempt < self.retries:
                await asyncio.sleep(0.5 * (attempt + 1))

        logger.warning(f"{method} {url} failed after {self.retries + 1} attempts")
        return None

    async def get(self, url: str, params: Optional[Dict] = None, headers: Optional[Dict] = None) -> Optional[Any]:
        return await self._request_with_retry("GET", url, params=params, headers=headers)
