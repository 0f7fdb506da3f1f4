"""HTTP client for the authoritative prayer-time feed and the zone table"""
import asyncio

import aiohttp
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from .models import SolatResponse, ZoneRecord

logger = logger.bind(module="feed.client")

_ZONES_ADAPTER = TypeAdapter(list[ZoneRecord])


class FeedError(Exception):
    """Feed request failed: transport, status, or payload shape"""


class PrayerFeedClient:
    """Fetches monthly JAKIM times by GPS and the JAKIM zone table."""

    def __init__(
        self,
        api_base: str = "https://api.waktusolat.app/v2/solat/gps",
        zones_url: str = "https://api.waktusolat.app/zones",
        timeout_seconds: float = 15.0,
    ):
        self.api_base = api_base.rstrip("/")
        self.zones_url = zones_url
        self.timeout_seconds = timeout_seconds

    async def fetch_times(self, lat: float, lng: float) -> SolatResponse:
        """Fetch the current month for the zone containing (lat, lng).

        Raises:
            FeedError: On network failure, non-2xx status or an invalid payload
        """
        url = f"{self.api_base}/{lat}/{lng}"
        logger.info(f"Fetching JAKIM data from {url}")
        data = await self._get_json(url)
        try:
            return SolatResponse.model_validate(data)
        except ValidationError as e:
            raise FeedError(f"Invalid solat payload: {e}") from e

    async def fetch_zones(self) -> list[ZoneRecord]:
        """Fetch every JAKIM zone with its state and district."""
        logger.info(f"Fetching zones from {self.zones_url}")
        data = await self._get_json(self.zones_url)
        try:
            return _ZONES_ADAPTER.validate_python(data)
        except ValidationError as e:
            raise FeedError(f"Invalid zones payload: {e}") from e

    async def _get_json(self, url: str):
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url) as resp:
                    if resp.status >= 400:
                        raise FeedError(f"API returned status: {resp.status}")
                    return await resp.json(content_type=None)
        except FeedError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise FeedError(f"Request failed: {e}") from e
