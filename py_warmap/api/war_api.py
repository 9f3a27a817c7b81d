"""
War API client.

Blocking requests calls wrapped for the refresher: fetch_all runs every hex
request on worker threads and fails the whole batch if any single hex fails.
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional

import requests
import structlog
from pydantic import ValidationError

from ..config.config import settings
from ..core.errors import FetchFailure
from ..core.refresh import FetchResult
from ..core.war_data import WarData, WarMapData

logger = structlog.get_logger()


class WarApiClient:
    """Client for the world conquest endpoints of one or more shards."""

    def __init__(self, shard_urls: Optional[Mapping[str, str]] = None,
                 timeout: Optional[float] = None, default_shard: Optional[str] = None,
                 include_static: bool = True):
        self.shard_urls = dict(shard_urls or settings.shard_urls)
        self.timeout = timeout or settings.request_timeout
        self.default_shard = default_shard or settings.default_shard
        self.include_static = include_static

    def shard_url(self, shard: Optional[str] = None) -> str:
        shard = shard or self.default_shard
        try:
            return self.shard_urls[shard]
        except KeyError:
            raise FetchFailure(f"Unknown shard: {shard}") from None

    def _get(self, url: str, hex_id: Optional[str] = None) -> Any:
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            raise FetchFailure(f"GET {url} failed: {exc}", hex_id=hex_id) from exc

    def get_current_war(self, shard: Optional[str] = None) -> Optional[WarData]:
        """Current war summary; None when unavailable."""
        url = f"{self.shard_url(shard)}/worldconquest/war"
        try:
            return WarData.model_validate(self._get(url))
        except (FetchFailure, ValidationError) as exc:
            logger.warning("War data unavailable", shard=shard, error=str(exc))
            return None

    def get_map_names(self, shard: Optional[str] = None) -> List[str]:
        url = f"{self.shard_url(shard)}/worldconquest/maps"
        names = self._get(url)
        if not isinstance(names, list):
            raise FetchFailure(f"Unexpected map list payload from {url}")
        return [str(name) for name in names]

    def _get_map_data(self, url: str, map_name: str) -> WarMapData:
        payload = self._get(url, hex_id=map_name)
        try:
            data = WarMapData.model_validate(payload)
        except ValidationError as exc:
            raise FetchFailure(f"Invalid map data for {map_name}: {exc}", hex_id=map_name) from exc
        return data.model_copy(update={"map_name": map_name})

    def get_map_dynamic_data(self, shard: Optional[str], map_name: str) -> WarMapData:
        url = f"{self.shard_url(shard)}/worldconquest/maps/{map_name}/dynamic/public"
        return self._get_map_data(url, map_name)

    def get_map_static_data(self, shard: Optional[str], map_name: str) -> WarMapData:
        url = f"{self.shard_url(shard)}/worldconquest/maps/{map_name}/static"
        return self._get_map_data(url, map_name)

    def get_all_map_dynamic_data(self, shard: Optional[str] = None) -> Dict[str, WarMapData]:
        return {name: self.get_map_dynamic_data(shard, name) for name in self.get_map_names(shard)}

    def get_all_map_static_data(self, shard: Optional[str] = None) -> Dict[str, WarMapData]:
        return {name: self.get_map_static_data(shard, name) for name in self.get_map_names(shard)}

    async def fetch_all(self, shard: Optional[str] = None) -> FetchResult:
        """
        Fetch every hex of a shard as one unit.

        Raises:
            FetchFailure: any single request failed; nothing is returned
        """
        names = await asyncio.to_thread(self.get_map_names, shard)
        logger.info("Fetching map data", shard=shard, hexes=len(names))

        dynamic = await asyncio.gather(*(
            asyncio.to_thread(self.get_map_dynamic_data, shard, name) for name in names
        ))

        static = None
        if self.include_static:
            static_list = await asyncio.gather(*(
                asyncio.to_thread(self.get_map_static_data, shard, name) for name in names
            ))
            static = dict(zip(names, static_list))

        war = await asyncio.to_thread(self.get_current_war, shard)

        return FetchResult(dynamic=dict(zip(names, dynamic)), static=static, war=war)

    async def __call__(self, shard: str) -> FetchResult:
        return await self.fetch_all(shard)
