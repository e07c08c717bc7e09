"""Image search for listing photos."""

import logging
from dataclasses import dataclass

from foodloop.adapters.imgur_client import ImageResult, ImageSearchClient
from foodloop.services.cache import Cache

_logger = logging.getLogger(__name__)


@dataclass
class ImageSearchService:
    """Searches stock images with caching."""

    client: ImageSearchClient
    cache: Cache
    ttl_seconds: int = 3600
    limit: int = 20

    async def search(self, query: str) -> list[ImageResult]:
        """Return image suggestions; an empty query yields no results."""
        cleaned = query.strip()
        if not cleaned:
            return []
        cache_key = f"images:search:{cleaned.lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        results = (await self.client.search_images(cleaned))[: self.limit]
        self.cache.set(cache_key, results, ttl_seconds=self.ttl_seconds)
        _logger.info("Image search: query=%s results=%s", cleaned, len(results))
        return results
