"""Imgur gallery search client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

IMGUR_BASE_URL = "https://api.imgur.com/3"


@dataclass(frozen=True)
class ImageResult:
    """A single image suggestion."""

    id: str
    link: str


class ImageSearchClient(Protocol):
    """Interface for remote image search."""

    async def search_images(self, query: str) -> list[ImageResult]:
        """Search images by free text."""


@dataclass
class HttpxImgurClient(ImageSearchClient):
    """HTTPX-backed Imgur client."""

    client_id: str
    http_client: httpx.AsyncClient
    base_url: str = IMGUR_BASE_URL

    @classmethod
    def create(
        cls, client_id: str, base_url: str = IMGUR_BASE_URL
    ) -> "HttpxImgurClient":
        """Create an Imgur client with a managed httpx session."""
        return cls(
            client_id=client_id, http_client=httpx.AsyncClient(), base_url=base_url
        )

    async def search_images(self, query: str) -> list[ImageResult]:
        """Return the first image of each matching gallery item."""
        if not query:
            return []
        response = await self.http_client.get(
            f"{self.base_url}/gallery/search",
            params={"sort": "top", "q": query},
            headers={"Authorization": f"Client-ID {self.client_id}"},
            timeout=10,
        )
        response.raise_for_status()
        results: list[ImageResult] = []
        for item in response.json().get("data", []):
            images = item.get("images") or []
            if not images:
                continue
            first = images[0]
            results.append(ImageResult(id=str(first["id"]), link=str(first["link"])))
        return results

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
