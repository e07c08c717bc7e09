"""Tests for HTTP-based adapters and the image search service."""

import asyncio

import httpx
import pytest

from foodloop.adapters.imgur_client import HttpxImgurClient, ImageResult
from foodloop.services.cache import InMemoryCache
from foodloop.services.images import ImageSearchService
from tests.conftest import FakeImageSearchClient


def test_imgur_client_returns_first_image_per_gallery() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "data": [
                    {
                        "id": "g1",
                        "images": [
                            {"id": "i1", "link": "https://i.imgur.com/i1.jpg"},
                            {"id": "i2", "link": "https://i.imgur.com/i2.jpg"},
                        ],
                    },
                    {"id": "g2", "images": []},
                    {"id": "g3"},
                ]
            },
        )

    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    client = HttpxImgurClient(client_id="cid", http_client=async_client)

    results = asyncio.run(client.search_images("bread"))

    assert results == [ImageResult(id="i1", link="https://i.imgur.com/i1.jpg")]
    assert seen[0].url.path.endswith("/gallery/search")
    assert seen[0].url.params["q"] == "bread"
    assert seen[0].headers["Authorization"] == "Client-ID cid"


def test_imgur_client_skips_request_for_empty_query() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    client = HttpxImgurClient(
        client_id="cid",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    assert asyncio.run(client.search_images("")) == []


def test_imgur_client_raises_on_http_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"data": []})

    client = HttpxImgurClient(
        client_id="cid",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.search_images("bread"))


def test_image_search_service_caches_results() -> None:
    client = FakeImageSearchClient()
    service = ImageSearchService(client=client, cache=InMemoryCache())

    first = asyncio.run(service.search(" Bread "))
    second = asyncio.run(service.search("bread"))

    assert first == second
    assert client.queries == ["Bread"]
    assert asyncio.run(service.search("  ")) == []


def test_in_memory_cache_evicts_oldest_entry() -> None:
    cache = InMemoryCache(max_entries=2)
    cache.set("a", 1, ttl_seconds=60)
    cache.set("b", 2, ttl_seconds=60)
    cache.set("c", 3, ttl_seconds=60)

    assert cache.get("a") is None
    assert cache.get("c") == 3
    assert len(cache) == 2


def test_in_memory_cache_expires_entries() -> None:
    cache = InMemoryCache()
    cache.set("a", 1, ttl_seconds=0)

    assert cache.get("a") is None
