"""Supabase storage gateway for the listing feed."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from supabase import Client

from foodloop.adapters.supabase_records import parse_category, parse_listing
from foodloop.domain.errors import RecordDecodeError, RemoteFetchError
from foodloop.domain.listings import Category, Listing
from foodloop.services.categories import CategorySource
from foodloop.services.feed import ListingSource

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class SupabaseStorageGateway(ListingSource, CategorySource):
    """Reads the full candidate set of listings and categories.

    Rows are decoded one at a time so a single bad record is skipped
    instead of failing the whole fetch.
    """

    client: Client
    listings_table: str = "food_items"
    categories_table: str = "categories"

    async def fetch_available_listings(self) -> list[Listing]:
        """Return all listings flagged available, newest first."""
        rows = await self._select(
            lambda: self.client.table(self.listings_table)
            .select("*")
            .eq("is_available", True)
            .order("created_at", desc=True)
            .execute()
        )
        return _decode_rows(rows, parse_listing, kind="listing")

    async def fetch_categories(self) -> list[Category]:
        """Return every stored category, duplicates included."""
        rows = await self._select(
            lambda: self.client.table(self.categories_table).select("*").execute()
        )
        return _decode_rows(rows, parse_category, kind="category")

    async def _select(self, query: Callable[[], object]) -> list[object]:
        try:
            response = await asyncio.to_thread(query)
        except Exception as exc:
            raise RemoteFetchError(f"Supabase request failed: {exc}") from exc
        data = getattr(response, "data", None)
        if data is None:
            return []
        if not isinstance(data, list):
            raise RemoteFetchError(
                f"Unexpected Supabase payload type {type(data).__name__}"
            )
        return data


def _decode_rows(
    rows: list[object], parse: Callable[[dict], T], *, kind: str
) -> list[T]:
    decoded: list[T] = []
    for row in rows:
        if not isinstance(row, dict):
            _logger.warning("Skipping %s row with unexpected shape: %r", kind, row)
            continue
        try:
            decoded.append(parse(row))
        except RecordDecodeError as exc:
            _logger.warning("Skipping undecodable %s: %s", kind, exc)
    if len(decoded) < len(rows):
        _logger.info("Decoded %s of %s %s rows", len(decoded), len(rows), kind)
    return decoded
