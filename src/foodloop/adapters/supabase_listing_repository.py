"""Supabase implementation for individual listing access."""

import logging
from dataclasses import dataclass

from supabase import Client

from foodloop.adapters.supabase_records import parse_listing
from foodloop.domain.errors import RecordDecodeError
from foodloop.domain.listings import Listing
from foodloop.services.saved_items import ListingRepository

_logger = logging.getLogger(__name__)

ID_CHUNK_SIZE = 10


@dataclass
class SupabaseListingRepository(ListingRepository):
    """Supabase-backed repository for food listings."""

    client: Client
    table: str = "food_items"

    def get_listing(self, listing_id: str) -> Listing | None:
        """Return a listing by id, if present."""
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("id", listing_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_listing(response.data[0])

    def list_listings_by_ids(self, listing_ids: list[str]) -> list[Listing]:
        """Return listings for the ids, queried in chunks of ten."""
        listings: list[Listing] = []
        for start in range(0, len(listing_ids), ID_CHUNK_SIZE):
            chunk = listing_ids[start : start + ID_CHUNK_SIZE]
            response = (
                self.client.table(self.table).select("*").in_("id", chunk).execute()
            )
            for row in response.data or []:
                try:
                    listings.append(parse_listing(row))
                except RecordDecodeError as exc:
                    _logger.warning("Skipping undecodable saved listing: %s", exc)
        return listings

    def set_availability(self, listing_id: str, is_available: bool) -> None:
        """Update the availability flag of a listing."""
        response = (
            self.client.table(self.table)
            .update({"is_available": is_available})
            .eq("id", listing_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to update availability for {listing_id}")
