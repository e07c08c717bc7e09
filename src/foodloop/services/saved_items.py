"""Services for a user's bookmarked listings."""

from dataclasses import dataclass
from typing import Protocol

from foodloop.domain.errors import NotFoundError
from foodloop.domain.listings import Listing
from foodloop.domain.models import UserProfile
from foodloop.services.pipeline import normalize_listings


class UserRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the profile for a user id, if present."""

    def update_saved_items(self, user_id: str, saved_items: list[str]) -> None:
        """Replace the user's saved listing ids."""


class ListingRepository(Protocol):
    """Persistence interface for individual listings."""

    def get_listing(self, listing_id: str) -> Listing | None:
        """Return a listing by id, if present."""

    def list_listings_by_ids(self, listing_ids: list[str]) -> list[Listing]:
        """Return the listings matching the given ids."""

    def set_availability(self, listing_id: str, is_available: bool) -> None:
        """Update the availability flag of a listing."""


@dataclass
class SavedItemsService:
    """Application service for saving and listing bookmarked food."""

    user_repository: UserRepository
    listing_repository: ListingRepository

    def get_profile(self, user_id: str) -> UserProfile:
        """Return a user profile or raise NotFoundError."""
        profile = self.user_repository.get_profile(user_id)
        if profile is None:
            raise NotFoundError(f"user {user_id!r} not found")
        return profile

    def is_saved(self, user_id: str, listing_id: str) -> bool:
        """Return True when the listing is in the user's saved items."""
        return listing_id in self.get_profile(user_id).saved_items

    def toggle_save(self, user_id: str, listing_id: str) -> bool:
        """Add or remove a listing and return whether it is now saved."""
        saved = list(self.get_profile(user_id).saved_items)
        if listing_id in saved:
            saved = [item for item in saved if item != listing_id]
            now_saved = False
        else:
            saved.append(listing_id)
            now_saved = True
        self.user_repository.update_saved_items(user_id, saved)
        return now_saved

    def list_saved(self, user_id: str) -> list[Listing]:
        """Return the user's saved listings, newest first."""
        saved = list(self.get_profile(user_id).saved_items)
        if not saved:
            return []
        return normalize_listings(self.listing_repository.list_listings_by_ids(saved))
