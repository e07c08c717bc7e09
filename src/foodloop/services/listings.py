"""Single-listing lookups."""

from dataclasses import dataclass

from foodloop.domain.errors import NotFoundError
from foodloop.domain.listings import Listing
from foodloop.domain.models import UserProfile
from foodloop.services.saved_items import ListingRepository, UserRepository


@dataclass(frozen=True)
class ListingDetail:
    """A listing together with its owner's profile, when one exists."""

    listing: Listing
    owner: UserProfile | None


@dataclass
class ListingDetailService:
    """Loads a listing and the profile of the user who shared it."""

    listing_repository: ListingRepository
    user_repository: UserRepository

    def get_detail(self, listing_id: str) -> ListingDetail:
        """Return the listing and owner; a missing owner is not an error."""
        listing = self.listing_repository.get_listing(listing_id)
        if listing is None:
            raise NotFoundError(f"listing {listing_id!r} not found")
        owner = (
            self.user_repository.get_profile(listing.owner_id)
            if listing.owner_id
            else None
        )
        return ListingDetail(listing=listing, owner=owner)
