"""Reserving and releasing listings."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol

from foodloop.domain.errors import ListingUnavailableError, NotFoundError
from foodloop.domain.listings import Listing
from foodloop.domain.models import ReservationNotice
from foodloop.services.saved_items import ListingRepository

_logger = logging.getLogger(__name__)


class NotificationRepository(Protocol):
    """Persistence interface for owner notifications."""

    def create_reservation_notice(self, notice: ReservationNotice) -> None:
        """Store a reservation notice for the listing owner."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ReservationService:
    """Toggles listing availability; listings are never deleted."""

    listing_repository: ListingRepository
    notification_repository: NotificationRepository | None = None
    clock: Callable[[], datetime] = _utcnow

    def reserve(self, listing_id: str, reserver_id: str | None = None) -> Listing:
        """Mark an available listing as reserved and notify its owner."""
        listing = self._require(listing_id)
        if not listing.is_available:
            raise ListingUnavailableError(f"listing {listing_id!r} is not available")
        self.listing_repository.set_availability(listing_id, False)
        _logger.info(
            "Listing %s reserved by %s (owner %s)",
            listing_id,
            reserver_id or "anonymous",
            listing.owner_id,
        )
        if reserver_id:
            self._notify_owner(listing, reserver_id)
        return _with_availability(listing, False)

    def unreserve(self, listing_id: str) -> Listing:
        """Make a listing available again."""
        listing = self._require(listing_id)
        self.listing_repository.set_availability(listing_id, True)
        return _with_availability(listing, True)

    def _require(self, listing_id: str) -> Listing:
        listing = self.listing_repository.get_listing(listing_id)
        if listing is None:
            raise NotFoundError(f"listing {listing_id!r} not found")
        return listing

    def _notify_owner(self, listing: Listing, reserver_id: str) -> None:
        if self.notification_repository is None:
            return
        notice = ReservationNotice(
            owner_id=listing.owner_id,
            reserver_id=reserver_id,
            listing_id=listing.id,
            listing_title=listing.title,
            created_at=self.clock(),
        )
        # The reservation stands even if the owner cannot be notified.
        try:
            self.notification_repository.create_reservation_notice(notice)
        except Exception:
            _logger.exception("Failed to notify owner of listing %s", listing.id)


def _with_availability(listing: Listing, is_available: bool) -> Listing:
    return replace(listing, is_available=is_available)
