"""Tests for saved items and reservations."""

import pytest

from foodloop.domain.errors import ListingUnavailableError, NotFoundError
from foodloop.domain.models import UserProfile
from foodloop.services.listings import ListingDetailService
from foodloop.services.reservations import ReservationService
from foodloop.services.saved_items import SavedItemsService
from tests.conftest import (
    NOW,
    InMemoryListingRepository,
    InMemoryNotificationRepository,
    InMemoryUserRepository,
    days,
    make_listing,
)


def _service() -> tuple[SavedItemsService, InMemoryUserRepository]:
    users = InMemoryUserRepository()
    users.users["u1"] = UserProfile(id="u1", username="ana")
    listings = InMemoryListingRepository()
    listings.add(
        make_listing("old", created_at=NOW - days(2)),
        make_listing("new", created_at=NOW),
    )
    return SavedItemsService(users, listings), users


def test_toggle_save_adds_then_removes() -> None:
    service, users = _service()

    assert service.toggle_save("u1", "old") is True
    assert service.is_saved("u1", "old")
    assert service.toggle_save("u1", "old") is False
    assert users.users["u1"].saved_items == ()


def test_list_saved_returns_newest_first() -> None:
    service, _ = _service()
    service.toggle_save("u1", "old")
    service.toggle_save("u1", "new")
    service.toggle_save("u1", "missing")

    assert [item.id for item in service.list_saved("u1")] == ["new", "old"]


def test_list_saved_empty() -> None:
    service, _ = _service()

    assert service.list_saved("u1") == []


def test_unknown_user_raises_not_found() -> None:
    service, _ = _service()

    with pytest.raises(NotFoundError):
        service.toggle_save("nobody", "old")


def test_reserve_and_unreserve() -> None:
    repository = InMemoryListingRepository()
    repository.add(make_listing("a"))
    service = ReservationService(repository)

    reserved = service.reserve("a", reserver_id="u2")

    assert reserved.is_available is False
    assert repository.listings["a"].is_available is False
    with pytest.raises(ListingUnavailableError):
        service.reserve("a")

    released = service.unreserve("a")

    assert released.is_available is True
    assert repository.listings["a"].is_available is True


def test_reserve_unknown_listing() -> None:
    service = ReservationService(InMemoryListingRepository())

    with pytest.raises(NotFoundError):
        service.reserve("missing")


def test_reserve_notifies_owner() -> None:
    repository = InMemoryListingRepository()
    repository.add(make_listing("a", title="Bread rolls"))
    notifications = InMemoryNotificationRepository()
    service = ReservationService(
        repository, notification_repository=notifications, clock=lambda: NOW
    )

    service.reserve("a", reserver_id="u2")

    [notice] = notifications.notices
    assert notice.owner_id == "owner-1"
    assert notice.reserver_id == "u2"
    assert notice.listing_id == "a"
    assert notice.listing_title == "Bread rolls"
    assert notice.created_at == NOW


def test_anonymous_reservation_sends_no_notice() -> None:
    repository = InMemoryListingRepository()
    repository.add(make_listing("a"))
    notifications = InMemoryNotificationRepository()
    service = ReservationService(repository, notification_repository=notifications)

    service.reserve("a")

    assert notifications.notices == []


def test_reservation_survives_notification_failure() -> None:
    repository = InMemoryListingRepository()
    repository.add(make_listing("a"))
    service = ReservationService(
        repository,
        notification_repository=InMemoryNotificationRepository(fail=True),
    )

    reserved = service.reserve("a", reserver_id="u2")

    assert reserved.is_available is False
    assert repository.listings["a"].is_available is False


def test_listing_detail_includes_owner() -> None:
    users = InMemoryUserRepository()
    users.users["owner-1"] = UserProfile(id="owner-1", username="ben", level=3)
    listings = InMemoryListingRepository()
    listings.add(make_listing("a"))
    service = ListingDetailService(listing_repository=listings, user_repository=users)

    detail = service.get_detail("a")

    assert detail.listing.id == "a"
    assert detail.owner is not None
    assert detail.owner.username == "ben"


def test_listing_detail_without_owner_profile() -> None:
    listings = InMemoryListingRepository()
    listings.add(make_listing("a"))
    service = ListingDetailService(
        listing_repository=listings, user_repository=InMemoryUserRepository()
    )

    assert service.get_detail("a").owner is None
    with pytest.raises(NotFoundError):
        service.get_detail("missing")
