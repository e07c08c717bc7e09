"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, time, timedelta

import pytest

from foodloop.adapters.imgur_client import ImageResult, ImageSearchClient
from foodloop.config import Settings
from foodloop.containers import AppContainer
from foodloop.domain.errors import RemoteFetchError
from foodloop.domain.listings import Category, GeoPoint, Listing, TimeSlot
from foodloop.domain.models import ReservationNotice, UserProfile
from foodloop.services.cache import InMemoryCache
from foodloop.services.categories import (
    CategoryRepository,
    CategorySource,
    CategoryService,
)
from foodloop.services.feed import FeedService, ListingSource
from foodloop.services.images import ImageSearchService
from foodloop.services.listings import ListingDetailService
from foodloop.services.location import FixedLocationProvider
from foodloop.services.reservations import NotificationRepository, ReservationService
from foodloop.services.saved_items import (
    ListingRepository,
    SavedItemsService,
    UserRepository,
)

NOW = datetime(2025, 3, 6, 12, 0, tzinfo=UTC)
BERLIN = GeoPoint(latitude=52.5200, longitude=13.4050)
BAKERY = Category(id="cat-bakery", name="Bakery", icon="birthday.cake")
DAIRY = Category(id="cat-dairy", name="Dairy", icon="drop.fill")


def make_listing(  # noqa: PLR0913
    listing_id: str,
    *,
    title: str | None = None,
    description: str = "",
    category: Category = BAKERY,
    location: GeoPoint | None = BERLIN,
    created_at: datetime = NOW,
    expires_at: datetime | None = None,
    pickup_slots: tuple[TimeSlot, ...] = (),
    is_available: bool = True,
) -> Listing:
    return Listing(
        id=listing_id,
        owner_id="owner-1",
        title=title or f"Listing {listing_id}",
        description=description,
        category=category,
        location=location,
        created_at=created_at,
        expires_at=expires_at,
        pickup_slots=pickup_slots,
        is_available=is_available,
    )


def days(count: float) -> timedelta:
    return timedelta(days=count)


def slot(weekday: int) -> TimeSlot:
    return TimeSlot(weekday=weekday, start=time(9, 0), end=time(18, 0))


@dataclass
class FakeListingSource(ListingSource):
    """Listing source returning a fixed list, or raising when told to fail."""

    listings: list[Listing] = field(default_factory=list)
    fail: bool = False
    calls: int = 0

    async def fetch_available_listings(self) -> list[Listing]:
        self.calls += 1
        if self.fail:
            raise RemoteFetchError("store unreachable")
        return list(self.listings)


@dataclass
class GatedListingSource(ListingSource):
    """Listing source whose responses are released manually, in any order."""

    responses: list[list[Listing]]
    gates: list[asyncio.Event] = field(default_factory=list)
    started: int = 0

    def __post_init__(self) -> None:
        self.gates = [asyncio.Event() for _ in self.responses]

    async def fetch_available_listings(self) -> list[Listing]:
        index = self.started
        self.started += 1
        await self.gates[index].wait()
        return self.responses[index]


@dataclass
class FakeCategorySource(CategorySource):
    """Category source returning a fixed list."""

    categories: list[Category] = field(default_factory=lambda: [BAKERY, DAIRY])
    fail: bool = False

    async def fetch_categories(self) -> list[Category]:
        if self.fail:
            raise RemoteFetchError("store unreachable")
        return list(self.categories)


@dataclass
class InMemoryCategoryRepository(CategoryRepository):
    """Records created categories."""

    created: list[Category] = field(default_factory=list)
    fail: bool = False

    def create_categories(self, categories: list[Category]) -> None:
        if self.fail:
            raise RuntimeError("write failed")
        self.created.extend(categories)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[str, UserProfile] = field(default_factory=dict)

    def get_profile(self, user_id: str) -> UserProfile | None:
        return self.users.get(user_id)

    def update_saved_items(self, user_id: str, saved_items: list[str]) -> None:
        self.users[user_id] = replace(
            self.users[user_id], saved_items=tuple(saved_items)
        )


@dataclass
class InMemoryListingRepository(ListingRepository):
    """In-memory listing repository for tests."""

    listings: dict[str, Listing] = field(default_factory=dict)

    def add(self, *listings: Listing) -> None:
        for listing in listings:
            self.listings[listing.id] = listing

    def get_listing(self, listing_id: str) -> Listing | None:
        return self.listings.get(listing_id)

    def list_listings_by_ids(self, listing_ids: list[str]) -> list[Listing]:
        return [self.listings[item] for item in listing_ids if item in self.listings]

    def set_availability(self, listing_id: str, is_available: bool) -> None:
        self.listings[listing_id] = replace(
            self.listings[listing_id], is_available=is_available
        )


@dataclass
class InMemoryNotificationRepository(NotificationRepository):
    """Records reservation notices."""

    notices: list[ReservationNotice] = field(default_factory=list)
    fail: bool = False

    def create_reservation_notice(self, notice: ReservationNotice) -> None:
        if self.fail:
            raise RuntimeError("write failed")
        self.notices.append(notice)


@dataclass
class FakeImageSearchClient(ImageSearchClient):
    """Image search client returning canned results."""

    results: list[ImageResult] = field(
        default_factory=lambda: [
            ImageResult(id="abc", link="https://i.imgur.com/abc.jpg"),
        ]
    )
    queries: list[str] = field(default_factory=list)

    async def search_images(self, query: str) -> list[ImageResult]:
        self.queries.append(query)
        return list(self.results)


def build_feed_service(
    listings: list[Listing] | None = None,
    categories: list[Category] | None = None,
    reference_point: GeoPoint | None = None,
    listing_source: ListingSource | None = None,
) -> FeedService:
    category_source = FakeCategorySource()
    if categories is not None:
        category_source.categories = categories
    return FeedService(
        listing_source=listing_source or FakeListingSource(listings=listings or []),
        category_service=CategoryService(
            source=category_source, repository=InMemoryCategoryRepository()
        ),
        location_provider=FixedLocationProvider(reference_point),
        clock=lambda: NOW,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        imgur_client_id="imgur-client",
    )


@pytest.fixture
def listing_repository() -> InMemoryListingRepository:
    return InMemoryListingRepository()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def notification_repository() -> InMemoryNotificationRepository:
    return InMemoryNotificationRepository()


@pytest.fixture
def image_client() -> FakeImageSearchClient:
    return FakeImageSearchClient()


@pytest.fixture
def container(
    settings: Settings,
    listing_repository: InMemoryListingRepository,
    user_repository: InMemoryUserRepository,
    notification_repository: InMemoryNotificationRepository,
    image_client: FakeImageSearchClient,
) -> AppContainer:
    feed_service = build_feed_service()

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        feed_service=feed_service,
        saved_items_service=SavedItemsService(
            user_repository=user_repository,
            listing_repository=listing_repository,
        ),
        reservation_service=ReservationService(
            listing_repository,
            notification_repository=notification_repository,
            clock=lambda: NOW,
        ),
        listing_detail_service=ListingDetailService(
            listing_repository=listing_repository,
            user_repository=user_repository,
        ),
        image_search_service=ImageSearchService(
            client=image_client, cache=InMemoryCache()
        ),
        close_resources=close_resources,
    )
