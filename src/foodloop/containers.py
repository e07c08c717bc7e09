"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from foodloop.adapters.imgur_client import HttpxImgurClient
from foodloop.adapters.supabase_category_repository import SupabaseCategoryRepository
from foodloop.adapters.supabase_listing_repository import SupabaseListingRepository
from foodloop.adapters.supabase_notification_repository import (
    SupabaseNotificationRepository,
)
from foodloop.adapters.supabase_storage_gateway import SupabaseStorageGateway
from foodloop.adapters.supabase_user_repository import SupabaseUserRepository
from foodloop.config import Settings
from foodloop.services.cache import InMemoryCache
from foodloop.services.categories import CategoryService
from foodloop.services.feed import FeedService
from foodloop.services.images import ImageSearchService
from foodloop.services.listings import ListingDetailService
from foodloop.services.location import FixedLocationProvider
from foodloop.services.reservations import ReservationService
from foodloop.services.saved_items import SavedItemsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    feed_service: FeedService
    saved_items_service: SavedItemsService
    reservation_service: ReservationService
    listing_detail_service: ListingDetailService
    image_search_service: ImageSearchService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    gateway = SupabaseStorageGateway(supabase_client)
    listing_repository = SupabaseListingRepository(supabase_client)
    category_service = CategoryService(
        source=gateway,
        repository=SupabaseCategoryRepository(supabase_client),
    )
    feed_service = FeedService(
        listing_source=gateway,
        category_service=category_service,
        location_provider=FixedLocationProvider.from_coordinates(
            resolved_settings.default_latitude, resolved_settings.default_longitude
        ),
        recommended_limit=resolved_settings.recommended_limit,
        min_distance_km=resolved_settings.min_distance_km,
    )
    user_repository = SupabaseUserRepository(supabase_client)
    saved_items_service = SavedItemsService(
        user_repository=user_repository,
        listing_repository=listing_repository,
    )
    reservation_service = ReservationService(
        listing_repository,
        notification_repository=SupabaseNotificationRepository(supabase_client),
    )
    listing_detail_service = ListingDetailService(
        listing_repository=listing_repository, user_repository=user_repository
    )
    imgur_client = HttpxImgurClient.create(
        client_id=resolved_settings.imgur_client_id,
        base_url=resolved_settings.imgur_base_url,
    )
    image_search_service = ImageSearchService(
        client=imgur_client,
        cache=InMemoryCache(),
        ttl_seconds=resolved_settings.image_search_ttl_seconds,
    )

    async def close_resources() -> None:
        await imgur_client.close()

    return AppContainer(
        settings=resolved_settings,
        feed_service=feed_service,
        saved_items_service=saved_items_service,
        reservation_service=reservation_service,
        listing_detail_service=listing_detail_service,
        image_search_service=image_search_service,
        close_resources=close_resources,
    )
