"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from foodloop.api.schemas import ReserveRequest, SaveItemRequest
from foodloop.app_logging import configure_logging
from foodloop.config import parse_category_names
from foodloop.containers import AppContainer
from foodloop.domain.errors import (
    ConfigurationError,
    ListingUnavailableError,
    NotFoundError,
    RemoteFetchError,
)
from foodloop.domain.feed import FilterConfig, SortPolicy
from foodloop.domain.listings import Category, GeoPoint, Listing
from foodloop.domain.models import UserProfile
from foodloop.services.geo import distance_km, format_distance


def create_app(container: AppContainer) -> FastAPI:  # noqa: C901, PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RemoteFetchError)
    async def remote_fetch_failed(
        request: Request, exc: RemoteFetchError
    ) -> JSONResponse:
        logger.warning("Listing fetch failed: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"detail": "Listings are temporarily unavailable.", "retry": True},
        )

    @app.exception_handler(ConfigurationError)
    async def invalid_configuration(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ListingUnavailableError)
    async def unavailable(
        request: Request, exc: ListingUnavailableError
    ) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/feed/nearby")
    async def nearby_feed(  # noqa: PLR0913
        request: Request,
        lat: float | None = None,
        lon: float | None = None,
        max_distance_km: float | None = None,
        category: list[str] | None = Query(default=None),
        include_expired: bool = False,
        sort: str = SortPolicy.DISTANCE.value,
    ) -> dict[str, object]:
        """Refresh the candidate set and return the nearby and recommended feeds."""
        state_container: AppContainer = request.app.state.container
        feed_service = state_container.feed_service
        sort_policy = SortPolicy.parse(sort)
        reference = await feed_service.resolve_reference_point(
            _explicit_point(lat, lon)
        )

        outcome = await feed_service.refresh()
        if outcome.error is not None:
            raise outcome.error

        config = FilterConfig(
            include_expired=include_expired,
            selected_category_names=parse_category_names(category),
            max_distance_km=(
                state_container.settings.default_max_distance_km
                if max_distance_km is None
                else max_distance_km
            ),
            reference_point=reference,
        )
        # A superseded refresh still answers with the listings it fetched.
        nearby = feed_service.get_nearby_feed(
            config, sort_policy, listings=outcome.listings
        )
        recommended = feed_service.get_recommended_feed(
            nearby, candidates=outcome.listings
        )
        today = datetime.now(tz=UTC).date()
        return {
            "sort": sort_policy.value,
            "reference_point": _serialize_point(reference),
            "items": [_serialize_listing(item, reference, today) for item in nearby],
            "recommended": [
                _serialize_listing(item, reference, today) for item in recommended
            ],
        }

    @app.get("/categories")
    async def list_categories(request: Request) -> dict[str, object]:
        """Return the de-duplicated category set."""
        state_container: AppContainer = request.app.state.container
        await _ensure_snapshot(state_container)
        return {
            "categories": [
                _serialize_category(item)
                for item in state_container.feed_service.categories
            ]
        }

    @app.get("/search")
    async def search(request: Request, q: str = "") -> dict[str, object]:
        """Search the current candidate set."""
        state_container: AppContainer = request.app.state.container
        await _ensure_snapshot(state_container)
        today = datetime.now(tz=UTC).date()
        results = state_container.feed_service.search(q)
        return {"items": [_serialize_listing(item, None, today) for item in results]}

    @app.get("/listings/{listing_id}")
    async def listing_detail(listing_id: str, request: Request) -> dict[str, object]:
        """Return a listing with a summary of its owner."""
        state_container: AppContainer = request.app.state.container
        detail = state_container.listing_detail_service.get_detail(listing_id)
        today = datetime.now(tz=UTC).date()
        payload = _serialize_listing(detail.listing, None, today)
        payload["owner"] = _serialize_owner(detail.owner)
        return payload

    @app.post("/listings/{listing_id}/reserve")
    async def reserve(
        listing_id: str, request: Request, payload: ReserveRequest | None = None
    ) -> dict[str, object]:
        """Reserve an available listing."""
        state_container: AppContainer = request.app.state.container
        listing = state_container.reservation_service.reserve(
            listing_id, reserver_id=payload.reserver_id if payload else None
        )
        return {"id": listing.id, "is_available": listing.is_available}

    @app.post("/listings/{listing_id}/unreserve")
    async def unreserve(listing_id: str, request: Request) -> dict[str, object]:
        """Release a reservation."""
        state_container: AppContainer = request.app.state.container
        listing = state_container.reservation_service.unreserve(listing_id)
        return {"id": listing.id, "is_available": listing.is_available}

    @app.get("/users/{user_id}")
    async def user_profile(user_id: str, request: Request) -> dict[str, object]:
        """Return a user's profile summary."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.saved_items_service.get_profile(user_id)
        return {
            "id": profile.id,
            "username": profile.username,
            "level": profile.level,
            "level_title": profile.level_title,
            "foods_saved": profile.foods_saved,
            "saved_items": list(profile.saved_items),
        }

    @app.get("/users/{user_id}/saved")
    async def saved_items(user_id: str, request: Request) -> dict[str, object]:
        """Return the user's saved listings, newest first."""
        state_container: AppContainer = request.app.state.container
        today = datetime.now(tz=UTC).date()
        listings = state_container.saved_items_service.list_saved(user_id)
        return {"items": [_serialize_listing(item, None, today) for item in listings]}

    @app.post("/users/{user_id}/saved")
    async def toggle_saved(
        user_id: str, payload: SaveItemRequest, request: Request
    ) -> dict[str, object]:
        """Toggle a listing in the user's saved items."""
        state_container: AppContainer = request.app.state.container
        saved = state_container.saved_items_service.toggle_save(
            user_id, payload.listing_id
        )
        return {"listing_id": payload.listing_id, "saved": saved}

    @app.get("/images/search")
    async def image_search(request: Request, q: str = "") -> dict[str, object]:
        """Suggest stock photos for a listing."""
        state_container: AppContainer = request.app.state.container
        images = await state_container.image_search_service.search(q)
        return {"images": [{"id": image.id, "link": image.link} for image in images]}

    return app


async def _ensure_snapshot(container: AppContainer) -> None:
    """Load the candidate set once if nothing has been applied yet."""
    if container.feed_service.snapshot.sequence:
        return
    outcome = await container.feed_service.refresh()
    if outcome.error is not None:
        raise outcome.error


def _explicit_point(lat: float | None, lon: float | None) -> GeoPoint | None:
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise ConfigurationError("lat and lon must be provided together")
    point = GeoPoint(latitude=lat, longitude=lon)
    if not point.is_valid:
        raise ConfigurationError("lat/lon out of range")
    return point


def _serialize_point(point: GeoPoint | None) -> dict[str, object] | None:
    if point is None:
        return None
    return {
        "latitude": point.latitude,
        "longitude": point.longitude,
        "address": point.address,
    }


def _serialize_category(category: Category) -> dict[str, object]:
    return {"id": category.id, "name": category.name, "icon": category.icon}


def _serialize_listing(
    listing: Listing, reference: GeoPoint | None, today: date
) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": listing.id,
        "owner_id": listing.owner_id,
        "title": listing.title,
        "description": listing.description,
        "category": _serialize_category(listing.category),
        "image_url": listing.image_url,
        "location": _serialize_point(listing.location),
        "created_at": listing.created_at.isoformat(),
        "expires_at": listing.expires_at.isoformat() if listing.expires_at else None,
        "pickup_slots": _serialize_slots(listing),
        "is_available": listing.is_available,
        "availability": listing.availability_label(today),
        "average_rating": listing.average_rating,
    }
    if reference is not None and listing.location is not None:
        km = distance_km(reference, listing.location)
        payload["distance_km"] = round(km, 3)
        payload["distance_label"] = format_distance(km)
    return payload


def _serialize_owner(owner: UserProfile | None) -> dict[str, object] | None:
    if owner is None:
        return None
    return {
        "id": owner.id,
        "username": owner.username,
        "level_title": owner.level_title,
        "foods_saved": owner.foods_saved,
    }


def _serialize_slots(listing: Listing) -> Sequence[dict[str, object]]:
    return [
        {
            "weekday": slot.weekday,
            "start": slot.start.isoformat(timespec="minutes"),
            "end": slot.end.isoformat(timespec="minutes"),
        }
        for slot in listing.pickup_slots
    ]
