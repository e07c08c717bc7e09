"""Listing feed service: fetch, filter, sort and recommend."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from foodloop.domain.errors import RemoteFetchError
from foodloop.domain.feed import (
    MIN_DISTANCE_KM,
    FeedSnapshot,
    FetchOutcome,
    FilterConfig,
    SortPolicy,
)
from foodloop.domain.listings import Category, GeoPoint, Listing
from foodloop.services import pipeline
from foodloop.services.categories import CategoryService

_logger = logging.getLogger(__name__)


class ListingSource(Protocol):
    """Read side of the storage gateway for listings."""

    async def fetch_available_listings(self) -> list[Listing]:
        """Return every listing flagged available; raises RemoteFetchError."""


class LocationProvider(Protocol):
    """Source of the default reference point."""

    async def current_reference_point(self) -> GeoPoint | None:
        """Return the current coordinate, or None when unknown."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class FeedService:
    """Owns the working candidate set and serves feeds derived from it.

    ``refresh`` may be called concurrently. Each call takes a sequence
    number when it starts, and its result replaces the snapshot only if no
    newer call has started by the time it completes. Older completions are
    dropped without cancelling the underlying read.
    """

    listing_source: ListingSource
    category_service: CategoryService
    location_provider: LocationProvider
    recommended_limit: int = pipeline.RECOMMENDED_LIMIT
    min_distance_km: float = MIN_DISTANCE_KM
    clock: Callable[[], datetime] = _utcnow
    _latest_started: int = field(default=0, init=False, repr=False)
    _snapshot: FeedSnapshot = field(default_factory=FeedSnapshot, init=False)

    @property
    def snapshot(self) -> FeedSnapshot:
        """The most recently applied fetch result."""
        return self._snapshot

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._snapshot.categories

    async def refresh(self) -> FetchOutcome:
        """Fetch listings and categories and apply them if still current."""
        self._latest_started += 1
        sequence = self._latest_started
        try:
            listings = pipeline.normalize_listings(
                await self.listing_source.fetch_available_listings()
            )
            categories = await self.category_service.load_categories()
        except RemoteFetchError as exc:
            _logger.warning("Feed refresh #%s failed: %s", sequence, exc)
            return FetchOutcome(sequence=sequence, error=exc)

        outcome = FetchOutcome(
            sequence=sequence,
            listings=tuple(listings),
            categories=tuple(categories),
        )
        if sequence != self._latest_started:
            _logger.info(
                "Discarding stale feed refresh #%s (latest #%s)",
                sequence,
                self._latest_started,
            )
            return outcome

        self._snapshot = FeedSnapshot(
            sequence=sequence,
            listings=outcome.listings,
            categories=outcome.categories,
        )
        return FetchOutcome(
            sequence=sequence,
            listings=outcome.listings,
            categories=outcome.categories,
            applied=True,
        )

    async def resolve_reference_point(
        self, explicit: GeoPoint | None = None
    ) -> GeoPoint | None:
        """Prefer an explicit point, otherwise ask the location provider."""
        if explicit is not None:
            return explicit
        return await self.location_provider.current_reference_point()

    def get_nearby_feed(
        self,
        config: FilterConfig,
        sort_policy: SortPolicy,
        listings: Sequence[Listing] | None = None,
    ) -> list[Listing]:
        """Filter and sort ``listings`` or, by default, the current snapshot.

        A caller whose refresh was superseded passes its own listings here.
        """
        filtered = pipeline.filter_listings(
            self._snapshot.listings if listings is None else listings,
            config,
            self.clock(),
            min_distance_km=self.min_distance_km,
        )
        return pipeline.sort_listings(filtered, sort_policy, config.reference_point)

    def get_recommended_feed(
        self,
        excluding: Sequence[Listing],
        candidates: Sequence[Listing] | None = None,
    ) -> list[Listing]:
        """Newest candidates not already in ``excluding``."""
        return pipeline.recommend(
            self._snapshot.listings if candidates is None else candidates,
            excluding,
            limit=self.recommended_limit,
        )

    def search(
        self, query: str, within: Sequence[Listing] | None = None
    ) -> list[Listing]:
        """Search ``within`` or, by default, the whole snapshot."""
        candidates = self._snapshot.listings if within is None else within
        return pipeline.search(query, candidates)
