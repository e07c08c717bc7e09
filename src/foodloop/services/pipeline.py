"""Pure filter, sort, recommendation and search stages for listing feeds.

Every function here returns a new list and leaves its input untouched.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from foodloop.domain.feed import MIN_DISTANCE_KM, FilterConfig, SortPolicy
from foodloop.domain.listings import Category, GeoPoint, Listing
from foodloop.services.geo import distance_km

RECOMMENDED_LIMIT = 10


def filter_listings(
    listings: Iterable[Listing],
    config: FilterConfig,
    now: datetime,
    *,
    min_distance_km: float = MIN_DISTANCE_KM,
) -> list[Listing]:
    """Narrow listings by expiry, category membership and radius."""
    max_distance = config.effective_max_distance_km(min_distance_km)
    reference = config.reference_point
    if reference is not None and not reference.is_valid:
        reference = None

    kept: list[Listing] = []
    for listing in listings:
        if listing.location is None or not listing.location.is_valid:
            continue
        if not config.include_expired and listing.is_expired(now):
            continue
        if (
            config.selected_category_names
            and listing.category.name not in config.selected_category_names
        ):
            continue
        if (
            reference is not None
            and distance_km(reference, listing.location) > max_distance
        ):
            continue
        kept.append(listing)
    return kept


def sort_listings(
    listings: Sequence[Listing],
    policy: SortPolicy,
    reference_point: GeoPoint | None = None,
) -> list[Listing]:
    """Order listings by the given policy with an id tie-break."""
    if policy is SortPolicy.DISTANCE:
        if reference_point is None:
            return list(listings)
        return sorted(listings, key=lambda item: _distance_key(item, reference_point))
    if policy is SortPolicy.EXPIRY:
        return sorted(listings, key=_expiry_key)
    return sorted(listings, key=_newest_key)


def recommend(
    candidates: Iterable[Listing],
    excluding: Iterable[Listing],
    limit: int = RECOMMENDED_LIMIT,
) -> list[Listing]:
    """Return the newest candidates not already shown, capped at ``limit``."""
    excluded_ids = {listing.id for listing in excluding}
    remaining = [item for item in candidates if item.id not in excluded_ids]
    return sort_listings(remaining, SortPolicy.NEWEST)[: max(limit, 0)]


def search(query: str, within: Iterable[Listing]) -> list[Listing]:
    """Case-insensitive substring search over title, description and category."""
    needle = query.casefold()
    if not needle:
        return []
    return [
        listing
        for listing in within
        if needle in listing.title.casefold()
        or needle in listing.description.casefold()
        or needle in listing.category.name.casefold()
    ]


def normalize_listings(listings: Iterable[Listing]) -> list[Listing]:
    """Base ordering for a fetched candidate set: newest first."""
    return sort_listings(list(listings), SortPolicy.NEWEST)


def dedupe_categories(categories: Iterable[Category]) -> list[Category]:
    """Stable-sort categories by name and keep the first-seen entry per name."""
    seen: set[str] = set()
    unique: list[Category] = []
    for category in sorted(categories, key=lambda item: item.name):
        if category.name in seen:
            continue
        seen.add(category.name)
        unique.append(category)
    return unique


def _newest_key(listing: Listing) -> tuple[float, str]:
    return (-listing.created_at.timestamp(), listing.id)


def _expiry_key(listing: Listing) -> tuple[int, float, str]:
    if listing.expires_at is not None:
        return (0, listing.expires_at.timestamp(), listing.id)
    return (1, -listing.created_at.timestamp(), listing.id)


def _distance_key(listing: Listing, reference: GeoPoint) -> tuple[int, float, str]:
    if listing.location is None or not listing.location.is_valid:
        return (1, 0.0, listing.id)
    return (0, distance_km(reference, listing.location), listing.id)
