"""Feed configuration and results."""

from dataclasses import dataclass, field
from enum import StrEnum

from foodloop.domain.errors import ConfigurationError, RemoteFetchError
from foodloop.domain.listings import Category, GeoPoint, Listing

DEFAULT_MAX_DISTANCE_KM = 10.0
MIN_DISTANCE_KM = 0.1


class SortPolicy(StrEnum):
    """Ordering applied to a filtered feed."""

    DISTANCE = "distance"
    NEWEST = "newest"
    EXPIRY = "expiry"

    @classmethod
    def parse(cls, raw: str) -> "SortPolicy":
        """Parse a policy name, raising ConfigurationError when unknown."""
        try:
            return cls(raw.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(policy.value for policy in cls)
            raise ConfigurationError(
                f"Unknown sort policy {raw!r}; expected one of: {allowed}"
            ) from exc


@dataclass(frozen=True)
class FilterConfig:
    """User context for narrowing the candidate set."""

    include_expired: bool = False
    selected_category_names: frozenset[str] = frozenset()
    max_distance_km: float = DEFAULT_MAX_DISTANCE_KM
    reference_point: GeoPoint | None = None

    def effective_max_distance_km(self, minimum: float = MIN_DISTANCE_KM) -> float:
        """Clamp the radius so zero or negative values keep a sane minimum."""
        return max(self.max_distance_km, minimum)


@dataclass(frozen=True)
class FeedSnapshot:
    """The working candidate set produced by one completed fetch."""

    sequence: int = 0
    listings: tuple[Listing, ...] = ()
    categories: tuple[Category, ...] = ()


@dataclass(frozen=True)
class FetchOutcome:
    """Result of a refresh: fetched data, whether it was applied, or an error."""

    sequence: int
    listings: tuple[Listing, ...] = ()
    categories: tuple[Category, ...] = ()
    applied: bool = False
    error: RemoteFetchError | None = field(default=None)

    @property
    def ok(self) -> bool:
        return self.error is None
