"""Location providers."""

from dataclasses import dataclass

from foodloop.domain.listings import GeoPoint
from foodloop.services.feed import LocationProvider


@dataclass
class FixedLocationProvider(LocationProvider):
    """Returns a configured reference point, or None when none is set."""

    point: GeoPoint | None = None

    @classmethod
    def from_coordinates(
        cls, latitude: float | None, longitude: float | None
    ) -> "FixedLocationProvider":
        """Build a provider; a missing coordinate means no known location."""
        if latitude is None or longitude is None:
            return cls()
        return cls(GeoPoint(latitude=latitude, longitude=longitude))

    async def current_reference_point(self) -> GeoPoint | None:
        return self.point
