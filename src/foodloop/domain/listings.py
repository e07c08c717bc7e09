"""Domain models for shared food listings."""

import math
from dataclasses import dataclass
from datetime import date, datetime, time

MAX_WEEKDAY = 6

AVAILABLE = "available"
AVAILABLE_TODAY = "available_today"
RESERVED = "reserved"


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in degrees with an optional address."""

    latitude: float
    longitude: float
    address: str | None = None

    @property
    def is_valid(self) -> bool:
        """Return True when both coordinates are finite and in range."""
        return (
            math.isfinite(self.latitude)
            and math.isfinite(self.longitude)
            and -90.0 <= self.latitude <= 90.0
            and -180.0 <= self.longitude <= 180.0
        )


@dataclass(frozen=True)
class Category:
    """A food category; the icon is an opaque symbol name."""

    id: str
    name: str
    icon: str


@dataclass(frozen=True)
class TimeSlot:
    """A weekly pickup window. Weekday 0 is Monday."""

    weekday: int
    start: time
    end: time


@dataclass(frozen=True)
class Rating:
    """A star rating left by another user."""

    rater_id: str
    stars: float
    comment: str | None
    rated_at: datetime


@dataclass(frozen=True)
class Listing:
    """A single shareable food item."""

    id: str
    owner_id: str
    title: str
    description: str
    category: Category
    location: GeoPoint | None
    created_at: datetime
    expires_at: datetime | None = None
    image_url: str | None = None
    pickup_slots: tuple[TimeSlot, ...] = ()
    is_available: bool = True
    ratings: tuple[Rating, ...] = ()

    @property
    def average_rating(self) -> float | None:
        """Mean star value, or None when unrated."""
        if not self.ratings:
            return None
        return sum(rating.stars for rating in self.ratings) / len(self.ratings)

    def is_expired(self, now: datetime) -> bool:
        """Listings without an expiry never expire; the boundary is exclusive."""
        return self.expires_at is not None and self.expires_at < now

    def availability_label(self, today: date) -> str:
        """Describe pickup availability relative to today's weekday."""
        if not self.is_available:
            return RESERVED
        weekday = today.weekday()
        if any(slot.weekday == weekday for slot in self.pickup_slots):
            return AVAILABLE_TODAY
        return AVAILABLE
