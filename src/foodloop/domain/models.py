"""Domain models for FoodLoop users."""

from dataclasses import dataclass
from datetime import datetime

_LEVEL_TIERS = (
    (5, "Beginner"),
    (15, "Advanced"),
    (30, "Expert"),
)


@dataclass(frozen=True)
class UserProfile:
    """Represents a user profile stored in the database."""

    id: str
    username: str
    saved_items: tuple[str, ...] = ()
    level: int = 0
    foods_saved: int = 0

    @property
    def level_title(self) -> str:
        """Human-readable tier for the user's level."""
        for ceiling, title in _LEVEL_TIERS:
            if self.level <= ceiling:
                return title
        return "Food Saver"


@dataclass(frozen=True)
class ReservationNotice:
    """Tells a listing owner that someone reserved their item."""

    owner_id: str
    reserver_id: str
    listing_id: str
    listing_title: str
    created_at: datetime
