"""Row decoding and encoding for Supabase tables."""

from collections.abc import Mapping
from datetime import UTC, datetime, time

from foodloop.domain.errors import RecordDecodeError
from foodloop.domain.listings import (
    MAX_WEEKDAY,
    Category,
    GeoPoint,
    Listing,
    Rating,
    TimeSlot,
)
from foodloop.domain.models import UserProfile

MIN_STARS = 1.0
MAX_STARS = 5.0


def parse_category(row: Mapping[str, object]) -> Category:
    """Parse a category row or embedded category document."""
    record_id = row.get("id")
    name = row.get("name")
    if not record_id or not isinstance(name, str) or not name.strip():
        raise RecordDecodeError(record_id, "category requires id and name")
    return Category(id=str(record_id), name=name, icon=str(row.get("icon") or ""))


def parse_listing(row: Mapping[str, object]) -> Listing:
    """Parse a food_items row into a domain model."""
    record_id = row.get("id")
    if not record_id:
        raise RecordDecodeError(record_id, "missing id")
    title = row.get("title")
    if not isinstance(title, str) or not title.strip():
        raise RecordDecodeError(record_id, "title must be a non-empty string")
    category_raw = row.get("category")
    if not isinstance(category_raw, Mapping):
        raise RecordDecodeError(record_id, "missing embedded category")
    try:
        category = parse_category(category_raw)
        created_at = _parse_datetime(row.get("created_at"))
        if created_at is None:
            raise RecordDecodeError(record_id, "missing created_at")
        return Listing(
            id=str(record_id),
            owner_id=str(row.get("owner_id") or ""),
            title=title,
            description=str(row.get("description") or ""),
            category=category,
            location=_parse_location(row.get("location")),
            created_at=created_at,
            expires_at=_parse_datetime(row.get("expiry_date")),
            image_url=row.get("image_url") or None,
            pickup_slots=tuple(
                _parse_slot(slot) for slot in row.get("available_times") or []
            ),
            is_available=_parse_flag(row.get("is_available", True)),
            ratings=tuple(
                _parse_rating(rating) for rating in row.get("ratings") or []
            ),
        )
    except RecordDecodeError as exc:
        if exc.record_id == record_id:
            raise
        raise RecordDecodeError(record_id, exc.reason) from exc
    except (KeyError, TypeError, ValueError) as exc:
        raise RecordDecodeError(record_id, str(exc)) from exc


def parse_profile(row: Mapping[str, object]) -> UserProfile:
    """Parse a users row into a profile."""
    return UserProfile(
        id=str(row["id"]),
        username=str(row.get("username") or ""),
        saved_items=tuple(str(item) for item in row.get("saved_items") or []),
        level=int(row.get("level") or 0),
        foods_saved=int(row.get("foods_saved") or 0),
    )


def serialize_category(category: Category) -> dict[str, object]:
    return {"id": category.id, "name": category.name, "icon": category.icon}


def _parse_location(raw: object) -> GeoPoint:
    if not isinstance(raw, Mapping):
        raise RecordDecodeError(None, "missing location")
    latitude = raw.get("latitude")
    longitude = raw.get("longitude")
    if latitude is None or longitude is None:
        raise RecordDecodeError(None, "location requires latitude and longitude")
    point = GeoPoint(
        latitude=float(latitude),
        longitude=float(longitude),
        address=raw.get("address") or None,
    )
    if not point.is_valid:
        raise RecordDecodeError(None, "coordinates out of range")
    return point


def _parse_slot(raw: Mapping[str, object]) -> TimeSlot:
    weekday = int(raw["day"])
    if not 0 <= weekday <= MAX_WEEKDAY:
        raise RecordDecodeError(None, f"pickup weekday {weekday} out of range")
    return TimeSlot(
        weekday=weekday,
        start=_parse_time(raw["start_time"]),
        end=_parse_time(raw["end_time"]),
    )


def _parse_rating(raw: Mapping[str, object]) -> Rating:
    stars = float(raw["stars"])
    if not MIN_STARS <= stars <= MAX_STARS:
        raise RecordDecodeError(None, f"rating {stars} out of range")
    rated_at = _parse_datetime(raw.get("date"))
    if rated_at is None:
        raise RecordDecodeError(None, "rating requires a date")
    return Rating(
        rater_id=str(raw["user_id"]),
        stars=stars,
        comment=raw.get("comment") or None,
        rated_at=rated_at,
    )


def _parse_flag(raw: object) -> bool:
    if not isinstance(raw, bool):
        raise TypeError(f"expected a boolean flag, got {raw!r}")
    return raw


def _parse_datetime(raw: object) -> datetime | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str):
        value = datetime.fromisoformat(raw)
    else:
        raise TypeError(f"unsupported timestamp {raw!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def _parse_time(raw: object) -> time:
    if isinstance(raw, time):
        return raw
    if not isinstance(raw, str):
        raise TypeError(f"unsupported time {raw!r}")
    if "T" in raw:
        return datetime.fromisoformat(raw).time()
    return time.fromisoformat(raw)
