"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    imgur_client_id: str
    imgur_base_url: str = "https://api.imgur.com/3"
    default_latitude: float | None = None
    default_longitude: float | None = None
    default_max_distance_km: float = 10.0
    min_distance_km: float = 0.1
    recommended_limit: int = 10
    image_search_ttl_seconds: int = 3600
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_category_names(raw: str | list[str] | None) -> frozenset[str]:
    """Parse category names from a comma-separated string or repeated values."""
    if raw is None:
        return frozenset()
    chunks = raw if isinstance(raw, list) else [raw]
    names: set[str] = set()
    for chunk in chunks:
        for value in chunk.split(","):
            cleaned = value.strip()
            if cleaned:
                names.add(cleaned)
    return frozenset(names)
