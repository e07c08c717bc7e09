"""Pydantic models for API request payloads."""

from pydantic import BaseModel, Field


class SaveItemRequest(BaseModel):
    """Body for toggling a saved listing."""

    listing_id: str = Field(min_length=1)


class ReserveRequest(BaseModel):
    """Body for reserving a listing."""

    reserver_id: str | None = None
