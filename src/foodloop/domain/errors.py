"""Error taxonomy for the listing feed."""


class FoodLoopError(Exception):
    """Base class for application errors."""


class RemoteFetchError(FoodLoopError):
    """The storage gateway is unreachable or returned an unusable response."""


class RecordDecodeError(FoodLoopError):
    """A single stored record could not be decoded."""

    def __init__(self, record_id: object, reason: str) -> None:
        super().__init__(f"record {record_id!r}: {reason}")
        self.record_id = record_id
        self.reason = reason


class ConfigurationError(FoodLoopError, ValueError):
    """Invalid feed configuration."""


class NotFoundError(FoodLoopError, LookupError):
    """A requested entity does not exist."""


class ListingUnavailableError(FoodLoopError):
    """The listing is already reserved or withdrawn."""
