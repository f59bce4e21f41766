"""
Domain exceptions.

Routers translate these into HTTP errors; collaborator failures
(geocoding, storage) are caught where their fallback lives and never
reach the caller.
"""

from __future__ import annotations

from typing import Any


class GolfFinderError(Exception):
    """Base class for all domain errors."""

    error_code = "internal_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidInput(GolfFinderError):
    error_code = "invalid_input"


class InvalidLocation(InvalidInput):
    error_code = "invalid_location"


class InvalidDate(InvalidInput):
    error_code = "invalid_date"


class NotFound(GolfFinderError):
    error_code = "not_found"


class GeocodingError(GolfFinderError):
    """The geocoding provider failed (HTTP error, bad payload, timeout)."""

    error_code = "geocoding_failed"


class StorageError(GolfFinderError):
    """The course store failed or timed out."""

    error_code = "storage_failed"


class TeeTimeProviderError(GolfFinderError):
    """A live tee-sheet provider failed (HTTP error, bad payload, timeout)."""

    error_code = "provider_failed"
