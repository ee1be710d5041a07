"""Error taxonomy for place resolution and details caching."""
from typing import Optional


class PlacesServiceError(Exception):
    """Base class for errors surfaced to callers of the places layer."""


class ConfigurationError(PlacesServiceError):
    """Required configuration (the provider API key) is missing."""


class ResolutionFailed(PlacesServiceError):
    """No provider candidate exists for a location.

    Permanent: callers should treat it as a data-quality issue rather than retry.
    """

    def __init__(self, location_id: str, location_name: str):
        self.location_id = location_id
        self.location_name = location_name
        super().__init__(f'Could not resolve Google Place ID for location "{location_name}".')


class TransportError(PlacesServiceError):
    """Timeout, network failure or non-2xx response from the provider.

    Transient: nothing is cached on this path, so the next call retries.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class UpstreamError(TransportError):
    """Photo media request returned a non-2xx status."""


class InvalidPhotoReference(PlacesServiceError, ValueError):
    """Photo name is not a well-formed `places/{id}/photos/{ref}` path."""


class PersistenceWarning(Exception):
    """Durable store read or write failed.

    Raised by durable store adapters and always caught by the details service.
    """
