"""Boundary exceptions raised by external collaborators."""


class NgsiError(Exception):
    """Base exception for all adapter errors."""


class FetchError(NgsiError):
    """Raised when the broker cannot be reached or answers with a non-2xx status."""

    def __init__(self, url: str, status_code: int | None = None, reason: str | None = None):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        if status_code is not None:
            message = f"NGSI-LD error: {status_code} for {url}"
        else:
            message = f"NGSI-LD request failed for {url}: {reason or 'unknown error'}"
        super().__init__(message)


class LocationUnavailableError(NgsiError):
    """Raised when no location fix can be obtained (absent, denied or failed)."""
