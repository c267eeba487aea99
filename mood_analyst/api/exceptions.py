"""
Catalog API Exceptions

Error taxonomy for the Spotify catalog client. Every failure surfaced by the
API layer is a CatalogError, so callers can recover from any of them in one
place.
"""

from typing import Optional


class CatalogError(Exception):
    """Base error for catalog API failures, carrying HTTP status and body when known."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: Optional[str] = None,
        url: Optional[str] = None
    ):
        super().__init__(message)
        self.status = status
        self.body = body
        self.url = url


class AuthError(CatalogError):
    """Bad or missing credentials, or a failed token exchange."""


class NotAuthenticatedError(AuthError):
    """An operation was called before authentication succeeded."""


class TransportError(CatalogError):
    """The request could not be built or sent (network failure, timeout)."""


class APIError(CatalogError):
    """The catalog answered with an unexpected HTTP status."""


class DecodeError(CatalogError):
    """The response body could not be decoded."""
