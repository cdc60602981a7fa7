"""Exceptions raised by the Nominatim client.

Transport failures (connection errors, timeouts, HTTP 4xx/5xx) are not
wrapped: they surface as the ``requests`` exceptions that caused them.
"""
from typing import Optional


class NominatimError(Exception):
    """Base class for errors raised by this library."""


class ConfigurationError(NominatimError, ValueError):
    """Invalid client configuration (base URL, timeout)."""


class DecodeError(NominatimError, ValueError):
    """A response body could not be decoded into the expected records."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url

    def __str__(self) -> str:
        msg = super().__str__()
        if self.url:
            return f"{msg} (url={self.url})"
        return msg
