"""Client for the OpenStreetMap Nominatim geocoding API."""
__version__ = "0.3.5"

from nominatim_client.client import Client
from nominatim_client.errors import ConfigurationError, DecodeError, NominatimError
from nominatim_client.ident import IdentificationMethod, IdentKind
from nominatim_client.models import (
    Address,
    ErrorResponse,
    ExtraTags,
    Place,
    Status,
    StructuredSearch,
)
from nominatim_client.settings import Settings

__all__ = [
    "Address",
    "Client",
    "ConfigurationError",
    "DecodeError",
    "ErrorResponse",
    "ExtraTags",
    "IdentificationMethod",
    "IdentKind",
    "NominatimError",
    "Place",
    "Settings",
    "Status",
    "StructuredSearch",
]
