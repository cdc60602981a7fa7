import logging
import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from nominatim_client import __version__
from nominatim_client.errors import ConfigurationError
from nominatim_client.ident import IdentificationMethod

# Environment configuration for building a Client without explicit arguments.

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://nominatim.openstreetmap.org/"
DEFAULT_TIMEOUT = 10.0
FALLBACK_USER_AGENT = f"nominatim-client/{__version__}"


def _as_float(val: Optional[str], default: float) -> float:
    if val is None or not val.strip():
        return default
    try:
        return float(val)
    except ValueError as exc:
        raise ConfigurationError(f"NOMINATIM_TIMEOUT must be a number, got {val!r}") from exc


class Settings:
    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        referer: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.BASE_URL: str = base_url or DEFAULT_BASE_URL
        self.USER_AGENT: Optional[str] = user_agent
        self.REFERER: Optional[str] = referer
        self.TIMEOUT: float = timeout

    @classmethod
    def from_env(cls, load_env: bool = True) -> "Settings":
        """Read NOMINATIM_* variables, optionally loading a .env file first."""
        if load_env:
            load_dotenv(find_dotenv(usecwd=True))
        return cls(
            base_url=os.getenv("NOMINATIM_BASE_URL"),
            user_agent=os.getenv("NOMINATIM_USER_AGENT"),
            referer=os.getenv("NOMINATIM_REFERER"),
            timeout=_as_float(os.getenv("NOMINATIM_TIMEOUT"), DEFAULT_TIMEOUT),
        )

    def identification(self) -> IdentificationMethod:
        """User-Agent wins over Referer; with neither, fall back to a generic UA."""
        if self.USER_AGENT:
            return IdentificationMethod.from_user_agent(self.USER_AGENT)
        if self.REFERER:
            return IdentificationMethod.from_referer(self.REFERER)
        logger.warning(
            "NOMINATIM_USER_AGENT / NOMINATIM_REFERER not set; using fallback UA %r. "
            "This may violate Nominatim usage policy.",
            FALLBACK_USER_AGENT,
        )
        return IdentificationMethod.from_user_agent(FALLBACK_USER_AGENT)
