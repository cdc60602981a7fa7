"""
Client for the Nominatim geocoding API.

Every operation is a single GET request relative to the configured base
URL, carrying the configured identification header, whose JSON body is
decoded into the records in `nominatim_client.models`.

API documentation: https://nominatim.org/release-docs/develop/api/Overview/
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar, Union
from urllib.parse import quote_plus, urlencode, urljoin, urlparse

import requests

from nominatim_client.errors import ConfigurationError, DecodeError
from nominatim_client.ident import IdentificationMethod
from nominatim_client.models import (
    ErrorResponse,
    Place,
    Status,
    StructuredSearch,
    decode_reverse,
    places_from_list,
)
from nominatim_client.settings import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Detail flags sent with every place-returning request.
_DETAIL_PARAMS = {"format": "json", "addressdetails": "1", "extratags": "1"}


def _normalize_base_url(url: str) -> str:
    """Validate an absolute http(s) URL and make sure it ends with '/'."""
    if not isinstance(url, str) or not url.strip():
        raise ConfigurationError(f"base URL must be a non-empty string, got {url!r}")
    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        raise ConfigurationError(f"invalid base URL {url!r}: {exc}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"base URL must be an absolute http(s) URL, got {url!r}")
    if parsed.query or parsed.fragment:
        raise ConfigurationError(f"base URL must not carry a query or fragment, got {url!r}")
    if not parsed.path.endswith("/"):
        url = parsed._replace(path=parsed.path + "/").geturl()
    return url


def _validate_timeout(timeout: Any) -> float:
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise ConfigurationError(f"timeout must be a number of seconds, got {timeout!r}")
    if timeout <= 0:
        raise ConfigurationError(f"timeout must be positive, got {timeout!r}")
    return float(timeout)


def _strip_ws(value: Union[str, float]) -> str:
    return "".join(str(value).split())


def _coordinate_text(value: Union[str, float]) -> str:
    """Decimal text for a coordinate; floats never use exponent notation."""
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    return _strip_ws(value)


class Client:
    """
    Interface to a Nominatim server.

    The configuration (identification, base URL, timeout) only changes
    through the explicit setters; a Client can be shared by concurrent
    callers as long as those setters are not called at the same time.
    """

    def __init__(
        self,
        ident: IdentificationMethod,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        if not isinstance(ident, IdentificationMethod):
            raise ConfigurationError(f"ident must be an IdentificationMethod, got {ident!r}")
        self._ident = ident
        self._base_url = _normalize_base_url(DEFAULT_BASE_URL if base_url is None else base_url)
        self._timeout = _validate_timeout(DEFAULT_TIMEOUT if timeout is None else timeout)
        self._owns_session = session is None
        self._session = session or requests.Session()
        logger.debug(
            "Nominatim client for %s (%s, timeout=%.1fs)", self._base_url, ident, self._timeout
        )

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None, session: Optional[requests.Session] = None
    ) -> "Client":
        """Build a client from NOMINATIM_* environment configuration."""
        settings = settings or Settings.from_env()
        return cls(
            settings.identification(),
            base_url=settings.BASE_URL,
            timeout=settings.TIMEOUT,
            session=session,
        )

    @property
    def ident(self) -> IdentificationMethod:
        return self._ident

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    def set_ident(self, ident: IdentificationMethod) -> None:
        if not isinstance(ident, IdentificationMethod):
            raise ConfigurationError(f"ident must be an IdentificationMethod, got {ident!r}")
        self._ident = ident

    def set_base_url(self, url: str) -> None:
        """Point the client at another server, e.g. a self-hosted instance."""
        self._base_url = _normalize_base_url(url)

    def set_timeout(self, seconds: float) -> None:
        self._timeout = _validate_timeout(seconds)

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def build_url(self, path: str, params: Dict[str, Any]) -> str:
        """Join `path` onto the base URL and append form-encoded `params`."""
        query = urlencode(params, safe=",", quote_via=quote_plus)
        return f"{urljoin(self._base_url, path)}?{query}"

    def _get(self, url: str, decoder: Callable[[Any], T]) -> T:
        logger.debug("GET %s", url)
        resp = self._session.get(url, headers=self._ident.headers(), timeout=self._timeout)
        resp.raise_for_status()
        try:
            data = resp.json()
        except ValueError as exc:
            raise DecodeError(f"response body is not valid JSON: {exc}", url=url) from exc
        try:
            return decoder(data)
        except DecodeError as exc:
            if exc.url is None:
                exc.url = url
            raise

    def status(self) -> Status:
        """
        Check the status of the server.

        A non-zero `Status.status` is returned as-is; callers decide what
        counts as unhealthy (see `Status.ok`).

        https://nominatim.org/release-docs/develop/api/Status/
        """
        return self._get(self.build_url("status.php", {"format": "json"}), Status.from_dict)

    def search(self, query: str) -> List[Place]:
        """
        Free-text search. Results keep the server's ranking order.

        https://nominatim.org/release-docs/develop/api/Search/
        """
        params = {"q": query, **_DETAIL_PARAMS}
        places = self._get(self.build_url("search", params), places_from_list)
        logger.debug("search %r: %d results", query, len(places))
        return places

    def search_structured(self, params: StructuredSearch) -> List[Place]:
        """Search by address components; only the fields that are set are sent."""
        query = {**_DETAIL_PARAMS, **params.to_params()}
        places = self._get(self.build_url("search", query), places_from_list)
        logger.debug("structured search %s: %d results", params.to_params(), len(places))
        return places

    def reverse(
        self,
        latitude: Union[str, float],
        longitude: Union[str, float],
        zoom: Optional[int] = None,
    ) -> Optional[Place]:
        """
        Find the place at a coordinate.

        Coordinates are passed as decimal text (whitespace removed, otherwise
        untouched) so no precision is lost. `zoom` (0-18) selects the
        administrative level and is not validated here. Returns None when the
        server answers with an error object such as "Unable to geocode".

        https://nominatim.org/release-docs/develop/api/Reverse/
        """
        params: Dict[str, Any] = {
            "lat": _coordinate_text(latitude),
            "lon": _coordinate_text(longitude),
            **_DETAIL_PARAMS,
        }
        if zoom is not None:
            params["zoom"] = zoom

        result = self._get(self.build_url("reverse", params), decode_reverse)
        if isinstance(result, ErrorResponse):
            logger.debug(
                "reverse %s,%s: no place (%s)", params["lat"], params["lon"], result.error
            )
            return None
        return result

    def lookup(self, ids: Iterable[str]) -> List[Place]:
        """
        Look up OSM objects by reference ("N240109189", "W50637691", "R146656").

        Ids are not validated; ones the server cannot resolve are simply
        missing from the result.

        https://nominatim.org/release-docs/develop/api/Lookup/
        """
        if isinstance(ids, str):
            ids = [ids]
        osm_ids = ",".join(_strip_ws(i) for i in ids)
        params = {"osm_ids": osm_ids, **_DETAIL_PARAMS}
        places = self._get(self.build_url("lookup", params), places_from_list)
        logger.debug("lookup %s: %d results", osm_ids, len(places))
        return places
