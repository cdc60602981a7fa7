"""
Records returned by a Nominatim server.

Nominatim omits whatever it does not know about a place (missing
administrative levels, no extra tags, no importance), and encodes some
values as strings on one endpoint and numbers on another. Decoding is
therefore permissive per field: anything absent falls back to an empty
value or None, and only a value of an unusable type raises DecodeError.
"""
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Union

from nominatim_client.errors import DecodeError


def _expect_object(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"expected a JSON object for {what}, got {type(data).__name__}")
    return data


def _opt_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise DecodeError(f"field {key!r} should be a scalar, got {type(value).__name__}")
    return str(value)


def _str(data: Dict[str, Any], key: str) -> str:
    return _opt_str(data, key) or ""


def _int(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise DecodeError(f"field {key!r} should be an integer, got bool")
    if isinstance(value, float) and not value.is_integer():
        raise DecodeError(f"field {key!r} should be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"field {key!r} should be an integer, got {value!r}") from exc


def _opt_float(data: Dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise DecodeError(f"field {key!r} should be a number, got bool")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"field {key!r} should be a number, got {value!r}") from exc


@dataclass
class Status:
    """Health snapshot from /status.php. A non-zero status is data, not an error."""
    status: int
    message: str
    data_updated: Optional[str] = None
    software_version: Optional[str] = None
    database_version: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == 0

    @classmethod
    def from_dict(cls, data: Any) -> "Status":
        data = _expect_object(data, "status")
        missing = [key for key in ("status", "message") if data.get(key) is None]
        if missing:
            raise DecodeError(f"status response lacks required field(s): {', '.join(missing)}")
        return cls(
            status=_int(data, "status"),
            message=_str(data, "message"),
            data_updated=_opt_str(data, "data_updated"),
            software_version=_opt_str(data, "software_version"),
            database_version=_opt_str(data, "database_version"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "message": self.message,
            "data_updated": self.data_updated,
            "software_version": self.software_version,
            "database_version": self.database_version,
        }


@dataclass
class Address:
    """Address breakdown of a place; Nominatim only sends the levels it has."""
    house_number: Optional[str] = None
    road: Optional[str] = None
    neighbourhood: Optional[str] = None
    suburb: Optional[str] = None
    hamlet: Optional[str] = None
    village: Optional[str] = None
    town: Optional[str] = None
    city: Optional[str] = None
    municipality: Optional[str] = None
    county: Optional[str] = None
    state_district: Optional[str] = None
    state: Optional[str] = None
    iso3166_2_lvl4: Optional[str] = None
    postcode: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None

    # attribute name -> JSON key, where they differ
    _WIRE_NAMES = {"iso3166_2_lvl4": "ISO3166-2-lvl4"}

    @property
    def locality(self) -> Optional[str]:
        """The most specific settlement name available."""
        return self.city or self.town or self.village or self.hamlet

    @classmethod
    def from_dict(cls, data: Any) -> "Address":
        data = _expect_object(data, "address")
        return cls(**{
            f.name: _opt_str(data, cls._WIRE_NAMES.get(f.name, f.name))
            for f in fields(cls)
        })

    def to_dict(self) -> Dict[str, Any]:
        return {
            self._WIRE_NAMES.get(f.name, f.name): getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass
class ExtraTags:
    """Selected OSM tags requested with extratags=1."""
    capital: Optional[str] = None
    website: Optional[str] = None
    wikidata: Optional[str] = None
    wikipedia: Optional[str] = None
    population: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ExtraTags":
        data = _expect_object(data, "extratags")
        return cls(**{f.name: _opt_str(data, f.name) for f in fields(cls)})

    def to_dict(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass
class Place:
    """
    A geocoded place.

    lat/lon are the decimal strings exactly as the server sent them, so no
    precision is lost to float round-tripping. `place_class` and `place_type`
    are the `class` and `type` keys of the JSON object.
    """
    place_id: int = 0
    licence: str = ""
    osm_type: str = ""
    osm_id: int = 0
    boundingbox: List[str] = field(default_factory=list)
    lat: str = ""
    lon: str = ""
    display_name: str = ""
    place_class: Optional[str] = None
    place_type: Optional[str] = None
    importance: Optional[float] = None
    icon: Optional[str] = None
    address: Optional[Address] = None
    extratags: Optional[ExtraTags] = None
    raw: Optional[Dict[str, Any]] = field(default=None, repr=False, compare=False)

    @property
    def osm_ref(self) -> Optional[str]:
        """Reference usable with Client.lookup, e.g. "R146656"."""
        if not self.osm_type or not self.osm_id:
            return None
        return f"{self.osm_type[0].upper()}{self.osm_id}"

    @classmethod
    def from_dict(cls, data: Any) -> "Place":
        data = _expect_object(data, "place")

        bbox = data.get("boundingbox")
        if bbox is None:
            bbox = []
        elif not isinstance(bbox, list):
            raise DecodeError(f"field 'boundingbox' should be an array, got {type(bbox).__name__}")

        address = data.get("address")
        extratags = data.get("extratags")

        return cls(
            place_id=_int(data, "place_id"),
            licence=_str(data, "licence"),
            osm_type=_str(data, "osm_type"),
            osm_id=_int(data, "osm_id"),
            boundingbox=[str(v) for v in bbox],
            lat=_str(data, "lat"),
            lon=_str(data, "lon"),
            display_name=_str(data, "display_name"),
            place_class=_opt_str(data, "class"),
            place_type=_opt_str(data, "type"),
            importance=_opt_float(data, "importance"),
            icon=_opt_str(data, "icon"),
            address=Address.from_dict(address) if address is not None else None,
            extratags=ExtraTags.from_dict(extratags) if extratags is not None else None,
            raw=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "place_id": self.place_id,
            "licence": self.licence,
            "osm_type": self.osm_type,
            "osm_id": self.osm_id,
            "boundingbox": list(self.boundingbox),
            "lat": self.lat,
            "lon": self.lon,
            "display_name": self.display_name,
            "class": self.place_class,
            "type": self.place_type,
            "importance": self.importance,
            "icon": self.icon,
            "address": self.address.to_dict() if self.address else None,
            "extratags": self.extratags.to_dict() if self.extratags else None,
        }


def places_from_list(data: Any) -> List[Place]:
    """Decode a JSON array of places, keeping the server's ranking order."""
    if not isinstance(data, list):
        raise DecodeError(f"expected a JSON array of places, got {type(data).__name__}")
    return [Place.from_dict(item) for item in data]


@dataclass
class StructuredSearch:
    """Address components for a structured search; unset fields are not sent."""
    amenity: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    county: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postalcode: Optional[str] = None

    def to_params(self) -> Dict[str, str]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.to_params()


@dataclass
class ErrorResponse:
    """Body sent by /reverse when no place exists at the coordinates."""
    error: str


def decode_reverse(data: Any) -> Union[Place, ErrorResponse]:
    """Pick the reverse response variant by probing for the `error` key."""
    data = _expect_object(data, "reverse response")
    if "error" in data:
        error = data["error"]
        if isinstance(error, dict):
            # newer servers: {"error": {"code": ..., "message": ...}}
            error = error.get("message") or ""
        return ErrorResponse(error=str(error))
    return Place.from_dict(data)
