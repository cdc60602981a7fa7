"""
Tests for decoding Nominatim JSON into records.

Run with: pytest tests/test_models.py -v
"""
import pytest

from nominatim_client.errors import DecodeError
from nominatim_client.models import (
    Address,
    ErrorResponse,
    ExtraTags,
    Place,
    Status,
    StructuredSearch,
    decode_reverse,
    places_from_list,
)

LIBERTY = {
    "place_id": 254498776,
    "licence": "Data © OpenStreetMap contributors, ODbL 1.0. https://osm.org/copyright",
    "osm_type": "way",
    "osm_id": 32965412,
    "lat": "40.689253199999996",
    "lon": "-74.04454817144321",
    "class": "tourism",
    "type": "attraction",
    "importance": 0.8101041080316136,
    "display_name": "Statue of Liberty, Flagpole Plaza, Manhattan, New York, United States",
    "address": {
        "tourism": "Statue of Liberty",
        "road": "Flagpole Plaza",
        "city": "New York",
        "state": "New York",
        "ISO3166-2-lvl4": "US-NY",
        "postcode": "10004",
        "country": "United States",
        "country_code": "us",
    },
    "extratags": {
        "wikidata": "Q9202",
        "wikipedia": "en:Statue of Liberty",
        "website": "https://www.nps.gov/stli/",
    },
    "boundingbox": ["40.6888049", "40.6896741", "-74.0451246", "-74.0439759"],
}


class TestPlace:
    """Test Place.from_dict."""

    def test_full_place(self):
        place = Place.from_dict(LIBERTY)
        assert place.place_id == 254498776
        assert place.osm_type == "way"
        assert place.osm_id == 32965412
        assert place.place_class == "tourism"
        assert place.place_type == "attraction"
        assert place.importance == pytest.approx(0.8101041080316136)
        assert place.address.city == "New York"
        assert place.address.iso3166_2_lvl4 == "US-NY"
        assert place.extratags.wikidata == "Q9202"
        assert place.extratags.population is None
        assert len(place.boundingbox) == 4
        assert place.raw is LIBERTY

    def test_lat_lon_kept_as_source_strings(self):
        place = Place.from_dict(LIBERTY)
        assert place.lat == "40.689253199999996"
        assert place.lon == "-74.04454817144321"

    def test_missing_address_and_extratags(self):
        data = {k: v for k, v in LIBERTY.items() if k not in ("address", "extratags")}
        place = Place.from_dict(data)
        assert place.address is None
        assert place.extratags is None
        assert place.display_name.startswith("Statue of Liberty")

    def test_empty_object_uses_defaults(self):
        place = Place.from_dict({})
        assert place.place_id == 0
        assert place.osm_id == 0
        assert place.lat == ""
        assert place.boundingbox == []
        assert place.place_class is None
        assert place.importance is None

    def test_mixed_string_and_number_encodings(self):
        place = Place.from_dict({
            "place_id": "123",
            "osm_id": "456",
            "importance": "0.5",
            "lat": 48.8566,
            "boundingbox": [48.8, 48.9, 2.2, 2.4],
            "extratags": {"population": 2165423, "capital": "yes"},
        })
        assert place.place_id == 123
        assert place.osm_id == 456
        assert place.importance == 0.5
        assert place.lat == "48.8566"
        assert place.boundingbox == ["48.8", "48.9", "2.2", "2.4"]
        assert place.extratags.population == "2165423"

    def test_bad_id_raises_decode_error(self):
        with pytest.raises(DecodeError):
            Place.from_dict({"place_id": "not-a-number"})

    def test_fractional_id_raises_decode_error(self):
        with pytest.raises(DecodeError):
            Place.from_dict({"place_id": 1.9})
        assert Place.from_dict({"osm_id": 42.0}).osm_id == 42

    def test_non_object_raises_decode_error(self):
        with pytest.raises(DecodeError):
            Place.from_dict(["not", "an", "object"])

    def test_bad_boundingbox_raises_decode_error(self):
        with pytest.raises(DecodeError):
            Place.from_dict({"boundingbox": "40.1,40.2,-74.1,-74.0"})

    def test_osm_ref(self):
        assert Place.from_dict({"osm_type": "relation", "osm_id": 146656}).osm_ref == "R146656"
        assert Place.from_dict({"osm_type": "way", "osm_id": 50637691}).osm_ref == "W50637691"
        assert Place.from_dict({}).osm_ref is None

    def test_to_dict_uses_wire_names(self):
        out = Place.from_dict(LIBERTY).to_dict()
        assert out["class"] == "tourism"
        assert out["type"] == "attraction"
        assert out["address"]["ISO3166-2-lvl4"] == "US-NY"
        assert "raw" not in out


class TestAddress:
    def test_locality_prefers_city(self):
        assert Address(city="Paris", town="Other").locality == "Paris"
        assert Address(village="Giverny").locality == "Giverny"
        assert Address().locality is None

    def test_unknown_keys_ignored(self):
        address = Address.from_dict({"tourism": "Statue of Liberty", "country": "United States"})
        assert address.country == "United States"

    def test_nested_object_value_rejected(self):
        with pytest.raises(DecodeError):
            Address.from_dict({"city": {"name": "Paris"}})


def test_extratags_all_optional():
    tags = ExtraTags.from_dict({})
    assert tags == ExtraTags()
    assert tags.to_dict() == {}


def test_places_from_list_preserves_order():
    places = places_from_list([{"place_id": 3}, {"place_id": 1}, {"place_id": 2}])
    assert [p.place_id for p in places] == [3, 1, 2]


def test_places_from_list_empty():
    assert places_from_list([]) == []


def test_places_from_list_rejects_object():
    with pytest.raises(DecodeError):
        places_from_list({"error": "Unable to geocode"})


class TestStatus:
    def test_healthy(self):
        status = Status.from_dict({
            "status": 0,
            "message": "OK",
            "data_updated": "2024-05-01T12:00:00+00:00",
            "software_version": "4.4.0",
            "database_version": "4.4.0",
        })
        assert status.ok
        assert status.software_version == "4.4.0"

    def test_non_zero_status_is_data(self):
        status = Status.from_dict({"status": 700, "message": "Database connection failed"})
        assert status.status == 700
        assert not status.ok
        assert status.data_updated is None

    @pytest.mark.parametrize("body", [{}, {"error": "Service Unavailable"}, {"status": 0}])
    def test_missing_required_fields(self, body):
        with pytest.raises(DecodeError):
            Status.from_dict(body)


class TestDecodeReverse:
    def test_error_object(self):
        result = decode_reverse({"error": "Unable to geocode"})
        assert result == ErrorResponse(error="Unable to geocode")

    def test_nested_error_object(self):
        result = decode_reverse({"error": {"code": 400, "message": "Parameter 'lat' missing."}})
        assert isinstance(result, ErrorResponse)
        assert result.error == "Parameter 'lat' missing."

    def test_place_object(self):
        result = decode_reverse(LIBERTY)
        assert isinstance(result, Place)
        assert result.osm_id == 32965412


def test_structured_search_only_set_fields():
    params = StructuredSearch(city="Paris").to_params()
    assert params == {"city": "Paris"}
    assert StructuredSearch().is_empty()
