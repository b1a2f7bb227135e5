"""Tests for catalog response normalization."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone

import pytest

from volcano_quakes.geo import haversine_km
from volcano_quakes.parsers import PARSER_MAP, CatalogGeoJSONParser, normalize_catalog
from volcano_quakes.parsers.base import is_finite_number

from conftest import make_collection, make_feature


def _independent_haversine(lat1, lon1, lat2, lon2):
    r = 6371.0
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (math.sin(dlat / 2) ** 2
         + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2)
    return r * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class TestNormalizeCatalog:
    def test_filters_malformed_records(self, campi):
        raw = make_collection(
            make_feature("null-mag", mag=None),
            make_feature("two-coords", coords=(14.1, 40.8)),
            make_feature("good", mag=1.8, coords=(14.15, 40.83, -0.4)),
        )
        events = normalize_catalog(raw, campi)

        assert [e.id for e in events] == ["good"]
        e = events[0]
        assert e.magnitude == 1.8
        assert e.longitude == 14.15
        assert e.latitude == 40.83
        assert e.depth_km == -0.4
        assert e.location_name == "Campi Flegrei"
        assert e.place == "2 km SW of Pozzuoli, Italy"
        assert e.time == datetime(2024, 2, 15, 12, 0, 0, tzinfo=timezone.utc)
        assert e.distance_from_reference_km == pytest.approx(
            _independent_haversine(40.827, 14.139, 40.83, 14.15), rel=1e-12,
        )
        assert e.distance_from_reference_km == haversine_km(40.827, 14.139, 40.83, 14.15)

    @pytest.mark.parametrize("mag", ["3.1", True, float("nan"), float("inf")])
    def test_non_numeric_magnitude_dropped(self, campi, mag):
        assert normalize_catalog(make_collection(make_feature(mag=mag)), campi) == []

    @pytest.mark.parametrize("coords", [
        (14.1, 40.8, 3.0, 0.0),
        (14.1, "40.8", 3.0),
        (14.1, 40.8, None),
        (float("nan"), 40.8, 3.0),
        None,
    ])
    def test_bad_geometry_dropped(self, campi, coords):
        assert normalize_catalog(make_collection(make_feature(coords=coords)), campi) == []

    def test_missing_time_dropped(self, campi):
        assert normalize_catalog(make_collection(make_feature(time_ms=None)), campi) == []

    def test_missing_sections_dropped(self, campi):
        raw = make_collection({"id": "x"}, {"id": "y", "properties": {"mag": 1.0}}, "junk")
        assert normalize_catalog(raw, campi) == []

    def test_integer_values_accepted(self, campi):
        events = normalize_catalog(make_collection(make_feature(mag=2, coords=(14, 41, 3))), campi)
        assert len(events) == 1
        assert isinstance(events[0].magnitude, float)
        assert events[0].depth_km == 3.0

    def test_missing_place_is_empty_string(self, campi):
        events = normalize_catalog(make_collection(make_feature(place=None)), campi)
        assert events[0].place == ""

    def test_id_coerced_to_string(self, campi):
        events = normalize_catalog(make_collection(make_feature(event_id=12345)), campi)
        assert events[0].id == "12345"

    @pytest.mark.parametrize("event_id", [None, ""])
    def test_missing_id_dropped(self, campi, event_id):
        assert normalize_catalog(make_collection(make_feature(event_id=event_id)), campi) == []

    def test_feature_without_id_key_dropped(self, campi):
        feature = make_feature()
        del feature["id"]
        assert normalize_catalog(make_collection(feature, make_feature("good")), campi)[0].id == "good"

    @pytest.mark.parametrize("field", ["mag", "time", "lon", "lat", "depth"])
    def test_out_of_range_integer_dropped(self, campi, field):
        huge = 10**400
        bad = make_feature("bad")
        if field in ("mag", "time"):
            bad["properties"][field] = huge
        else:
            bad["geometry"]["coordinates"][["lon", "lat", "depth"].index(field)] = huge
        events = normalize_catalog(make_collection(bad, make_feature("good")), campi)
        assert [e.id for e in events] == ["good"]

    @pytest.mark.parametrize("raw", [None, [], "text", {}, {"features": None}, {"features": {}}])
    def test_no_feature_collection(self, campi, raw, caplog):
        with caplog.at_level(logging.WARNING):
            assert normalize_catalog(raw, campi) == []
        assert "No earthquake features found for Campi Flegrei" in caplog.text

    def test_empty_features(self, campi):
        assert normalize_catalog(make_collection(), campi) == []

    def test_metadata_count_logged(self, campi, caplog):
        with caplog.at_level(logging.INFO, logger="volcano_quakes.parsers.catalog_geojson"):
            normalize_catalog(make_collection(make_feature(), count=1), campi)
        assert "Found 1 earthquakes for Campi Flegrei" in caplog.text

    def test_preserves_order(self, campi):
        raw = make_collection(make_feature("b"), make_feature("a"), make_feature("c"))
        assert [e.id for e in normalize_catalog(raw, campi)] == ["b", "a", "c"]


class TestParserRegistry:
    def test_geojson_parser_registered(self, santorini):
        parser = PARSER_MAP["geojson"]
        assert isinstance(parser, CatalogGeoJSONParser)
        events = parser.parse(make_collection(make_feature(coords=(25.4, 36.41, 8.0))), santorini)
        assert events[0].location_name == "Santorini"


class TestIsFiniteNumber:
    @pytest.mark.parametrize("value,expected", [
        (1, True), (1.5, True), (-0.0, True),
        (None, False), ("1", False), (True, False), (float("nan"), False), (float("-inf"), False),
        (10**400, False), (-10**400, False),
    ])
    def test_values(self, value, expected):
        assert is_finite_number(value) is expected
