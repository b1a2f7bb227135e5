"""Parsers for converting catalog responses to SeismicEvent."""

from volcano_quakes.parsers.catalog_geojson import CatalogGeoJSONParser, normalize_catalog

PARSER_MAP = {
    "geojson": CatalogGeoJSONParser(),
}

__all__ = ["PARSER_MAP", "CatalogGeoJSONParser", "normalize_catalog"]
