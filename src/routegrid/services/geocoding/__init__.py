"""Geocoding services."""

from .nominatim_client import NominatimGeocoder, parse_coordinate_literal

__all__ = ["NominatimGeocoder", "parse_coordinate_literal"]
