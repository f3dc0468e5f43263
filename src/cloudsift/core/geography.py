"""Geography helpers — store coordinates as unsigned integers and query them by box.

The 2011-02-01 API has no geo field type and its uint fields cannot hold
negative or fractional numbers. Latitude and longitude are therefore shifted
by 180 degrees and expressed in centimetres along the earth's surface, which
keeps them positive and close to proportional to real distance.

Typical use::

    lat, lng = degrees_to_int(45.52, -122.68)
    client.add_item("42", {"lat": lat, "lng": lng})

    box = coordinate_box(45.52, -122.68, meters=5000)
    client.search("coffee", {"filter": {"and": box}})
"""

from __future__ import annotations

import math

from cloudsift.models.filter import RangeValue

EARTH_RADIUS = 6367444
METERS_PER_DEGREE_OF_LATITUDE = 111133
CENTIMETERS_PER_METER = 100


def degrees_to_int(lat: float, lng: float) -> tuple[int, int]:
    """Encode a coordinate pair as the integers stored in the index."""
    return _latitude_to_int(lat), _longitude_to_int(lng, lat)


def int_to_degrees(lat: int, lng: int) -> tuple[float, float]:
    """Decode integers produced by :func:`degrees_to_int`."""
    latitude = _latitude_to_degrees(lat)
    return latitude, _longitude_to_degrees(lng, latitude)


def coordinate_box(lat: float, lng: float, meters: float) -> dict[str, RangeValue]:
    """Integer ranges covering a square of ``2 * meters`` around a point.

    The result can be dropped straight into a filter mapping.
    """
    earth_radius_at_latitude = EARTH_RADIUS * math.cos(math.radians(lat))
    change_in_latitude = math.degrees(meters / EARTH_RADIUS)
    change_in_longitude = math.degrees(meters / earth_radius_at_latitude)

    bottom = _latitude_to_int(lat - change_in_latitude)
    top = _latitude_to_int(lat + change_in_latitude)
    left = _longitude_to_int(lng - change_in_longitude, lat)
    right = _longitude_to_int(lng + change_in_longitude, lat)

    return {
        "lat": RangeValue(start=bottom, end=top),
        "lng": RangeValue(start=left, end=right),
    }


def _meters_per_degree_of_longitude(latitude: float) -> float:
    return METERS_PER_DEGREE_OF_LATITUDE * math.cos(math.radians(latitude))


def _latitude_to_int(degrees: float) -> int:
    return round((degrees + 180) * METERS_PER_DEGREE_OF_LATITUDE * CENTIMETERS_PER_METER)


def _latitude_to_degrees(value: int) -> float:
    return value / METERS_PER_DEGREE_OF_LATITUDE / CENTIMETERS_PER_METER - 180


def _longitude_to_int(degrees: float, latitude: float) -> int:
    return round((degrees + 180) * _meters_per_degree_of_longitude(latitude) * CENTIMETERS_PER_METER)


def _longitude_to_degrees(value: int, latitude: float) -> float:
    return value / _meters_per_degree_of_longitude(latitude) / CENTIMETERS_PER_METER - 180
