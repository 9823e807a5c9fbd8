"""Geometry primitives used by the result filters.

Points, lat/lng rectangles (optionally crossing the antimeridian), the
great-circle distance helper, and the attribute layout used to read an
item's coordinates.
"""

import json
import logging
from math import asin, cos, degrees, radians, sin, sqrt
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from shapely.geometry import Point, box

logger = logging.getLogger(__name__)

EARTH_RADIUS_METERS = 6367000.0


class GeoPoint(BaseModel):
    """Latitude/longitude pair in degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)

    def to_shapely_point(self) -> Point:
        return Point(self.longitude, self.latitude)  # lon, lat == x, y


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle distance in meters between two points."""
    lat1 = radians(a.latitude)
    lon1 = radians(a.longitude)
    lat2 = radians(b.latitude)
    lon2 = radians(b.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * asin(min(1.0, sqrt(h)))


class GeoRectangle(BaseModel):
    """Latitude/longitude rectangle.

    When ``min_longitude > max_longitude`` the rectangle crosses the
    antimeridian and covers ``[min_longitude, 180] U [-180, max_longitude]``.
    """

    model_config = ConfigDict(frozen=True)

    min_latitude: float = Field(..., ge=-90.0, le=90.0)
    min_longitude: float = Field(..., ge=-180.0, le=180.0)
    max_latitude: float = Field(..., ge=-90.0, le=90.0)
    max_longitude: float = Field(..., ge=-180.0, le=180.0)

    @model_validator(mode="after")
    def check_latitudes(self) -> "GeoRectangle":
        if self.min_latitude > self.max_latitude:
            raise ValueError("min_latitude must not exceed max_latitude")
        return self

    @property
    def crosses_antimeridian(self) -> bool:
        return self.min_longitude > self.max_longitude

    @classmethod
    def around(cls, center: GeoPoint, radius_m: float) -> "GeoRectangle":
        """Smallest lat/lng rectangle containing the circle ``(center, radius_m)``."""
        angular = radius_m / EARTH_RADIUS_METERS
        lat_delta = degrees(angular)
        min_lat = center.latitude - lat_delta
        max_lat = center.latitude + lat_delta

        if min_lat <= -90.0 or max_lat >= 90.0:
            # A pole is inside the circle
            return cls(min_latitude=max(min_lat, -90.0), min_longitude=-180.0,
                       max_latitude=min(max_lat, 90.0), max_longitude=180.0)

        lng_delta = degrees(asin(min(1.0, sin(angular) / cos(radians(center.latitude)))))
        if lng_delta >= 180.0:
            min_lng, max_lng = -180.0, 180.0
        else:
            min_lng = _wrap_longitude(center.longitude - lng_delta)
            max_lng = _wrap_longitude(center.longitude + lng_delta)
        return cls(min_latitude=min_lat, min_longitude=min_lng,
                   max_latitude=max_lat, max_longitude=max_lng)

    def contains_point(self, point: GeoPoint) -> bool:
        """Boundary-inclusive containment test."""
        shapely_point = point.to_shapely_point()
        if not self.crosses_antimeridian:
            return box(self.min_longitude, self.min_latitude,
                       self.max_longitude, self.max_latitude).covers(shapely_point)
        east = box(self.min_longitude, self.min_latitude, 180.0, self.max_latitude)
        west = box(-180.0, self.min_latitude, self.max_longitude, self.max_latitude)
        return east.covers(shapely_point) or west.covers(shapely_point)


def _wrap_longitude(longitude: float) -> float:
    if longitude > 180.0:
        return longitude - 360.0
    if longitude < -180.0:
        return longitude + 360.0
    return longitude


class CoordinateAttributes(BaseModel):
    """Where an item stores its coordinates.

    Items either carry a GeoJSON point string (``{"type": "Point",
    "coordinates": [lng, lat]}``) in ``geo_json_attribute`` or separate
    latitude/longitude attributes. The GeoJSON attribute wins when present.
    """

    model_config = ConfigDict(frozen=True)

    geo_json_attribute: Optional[str] = "geoJson"
    latitude_attribute: Optional[str] = "latitude"
    longitude_attribute: Optional[str] = "longitude"

    def point_for(self, item: Mapping[str, Any]) -> Optional[GeoPoint]:
        """Read the item's location, or None when it has no readable coordinates."""
        try:
            if self.geo_json_attribute and item.get(self.geo_json_attribute) is not None:
                geo_json = item[self.geo_json_attribute]
                if isinstance(geo_json, str):
                    geo_json = json.loads(geo_json)
                longitude, latitude = geo_json["coordinates"][:2]
            elif (self.latitude_attribute and self.longitude_attribute
                  and self.latitude_attribute in item and self.longitude_attribute in item):
                latitude = item[self.latitude_attribute]
                longitude = item[self.longitude_attribute]
            else:
                return None
            return GeoPoint(latitude=float(latitude), longitude=float(longitude))
        except (ValueError, TypeError, KeyError) as e:
            logger.debug(f"Unreadable coordinates in item: {e}")
            return None
