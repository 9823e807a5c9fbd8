"""Result filters and geometry primitives for geo query plans."""

from .geometry import (
    EARTH_RADIUS_METERS,
    CoordinateAttributes,
    GeoPoint,
    GeoRectangle,
    haversine_m,
)
from .geo_filters import (
    BaseGeoFilter,
    CompositeFilter,
    FilterOperator,
    RadiusFilter,
    RectangleFilter,
)

__all__ = [
    'EARTH_RADIUS_METERS',
    'CoordinateAttributes',
    'GeoPoint',
    'GeoRectangle',
    'haversine_m',
    'BaseGeoFilter',
    'CompositeFilter',
    'FilterOperator',
    'RadiusFilter',
    'RectangleFilter',
]
