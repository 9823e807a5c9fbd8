"""Client-side result filters.

The coarse geohash partitioning returns every item inside the covering cells,
so the unioned result of a plan is a superset of the true matches. A filter
removes those false positives. Filters form a closed, tagged variant tree:

- ``RectangleFilter``: item lies inside a lat/lng rectangle
- ``RadiusFilter``: item lies within a great-circle distance of a center
- ``CompositeFilter``: AND / OR / NOT of other filters

Filters are frozen pydantic models. They hold no per-call state and never
mutate the items they inspect, so one instance can be shared by concurrent
plans.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterable, List, Literal, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .geometry import CoordinateAttributes, GeoPoint, GeoRectangle, haversine_m

logger = logging.getLogger(__name__)

Item = Mapping[str, Any]


class FilterOperator(str, Enum):
    """Logical operator of a CompositeFilter."""
    AND = "and"
    OR = "or"
    NOT = "not"


class BaseGeoFilter(BaseModel, ABC):
    """Contract shared by every filter variant."""

    model_config = ConfigDict(frozen=True)

    @abstractmethod
    def contains(self, item: Item) -> bool:
        """Whether the item belongs to the requested shape."""

    def filter(self, items: Iterable[Item]) -> List[Item]:
        """Keep the items accepted by ``contains``, preserving their order."""
        return [item for item in items if self.contains(item)]


class RectangleFilter(BaseGeoFilter):
    """Accept items located inside a lat/lng rectangle (boundary inclusive)."""

    kind: Literal["rectangle"] = "rectangle"
    rectangle: GeoRectangle
    coordinates: CoordinateAttributes = Field(default_factory=CoordinateAttributes)

    def contains(self, item: Item) -> bool:
        point = self.coordinates.point_for(item)
        return point is not None and self.rectangle.contains_point(point)


class RadiusFilter(BaseGeoFilter):
    """Accept items within ``radius_m`` meters of ``center``."""

    kind: Literal["radius"] = "radius"
    center: GeoPoint
    radius_m: float = Field(..., gt=0)
    coordinates: CoordinateAttributes = Field(default_factory=CoordinateAttributes)

    def contains(self, item: Item) -> bool:
        point = self.coordinates.point_for(item)
        return point is not None and haversine_m(self.center, point) <= self.radius_m


class CompositeFilter(BaseGeoFilter):
    """Logical combination of other filters."""

    kind: Literal["composite"] = "composite"
    operator: FilterOperator
    operands: Tuple[BaseGeoFilter, ...]

    @model_validator(mode="after")
    def check_arity(self) -> "CompositeFilter":
        if self.operator == FilterOperator.NOT and len(self.operands) != 1:
            raise ValueError("NOT takes exactly one operand")
        if not self.operands:
            raise ValueError(f"{self.operator.value.upper()} needs at least one operand")
        return self

    @classmethod
    def all_of(cls, *operands: BaseGeoFilter) -> "CompositeFilter":
        return cls(operator=FilterOperator.AND, operands=operands)

    @classmethod
    def any_of(cls, *operands: BaseGeoFilter) -> "CompositeFilter":
        return cls(operator=FilterOperator.OR, operands=operands)

    @classmethod
    def negate(cls, operand: BaseGeoFilter) -> "CompositeFilter":
        return cls(operator=FilterOperator.NOT, operands=(operand,))

    def contains(self, item: Item) -> bool:
        if self.operator == FilterOperator.AND:
            return all(operand.contains(item) for operand in self.operands)
        if self.operator == FilterOperator.OR:
            return any(operand.contains(item) for operand in self.operands)
        return not self.operands[0].contains(item)
