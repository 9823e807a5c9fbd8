"""Geo Query Data Models

Pydantic models for the geo attribute layout, geohash ranges, query
templates, per-partition queries and query plans.
"""

from .geohash_range import GeohashRange
from .geo_config import GeoConfig, HashKeyDecorator, make_separator_decorator
from .query_models import (
    QueryFlavor,
    QueryTemplate,
    HashKeyCondition,
    RangeKeyCondition,
    ConcretePartitionQuery,
    RESERVED_NAME_PLACEHOLDERS,
    RESERVED_VALUE_PLACEHOLDERS,
)
from .query_plan import GeoQueryPlan, ExecutionSummary

__all__ = [
    'GeohashRange',
    'GeoConfig',
    'HashKeyDecorator',
    'make_separator_decorator',
    'QueryFlavor',
    'QueryTemplate',
    'HashKeyCondition',
    'RangeKeyCondition',
    'ConcretePartitionQuery',
    'RESERVED_NAME_PLACEHOLDERS',
    'RESERVED_VALUE_PLACEHOLDERS',
    'GeoQueryPlan',
    'ExecutionSummary',
]
