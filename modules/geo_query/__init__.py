"""Geo Query Module

Fans a rectangle or radius query out over geohash-partitioned DynamoDB range
queries, runs them concurrently and filters the merged results down to the
items inside the requested shape.
"""

from .coverage import GeohashRangeCoverer, FixedRangeCoverer
from .execution import QueryExecutor, DynamoDBQueryExecutor, ParallelQueryExecutor
from .filters import (
    CompositeFilter,
    CoordinateAttributes,
    FilterOperator,
    GeoPoint,
    GeoRectangle,
    RadiusFilter,
    RectangleFilter,
)
from .models import (
    ConcretePartitionQuery,
    ExecutionSummary,
    GeoConfig,
    GeohashRange,
    GeoQueryPlan,
    QueryFlavor,
    QueryTemplate,
)
from .processor import GeoQueryService
from .query_builder import QueryTemplateBuilder

__all__ = [
    'GeohashRangeCoverer',
    'FixedRangeCoverer',
    'QueryExecutor',
    'DynamoDBQueryExecutor',
    'ParallelQueryExecutor',
    'CompositeFilter',
    'CoordinateAttributes',
    'FilterOperator',
    'GeoPoint',
    'GeoRectangle',
    'RadiusFilter',
    'RectangleFilter',
    'ConcretePartitionQuery',
    'ExecutionSummary',
    'GeoConfig',
    'GeohashRange',
    'GeoQueryPlan',
    'QueryFlavor',
    'QueryTemplate',
    'GeoQueryService',
    'QueryTemplateBuilder',
]

__version__ = "1.0.0"
