"""Geo Query Service

Composition of the geo query pipeline: a region is covered with coarse
geohash ranges, each coarse range is split at hash-key boundaries, the fine
ranges are turned into partition queries, and the queries are paired with
the filter of the requested shape in a GeoQueryPlan.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from dynamo_geo.utils import log_performance

from ..coverage import GeohashRangeCoverer
from ..execution import ParallelQueryExecutor
from ..filters import (
    BaseGeoFilter,
    CoordinateAttributes,
    GeoPoint,
    GeoRectangle,
    RadiusFilter,
    RectangleFilter,
)
from ..models import (
    ConcretePartitionQuery,
    GeoConfig,
    GeohashRange,
    GeoQueryPlan,
    QueryFlavor,
    QueryTemplate,
)
from ..query_builder import QueryTemplateBuilder

logger = logging.getLogger(__name__)


class GeoQueryService:
    """Builds geo query plans for rectangle and radius queries.

    The service is stateless apart from its collaborators and may be shared
    across threads.
    """

    def __init__(self, config: GeoConfig, coverer: GeohashRangeCoverer,
                 flavor: QueryFlavor = QueryFlavor.REQUEST,
                 coordinates: Optional[CoordinateAttributes] = None):
        """Initialize the service.

        Args:
            config: Geo attribute layout of the target table
            coverer: Covers regions with geohash ranges and derives hash keys
            flavor: Shape of the generated partition queries
            coordinates: Where items store their location, used by the result filters
        """
        self.config = config
        self.coverer = coverer
        self.flavor = flavor
        self.coordinates = coordinates or CoordinateAttributes()
        self.builder = QueryTemplateBuilder(coverer)

    def fine_ranges(self, region: GeoRectangle) -> List[GeohashRange]:
        """Cover the region and split every coarse range to the hash key length."""
        coarse_ranges = self.coverer.cover(region)
        fine = [
            fine_range
            for coarse_range in coarse_ranges
            for fine_range in coarse_range.try_split(self.config.hash_key_length, self.coverer)
        ]
        logger.debug(f"Covered region with {len(coarse_ranges)} coarse ranges, "
                     f"{len(fine)} after splitting")
        return fine

    def generate_queries(self, template: QueryTemplate, region: GeoRectangle,
                         discriminator: Optional[str] = None) -> Tuple[ConcretePartitionQuery, ...]:
        """Partition queries covering the region, in covering order."""
        ranges = self.fine_ranges(region)
        return tuple(self.builder.build(template, ranges, self.config, discriminator, self.flavor))

    def rectangle_query(self, template: QueryTemplate, rectangle: GeoRectangle,
                        discriminator: Optional[str] = None) -> GeoQueryPlan:
        """Plan for the items inside ``rectangle``."""
        result_filter = RectangleFilter(rectangle=rectangle, coordinates=self.coordinates)
        return self._plan(template, rectangle, result_filter, discriminator)

    def radius_query(self, template: QueryTemplate, center: GeoPoint, radius_m: float,
                     discriminator: Optional[str] = None) -> GeoQueryPlan:
        """Plan for the items within ``radius_m`` meters of ``center``."""
        result_filter = RadiusFilter(center=center, radius_m=radius_m, coordinates=self.coordinates)
        bounding_box = GeoRectangle.around(center, radius_m)
        return self._plan(template, bounding_box, result_filter, discriminator)

    @log_performance
    def query_rectangle(self, executor: ParallelQueryExecutor, template: QueryTemplate,
                        rectangle: GeoRectangle,
                        discriminator: Optional[str] = None) -> List[Dict[str, Any]]:
        """Plan and run a rectangle query."""
        return executor.execute(self.rectangle_query(template, rectangle, discriminator))

    @log_performance
    def query_radius(self, executor: ParallelQueryExecutor, template: QueryTemplate,
                     center: GeoPoint, radius_m: float,
                     discriminator: Optional[str] = None) -> List[Dict[str, Any]]:
        """Plan and run a radius query."""
        return executor.execute(self.radius_query(template, center, radius_m, discriminator))

    def _plan(self, template: QueryTemplate, region: GeoRectangle, result_filter: BaseGeoFilter,
              discriminator: Optional[str]) -> GeoQueryPlan:
        queries = self.generate_queries(template, region, discriminator)
        logger.info(f"Generated {len(queries)} partition queries for {result_filter.kind} query "
                    f"on {template.table_name}")
        return GeoQueryPlan(queries=queries, result_filter=result_filter)
