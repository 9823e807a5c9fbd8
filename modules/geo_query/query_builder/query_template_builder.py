"""Query Template Builder

Turns one caller-supplied query template and a list of fine-grained geohash
ranges into one concrete partition query per range. Every partition query
is constructed in one step from a deep copy of the template, so the caller's
template is never touched and no partially built query is ever visible.
"""

import logging
from typing import List, Optional, Sequence, Union

from dynamo_geo.exceptions import GeoValidationError, InvalidConfigurationError, InvalidRangeError

from ..coverage import GeohashRangeCoverer
from ..models import (
    ConcretePartitionQuery,
    GeoConfig,
    GeohashRange,
    HashKeyCondition,
    QueryFlavor,
    QueryTemplate,
    RangeKeyCondition,
    RESERVED_NAME_PLACEHOLDERS,
    RESERVED_VALUE_PLACEHOLDERS,
)

logger = logging.getLogger(__name__)


class QueryTemplateBuilder:
    """Builds per-partition queries from a template and geohash ranges.

    The hash key of each partition is derived from the range minimum through
    the coverer's hashing scheme, optionally decorated into a composite key
    with a discriminator value.
    """

    def __init__(self, coverer: GeohashRangeCoverer):
        """Initialize the builder.

        Args:
            coverer: Provides ``hash_key_for`` for the partition key derivation
        """
        self.coverer = coverer

    def build(self, template: QueryTemplate, ranges: Sequence[GeohashRange], config: GeoConfig,
              discriminator: Optional[str] = None,
              flavor: QueryFlavor = QueryFlavor.REQUEST) -> List[ConcretePartitionQuery]:
        """Build one concrete query per range, in input order.

        Args:
            template: Caller-owned base query, cloned for every partition
            ranges: Geohash ranges already split to ``config.hash_key_length``
            config: Geo attribute layout
            discriminator: Value combined into a composite hash key
            flavor: REQUEST attaches ``config.index_name``; SPEC keeps the template's index

        Returns:
            List with exactly one ConcretePartitionQuery per input range

        Raises:
            InvalidConfigurationError: Composite keys are required and no discriminator was given
            InvalidRangeError: A range has ``min > max``
            GeoValidationError: The template uses a reserved key placeholder
        """
        self._validate_inputs(template, ranges, config, discriminator)

        queries = [
            self._build_partition_query(partition, template, geohash_range, config, discriminator, flavor)
            for partition, geohash_range in enumerate(ranges)
        ]

        logger.debug(f"Built {len(queries)} partition queries for table {template.table_name} "
                     f"({flavor.value} flavor, composite={self._use_composite_key(config, discriminator)})")
        return queries

    def _validate_inputs(self, template: QueryTemplate, ranges: Sequence[GeohashRange],
                         config: GeoConfig, discriminator: Optional[str]) -> None:
        if config.composite_key_required and not discriminator:
            raise InvalidConfigurationError(
                "A discriminator value is required to build composite hash keys",
                {"hash_key_column": config.hash_key_column},
            )

        for position, geohash_range in enumerate(ranges):
            if geohash_range.min > geohash_range.max:
                raise InvalidRangeError(
                    "Geohash range minimum is greater than maximum",
                    {"position": position, "min": geohash_range.min, "max": geohash_range.max},
                )

        clashing = (RESERVED_NAME_PLACEHOLDERS & set(template.expression_attribute_names)) | \
            (RESERVED_VALUE_PLACEHOLDERS & set(template.expression_attribute_values))
        if clashing:
            raise GeoValidationError(
                "Query template uses placeholders reserved for the geo key condition",
                {"placeholders": sorted(clashing)},
            )

    def _use_composite_key(self, config: GeoConfig, discriminator: Optional[str]) -> bool:
        return config.uses_composite_keys and bool(discriminator)

    def _hash_key_value(self, geohash_range: GeohashRange, config: GeoConfig,
                        discriminator: Optional[str]) -> Union[int, str]:
        raw_hash_key = self.coverer.hash_key_for(geohash_range.min, config.hash_key_length)
        if self._use_composite_key(config, discriminator):
            return config.hash_key_decorator(discriminator, raw_hash_key)
        return raw_hash_key

    def _build_partition_query(self, partition: int, template: QueryTemplate,
                               geohash_range: GeohashRange, config: GeoConfig,
                               discriminator: Optional[str],
                               flavor: QueryFlavor) -> ConcretePartitionQuery:
        clone = template.clone()
        index_name = config.index_name if flavor == QueryFlavor.REQUEST else clone.index_name
        return ConcretePartitionQuery(
            partition=partition,
            template=clone,
            hash_key=HashKeyCondition(
                column=config.hash_key_column,
                value=self._hash_key_value(geohash_range, config, discriminator),
            ),
            range_key=RangeKeyCondition(
                column=config.range_key_column,
                min=geohash_range.min,
                max=geohash_range.max,
            ),
            index_name=index_name,
            flavor=flavor,
        )
