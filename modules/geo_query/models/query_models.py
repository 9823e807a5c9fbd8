"""Query Models for Geo Query Fan-out

Pydantic models for the caller-owned query template and the per-partition
queries generated from it. All models are frozen: a concrete partition query
is built once by the query builder and never mutated afterwards, so it can be
handed to any worker thread without locking.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dynamo_geo.exceptions import InvalidRangeError

HASH_KEY_NAME_PLACEHOLDER = "#geo_hash_key"
HASH_KEY_VALUE_PLACEHOLDER = ":geo_hash_key"
RANGE_KEY_NAME_PLACEHOLDER = "#geo_range_key"
RANGE_MIN_VALUE_PLACEHOLDER = ":geo_range_min"
RANGE_MAX_VALUE_PLACEHOLDER = ":geo_range_max"

RESERVED_NAME_PLACEHOLDERS = frozenset([HASH_KEY_NAME_PLACEHOLDER, RANGE_KEY_NAME_PLACEHOLDER])
RESERVED_VALUE_PLACEHOLDERS = frozenset([
    HASH_KEY_VALUE_PLACEHOLDER, RANGE_MIN_VALUE_PLACEHOLDER, RANGE_MAX_VALUE_PLACEHOLDER
])


class QueryFlavor(str, Enum):
    """Shape of the generated partition queries."""
    REQUEST = "request"  # geo index name attached explicitly from GeoConfig
    SPEC = "spec"  # template index reference kept as-is


class QueryTemplate(BaseModel):
    """Caller-owned base query cloned into every partition query.

    Field names follow the DynamoDB Query API. The key condition is never part
    of the template; it is generated per partition.
    """

    model_config = ConfigDict(frozen=True)

    table_name: str = Field(..., min_length=1, description="Table the query targets")
    index_name: Optional[str] = Field(None, description="Index reference used by the SPEC flavor")
    projection_expression: Optional[str] = Field(None, description="Attributes to return")
    attributes_to_get: Optional[List[str]] = Field(None, description="Legacy attribute projection")
    select: Optional[str] = Field(None, description="ALL_ATTRIBUTES, ALL_PROJECTED_ATTRIBUTES, SPECIFIC_ATTRIBUTES or COUNT")
    filter_expression: Optional[str] = Field(None, description="Opaque store-side post-filter expression")
    expression_attribute_names: Dict[str, str] = Field(default_factory=dict)
    expression_attribute_values: Dict[str, Any] = Field(default_factory=dict)
    limit: Optional[int] = Field(None, ge=1, description="Maximum items evaluated per page")
    consistent_read: bool = Field(False)
    scan_index_forward: bool = Field(True)
    return_consumed_capacity: Optional[str] = Field(None)
    exclusive_start_key: Optional[Dict[str, Any]] = Field(None)

    def clone(self) -> "QueryTemplate":
        """Deep copy so mutable collections are never shared between partitions."""
        return self.model_copy(deep=True)


class HashKeyCondition(BaseModel):
    """Equality condition on the partition key."""

    model_config = ConfigDict(frozen=True)

    column: str
    value: Union[int, str]


class RangeKeyCondition(BaseModel):
    """``BETWEEN min AND max`` condition on the geohash sort key."""

    model_config = ConfigDict(frozen=True)

    column: str
    min: int
    max: int

    @model_validator(mode="after")
    def check_bounds(self) -> "RangeKeyCondition":
        if self.min > self.max:
            raise InvalidRangeError(
                "Range key condition minimum is greater than maximum",
                {"column": self.column, "min": self.min, "max": self.max},
            )
        return self


class ConcretePartitionQuery(BaseModel):
    """One partition-scoped query: a template clone plus resolved key conditions."""

    model_config = ConfigDict(frozen=True)

    partition: int = Field(..., ge=0, description="Submission ordinal within the plan")
    template: QueryTemplate
    hash_key: HashKeyCondition
    range_key: RangeKeyCondition
    index_name: Optional[str] = Field(None, description="Index the query runs against")
    flavor: QueryFlavor = QueryFlavor.REQUEST

    def key_condition_expression(self) -> str:
        return (
            f"{HASH_KEY_NAME_PLACEHOLDER} = {HASH_KEY_VALUE_PLACEHOLDER} AND "
            f"{RANGE_KEY_NAME_PLACEHOLDER} BETWEEN "
            f"{RANGE_MIN_VALUE_PLACEHOLDER} AND {RANGE_MAX_VALUE_PLACEHOLDER}"
        )

    def to_query_kwargs(self) -> Dict[str, Any]:
        """Render keyword arguments for boto3 ``Table.query``.

        Returns fresh dictionaries on every call; the template's expression
        maps are copied before the key placeholders are added.
        """
        template = self.template
        names = dict(template.expression_attribute_names)
        names[HASH_KEY_NAME_PLACEHOLDER] = self.hash_key.column
        names[RANGE_KEY_NAME_PLACEHOLDER] = self.range_key.column

        values = dict(template.expression_attribute_values)
        values[HASH_KEY_VALUE_PLACEHOLDER] = self.hash_key.value
        values[RANGE_MIN_VALUE_PLACEHOLDER] = self.range_key.min
        values[RANGE_MAX_VALUE_PLACEHOLDER] = self.range_key.max

        kwargs: Dict[str, Any] = {
            "KeyConditionExpression": self.key_condition_expression(),
            "ExpressionAttributeNames": names,
            "ExpressionAttributeValues": values,
            "ConsistentRead": template.consistent_read,
            "ScanIndexForward": template.scan_index_forward,
        }
        optional = {
            "IndexName": self.index_name,
            "ProjectionExpression": template.projection_expression,
            "AttributesToGet": list(template.attributes_to_get) if template.attributes_to_get else None,
            "Select": template.select,
            "FilterExpression": template.filter_expression,
            "Limit": template.limit,
            "ReturnConsumedCapacity": template.return_consumed_capacity,
            "ExclusiveStartKey": dict(template.exclusive_start_key) if template.exclusive_start_key else None,
        }
        kwargs.update({key: value for key, value in optional.items() if value is not None})
        return kwargs

    def describe(self) -> Dict[str, Any]:
        """Compact description used in logs and CLI output."""
        return {
            "partition": self.partition,
            "table": self.template.table_name,
            "index": self.index_name,
            "hash_key": {self.hash_key.column: self.hash_key.value},
            "range_key": {self.range_key.column: [self.range_key.min, self.range_key.max]},
        }
