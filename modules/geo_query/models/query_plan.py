"""Geo query plan and execution summary models."""

from datetime import datetime
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..filters import BaseGeoFilter
from .query_models import ConcretePartitionQuery


class GeoQueryPlan(BaseModel):
    """Unit of work handed to the executor.

    Couples the partition queries derived from a shape with the filter that
    removes the false positives of that same shape.
    """

    model_config = ConfigDict(frozen=True)

    queries: Tuple[ConcretePartitionQuery, ...] = Field(default_factory=tuple)
    result_filter: BaseGeoFilter

    @property
    def partition_count(self) -> int:
        return len(self.queries)

    def is_empty(self) -> bool:
        return not self.queries


class ExecutionSummary(BaseModel):
    """Metrics for one plan execution."""

    partitions: int = Field(ge=0, description="Number of partition queries executed")
    items_fetched: int = Field(ge=0, description="Items returned by the store before filtering")
    items_returned: int = Field(ge=0, description="Items left after the result filter")
    duration_seconds: float = Field(ge=0, description="Wall-clock time of the execution")
    completed_at: datetime = Field(default_factory=datetime.now)

    def get_false_positive_rate(self) -> float:
        """Share of fetched items discarded by the filter."""
        if self.items_fetched == 0:
            return 0.0
        return (self.items_fetched - self.items_returned) / self.items_fetched

    def get_processing_summary(self) -> str:
        return (f"{self.partitions} partitions, {self.items_fetched} items fetched, "
                f"{self.items_returned} returned in {self.duration_seconds:.3f}s "
                f"({self.get_false_positive_rate() * 100:.1f}% filtered)")
