"""Geohash range model.

A geohash range is a contiguous interval of integer-encoded cell identifiers
used as the sort-key condition of one partition query.
"""

from typing import TYPE_CHECKING, List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dynamo_geo.exceptions import InvalidRangeError

if TYPE_CHECKING:
    from ..coverage import GeohashRangeCoverer


class GeohashRange(BaseModel):
    """Inclusive interval ``[min, max]`` of geohash sort-key values."""

    model_config = ConfigDict(frozen=True)

    min: int = Field(..., description="Lowest geohash value in the range (inclusive)")
    max: int = Field(..., description="Highest geohash value in the range (inclusive)")

    @model_validator(mode="after")
    def check_bounds(self) -> "GeohashRange":
        if self.min > self.max:
            raise InvalidRangeError(
                "Geohash range minimum is greater than maximum",
                {"min": self.min, "max": self.max},
            )
        return self

    @property
    def span(self) -> int:
        """Number of geohash values covered by the range."""
        return self.max - self.min + 1

    def try_split(self, hash_key_length: int, coverer: "GeohashRangeCoverer") -> List["GeohashRange"]:
        """Split into key-length-aligned sub-ranges using the coverer's hashing scheme."""
        return coverer.split(self, hash_key_length)

    def __str__(self) -> str:
        return f"[{self.min},{self.max}]"
