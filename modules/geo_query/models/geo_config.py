"""Geo attribute layout of the target table.

GeoConfig describes which columns hold the partition (hash) key and the
geohash sort key, which global secondary index serves geo queries, how long
the hash key prefix is, and optionally how a composite hash key is formed
from an application-level discriminator (e.g. a category).
"""

from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dynamo_geo.exceptions import InvalidConfigurationError

HashKeyDecorator = Callable[[str, int], str]


def make_separator_decorator(separator: str) -> HashKeyDecorator:
    """Build a decorator producing ``"<discriminator><separator><hash key>"``."""
    def decorate(discriminator: str, hash_key: int) -> str:
        return f"{discriminator}{separator}{hash_key}"

    return decorate


class GeoConfig(BaseModel):
    """Immutable geo attribute layout shared read-only across all queries."""

    model_config = ConfigDict(frozen=True)

    hash_key_column: str = Field(..., min_length=1, description="Partition key attribute of the geo index")
    range_key_column: str = Field(..., min_length=1, description="Geohash sort key attribute of the geo index")
    index_name: str = Field(..., min_length=1, description="Global secondary index used for geo queries")
    hash_key_length: int = Field(..., ge=1, description="Number of leading geohash digits forming the hash key")
    hash_key_decorator: Optional[HashKeyDecorator] = Field(
        None, description="Combines a discriminator with the raw hash key into a composite key"
    )
    composite_key_required: bool = Field(
        False, description="Reject queries without a discriminator instead of using the raw hash key"
    )

    @model_validator(mode="after")
    def check_composite_key(self) -> "GeoConfig":
        if self.composite_key_required and self.hash_key_decorator is None:
            raise InvalidConfigurationError(
                "Composite hash keys are required but no hash key decorator is configured",
                {"hash_key_column": self.hash_key_column},
            )
        return self

    @property
    def uses_composite_keys(self) -> bool:
        return self.hash_key_decorator is not None

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "GeoConfig":
        """Create a GeoConfig from the ``geo`` section of the environment configuration.

        A ``composite_key_separator`` entry installs a separator decorator.
        """
        separator = settings.get("composite_key_separator")
        decorator = make_separator_decorator(separator) if separator else None
        return cls(
            hash_key_column=settings.get("hash_key_column"),
            range_key_column=settings.get("range_key_column"),
            index_name=settings.get("index_name"),
            hash_key_length=settings.get("hash_key_length"),
            hash_key_decorator=decorator,
            composite_key_required=settings.get("composite_key_required", False),
        )
