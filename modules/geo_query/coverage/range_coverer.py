"""Geohash range covering contract.

Covering a lat/lng region with cell ranges is cell-hierarchy math (S2) that
lives outside this package; ``cover`` is abstract. The hash-key scheme used
by DynamoDB geo tables is decimal: the hash key of a geohash is its leading
``hash_key_length`` digits. ``hash_key_for`` and ``split`` implement that
scheme and may be overridden by coverers with a different key layout.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List

from ..filters import GeoRectangle
from ..models import GeohashRange

logger = logging.getLogger(__name__)


class GeohashRangeCoverer(ABC):
    """Produces the geohash ranges a query fans out over."""

    @abstractmethod
    def cover(self, region: GeoRectangle) -> List[GeohashRange]:
        """Ordered coarse ranges covering the region."""

    def hash_key_for(self, geohash: int, hash_key_length: int) -> int:
        """Leading ``hash_key_length`` digits of ``geohash`` (sign preserved)."""
        if geohash < 0:
            # The minus sign counts as a digit
            hash_key_length += 1
        digits = len(str(geohash))
        if digits <= hash_key_length:
            return geohash
        denominator = 10 ** (digits - hash_key_length)
        quotient = abs(geohash) // denominator
        return -quotient if geohash < 0 else quotient

    def split(self, geohash_range: GeohashRange, hash_key_length: int) -> List[GeohashRange]:
        """Split a range at hash-key boundaries.

        The returned ranges are ordered, contiguous and exactly tile the input:
        each one holds values sharing a single hash key. The same hash key may
        appear in more than one piece (``10`` and ``100..109`` at key length 2).
        """
        result = []
        lower = geohash_range.min
        while lower <= geohash_range.max:
            upper = min(self._bucket_end(lower, hash_key_length), geohash_range.max)
            result.append(GeohashRange(min=lower, max=upper))
            lower = upper + 1

        logger.debug(f"Split {geohash_range} into {len(result)} ranges at key length {hash_key_length}")
        return result

    def _bucket_end(self, geohash: int, hash_key_length: int) -> int:
        """Largest value reachable upward from ``geohash`` without changing its hash key."""
        magnitude = abs(geohash)
        digits = len(str(magnitude))
        if digits <= hash_key_length:
            # Short values are their own hash key
            return geohash
        denominator = 10 ** (digits - hash_key_length)
        quotient = magnitude // denominator
        if geohash >= 0:
            return (quotient + 1) * denominator - 1
        return -quotient * denominator


class FixedRangeCoverer(GeohashRangeCoverer):
    """Coverer returning a precomputed covering regardless of the region.

    Useful when the covering is computed elsewhere (another service, a cache)
    and only the fan-out and execution run here.
    """

    def __init__(self, ranges: Iterable[GeohashRange]):
        self.ranges = tuple(ranges)

    def cover(self, region: GeoRectangle) -> List[GeohashRange]:
        return list(self.ranges)
