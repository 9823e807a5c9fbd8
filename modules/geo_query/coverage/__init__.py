"""Geohash range covering: coarse covering contract and hash-key splitting."""

from .range_coverer import GeohashRangeCoverer, FixedRangeCoverer

__all__ = ['GeohashRangeCoverer', 'FixedRangeCoverer']
