"""Geo Query Processor

Composes covering, splitting, query building and filtering into query plans.
"""

from .geo_query_service import GeoQueryService

__all__ = ['GeoQueryService']
