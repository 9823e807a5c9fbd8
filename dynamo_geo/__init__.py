"""
DynamoDB Geo Query Core Package

This package contains the shared infrastructure for the geo query system:
configuration loading, the exception hierarchy, logging setup and the
DynamoDB connection layer used by the query modules.
"""

from .exceptions import GeoQueryBaseException

__version__ = "1.0.0"
__all__ = ['GeoQueryBaseException']
