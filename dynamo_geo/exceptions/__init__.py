"""
Custom exceptions for the DynamoDB Geo Query system.

This module provides domain-specific exception classes for error handling
and debugging throughout the system.
"""

from .custom_exceptions import (
    GeoQueryBaseException,
    GeoConfigurationError,
    InvalidConfigurationError,
    GeoValidationError,
    InvalidRangeError,
    GeoConnectionError,
    GeoQueryExecutionError,
    StoreQueryError,
    PartitionQueryFailedError,
    PoolRejectedError,
    QueryInterruptedError,
)

__all__ = [
    "GeoQueryBaseException",
    "GeoConfigurationError",
    "InvalidConfigurationError",
    "GeoValidationError",
    "InvalidRangeError",
    "GeoConnectionError",
    "GeoQueryExecutionError",
    "StoreQueryError",
    "PartitionQueryFailedError",
    "PoolRejectedError",
    "QueryInterruptedError",
]
