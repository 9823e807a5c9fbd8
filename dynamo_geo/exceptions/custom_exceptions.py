"""
Custom exception classes for the DynamoDB Geo Query system.

This module defines domain-specific exceptions to provide clear error handling
and debugging information for query planning and partitioned execution.
"""

from typing import Optional, Dict, Any


class GeoQueryBaseException(Exception):
    """Base exception class for all geo query exceptions."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class GeoConfigurationError(GeoQueryBaseException):
    """
    Exception raised when configuration loading or validation fails.

    This exception is raised when:
    - Configuration files are missing or invalid
    - Environment configuration is malformed
    - Required configuration values are missing
    """
    pass


class InvalidConfigurationError(GeoConfigurationError):
    """
    Exception raised when a geo configuration cannot produce a valid query.

    Raised when a composite hash key is required but no discriminator
    value was supplied, or when the geo attribute layout is inconsistent.
    """
    pass


class GeoValidationError(GeoQueryBaseException):
    """
    Exception raised when data validation fails.

    This exception is raised when:
    - Configuration structure validation fails
    - Query template validation fails
    - Required environment variables are missing
    """
    pass


class InvalidRangeError(GeoValidationError):
    """Exception raised when a geohash range is malformed (min > max)."""
    pass


class GeoConnectionError(GeoQueryBaseException):
    """
    Exception raised when the DynamoDB connection fails.

    This exception is raised when:
    - Network connection issues
    - Table or index unavailable
    - Credentials cannot be resolved
    """
    pass


class GeoQueryExecutionError(GeoQueryBaseException):
    """
    Exception raised when partitioned query execution fails.

    Base class for every failure raised while running a query plan.
    """
    pass


class StoreQueryError(GeoQueryExecutionError):
    """Transport or store-side failure surfaced by a single partition query."""
    pass


class PartitionQueryFailedError(GeoQueryExecutionError):
    """
    Exception raised when at least one partition query of a plan failed.

    Carries the first failed partition in submission order, how many sibling
    partitions completed successfully and how many failed. The underlying
    error is chained as ``__cause__``.
    """

    def __init__(self, message: str, partition: int, succeeded_count: int,
                 failed_count: int = 1, context: Optional[Dict[str, Any]] = None):
        context = dict(context or {})
        context.setdefault("partition", partition)
        context.setdefault("succeeded", succeeded_count)
        context.setdefault("failed", failed_count)
        super().__init__(message, context)
        self.partition = partition
        self.succeeded_count = succeeded_count
        self.failed_count = failed_count


class PoolRejectedError(GeoQueryExecutionError):
    """Exception raised when the worker pool refuses a submission."""
    pass


class QueryInterruptedError(GeoQueryExecutionError):
    """Exception raised when the caller is interrupted while waiting on partitions."""
    pass
