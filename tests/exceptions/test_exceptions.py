"""
Unit tests for custom exceptions module.

This module contains tests for the exception hierarchy, context handling and
the failure details carried by partition execution errors.
"""

import pytest
from dynamo_geo.exceptions import (
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


class TestGeoQueryBaseException:
    """Test suite for GeoQueryBaseException class."""

    def test_base_exception_without_context(self):
        """Test GeoQueryBaseException without context."""
        exception = GeoQueryBaseException("Test error message")

        assert str(exception) == "Test error message"
        assert exception.message == "Test error message"
        assert exception.context == {}

    def test_base_exception_with_context(self):
        """Test GeoQueryBaseException with context."""
        context = {"table": "geo-points", "index": "geohash-index"}
        exception = GeoQueryBaseException("Test error message", context)

        assert exception.context == context
        assert str(exception) == "Test error message (Context: table=geo-points, index=geohash-index)"

    def test_base_exception_with_none_context(self):
        """Test GeoQueryBaseException with None context."""
        exception = GeoQueryBaseException("Test error message", None)

        assert str(exception) == "Test error message"
        assert exception.context == {}


class TestExceptionHierarchy:
    """Test suite for the exception class hierarchy."""

    @pytest.mark.parametrize("exception_class,parent_class", [
        (GeoConfigurationError, GeoQueryBaseException),
        (InvalidConfigurationError, GeoConfigurationError),
        (GeoValidationError, GeoQueryBaseException),
        (InvalidRangeError, GeoValidationError),
        (GeoConnectionError, GeoQueryBaseException),
        (GeoQueryExecutionError, GeoQueryBaseException),
        (StoreQueryError, GeoQueryExecutionError),
        (PoolRejectedError, GeoQueryExecutionError),
        (QueryInterruptedError, GeoQueryExecutionError),
    ])
    def test_inheritance(self, exception_class, parent_class):
        """Test every exception derives from its family."""
        exception = exception_class("error")

        assert isinstance(exception, parent_class)
        assert isinstance(exception, Exception)

    def test_invalid_range_is_not_value_error(self):
        """Test range errors are not swallowed by pydantic's ValueError wrapping."""
        assert not issubclass(InvalidRangeError, ValueError)

    def test_execution_errors_caught_as_base(self):
        """Test execution errors can be caught as GeoQueryBaseException."""
        with pytest.raises(GeoQueryBaseException) as exc_info:
            raise PoolRejectedError("pool shut down", {"partition": 3})

        assert isinstance(exc_info.value, GeoQueryExecutionError)
        assert "partition=3" in str(exc_info.value)


class TestPartitionQueryFailedError:
    """Test suite for PartitionQueryFailedError class."""

    def test_failure_details(self):
        """Test partition, counts and context are exposed."""
        exception = PartitionQueryFailedError("Partition query failed", partition=2,
                                              succeeded_count=5, failed_count=2)

        assert exception.partition == 2
        assert exception.succeeded_count == 5
        assert exception.failed_count == 2
        assert exception.context == {"partition": 2, "succeeded": 5, "failed": 2}

    def test_default_failed_count(self):
        exception = PartitionQueryFailedError("Partition query failed", partition=0, succeeded_count=0)

        assert exception.failed_count == 1

    def test_extra_context_is_kept(self):
        """Test caller context is merged without being mutated."""
        context = {"hash_key": "cafe:10"}
        exception = PartitionQueryFailedError("Partition query failed", partition=1,
                                              succeeded_count=3, context=context)

        assert exception.context["hash_key"] == "cafe:10"
        assert exception.context["partition"] == 1
        assert context == {"hash_key": "cafe:10"}

    def test_cause_is_chained(self):
        """Test the underlying store error is available as __cause__."""
        cause = StoreQueryError("throttled")

        with pytest.raises(PartitionQueryFailedError) as exc_info:
            try:
                raise cause
            except StoreQueryError as e:
                raise PartitionQueryFailedError(str(e), partition=0, succeeded_count=0) from e

        assert exc_info.value.__cause__ is cause
