"""
Tests for DynamoDBConnector class.

This module tests DynamoDB connection functionality including retry logic,
timeout handling, and geo index validation.
"""

import pytest
from unittest.mock import Mock, patch
from botocore.exceptions import ClientError, EndpointConnectionError
from tenacity import wait_none

from dynamo_geo.connection.dynamodb_connector import DynamoDBConnector
from dynamo_geo.exceptions import GeoConnectionError


class TestDynamoDBConnector:
    """Test cases for DynamoDBConnector class."""

    @pytest.fixture
    def mock_config_loader(self):
        """Create a mock ConfigLoader for testing."""
        mock_loader = Mock()
        mock_loader.get_dynamodb_settings.return_value = {
            "region_name": "ap-southeast-2",
            "table_name": "geo-points-dev",
            "endpoint_url": "http://localhost:8000",
            "connect_timeout_seconds": 5,
        }
        mock_loader.get_geo_settings.return_value = {"index_name": "geohash-index"}
        return mock_loader

    @pytest.fixture
    def connector(self, mock_config_loader):
        """Create a DynamoDBConnector instance for testing."""
        return DynamoDBConnector(mock_config_loader, "development")

    @pytest.fixture
    def mock_boto3(self):
        with patch("dynamo_geo.connection.dynamodb_connector.boto3") as mocked:
            yield mocked

    @pytest.fixture
    def mock_table(self, mock_boto3):
        table = Mock()
        table.table_status = "ACTIVE"
        table.global_secondary_indexes = [{"IndexName": "geohash-index"}]
        mock_boto3.session.Session.return_value.resource.return_value.Table.return_value = table
        return table

    @pytest.fixture
    def no_retry_wait(self):
        with patch.object(DynamoDBConnector._load_table.retry, "wait", wait_none()):
            yield

    def test_init(self, connector, mock_config_loader):
        """Test connector starts disconnected."""
        assert connector.config_loader is mock_config_loader
        assert connector.get_table() is None
        assert not connector.is_connected()

    def test_connect_success(self, connector, mock_boto3, mock_table):
        """Test successful connection to the configured table."""
        result = connector.connect()

        assert result is mock_table
        assert connector.is_connected()
        mock_table.load.assert_called_once()
        mock_boto3.session.Session.assert_called_once_with(region_name="ap-southeast-2",
                                                           profile_name=None)
        resource_call = mock_boto3.session.Session.return_value.resource.call_args
        assert resource_call.args == ("dynamodb",)
        assert resource_call.kwargs["endpoint_url"] == "http://localhost:8000"
        session_resource = mock_boto3.session.Session.return_value.resource.return_value
        session_resource.Table.assert_called_once_with("geo-points-dev")

    def test_client_config_timeouts(self, connector):
        """Test botocore timeouts and retries come from settings."""
        config = connector._build_client_config({"connect_timeout_seconds": 5, "max_attempts": 4})

        assert config.connect_timeout == 5
        assert config.read_timeout == 30
        assert config.retries == {"max_attempts": 4, "mode": "standard"}

    def test_connect_client_error(self, connector, mock_table):
        """Test store errors (missing table, bad credentials) become GeoConnectionError."""
        mock_table.load.side_effect = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "Requested resource not found"}},
            "DescribeTable",
        )

        with pytest.raises(GeoConnectionError) as exc_info:
            connector.connect()

        assert "Failed to connect to DynamoDB table" in str(exc_info.value)
        assert exc_info.value.context["table"] == "geo-points-dev"
        assert mock_table.load.call_count == 1
        assert not connector.is_connected()

    def test_connect_retries_endpoint_errors(self, connector, mock_table, no_retry_wait):
        """Test unreachable endpoints are retried then reported as a timeout."""
        mock_table.load.side_effect = EndpointConnectionError(endpoint_url="http://localhost:8000")

        with pytest.raises(GeoConnectionError) as exc_info:
            connector.connect()

        assert "Connection timeout" in str(exc_info.value)
        assert mock_table.load.call_count == 3

    def test_connect_recovers_after_retry(self, connector, mock_table, no_retry_wait):
        """Test a transient endpoint error followed by success."""
        mock_table.load.side_effect = [EndpointConnectionError(endpoint_url="http://localhost:8000"), None]

        assert connector.connect() is mock_table
        assert mock_table.load.call_count == 2

    def test_index_access_requires_connection(self, connector):
        with pytest.raises(GeoConnectionError, match="Not connected"):
            connector.test_index_access()

    def test_index_access(self, connector, mock_table):
        """Test the configured geo index is found on the table."""
        connector.connect()

        assert connector.test_index_access() == {"geohash-index": True}

    def test_index_access_missing_index(self, connector, mock_table):
        mock_table.global_secondary_indexes = None
        connector.connect()

        assert connector.test_index_access() == {"geohash-index": False}

    def test_disconnect(self, connector, mock_table):
        """Test disconnect drops the table resource."""
        connector.connect()
        connector.disconnect()

        assert not connector.is_connected()
        assert connector.get_table() is None
