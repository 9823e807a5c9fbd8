"""
DynamoDB connector for the geo query system.

This module provides DynamoDB table connectivity with retry logic and
timeout handling, plus validation that the configured geo index exists.
"""

from typing import Optional, Dict, Any

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
)
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from ..config import ConfigLoader
from ..exceptions import GeoConnectionError
from ..utils import get_logger

logger = get_logger(__name__)


class DynamoDBConnector:
    """
    DynamoDB table connection manager with retry logic and timeout handling.

    The connector resolves the boto3 session from configuration (region,
    optional profile and endpoint override for local DynamoDB) and hands out a
    ``Table`` resource. Connection and read timeouts are enforced by botocore.
    """

    def __init__(self, config_loader: ConfigLoader, environment: str = "development"):
        """
        Initialize the DynamoDB connector.

        Args:
            config_loader: ConfigLoader instance for accessing configuration
            environment: Environment whose ``dynamodb`` section is used
        """
        self.config_loader = config_loader
        self.environment = environment
        self._table = None
        logger.debug("DynamoDBConnector initialized")

    def _build_client_config(self, settings: Dict[str, Any]) -> Config:
        return Config(
            connect_timeout=settings.get("connect_timeout_seconds", 10),
            read_timeout=settings.get("read_timeout_seconds", 30),
            retries={"max_attempts": settings.get("max_attempts", 3), "mode": "standard"},
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        retry=retry_if_exception_type((EndpointConnectionError, ConnectTimeoutError)),
        reraise=True,
    )
    def _load_table(self, settings: Dict[str, Any]):
        session = boto3.session.Session(
            region_name=settings.get("region_name"),
            profile_name=settings.get("profile_name"),
        )
        resource = session.resource(
            "dynamodb",
            endpoint_url=settings.get("endpoint_url"),
            config=self._build_client_config(settings),
        )
        table = resource.Table(settings["table_name"])
        # Forces a DescribeTable call so bad names/credentials fail here
        table.load()
        return table

    def connect(self):
        """
        Establish the connection to the configured DynamoDB table.

        Returns:
            boto3 ``Table`` resource

        Raises:
            GeoConnectionError: If the table cannot be reached after retries
        """
        settings = self.config_loader.get_dynamodb_settings(self.environment)
        table_name = settings.get("table_name")

        logger.info(f"Attempting connection to DynamoDB table {table_name}")
        try:
            table = self._load_table(settings)
        except (EndpointConnectionError, ConnectTimeoutError):
            raise GeoConnectionError(
                "Connection timeout - DynamoDB endpoint may be unavailable",
                {"table": table_name, "endpoint": settings.get("endpoint_url")},
            )
        except (ClientError, BotoCoreError) as e:
            error_msg = f"Failed to connect to DynamoDB table: {str(e)}"
            logger.error(error_msg)
            raise GeoConnectionError(error_msg, {"table": table_name}) from e

        self._table = table
        logger.info(f"Successfully connected to {table_name} ({table.table_status})")
        return table

    def test_index_access(self) -> Dict[str, bool]:
        """
        Check that the configured geo index exists on the connected table.

        Returns:
            Mapping of index name to whether it exists on the table

        Raises:
            GeoConnectionError: If not connected
        """
        if self._table is None:
            raise GeoConnectionError("Not connected to DynamoDB - call connect() first")

        index_name = self.config_loader.get_geo_settings(self.environment)["index_name"]
        indexes = self._table.global_secondary_indexes or []
        available = {index["IndexName"] for index in indexes}

        results = {index_name: index_name in available}
        if not results[index_name]:
            logger.warning(f"Geo index {index_name} not found. Available: {sorted(available)}")
        return results

    def get_table(self):
        """
        Get the current table resource.

        Returns:
            Table resource if connected, None otherwise
        """
        return self._table

    def is_connected(self) -> bool:
        """Check if currently connected to DynamoDB."""
        return self._table is not None

    def disconnect(self) -> None:
        """Drop the cached table resource."""
        if self._table is not None:
            self._table = None
            logger.info("Disconnected from DynamoDB")
