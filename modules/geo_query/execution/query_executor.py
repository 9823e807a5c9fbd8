"""Single partition query execution.

A QueryExecutor runs one concrete partition query to completion, following
pagination until the store reports no further page, and surfaces every
transport or store-side failure as StoreQueryError.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from botocore.exceptions import BotoCoreError, ClientError
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from dynamo_geo.exceptions import StoreQueryError

from ..models import ConcretePartitionQuery

logger = logging.getLogger(__name__)

THROTTLING_ERROR_CODES = frozenset([
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
    "InternalServerError",
])


def _is_throttling_error(exc: BaseException) -> bool:
    if not isinstance(exc, ClientError):
        return False
    return exc.response.get("Error", {}).get("Code") in THROTTLING_ERROR_CODES


class QueryExecutor(ABC):
    """Runs one partition query, including its pagination."""

    @abstractmethod
    def run(self, query: ConcretePartitionQuery) -> List[Dict[str, Any]]:
        """Return every item of the partition query, in store order.

        Raises:
            StoreQueryError: On any transport or store-side failure
        """


class DynamoDBQueryExecutor(QueryExecutor):
    """QueryExecutor backed by a boto3 DynamoDB ``Table`` resource.

    Pages are requested with ``ExclusiveStartKey`` until the response carries
    no ``LastEvaluatedKey``. Throttled pages are retried with exponential
    backoff; any other error fails the partition.
    """

    def __init__(self, table):
        """Initialize the executor.

        Args:
            table: boto3 ``Table`` resource the partition queries run against
        """
        self.table = table

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        retry=retry_if_exception(_is_throttling_error),
        reraise=True,
    )
    def _query_page(self, kwargs: Dict[str, Any]) -> Dict[str, Any]:
        return self.table.query(**kwargs)

    def run(self, query: ConcretePartitionQuery) -> List[Dict[str, Any]]:
        kwargs = query.to_query_kwargs()
        items: List[Dict[str, Any]] = []
        pages = 0

        try:
            while True:
                response = self._query_page(kwargs)
                pages += 1
                items.extend(response.get("Items", []))

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break
                kwargs = dict(kwargs, ExclusiveStartKey=last_evaluated_key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Partition {query.partition} query failed after {pages} pages: {e}")
            raise StoreQueryError(
                f"DynamoDB query failed: {str(e)}",
                {"partition": query.partition, "hash_key": query.hash_key.value, "pages": pages},
            ) from e

        logger.debug(f"Partition {query.partition}: {len(items)} items in {pages} pages")
        return items
