"""Partition query execution: single-partition executors and the parallel fan-out."""

from .query_executor import QueryExecutor, DynamoDBQueryExecutor, THROTTLING_ERROR_CODES
from .parallel_executor import ParallelQueryExecutor

__all__ = [
    'QueryExecutor',
    'DynamoDBQueryExecutor',
    'THROTTLING_ERROR_CODES',
    'ParallelQueryExecutor',
]
