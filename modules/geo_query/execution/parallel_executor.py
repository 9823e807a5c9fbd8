"""Parallel Query Executor

Runs the partition queries of a plan concurrently on a caller-owned worker
pool and reconciles the results: all partitions must succeed, their items are
unioned in submission order and the plan's filter is applied once.

The executor never creates threads. The pool is borrowed for the duration of
one ``execute`` call and may be shared by many concurrent plans.
"""

import logging
import time
from concurrent.futures import CancelledError, Executor, Future, wait
from typing import Any, Dict, List, Sequence, Tuple

from dynamo_geo.exceptions import PartitionQueryFailedError, PoolRejectedError, QueryInterruptedError

from ..models import ConcretePartitionQuery, ExecutionSummary, GeoQueryPlan
from .query_executor import QueryExecutor

logger = logging.getLogger(__name__)

Item = Dict[str, Any]


class ParallelQueryExecutor:
    """All-or-nothing concurrent execution of a GeoQueryPlan.

    Features:
    - One pool submission per partition query
    - Waits for every partition before inspecting results
    - Raises PartitionQueryFailedError if any partition failed; never returns a partial union
    - Deterministic union order (plan order), no deduplication
    - Empty plans return immediately without touching the pool
    """

    def __init__(self, query_executor: QueryExecutor, pool: Executor):
        """Initialize the executor.

        Args:
            query_executor: Runs a single partition query with its pagination
            pool: Caller-owned bounded worker pool
        """
        self.query_executor = query_executor
        self.pool = pool

    def execute(self, plan: GeoQueryPlan) -> List[Item]:
        """Run every partition query of the plan and return the filtered union.

        Raises:
            PoolRejectedError: The pool refused a submission
            QueryInterruptedError: The caller was interrupted while waiting
            PartitionQueryFailedError: At least one partition query failed
        """
        items, _ = self.execute_with_summary(plan)
        return items

    def execute_with_summary(self, plan: GeoQueryPlan) -> Tuple[List[Item], ExecutionSummary]:
        """Same as ``execute`` but also returns execution metrics."""
        start_time = time.monotonic()

        if plan.is_empty():
            logger.debug("Empty query plan - nothing to execute")
            return [], ExecutionSummary(partitions=0, items_fetched=0, items_returned=0,
                                        duration_seconds=0.0)

        futures = self._submit_all(plan.queries)
        self._wait_for_all(futures)
        partition_items = self._collect_results(plan.queries, futures)

        merged = [item for items in partition_items for item in items]
        filtered = plan.result_filter.filter(merged)

        summary = ExecutionSummary(
            partitions=plan.partition_count,
            items_fetched=len(merged),
            items_returned=len(filtered),
            duration_seconds=time.monotonic() - start_time,
        )
        logger.info(f"Geo query completed: {summary.get_processing_summary()}")
        return filtered, summary

    def _run_partition(self, query: ConcretePartitionQuery) -> List[Item]:
        logger.debug(f"Running partition {query.partition}: {query.describe()}")
        return list(self.query_executor.run(query))

    def _submit_all(self, queries: Sequence[ConcretePartitionQuery]) -> List[Future]:
        futures: List[Future] = []
        for query in queries:
            try:
                futures.append(self.pool.submit(self._run_partition, query))
            except RuntimeError as e:
                # Raised by concurrent.futures pools after shutdown
                cancelled = self._cancel_outstanding(futures)
                logger.error(f"Worker pool rejected partition {query.partition}: {e}")
                raise PoolRejectedError(
                    f"Worker pool rejected partition query: {str(e)}",
                    {"partition": query.partition, "submitted": len(futures), "cancelled": cancelled},
                ) from e
        return futures

    def _wait_for_all(self, futures: List[Future]) -> None:
        try:
            wait(futures)
        except KeyboardInterrupt as e:
            cancelled = self._cancel_outstanding(futures)
            logger.warning(f"Interrupted while waiting on partitions; cancelled {cancelled} pending")
            raise QueryInterruptedError(
                "Interrupted while waiting for partition queries",
                {"partitions": len(futures), "cancelled": cancelled},
            ) from e

    def _collect_results(self, queries: Sequence[ConcretePartitionQuery],
                         futures: List[Future]) -> List[List[Item]]:
        results: List[List[Item]] = []
        failures: List[Tuple[ConcretePartitionQuery, BaseException]] = []

        for query, future in zip(queries, futures):
            if future.cancelled():
                failures.append((query, CancelledError(f"Partition {query.partition} was cancelled")))
                continue
            error = future.exception()
            if error is not None:
                failures.append((query, error))
            else:
                results.append(future.result())

        if failures:
            failed_query, cause = failures[0]
            logger.error(f"{len(failures)} of {len(queries)} partition queries failed; "
                         f"first failure in partition {failed_query.partition}: {cause}")
            raise PartitionQueryFailedError(
                f"Partition query failed: {cause}",
                partition=failed_query.partition,
                succeeded_count=len(results),
                failed_count=len(failures),
                context={"hash_key": failed_query.hash_key.value},
            ) from cause

        return results

    @staticmethod
    def _cancel_outstanding(futures: List[Future]) -> int:
        return sum(1 for future in futures if future.cancel())
