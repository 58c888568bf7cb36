"""
Batch fan-out for page extraction.

Each batch runs concurrently under a semaphore; every item produces an
outcome (result or error) and one failure never cancels its siblings.
Batches themselves run strictly in sequence with a throttle in between.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Generic, Iterator, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class BatchStatus(str, Enum):
	"""Status of a settled batch."""
	COMPLETED = "completed"
	PARTIAL_FAILURE = "partial_failure"
	FAILED = "failed"


@dataclass
class BatchOutcome(Generic[T, R]):
	"""Outcome of processing a single item."""
	item: T
	success: bool
	result: Optional[R] = None
	error: Optional[str] = None


@dataclass
class BatchSummary(Generic[T, R]):
	"""All outcomes of one batch, in completion order."""
	status: BatchStatus
	outcomes: list[BatchOutcome[T, R]] = field(default_factory=list)

	@property
	def succeeded(self) -> int:
		return sum(1 for o in self.outcomes if o.success)

	@property
	def failed(self) -> int:
		return len(self.outcomes) - self.succeeded

	@property
	def results(self) -> list[R]:
		"""Results of successful items that produced a value."""
		return [o.result for o in self.outcomes if o.success and o.result is not None]


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
	"""Split items into consecutive groups of at most size."""
	if size < 1:
		raise ValueError("Batch size must be at least 1")
	for start in range(0, len(items), size):
		yield list(items[start:start + size])


class BatchProcessor(Generic[T, R]):
	"""
	Processes items in fixed-size concurrent batches.

	Usage:
		processor = BatchProcessor(batch_size=10, delay=5.0)
		summaries = await processor.run(urls, handler)
	"""

	def __init__(self, batch_size: int = 10, delay: float = 0.0):
		"""
		Initialize batch processor.

		Args:
			batch_size: Items per batch; also the concurrency bound
			delay: Seconds to wait between batches (not after the last)
		"""
		self.batch_size = batch_size
		self.delay = delay

	async def execute(
		self,
		items: list[T],
		handler: Callable[[T], Awaitable[R]],
	) -> BatchSummary[T, R]:
		"""Run one batch concurrently and collect every item's outcome."""
		if not items:
			return BatchSummary(status=BatchStatus.COMPLETED)

		semaphore = asyncio.Semaphore(self.batch_size)
		outcomes: list[BatchOutcome[T, R]] = []

		async def process_item(item: T) -> None:
			async with semaphore:
				try:
					result = await handler(item)
					outcome = BatchOutcome(item=item, success=True, result=result)
				except Exception as e:
					logger.warning(f"Batch item {item} failed: {e}")
					outcome = BatchOutcome(item=item, success=False, error=str(e))
				outcomes.append(outcome)

		# Fan out
		await asyncio.gather(*(process_item(item) for item in items))

		# Fan in
		succeeded = sum(1 for o in outcomes if o.success)
		if succeeded == len(outcomes):
			status = BatchStatus.COMPLETED
		elif succeeded == 0:
			status = BatchStatus.FAILED
		else:
			status = BatchStatus.PARTIAL_FAILURE
		return BatchSummary(status=status, outcomes=outcomes)

	async def run(
		self,
		items: Sequence[T],
		handler: Callable[[T], Awaitable[R]],
	) -> list[BatchSummary[T, R]]:
		"""Run all items batch by batch, sleeping between batches."""
		batches = list(chunked(items, self.batch_size))
		summaries: list[BatchSummary[T, R]] = []

		for index, batch in enumerate(batches, start=1):
			logger.info(f"Batch {index}/{len(batches)} ({len(batch)} items)")
			summary = await self.execute(batch, handler)
			logger.info(
				f"Batch {index}/{len(batches)} {summary.status.value}: "
				f"{summary.succeeded} succeeded, {summary.failed} failed"
			)
			summaries.append(summary)

			if index < len(batches) and self.delay > 0:
				await asyncio.sleep(self.delay)

		return summaries
