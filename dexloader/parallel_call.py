"""
Bounded-parallelism drain of a shared work queue
"""

import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable
from typing import Dict, List, Optional, TypeVar

LOGGER = logging.getLogger(__name__)

V = TypeVar("V")


async def drain_queue(
	queue: List[int],
	operation: Callable[[int], Awaitable[V]],
	concurrency: int,
	abort: Optional[threading.Event] = None,
	on_progress: Optional[Callable[[int], None]] = None,
	progress_stride: int = 20,
) -> Dict[int, V]:
	"""
	Work through a queue of IDs with a fixed number of concurrent workers
	:param queue: IDs to process; popped from the end and emptied in place
	:param operation: Coroutine to run per ID
	:param concurrency: How many workers to spawn
	:param abort: Flag checked before each pop; in-flight items still finish
	:param on_progress: Called with the completed count every progress_stride items
	:param progress_stride: How often to report progress
	:return: Results for every ID that succeeded; failed IDs are left out
	"""
	results: Dict[int, V] = {}
	completed = 0

	async def worker() -> None:
		nonlocal completed
		while queue and not (abort is not None and abort.is_set()):
			item_id = queue.pop()
			try:
				results[item_id] = await operation(item_id)
			except Exception as error:
				LOGGER.debug(f"Leaving #{item_id} unresolved: {error!r}")
			finally:
				completed += 1
				if on_progress is not None and completed % progress_stride == 0:
					on_progress(completed)

	await asyncio.gather(*(worker() for _ in range(max(1, concurrency))))
	return results
