"""
Bounded concurrency for outbound probes.
"""
import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from review_radar.utils.logger import LayerLogger, NullLayerLogger

T = TypeVar("T")

DEFAULT_BATCH_LIMIT = 3

Task = Callable[[], Awaitable[T]]


def _chunks(items: Sequence[Task], size: int) -> List[Sequence[Task]]:
    return [items[i:i + size] for i in range(0, len(items), size)]


async def run_batched(
    tasks: Sequence[Task],
    limit: int = DEFAULT_BATCH_LIMIT,
    default: Optional[T] = None,
    logger: Optional[LayerLogger] = None,
) -> List[Optional[T]]:
    """
    Run zero-argument async tasks in consecutive chunks of `limit`.

    Each chunk runs concurrently and completes before the next one starts.
    Results come back in input order. A task that raises contributes
    `default` in its slot; the rest of the batch is unaffected. A task that
    is cancelled on its own counts as failed; cancelling the runner itself
    propagates out of the await.
    """
    logger = logger or NullLayerLogger()
    size = max(1, limit)
    results: List[Optional[T]] = []

    for batch_index, chunk in enumerate(_chunks(list(tasks), size)):
        outcomes = await asyncio.gather(*(task() for task in chunk), return_exceptions=True)
        for offset, outcome in enumerate(outcomes):
            if isinstance(outcome, BaseException):
                logger.log_error(
                    f"Task failed: {str(outcome)}",
                    error_type=type(outcome).__name__,
                    task_index=batch_index * size + offset,
                )
                results.append(default)
            else:
                results.append(outcome)

    return results
