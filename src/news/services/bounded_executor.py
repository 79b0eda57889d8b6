"""
Bounded fan-out executor
Runs fetch tasks in sequential batches; every task in a batch settles before the next batch starts
"""

import asyncio
import math
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional

import structlog

from ..models.article import Article
from ...core.performance_timer import PerformanceTimer

logger = structlog.get_logger(__name__)

MIN_CONCURRENCY = 1
MAX_CONCURRENCY = 10
DEFAULT_CONCURRENCY = 5


def clamp_concurrency(value: Optional[int], default: int = DEFAULT_CONCURRENCY) -> int:
    if value is None:
        value = default
    try:
        value = int(value)
    except (TypeError, ValueError):
        value = default
    return max(MIN_CONCURRENCY, min(MAX_CONCURRENCY, value))


class FetchTask:
    """Zero-argument async unit of work bound to one source; runs once

    timeout overrides the batch-wide task timeout for this task only.
    """

    def __init__(self, name: str, fn: Callable[[], Awaitable[List[Article]]], timeout: Optional[float] = None):
        self.name = name
        self.timeout = timeout
        self._fn = fn
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    async def run(self) -> List[Article]:
        if self._consumed:
            raise RuntimeError(f"FetchTask '{self.name}' has already been run")
        self._consumed = True
        return await self._fn()


@dataclass
class FetchResult:
    source: str
    articles: List[Article] = field(default_factory=list)
    error: Optional[BaseException] = None
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


async def _settle(task: FetchTask, task_timeout: Optional[float]) -> FetchResult:
    if task.timeout is not None:
        task_timeout = task.timeout
    timer = PerformanceTimer(task.name)
    timer.start()
    try:
        if task_timeout:
            articles = await asyncio.wait_for(task.run(), timeout=task_timeout)
        else:
            articles = await task.run()
    except asyncio.TimeoutError as e:
        logger.warning("fetch_task_timeout", source=task.name, timeout=task_timeout)
        return FetchResult(task.name, [], e, timer.stop())
    except Exception as e:
        logger.warning("fetch_task_failed", source=task.name, error=str(e), error_type=type(e).__name__)
        return FetchResult(task.name, [], e, timer.stop())

    return FetchResult(task.name, list(articles or []), None, timer.stop())


async def run_bounded(
    tasks: List[FetchTask],
    max_concurrency: Optional[int] = None,
    task_timeout: Optional[float] = None,
) -> List[FetchResult]:
    """
    Run tasks at most max_concurrency at a time

    Tasks are split into batches of max_concurrency (clamped to [1, 10]).
    A batch is gathered with return_exceptions so one failing or slow task
    never cancels its siblings. No retries; a failed task yields a result
    with no articles and the error attached.
    """
    size = clamp_concurrency(max_concurrency)
    results: List[FetchResult] = []
    batch_count = math.ceil(len(tasks) / size) if tasks else 0

    for index in range(batch_count):
        batch = tasks[index * size:(index + 1) * size]
        logger.debug("fetch_batch_started", batch=index + 1, batches=batch_count, size=len(batch))

        settled = await asyncio.gather(
            *(_settle(task, task_timeout) for task in batch),
            return_exceptions=True,
        )

        for task, outcome in zip(batch, settled):
            if isinstance(outcome, BaseException):
                # Only reachable for cancellation-like errors escaping _settle
                results.append(FetchResult(task.name, [], outcome))
            else:
                results.append(outcome)

        logger.debug(
            "fetch_batch_completed",
            batch=index + 1,
            succeeded=sum(1 for r in results[-len(batch):] if r.ok),
        )

    return results
