"""
Batch Queue
===========
Bounded in-memory buffer that hands batches of events to a flush callback.

Two triggers drain the queue: reaching ``batch_size`` and a periodic timer.
Both go through the same guard, so at most one batch is in flight at any
time. When the queue is full new events are dropped.
"""

import asyncio
import contextlib
from typing import Awaitable, Callable, List, Optional, Set

import structlog

from .config import DEFAULT_BATCH_SIZE, DEFAULT_FLUSH_INTERVAL, DEFAULT_MAX_QUEUE_SIZE
from .models import EventInput, EventLike, coerce_event

logger = structlog.get_logger(__name__)

FlushCallback = Callable[[List[EventInput]], Awaitable[None]]


class BatchQueue:
    """
    Buffers events and flushes them in batches.

    The queue must be used from within a running event loop: size-triggered
    flushes and the interval timer are scheduled as asyncio tasks.
    """

    def __init__(
        self,
        on_flush: FlushCallback,
        batch_size: int = DEFAULT_BATCH_SIZE,
        flush_interval: float = DEFAULT_FLUSH_INTERVAL,
        max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE,
    ):
        self.batch_size = batch_size
        self.flush_interval = flush_interval
        self.max_queue_size = max_queue_size
        self._on_flush = on_flush

        self._queue: List[EventInput] = []
        self._flushing = False
        self._settled: Optional[asyncio.Future] = None
        self._closed = False
        self._timer: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def size(self) -> int:
        """Number of events queued but not yet handed to the flush callback."""
        return len(self._queue)

    @property
    def flushing(self) -> bool:
        return self._flushing

    @property
    def closed(self) -> bool:
        return self._closed

    def enqueue(self, event: EventLike) -> None:
        """
        Add an event to the queue without waiting for delivery.

        Events beyond ``max_queue_size``, or enqueued after ``close()``, are
        dropped. Events without an idempotency key get one here, once.
        """
        if self._closed:
            logger.warning("Queue closed, dropping event")
            return

        if len(self._queue) >= self.max_queue_size:
            logger.debug("Queue full, dropping event", max_queue_size=self.max_queue_size)
            return

        self._queue.append(coerce_event(event).with_idempotency_key())
        self._start_timer()

        if len(self._queue) >= self.batch_size:
            self._trigger_flush()

    async def flush(self) -> None:
        """
        Deliver everything currently queued as one batch.

        Does nothing when the queue is empty or another flush is in flight.
        Errors raised by the flush callback propagate to the caller.
        """
        batch = self._take_batch()
        if batch is None:
            return
        await self._deliver(batch)

    async def close(self) -> None:
        """Stop the timer, let in-flight flushes settle, then flush once more."""
        self._closed = True
        await self._stop_timer()

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        # Covers flushes awaited directly by callers, which are not in _tasks
        while self._flushing and self._settled is not None:
            await asyncio.wait({self._settled})

        await self.flush()

    # Internals

    def _take_batch(self) -> Optional[List[EventInput]]:
        if self._flushing or not self._queue:
            return None

        self._flushing = True
        self._settled = asyncio.get_running_loop().create_future()
        batch, self._queue = self._queue, []
        return batch

    async def _deliver(self, batch: List[EventInput]) -> None:
        try:
            await self._on_flush(batch)
            logger.debug("Batch flushed", count=len(batch))
        finally:
            self._release()

    def _release(self) -> None:
        self._flushing = False
        if self._settled is not None and not self._settled.done():
            self._settled.set_result(None)

    def _trigger_flush(self) -> None:
        """Start a background flush; the caller does not wait for it."""
        loop = asyncio.get_running_loop()

        batch = self._take_batch()
        if batch is None:
            return

        task = loop.create_task(self._deliver(batch))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)

        if task.cancelled():
            # A task cancelled before it started never reached its finally block
            self._release()
            return

        error = task.exception()
        if error is not None:
            logger.error("Background flush failed", error=str(error))
            task.get_loop().call_exception_handler({
                "message": "LogStitch background flush failed",
                "exception": error,
                "task": task,
            })

    def _start_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            return
        self._timer = asyncio.get_running_loop().create_task(self._run_timer())
        logger.debug("Flush timer started", interval=self.flush_interval)

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self.flush_interval)
            self._trigger_flush()

    async def _stop_timer(self) -> None:
        if self._timer is None:
            return

        self._timer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._timer
        self._timer = None
        logger.debug("Flush timer stopped")
