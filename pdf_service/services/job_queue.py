"""
Render Job Queue.

A single-concurrency FIFO queue that serializes render jobs on the event loop.
At most one job runs at a time; jobs start in submission order and the next
one starts as soon as the current one settles, whether it succeeded or not.

The deque and the busy flag are only touched from code running on the event
loop, so they need no lock.
"""

import asyncio
import itertools
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Deque, Optional

from ..models import QueueStats

logger = logging.getLogger("pdf_service.job_queue")

UnitOfWork = Callable[[], Awaitable[bytes]]

_job_ids = itertools.count(1)


def _consume_exception(future: asyncio.Future) -> None:
    # The submitter may have gone away; mark the failure as retrieved so
    # asyncio does not report it when the future is collected.
    if not future.cancelled():
        future.exception()


@dataclass
class RenderJob:
    """One admitted unit of work and the future its submitter is waiting on."""

    work: UnitOfWork
    future: asyncio.Future
    id: int = field(default_factory=lambda: next(_job_ids))
    enqueued_at: float = field(default_factory=time.monotonic)
    started_at: Optional[float] = None
    finished_at: Optional[float] = None

    @property
    def wait_ms(self) -> float:
        if self.started_at is None:
            return 0.0
        return (self.started_at - self.enqueued_at) * 1000

    @property
    def run_ms(self) -> float:
        if self.started_at is None or self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at) * 1000


class JobQueue:
    """
    Serializes asynchronous units of work.

    ``submit()`` returns a future that is resolved or rejected exactly once
    with the outcome of the unit of work. A failing job never blocks the jobs
    queued behind it. The queue is unbounded and in-memory only.
    """

    def __init__(self):
        self._pending: Deque[RenderJob] = deque()
        self._busy = False
        self._current: Optional[asyncio.Task] = None
        self._idle = asyncio.Event()
        self._idle.set()
        self._processed = 0
        self._failed = 0

    @property
    def pending(self) -> int:
        """Number of jobs waiting to run."""
        return len(self._pending)

    @property
    def busy(self) -> bool:
        return self._busy

    def stats(self) -> QueueStats:
        return QueueStats(
            pending=self.pending,
            busy=self._busy,
            processed=self._processed,
            failed=self._failed,
        )

    def submit(self, work: UnitOfWork) -> asyncio.Future:
        """
        Append a unit of work to the tail of the queue.

        Args:
            work: Zero-argument coroutine function producing the PDF bytes

        Returns:
            Future settled with the result or exception of ``work``
        """
        loop = asyncio.get_running_loop()
        job = RenderJob(work=work, future=loop.create_future())
        job.future.add_done_callback(_consume_exception)
        self._pending.append(job)
        self._idle.clear()
        logger.info(f"Job {job.id} queued (pending={self.pending}, busy={self._busy})")
        self.drain()
        return job.future

    def drain(self) -> None:
        """Start the next pending job if the queue is idle. Safe to call at any time."""
        if self._busy or not self._pending:
            return

        job = self._pending.popleft()
        self._busy = True
        job.started_at = time.monotonic()
        logger.debug(f"Job {job.id} started after waiting {job.wait_ms:.2f}ms")
        self._current = asyncio.create_task(self._run(job))

    async def join(self) -> None:
        """Wait until no job is running and none are pending."""
        await self._idle.wait()

    async def _run(self, job: RenderJob) -> None:
        try:
            result = await job.work()
        except asyncio.CancelledError:
            if not job.future.done():
                job.future.cancel()
            raise
        except Exception as e:
            self._failed += 1
            if not job.future.done():
                job.future.set_exception(e)
            logger.warning(f"Job {job.id} failed: {e}")
        else:
            self._processed += 1
            if not job.future.done():
                job.future.set_result(result)
        finally:
            job.finished_at = time.monotonic()
            logger.debug(f"Job {job.id} settled after {job.run_ms:.2f}ms")
            self._busy = False
            self._current = None
            self.drain()
            if not self._busy:
                self._idle.set()
