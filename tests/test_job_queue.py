"""Tests for the single-concurrency render queue."""

import asyncio
import gc

import pytest

from pdf_service.services.job_queue import JobQueue


def recording_job(i, timeline, running, delay=0.01):
    async def work():
        running.append(i)
        assert len(running) == 1, f"jobs overlapped: {running}"
        loop = asyncio.get_running_loop()
        start = loop.time()
        await asyncio.sleep(delay)
        timeline.append((i, start, loop.time()))
        running.remove(i)
        return f"pdf-{i}".encode()

    return work


class TestOrdering:
    @pytest.mark.asyncio
    async def test_jobs_run_in_submission_order_without_overlap(self):
        queue = JobQueue()
        timeline, running = [], []

        futures = [queue.submit(recording_job(i, timeline, running)) for i in range(5)]
        results = await asyncio.gather(*futures)

        assert results == [f"pdf-{i}".encode() for i in range(5)]
        assert [i for i, _, _ in timeline] == list(range(5))
        for (_, start_a, end_a), (_, start_b, _) in zip(timeline, timeline[1:]):
            assert start_a <= start_b
            assert end_a <= start_b

    @pytest.mark.asyncio
    async def test_only_one_job_in_flight(self):
        queue = JobQueue()
        release = asyncio.Event()

        async def blocking():
            await release.wait()
            return b"first"

        async def second():
            return b"second"

        first_future = queue.submit(blocking)
        second_future = queue.submit(second)
        await asyncio.sleep(0)

        assert queue.busy
        assert queue.pending == 1
        assert not second_future.done()

        release.set()
        assert await first_future == b"first"
        assert await second_future == b"second"
        assert not queue.busy
        assert queue.pending == 0

    @pytest.mark.asyncio
    async def test_redundant_drain_is_a_no_op(self):
        queue = JobQueue()
        timeline, running = [], []

        futures = [queue.submit(recording_job(i, timeline, running)) for i in range(3)]
        for _ in range(5):
            queue.drain()

        await asyncio.gather(*futures)
        assert [i for i, _, _ in timeline] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_drain_on_empty_queue(self):
        queue = JobQueue()
        queue.drain()
        assert not queue.busy
        await asyncio.wait_for(queue.join(), timeout=1)


class TestFailures:
    @pytest.mark.asyncio
    async def test_failed_job_does_not_block_next(self):
        queue = JobQueue()

        async def failing():
            raise ValueError("boom")

        async def succeeding():
            return b"ok"

        first = queue.submit(failing)
        second = queue.submit(succeeding)

        with pytest.raises(ValueError, match="boom"):
            await first
        assert await second == b"ok"

        stats = queue.stats()
        assert stats.failed == 1
        assert stats.processed == 1
        assert stats.busy is False
        assert stats.pending == 0

    @pytest.mark.asyncio
    async def test_caller_cancellation_does_not_stop_running_job(self):
        queue = JobQueue()
        finished = asyncio.Event()

        async def work():
            await asyncio.sleep(0.01)
            finished.set()
            return b"done"

        future = queue.submit(work)
        waiter = asyncio.ensure_future(asyncio.shield(future))
        await asyncio.sleep(0)
        waiter.cancel()

        await asyncio.wait_for(finished.wait(), timeout=1)
        assert await future == b"done"

    @pytest.mark.asyncio
    async def test_abandoned_failure_is_not_reported_as_unretrieved(self):
        loop = asyncio.get_running_loop()
        reported = []
        loop.set_exception_handler(lambda _loop, context: reported.append(context))
        try:
            queue = JobQueue()

            async def failing():
                raise ValueError("boom")

            future = queue.submit(failing)
            await asyncio.wait_for(queue.join(), timeout=1)
            await asyncio.sleep(0)
            assert future.done()

            del future
            gc.collect()
        finally:
            loop.set_exception_handler(None)

        assert not [c for c in reported if "never retrieved" in c.get("message", "")]
        assert queue.stats().failed == 1


class TestJoin:
    @pytest.mark.asyncio
    async def test_join_waits_for_all_jobs(self):
        queue = JobQueue()
        timeline, running = [], []

        for i in range(3):
            queue.submit(recording_job(i, timeline, running))

        await asyncio.wait_for(queue.join(), timeout=2)
        assert len(timeline) == 3
        assert queue.stats().processed == 3
