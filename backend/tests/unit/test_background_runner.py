"""
Unit tests for the in-process background job runner.
"""

import asyncio
import logging

import pytest

from app.workers.runner import BackgroundRunner


@pytest.mark.asyncio
class TestBackgroundRunner:

    async def test_drain_waits_for_jobs(self):
        runner = BackgroundRunner()
        done = []

        async def job(n):
            await asyncio.sleep(0)
            done.append(n)

        for n in range(3):
            runner.submit(job(n), name=f"job-{n}")
        assert runner.pending == 3

        await runner.drain()

        assert sorted(done) == [0, 1, 2]
        assert runner.pending == 0

    async def test_drain_includes_follow_up_jobs(self):
        runner = BackgroundRunner()
        done = []

        async def second():
            done.append("second")

        async def first():
            done.append("first")
            runner.submit(second(), name="second")

        runner.submit(first(), name="first")
        await runner.drain()

        assert done == ["first", "second"]

    async def test_failure_is_logged_not_raised(self, caplog):
        runner = BackgroundRunner()

        async def broken():
            raise RuntimeError("simulated failure")

        with caplog.at_level(logging.ERROR, logger="app.workers.runner"):
            runner.submit(broken(), name="broken-job")
            await runner.drain()
            await asyncio.sleep(0)

        assert runner.pending == 0
        assert any("broken-job failed" in r.getMessage() for r in caplog.records)

    async def test_shutdown_cancels_outstanding(self):
        runner = BackgroundRunner()
        started = asyncio.Event()

        async def forever():
            started.set()
            await asyncio.sleep(3600)

        task = runner.submit(forever(), name="forever")
        await started.wait()

        await runner.shutdown()

        assert task.cancelled()
        assert runner.pending == 0
