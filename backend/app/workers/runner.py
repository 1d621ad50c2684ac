"""
In-process runner for fire-and-forget background jobs.

Requests submit a coroutine and return immediately; the runner keeps a
reference to every task until it finishes and logs failures.
"""
import asyncio
import logging
from typing import Awaitable, Set

logger = logging.getLogger(__name__)


class BackgroundRunner:
    """Owns the simulation tasks started by API requests."""

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, job: Awaitable[None], name: str) -> asyncio.Task:
        """Schedule ``job`` on the running loop without awaiting it."""
        task = asyncio.ensure_future(job)
        task.set_name(name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        logger.debug(f"Background job {name} scheduled")
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.info(f"Background job {task.get_name()} cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Background job {task.get_name()} failed", exc_info=exc)

    async def drain(self) -> None:
        """Wait until every submitted job, including ones they submit, is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel outstanding jobs (application shutdown)."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info(f"Background runner stopped, {len(tasks)} job(s) cancelled")
