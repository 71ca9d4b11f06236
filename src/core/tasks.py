import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)

_background_tasks: set[asyncio.Task[Any]] = set()


def _task_done(task: asyncio.Task) -> None:
    _background_tasks.discard(task)
    if not task.cancelled():
        exc = task.exception()
        if exc:
            logger.error("Background task %s failed: %s", task.get_name(), exc, exc_info=exc)


def create_background_task(coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task:
    """Start a task that is kept referenced until it finishes; failures are logged."""
    task = asyncio.create_task(coro, name=name)
    _background_tasks.add(task)
    task.add_done_callback(_task_done)
    return task


async def cancel_background_tasks() -> None:
    """Cancel whatever is still running, e.g. an asset pre-fetch at shutdown."""
    pending = list(_background_tasks)
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
