"""
Background task registry.

The event loop holds only weak references to tasks. The tunnel client task
has no awaiting owner once the URL wait is over, so it is kept here until
ssh exits, and its outcome is logged when it ends.
"""

import asyncio
import logging
from typing import Coroutine, Optional, Set

logger = logging.getLogger(__name__)

_background_tasks: Set[asyncio.Task] = set()


def _log_outcome(task: asyncio.Task) -> None:
    _background_tasks.discard(task)
    name = task.get_name()
    if task.cancelled():
        logger.info(f"Background task cancelled: {name}")
        return
    exc = task.exception()
    if exc is not None:
        logger.error(
            f"Background task failed: {name}",
            exc_info=(type(exc), exc, exc.__traceback__),
        )
    else:
        logger.debug(f"Background task finished: {name}")


def create_tracked_task(coro: Coroutine, name: Optional[str] = None) -> asyncio.Task:
    """Schedule ``coro`` and hold a reference to it until it finishes."""
    task = asyncio.create_task(coro, name=name)
    _background_tasks.add(task)
    task.add_done_callback(_log_outcome)
    logger.debug(f"Started background task: {task.get_name()}")
    return task


def get_active_tasks() -> Set[asyncio.Task]:
    """Snapshot of the tasks that have not finished yet."""
    return set(_background_tasks)
