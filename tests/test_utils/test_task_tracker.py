"""
Tests for the background task registry.

Tests cover:
- Tasks are held until they finish
- How each outcome (success, failure, cancellation) is logged
"""

import asyncio
import logging

import pytest

from tunnelshare.utils.task_tracker import create_tracked_task, get_active_tasks

pytestmark = pytest.mark.usefixtures("clean_task_registry")


# =============================================================================
# Helper Coroutines
# =============================================================================


async def quick_task():
    await asyncio.sleep(0.01)
    return "done"


async def slow_task():
    await asyncio.sleep(10.0)


async def failing_task():
    await asyncio.sleep(0.01)
    raise ValueError("Task failed!")


# =============================================================================
# Registry Tests
# =============================================================================


class TestCreateTrackedTask:
    """Tests for create_tracked_task function."""

    @pytest.mark.asyncio
    async def test_named_task_is_registered(self):
        task = create_tracked_task(slow_task(), name="reverse-ssh-pico")

        assert task.get_name() == "reverse-ssh-pico"
        assert task in get_active_tasks()

    @pytest.mark.asyncio
    async def test_finished_task_is_released(self):
        task = create_tracked_task(quick_task())

        assert await task == "done"
        await asyncio.sleep(0)  # let the done callback run

        assert task not in get_active_tasks()

    @pytest.mark.asyncio
    async def test_snapshot_is_a_copy(self):
        create_tracked_task(slow_task())

        get_active_tasks().clear()

        assert len(get_active_tasks()) == 1


# =============================================================================
# Outcome Logging Tests
# =============================================================================


class TestOutcomeLogging:
    @pytest.mark.asyncio
    async def test_failure_is_logged(self, caplog):
        task = create_tracked_task(failing_task(), name="doomed")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ValueError):
                await task
            await asyncio.sleep(0)

        assert "Background task failed: doomed" in caplog.text
        assert task not in get_active_tasks()

    @pytest.mark.asyncio
    async def test_cancellation_is_logged(self, caplog):
        task = create_tracked_task(slow_task(), name="stopped")
        await asyncio.sleep(0)

        with caplog.at_level(logging.INFO):
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            await asyncio.sleep(0)

        assert "Background task cancelled: stopped" in caplog.text
        assert task not in get_active_tasks()
