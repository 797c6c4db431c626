"""Utility modules for tunnelshare."""

from . import task_tracker

__all__ = ["task_tracker"]
