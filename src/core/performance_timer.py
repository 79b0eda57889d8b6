"""
Performance measurement utilities for timing fetch tasks and provider calls.
"""

import time
from contextlib import contextmanager
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


class PerformanceTimer:
    """Monotonic timer for measuring one stage of the pipeline."""

    def __init__(self, stage_name: str):
        self.stage_name = stage_name
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def start(self) -> None:
        self.start_time = time.monotonic()
        self.end_time = None

    def stop(self) -> float:
        """Stop timing and return duration in seconds."""
        if self.start_time is None:
            raise ValueError("Timer not started")

        self.end_time = time.monotonic()
        return self.end_time - self.start_time

    @property
    def elapsed(self) -> float:
        """Duration so far, or the final duration once stopped."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.monotonic()
        return end - self.start_time


@contextmanager
def time_stage(stage_name: str, log: bool = False):
    """Context manager for timing a code block."""
    timer = PerformanceTimer(stage_name)
    timer.start()
    try:
        yield timer
    finally:
        duration = timer.stop()
        if log:
            logger.debug("stage_timed", stage=stage_name, duration_seconds=round(duration, 3))
