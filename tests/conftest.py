"""Shared fixtures: a controllable clock so no test sleeps for real."""

import threading
from typing import Optional

import pytest


class FakeClock:
    """Clock whose time only moves when something waits on it."""

    def __init__(self, now: float = 0.0) -> None:
        self.time = now
        self.waits: list[float] = []

    def now(self) -> float:
        return self.time

    def wait(self, seconds: float, cancel: Optional[threading.Event] = None) -> bool:
        self.waits.append(seconds)
        if cancel is not None and cancel.is_set():
            return False
        self.time += seconds
        return True

    async def wait_async(self, seconds: float) -> None:
        self.waits.append(seconds)
        self.time += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(1_700_000_020.0)  # 20 s left in the window
