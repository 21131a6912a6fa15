"""Helpers shared by the test modules."""

from __future__ import annotations

import asyncio


def run(coro):
    """Drive a service coroutine to completion."""
    return asyncio.run(coro)


class StepClock:
    """Millisecond clock that advances by a fixed step on every call."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000) -> None:
        self.value = start
        self.step = step

    def __call__(self) -> int:
        current = self.value
        self.value += self.step
        return current
