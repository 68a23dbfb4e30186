"""Retry utilities.

`fixed_interval` is an async generator that sleeps for a constant delay and then
yields the attempt number, forever. Callers break out of the loop once the
operation succeeds. The sleep happens *before* every attempt, including the
first one.
"""
import asyncio
from typing import AsyncIterator, Awaitable, Callable

Sleep = Callable[[float], Awaitable[None]]


async def fixed_interval(
    delay: float,
    *,
    sleep: Sleep = asyncio.sleep,
    delay_first: bool = True,
) -> AsyncIterator[int]:
    attempt = 0
    while True:
        if attempt > 0 or delay_first:
            await sleep(delay)
        attempt += 1
        yield attempt
