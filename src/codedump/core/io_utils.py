"""
Blocking filesystem calls run off the event loop.

Each call is awaited before the next one is issued, so traversal order stays
deterministic; the executor only provides the suspension point.
"""

import asyncio
from typing import Any, Callable, TypeVar

T = TypeVar("T")


async def run_blocking(func: Callable[..., T], *args: Any) -> T:
    """Run ``func(*args)`` in the default executor and await the result."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)
