"""
Per-key coalescing of concurrent cache misses.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, TypeVar

T = TypeVar("T")


class SingleFlight:
    """
    Run at most one in-flight call per key.

    Callers arriving while a call for the same key is running await its
    outcome instead of starting their own. Failures are shared as well and
    never remembered once the call completes.
    """

    def __init__(self) -> None:
        self._inflight: Dict[str, "asyncio.Future[Any]"] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._inflight

    async def do(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        existing = self._inflight.get(key)
        if existing is not None:
            # Shield so one cancelled waiter does not cancel the shared call
            return await asyncio.shield(existing)

        future: "asyncio.Future[T]" = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            result = await fn()
        except Exception as exc:
            future.set_exception(exc)
            # Mark retrieved; there may be no waiters
            future.exception()
            raise
        else:
            future.set_result(result)
            return result
        finally:
            if not future.done():
                future.cancel()
            self._inflight.pop(key, None)
