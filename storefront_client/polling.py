import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Set

logger = logging.getLogger("storefront_client.polling")


class PollingRefresher:
    """
    Calls ``tick`` every ``interval`` seconds until stopped.

    Each tick runs as its own task, so a slow fetch does not delay the next
    one; callers that care about ordering must discard stale results
    themselves. There is no backoff: a failed tick is followed by the next
    one on schedule.
    """

    def __init__(self, tick: Callable[[], Awaitable[Any]], interval: float = 15.0):
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.tick = tick
        self.interval = interval
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self._fire()

    def _fire(self) -> None:
        self.ticks += 1
        task = asyncio.get_running_loop().create_task(self.tick())
        self._in_flight.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task) -> None:
        self._in_flight.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Refresh tick failed: %s", task.exception())
