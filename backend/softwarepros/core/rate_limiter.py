"""
backend/softwarepros/core/rate_limiter.py

Fixed-Window Rate Limiter

In-memory, per-identifier admission counter used to throttle outbound
actions such as contact-form email sends:
- Admits at most `max_requests` actions per trailing `window_ms` per identifier
- Denied attempts are never recorded against later windows
- A periodic background sweep drops identifiers with no active entries

State lives on the instance and is lost on restart. Operations never await,
so they are consistent under asyncio's single-threaded scheduling; the
limiter is not safe to share across threads or processes.
"""

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable
from types import TracebackType

logger = logging.getLogger(__name__)

Clock = Callable[[], int]

DEFAULT_SWEEP_INTERVAL_SECONDS = 5 * 60


def wall_clock_ms() -> int:
    """Milliseconds since the epoch."""
    return int(time.time() * 1000)


class RateLimiter:
    """
    Fixed-window request counter keyed by an arbitrary string identifier.

    Args:
        window_ms (int): Window length in milliseconds.
        max_requests (int): Maximum admissions per window per identifier.
        clock (Clock): Returns the current time in milliseconds.
        sweep_interval (float): Seconds between background sweeps.
    """

    def __init__(
        self,
        window_ms: int,
        max_requests: int,
        clock: Clock = wall_clock_ms,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
    ) -> None:
        if window_ms <= 0:
            raise ValueError("window_ms must be positive")
        if max_requests < 0:
            raise ValueError("max_requests must not be negative")

        self.window_ms = window_ms
        self.max_requests = max_requests
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._requests: dict[str, list[int]] = {}
        self._sweep_task: asyncio.Task[None] | None = None

    # ---------------------------------------------------
    # Admission Checks
    # ---------------------------------------------------
    def _active(self, identifier: str, window_start: int) -> list[int]:
        return [ts for ts in self._requests.get(identifier, []) if ts > window_start]

    def can_make_request(self, identifier: str) -> bool:
        """
        Admits and records a request for `identifier` if it is under the cap.

        Returns:
            bool: True if admitted, False if denied. Denials are not recorded.
        """
        now = self._clock()
        recent = self._active(identifier, now - self.window_ms)

        if len(recent) < self.max_requests:
            recent.append(now)
            self._requests[identifier] = recent
            return True

        # Persist the pruned sequence without counting the denied attempt
        if recent:
            self._requests[identifier] = recent
        else:
            self._requests.pop(identifier, None)
        logger.debug(f"[RATE LIMIT] Denied request for identifier={identifier}")
        return False

    def get_remaining_requests(self, identifier: str) -> int:
        """Returns how many more requests `identifier` may make in the current window."""
        now = self._clock()
        active_count = len(self._active(identifier, now - self.window_ms))
        return max(0, self.max_requests - active_count)

    def get_time_until_next_request(self, identifier: str) -> int:
        """
        Returns milliseconds until the oldest recorded request leaves the window.

        Only the oldest entry is considered, so when several entries expire
        in sequence the value can under-report the real wait.
        """
        requests = self._requests.get(identifier)
        if not requests:
            return 0

        oldest = min(requests)
        window_start = self._clock() - self.window_ms
        return max(0, oldest - window_start)

    # ---------------------------------------------------
    # Sweep
    # ---------------------------------------------------
    def cleanup(self) -> None:
        """Drops expired entries and forgets identifiers with none left."""
        window_start = self._clock() - self.window_ms
        removed = 0

        for identifier in list(self._requests):
            recent = self._active(identifier, window_start)
            if recent:
                self._requests[identifier] = recent
            else:
                del self._requests[identifier]
                removed += 1

        if removed:
            logger.debug(f"[RATE LIMIT] Sweep removed {removed} idle identifiers")

    def tracked_identifiers(self) -> list[str]:
        return list(self._requests)

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            try:
                self.cleanup()
            except Exception:
                logger.exception("[RATE LIMIT] Sweep failed")

    # ---------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------
    @property
    def running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    def start(self) -> None:
        """Starts the background sweep on the running event loop."""
        if self.running:
            return
        self._sweep_task = asyncio.get_running_loop().create_task(self._sweep_loop())
        logger.info(
            f"[RATE LIMIT] Sweep started (window={self.window_ms}ms, "
            f"max={self.max_requests}, every {self.sweep_interval}s)"
        )

    async def stop(self) -> None:
        """Cancels the background sweep and waits for it to finish."""
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("[RATE LIMIT] Sweep stopped")

    async def __aenter__(self) -> "RateLimiter":
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()
