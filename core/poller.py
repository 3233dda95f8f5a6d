"""
core/poller.py
────────────────────────────────────────────────────────────────────────
Client-side "is it done yet?" loop for a generation.

`GenerationPoller.wait()` calls `fetch(generation_id)` every `interval`
seconds until the generation reports

    completed → the generation dict is returned (progress snaps to 100)
    error     → GenerationFailed
    timeout   → PollingTimeout  (the generation itself is left alone and
                                 may still complete later)

`fetch` is any coroutine returning the `GET /generations/{id}` payload;
errors it raises (404, network) end the polling as-is.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict

_LOG = logging.getLogger(__name__)

POLLING_INTERVAL = 2.0     # seconds between checks
MAX_POLLING_TIME = 300.0   # give up after five minutes
PROGRESS_CAP = 90          # never claim more until a terminal state is seen

Fetch = Callable[[int], Awaitable[Dict[str, Any]]]
ProgressHook = Callable[[int], None]


class PollingError(RuntimeError):
    pass


class GenerationFailed(PollingError):
    pass


class PollingTimeout(PollingError):
    pass


class PollingCancelled(PollingError):
    pass


def estimate_progress(elapsed: float, timeout: float = MAX_POLLING_TIME) -> int:
    """Elapsed share of the time budget, as a percentage capped below 100."""
    if timeout <= 0:
        return PROGRESS_CAP
    return round(min(PROGRESS_CAP, max(0.0, elapsed) / timeout * 100))


class GenerationPoller:
    def __init__(
        self,
        fetch: Fetch,
        interval: float = POLLING_INTERVAL,
        timeout: float = MAX_POLLING_TIME,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        log: logging.Logger = _LOG,
    ) -> None:
        self._fetch = fetch
        self.interval = interval
        self.timeout = timeout
        self._clock = clock
        self._sleep = sleep
        self._log = log

    async def wait(
        self,
        generation_id: int,
        on_progress: ProgressHook | None = None,
        cancel: asyncio.Event | None = None,
    ) -> Dict[str, Any]:
        report = on_progress or (lambda _pct: None)
        started = self._clock()
        report(0)

        while True:
            generation = await self._fetch(generation_id)
            status = generation.get("status")

            if status == "completed":
                report(100)
                return generation
            if status == "error":
                raise GenerationFailed(generation.get("error") or "generation failed")

            elapsed = self._clock() - started
            if elapsed >= self.timeout:
                self._log.warning(
                    "generation %s still %s after %.0fs – giving up", generation_id, status, elapsed
                )
                raise PollingTimeout(f"generation {generation_id} did not finish in {self.timeout:.0f}s")

            report(estimate_progress(elapsed, self.timeout))

            if cancel is not None and cancel.is_set():
                raise PollingCancelled(f"polling of generation {generation_id} cancelled")
            await self._sleep(self.interval)
