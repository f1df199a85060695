"""Refresh cadence and cancellation for fetch cycles.

Every cycle gets an increasing id. A cycle is cancelled when it is
superseded (parameter change, manual refresh, stop) and a late result
older than the last applied one is discarded, so results are always
applied in order on the event loop.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel

from ngsimap.adapters.errors import FetchError
from ngsimap.contracts.enums import PollStatus
from ngsimap.contracts.result import ServiceError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_S = 15.0

P = TypeVar("P")
T = TypeVar("T")


class PollState(BaseModel):
    """Observable refresh state for the UI layer."""

    status: PollStatus = PollStatus.IDLE
    error: ServiceError | None = None
    paused: bool = False
    last_applied_at: datetime | None = None
    cycles_applied: int = 0
    cycles_cancelled: int = 0
    cycles_discarded: int = 0


class PollingController(Generic[P, T]):
    """Runs ``fetch(params)`` every ``interval_s`` and hands results to ``apply``.

    ``apply`` runs synchronously on the event loop and may refine
    ``state.status`` (it is set to OK just before the call).
    """

    def __init__(
        self,
        fetch: Callable[[P], Awaitable[T]],
        apply: Callable[[T], None],
        params: P,
        interval_s: float = DEFAULT_INTERVAL_S,
    ):
        if interval_s <= 0:
            raise ValueError(f"interval_s must be positive, got {interval_s}")
        self._fetch = fetch
        self._apply = apply
        self._params = params
        self._interval_s = interval_s
        self._timer: asyncio.Task | None = None
        self._inflight: asyncio.Task | None = None
        self._issued = 0
        self._applied = 0
        self._settled = PollStatus.IDLE
        self.state = PollState()

    @property
    def params(self) -> P:
        return self._params

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def inflight(self) -> asyncio.Task | None:
        if self._inflight is not None and not self._inflight.done():
            return self._inflight
        return None

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the interval timer; the first tick fires immediately."""
        if not self.running:
            self._timer = asyncio.create_task(self._run_timer())

    async def stop(self) -> None:
        """Stop the timer and cancel any outstanding fetch."""
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await timer
        inflight = self._cancel_inflight()
        if inflight is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await inflight
        if self.state.status == PollStatus.LOADING:
            self.state.status = self._settled

    def pause(self) -> None:
        self.state.paused = True

    def resume(self) -> None:
        self.state.paused = False

    def refresh(self) -> asyncio.Task:
        """Fetch now, superseding any outstanding cycle. The timer keeps its phase."""
        self._cancel_inflight()
        return self._launch()

    def set_params(self, params: P) -> asyncio.Task:
        """Switch parameters and refetch; the prior cycle's result is dropped."""
        self._params = params
        return self.refresh()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run_timer(self) -> None:
        while True:
            if not self.state.paused and self.inflight is None:
                self._launch()
            await asyncio.sleep(self._interval_s)

    def _cancel_inflight(self) -> asyncio.Task | None:
        task = self.inflight
        if task is not None:
            task.cancel()
            self.state.cycles_cancelled += 1
        return task

    def _launch(self) -> asyncio.Task:
        self._issued += 1
        task = asyncio.create_task(self._run_cycle(self._issued, self._params))
        task.add_done_callback(_log_cycle_failure)
        self._inflight = task
        return task

    async def _run_cycle(self, cycle_id: int, params: P) -> bool:
        self.state.status = PollStatus.LOADING
        try:
            result = await self._fetch(params)
        except FetchError as exc:
            logger.warning("Fetch cycle %d failed: %s", cycle_id, exc)
            if cycle_id == self._issued:
                self.state.status = PollStatus.ERROR
                self.state.error = ServiceError(
                    code="fetch_failed",
                    message=str(exc),
                    details={"url": exc.url, "status_code": exc.status_code},
                )
                self._settled = PollStatus.ERROR
            return False

        if cycle_id <= self._applied:
            self.state.cycles_discarded += 1
            logger.debug("Discarding stale cycle %d (applied %d)", cycle_id, self._applied)
            return False

        self._applied = cycle_id
        self.state.status = PollStatus.OK
        self.state.error = None
        self._apply(result)
        self._settled = self.state.status
        self.state.cycles_applied += 1
        self.state.last_applied_at = datetime.now(tz=timezone.utc)
        return True


def _log_cycle_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Fetch cycle crashed", exc_info=exc)
