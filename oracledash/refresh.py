"""
Refresh controller.

Drives the fetch -> normalize -> derive -> publish cycle on a fixed period.

Lifecycle: IDLE -> RUNNING (start) -> STOPPED (stop). The first fetch runs
immediately on start, later ones on a fixed-rate grid. Fetches never
overlap: a tick that falls due while a fetch is still outstanding is
skipped and the grid moves on to the next slot. Every tick makes exactly
one attempt, whatever happened before; there is no backoff.
"""

import asyncio
import logging
import math
from datetime import tzinfo
from typing import Any, Awaitable, Callable, Iterable, Optional

from .errors import MalformedPayload, TransportFailure
from .normalizer import normalize_payload
from .snapshot_store import ViewStateStore
from .types import ControllerState, RefreshStats, TrackedPair, ViewState
from .view_model import build_view_state

logger = logging.getLogger(__name__)

FetchFn = Callable[[], Awaitable[Any]]
Listener = Callable[[ViewState], None]


class RefreshHandle:
    """
    Cancellation token for a running refresh schedule.

    Returned by RefreshController.start() and consumed by stop().
    """

    def __init__(self):
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        """True once the schedule task has fully unwound."""
        return self._task is not None and self._task.done()

    def _cancel(self) -> None:
        self._cancelled = True
        if self._task is not None:
            self._task.cancel()


class RefreshController:
    """
    Periodically refreshes the ViewStateStore from the oracle.

    Failed cycles (transport errors, malformed payloads) are logged and
    leave the store untouched; the schedule keeps running. Results of a
    fetch that completes after stop() are discarded.
    """

    DEFAULT_PERIOD_S = 10.0

    def __init__(
        self,
        fetch: FetchFn,
        store: ViewStateStore,
        pairs: Iterable[TrackedPair],
        period_s: float = DEFAULT_PERIOD_S,
        explorer_base_url: str = "",
        tz: Optional[tzinfo] = None,
    ):
        """
        Initialize the controller.

        Args:
            fetch: Coroutine function returning the decoded oracle payload
            store: Store to publish into (owned by this view)
            pairs: Tracked pairs, fixed for the controller's lifetime
            period_s: Polling period in seconds
            explorer_base_url: Prefix for transaction links
            tz: Display zone for times (local time if None)
        """
        if period_s <= 0:
            raise ValueError("period_s must be positive")

        self._fetch = fetch
        self._store = store
        self._pairs = tuple(pairs)
        self._period_s = period_s
        self._explorer_base_url = explorer_base_url
        self._tz = tz

        self._state = ControllerState.IDLE
        self._handle: Optional[RefreshHandle] = None
        self._listeners: list[Listener] = []
        self._stats = RefreshStats()

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def pairs(self) -> tuple[TrackedPair, ...]:
        return self._pairs

    @property
    def period_s(self) -> float:
        return self._period_s

    @property
    def is_running(self) -> bool:
        return self._state is ControllerState.RUNNING

    def add_listener(self, listener: Listener) -> None:
        """Register a callback invoked with every published ViewState."""
        self._listeners.append(listener)

    def start(self) -> RefreshHandle:
        """
        Start the refresh schedule on the running event loop.

        Returns:
            Handle to pass to stop()

        Raises:
            RuntimeError: if already started/stopped or no loop is running
        """
        if self._state is not ControllerState.IDLE:
            raise RuntimeError(f"Cannot start refresh controller in state {self._state.name}")

        loop = asyncio.get_running_loop()
        handle = RefreshHandle()
        handle._task = loop.create_task(self._run(handle), name="oracle-refresh")

        self._handle = handle
        self._state = ControllerState.RUNNING
        logger.info(
            f"Refresh started every {self._period_s:g}s for "
            f"{', '.join(p.label for p in self._pairs)}"
        )
        return handle

    def stop(self, handle: RefreshHandle) -> None:
        """
        Stop the schedule. No fetch is issued after this returns.

        A fetch already in flight is cancelled; if it completes anyway,
        its result is discarded.
        """
        if handle is not self._handle:
            raise ValueError("Handle was not issued by this controller")

        if handle.cancelled:
            logger.warning("Refresh controller already stopped")
            return

        handle._cancel()
        self._state = ControllerState.STOPPED
        logger.info(
            f"Refresh stopped. Polls={self._stats.poll_count}, "
            f"Success={self._stats.success_count}, Errors={self._stats.error_count}"
        )

    async def wait_stopped(self) -> None:
        """Wait for the schedule task to finish unwinding after stop()."""
        if self._handle is None or self._handle._task is None:
            return
        await asyncio.gather(self._handle._task, return_exceptions=True)

    async def refresh_once(self) -> bool:
        """
        Run one fetch cycle.

        Returns:
            True if a new ViewState was published
        """
        if self._state is ControllerState.STOPPED:
            return False

        self._stats.poll_count += 1

        try:
            payload = await self._fetch()
            snapshot = normalize_payload(payload)
        except (TransportFailure, MalformedPayload) as e:
            self._stats.error_count += 1
            self._stats.last_error = f"{type(e).__name__}: {e}"
            logger.warning(f"Oracle refresh failed: {self._stats.last_error}")
            return False

        if self._state is ControllerState.STOPPED:
            self._stats.discarded_count += 1
            logger.debug("Discarding fetch result that completed after stop")
            return False

        state = build_view_state(
            snapshot,
            self._pairs,
            explorer_base_url=self._explorer_base_url,
            tz=self._tz,
        )
        seq = self._store.publish(state)
        self._stats.success_count += 1
        self._stats.last_error = None
        logger.debug(
            f"Published snapshot seq={seq} records={len(snapshot)} "
            f"last_updated={state.last_updated_ts}"
        )

        self._notify(state)
        return True

    def _notify(self, state: ViewState) -> None:
        for listener in self._listeners:
            try:
                listener(state)
            except Exception:
                logger.exception("View state listener failed")

    async def _run(self, handle: RefreshHandle) -> None:
        """Main schedule loop."""
        loop = asyncio.get_running_loop()
        next_tick = loop.time()

        while not handle.cancelled:
            try:
                await self.refresh_once()
            except Exception as e:
                self._stats.error_count += 1
                self._stats.last_error = f"{type(e).__name__}: {e}"
                logger.exception("Unexpected error in refresh cycle")

            next_tick += self._period_s
            now = loop.time()
            if now > next_tick:
                # Fetch overran one or more ticks
                missed = math.floor((now - next_tick) / self._period_s) + 1
                self._stats.skipped_ticks += missed
                next_tick += missed * self._period_s
                logger.debug(f"Skipped {missed} tick(s) while a fetch was outstanding")

            await asyncio.sleep(next_tick - now)

    @property
    def stats(self) -> dict:
        """Get refresh statistics."""
        return {
            "state": self._state.name,
            "poll_count": self._stats.poll_count,
            "success_count": self._stats.success_count,
            "error_count": self._stats.error_count,
            "skipped_ticks": self._stats.skipped_ticks,
            "discarded_count": self._stats.discarded_count,
            "last_error": self._stats.last_error,
            "success_rate": self._stats.success_count / max(1, self._stats.poll_count),
        }
