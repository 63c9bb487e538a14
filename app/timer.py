"""Fixed-interval refresh timer for Nightscout Tray.

Fires once immediately, then every ``interval`` seconds until stopped.
Ticks are produced on a background thread and handed to a dispatcher,
which decides where the callback actually runs:

- ``main_thread_dispatcher()`` hops onto the AppKit main thread (macOS),
  so callbacks keep firing while the status menu is open.
- ``executor_dispatcher(executor)`` queues onto a single-worker executor.
- With no dispatcher the callback runs on the timer thread itself.

Usage:
    from app.timer import RefreshTimer

    def on_tick(timer):
        controller.run_cycle()

    timer = RefreshTimer(on_tick, interval=10.0)
    timer.start()
"""

import threading
from concurrent.futures import Executor
from typing import Callable, Optional

from config import get_logger

logger = get_logger(__name__)

Dispatch = Callable[[Callable[[], None]], None]


# Global callback helper for the main-thread dispatcher - defined once at module level
_MainThreadHelper = None
_MainThreadHelperLock = threading.Lock()


def _get_main_thread_helper():
    """Get or create the global callback helper class (thread-safe)."""
    global _MainThreadHelper

    if _MainThreadHelper is not None:
        return _MainThreadHelper

    with _MainThreadHelperLock:
        if _MainThreadHelper is not None:
            return _MainThreadHelper

        from Foundation import NSObject

        class _RefreshTimerHelper(NSObject):
            """Helper object to run a Python callable on the main thread."""

            def runCallable_(self, fn):
                try:
                    fn()
                except Exception as e:
                    logger.error(f"Main thread callback failed: {e}", exc_info=True)

        _MainThreadHelper = _RefreshTimerHelper

    return _MainThreadHelper


def main_thread_dispatcher() -> Dispatch:
    """Dispatcher that runs callbacks on the AppKit main thread."""
    helper = _get_main_thread_helper().alloc().init()

    def dispatch(fn: Callable[[], None]) -> None:
        helper.performSelectorOnMainThread_withObject_waitUntilDone_(
            "runCallable:", fn, False
        )

    return dispatch


def executor_dispatcher(executor: Executor) -> Dispatch:
    """Dispatcher that queues callbacks onto an executor."""

    def dispatch(fn: Callable[[], None]) -> None:
        executor.submit(fn)

    return dispatch


def inline_dispatch(fn: Callable[[], None]) -> None:
    fn()


class RefreshTimer:
    """Timer that triggers a callback now and then at a fixed interval.

    There is no backoff, jitter, or drift correction: a tick is produced
    every ``interval`` seconds no matter how the previous callback fared.

    Attributes:
        interval: Time between ticks in seconds.
        ticks: Number of ticks produced so far.

    Example:
        >>> timer = RefreshTimer(callback, interval=10.0)
        >>> timer.start()
        >>> # On shutdown...
        >>> timer.stop()
    """

    def __init__(self, callback: Callable[["RefreshTimer"], None], interval: float,
                 dispatch: Optional[Dispatch] = None):
        """Initialize the timer.

        Args:
            callback: Function to call on each tick. Receives the timer as argument.
            interval: Time between ticks in seconds.
            dispatch: Where to run the callback (defaults to the timer thread).
        """
        if interval <= 0:
            raise ValueError("interval must be positive")

        self._callback = callback
        self._interval = interval
        self._dispatch = dispatch or inline_dispatch
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._running = False
        self.ticks = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._running

    def _run_callback(self) -> None:
        if not self._running:
            return
        try:
            self._callback(self)
        except Exception as e:
            logger.error(f"Refresh timer callback failed: {e}", exc_info=True)

    def _tick(self) -> None:
        self.ticks += 1
        try:
            self._dispatch(self._run_callback)
        except Exception as e:
            logger.error(f"Could not dispatch refresh tick: {e}", exc_info=True)

    def _timer_loop(self) -> None:
        """Background thread producing ticks."""
        self._tick()
        while not self._stop_event.wait(self._interval):
            self._tick()

    def start(self) -> None:
        """Start ticking. The first tick fires immediately."""
        if self._running:
            return

        self._running = True
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._timer_loop, daemon=True, name="RefreshTimer"
        )
        self._thread.start()
        logger.debug(f"RefreshTimer started with interval {self._interval}s")

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        """Stop the timer (application shutdown only)."""
        self._running = False
        self._stop_event.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        logger.debug("RefreshTimer stopped")
