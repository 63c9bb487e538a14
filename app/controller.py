"""Application controller for Nightscout Tray.

Runs the refresh pipeline (fetch, map, present) and applies settings
updates. Uses dependency injection for testability.

Usage:
    from app.controller import AppController
    from app.dependencies import create_dependencies

    deps = create_dependencies(presenter)
    controller = AppController(deps)
    controller.start()
"""
import threading
from typing import Any, Dict, Optional

from app.dependencies import AppDependencies
from app.events import Event, EventBus, EventType
from app.timer import Dispatch, RefreshTimer, inline_dispatch
from config import (
    INTERVALS,
    NIGHTSCOUT,
    ConfigurationError,
    FetchError,
    LogContext,
    get_logger,
    log_exception,
)
from nightscout.display import DisplayModel, map_properties

logger = get_logger(__name__)


class AppController:
    """Central controller that orchestrates the refresh pipeline.

    A cycle fetches the properties for the current base URL, maps them to
    a DisplayModel and hands it to the presenter. Cycles never overlap: a
    tick that arrives while a cycle is running is skipped.

    The fetch runs wherever the cycle runs; only the presenter call goes
    through ``present_dispatch``, so a UI toolkit can keep it on its main
    thread while network I/O stays on a worker.

    Attributes:
        deps: The dependency container with all components.
        event_bus: Event bus for publishing state changes.
    """

    def __init__(self, deps: AppDependencies, event_bus: Optional[EventBus] = None,
                 present_dispatch: Optional[Dispatch] = None):
        self.deps = deps
        self.event_bus = event_bus or deps.event_bus or EventBus(async_mode=False)
        self._present_dispatch = present_dispatch or inline_dispatch

        self._cycle_lock = threading.Lock()
        self._timer: Optional[RefreshTimer] = None
        self._last_model: Optional[DisplayModel] = None
        self.cycles_run = 0
        self.cycles_skipped = 0

        self.event_bus.subscribe(EventType.SETTINGS_CHANGED, self._on_settings_changed)
        logger.info("AppController initialized")

    @property
    def last_model(self) -> Optional[DisplayModel]:
        """The most recently presented reading, if any."""
        return self._last_model

    @property
    def is_running(self) -> bool:
        return self._timer is not None and self._timer.is_running

    def start(self, dispatch: Optional[Dispatch] = None,
              interval: float = INTERVALS.REFRESH_SECONDS) -> None:
        """Run a cycle now and then every interval seconds."""
        if self.is_running:
            return

        logger.info(f"Starting refresh every {interval:.0f}s from {self.deps.state.base_url}")
        self.event_bus.publish(EventType.APP_STARTING)
        self._timer = RefreshTimer(self._on_tick, interval, dispatch=dispatch)
        self._timer.start()

    def stop(self) -> None:
        """Stop refreshing (application shutdown)."""
        logger.info("Stopping AppController...")
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        self.event_bus.publish(EventType.APP_STOPPING)

    def _on_tick(self, timer: RefreshTimer) -> None:
        self.run_cycle()

    def run_cycle(self) -> Optional[DisplayModel]:
        """Perform one fetch-map-present cycle.

        Returns:
            The presented DisplayModel, or None when nothing was shown
            (busy, fetch failure, or no scaled reading).
        """
        if not self._cycle_lock.acquire(blocking=False):
            self.cycles_skipped += 1
            logger.debug("Previous refresh still running, skipping tick")
            self.event_bus.publish(EventType.CYCLE_SKIPPED)
            return None

        try:
            self.cycles_run += 1
            with LogContext(logger, "Refresh cycle"):
                return self._cycle()
        except Exception as e:
            log_exception(logger, "Refresh cycle crashed", e)
            return None
        finally:
            self._cycle_lock.release()

    def _cycle(self) -> Optional[DisplayModel]:
        base_url = self.deps.state.base_url

        try:
            props = self.deps.client.fetch_properties(base_url)
        except (FetchError, ConfigurationError) as e:
            logger.warning(f"Fetch failed: {e}")
            self.event_bus.publish(EventType.FETCH_FAILED, {
                "base_url": base_url,
                "error": str(e),
            })
            return None

        model = map_properties(props)
        if model is None:
            self.event_bus.publish(EventType.READING_MISSING, {"base_url": base_url})
            return None

        self._present_dispatch(lambda: self.deps.presenter.present(model))
        self._last_model = model
        self.event_bus.publish(EventType.GLUCOSE_UPDATED, {
            "title": model.title,
            "direction": model.direction_code,
        })
        return model

    # === Settings channel ===

    def apply_settings(self, message: Dict[str, Any]) -> bool:
        """Apply a settings-update message such as {"nightscoutUrl": "..."}.

        Returns:
            True if the base URL changed.

        Raises:
            ConfigurationError: If the URL in the message is invalid.
        """
        if NIGHTSCOUT.SETTINGS_KEY not in message:
            return False

        changed = self.deps.state.set_base_url(message[NIGHTSCOUT.SETTINGS_KEY])
        if changed and self.deps.settings is not None:
            self.deps.settings.set_nightscout_url(self.deps.state.base_url)
        return changed

    def _on_settings_changed(self, event: Event) -> None:
        try:
            self.apply_settings(event.data)
        except ConfigurationError as e:
            logger.warning(f"Rejected settings update: {e}")
