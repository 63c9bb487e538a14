"""Dependency injection container for Nightscout Tray.

Provides a centralized way to create and manage application dependencies,
making components easier to test and swap out.

Usage:
    from app.dependencies import create_dependencies

    deps = create_dependencies(presenter)
    deps.client.fetch_properties(deps.state.base_url)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from app.events import EventBus
from app.state import AppState
from app.views.tray import TrayPresenter
from config import NIGHTSCOUT, STORAGE, ConfigurationError, get_logger
from nightscout.client import NightscoutClient
from storage.settings import SettingsManager, get_settings_manager

logger = get_logger(__name__)


@dataclass
class AppDependencies:
    """Container for all application dependencies.

    Using a dataclass makes dependencies explicit and easy to mock in tests.
    """

    client: NightscoutClient
    state: AppState
    presenter: TrayPresenter
    settings: Optional[SettingsManager] = None
    event_bus: Optional[EventBus] = None

    def __post_init__(self):
        logger.debug("AppDependencies container created")


def _initial_state(url: str) -> AppState:
    try:
        return AppState(url)
    except ConfigurationError as e:
        logger.warning(f"Ignoring configured base URL: {e}")
        return AppState(NIGHTSCOUT.DEFAULT_BASE_URL)


def create_dependencies(
    presenter: TrayPresenter,
    data_dir: Optional[Path] = None,
    event_bus: Optional[EventBus] = None,
    base_url: Optional[str] = None,
) -> AppDependencies:
    """Create all application dependencies.

    Args:
        presenter: Tray presenter selected for this platform.
        data_dir: Override the default data directory.
        event_bus: Provide an existing event bus, or one will be created.
        base_url: Override the stored base URL.

    Returns:
        AppDependencies container with all components.
    """
    logger.info("Creating application dependencies...")

    if data_dir is None:
        data_dir = Path.home() / STORAGE.DATA_DIR_NAME

    settings = get_settings_manager(data_dir)
    state = _initial_state(base_url or settings.initial_url())

    deps = AppDependencies(
        client=NightscoutClient(),
        state=state,
        presenter=presenter,
        settings=settings,
        event_bus=event_bus or EventBus(async_mode=False),
    )

    logger.info(f"All dependencies created, base URL {state.base_url}")
    return deps
