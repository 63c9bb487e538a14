"""Application module for Nightscout Tray.

Contains the main application components:
- EventBus: Internal event communication and the settings channel
- AppController: Refresh pipeline orchestration with DI
- RefreshTimer: Fixed-interval scheduler
- AppState: Runtime configuration (service base URL)
- Views: UI components (icons, tray presenters, menus)
"""

from app.controller import AppController
from app.dependencies import AppDependencies, create_dependencies
from app.events import Event, EventBus, EventType
from app.state import AppState
from app.timer import RefreshTimer

__all__ = [
    "AppController",
    "AppDependencies",
    "AppState",
    "Event",
    "EventBus",
    "EventType",
    "RefreshTimer",
    "create_dependencies",
]
