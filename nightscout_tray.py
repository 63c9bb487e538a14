#!/usr/bin/env python3
"""
Nightscout Tray - Menu Bar / System Tray Glucose Display
Polls a Nightscout site and shows the latest reading in the tray.
"""
import signal
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Dict, Optional

from PIL import Image

from app.controller import AppController
from app.dependencies import create_dependencies
from app.events import EventBus, EventType
from app.timer import executor_dispatcher, main_thread_dispatcher
from app.views.icons import DirectionIconSet, IconRenderer
from app.views.menu_builder import MenuBuilder, MenuCallbacks, to_pystray_menu, to_rumps_menu
from app.views.tray import (
    PlatformKind,
    PystrayHandle,
    RenderTarget,
    RumpsHandle,
    resolve_platform_kind,
    select_presenter,
)
from config import ASSETS, COLORS, INTERVALS, NIGHTSCOUT, STORAGE, UI, get_logger, setup_logging

logger = get_logger(__name__)

APP_NAME = "Nightscout"

# Creation order is the order the icons appear in the tray
ICON_DISPLAY_ORDER = (
    RenderTarget.GLUCOSE_ICON,
    RenderTarget.OPERATOR_ICON,
    RenderTarget.DELTA_ICON,
    RenderTarget.DIRECTION_ICON,
)


def _font_path() -> Optional[Path]:
    path = ASSETS.font_path
    return path if path.exists() else None


def _blank_icon() -> Image.Image:
    return Image.new("RGBA", (UI.ICON_SIZE, UI.ICON_SIZE), COLORS.ICON_BACKGROUND_RGBA)


def _install_signal_handlers(quit_app: Callable[[], None]) -> None:
    """Handle SIGTERM/SIGINT by shutting down cleanly."""

    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, quitting...")
        quit_app()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def run_status_bar(data_dir: Path) -> None:
    """macOS: one status item showing the reading as its title."""
    import rumps
    from Foundation import NSBundle

    # Menu bar only, no dock icon
    info = NSBundle.mainBundle().infoDictionary()
    info["LSUIElement"] = "1"

    app = rumps.App(APP_NAME, title=UI.PLACEHOLDER_TITLE, quit_button=None)
    presenter = select_presenter(PlatformKind.TEXT, {RenderTarget.TITLE_TEXT: RumpsHandle(app)})
    event_bus = EventBus(async_mode=False)
    deps = create_dependencies(presenter, data_dir=data_dir, event_bus=event_bus)
    # Fetches run on a worker; only title updates go to the main thread
    controller = AppController(deps, event_bus, present_dispatch=main_thread_dispatcher())

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="refresh")
    dispatch = executor_dispatcher(executor)

    def edit_url() -> None:
        window = rumps.Window(
            message="Base URL of your Nightscout site:",
            title="Nightscout URL",
            default_text=deps.state.base_url,
            ok="Save",
            cancel="Cancel",
            dimensions=(320, 24),
        )
        response = window.run()
        if response.clicked:
            event_bus.publish(EventType.SETTINGS_CHANGED,
                              {NIGHTSCOUT.SETTINGS_KEY: response.text.strip()},
                              source="menu")

    def quit_app() -> None:
        logger.info("Application shutting down...")
        controller.stop()
        executor.shutdown(wait=False)
        rumps.quit_application()

    callbacks = MenuCallbacks(
        refresh_now=lambda: dispatch(controller.run_cycle),
        edit_url=edit_url,
        quit_app=quit_app,
    )
    app.menu = to_rumps_menu(MenuBuilder().build_main_menu(callbacks, PlatformKind.TEXT))

    # Menu items only get their NSMenuItems once rumps.run() is going
    def delayed_start(timer) -> None:
        timer.stop()
        controller.start(dispatch=dispatch)

    startup_timer = rumps.Timer(delayed_start, INTERVALS.STARTUP_DELAY_SECONDS)
    startup_timer.start()

    _install_signal_handlers(quit_app)
    app.run()


def run_system_tray(data_dir: Path, kind: PlatformKind) -> None:
    """Windows/Linux: four icons, or one tooltip icon for unknown platforms."""
    import pystray

    targets = ICON_DISPLAY_ORDER if kind is PlatformKind.ICONS else (RenderTarget.TITLE_TEXT,)
    icons: Dict[RenderTarget, "pystray.Icon"] = {
        target: pystray.Icon(f"nightscout-{target.name.lower()}", _blank_icon(), APP_NAME)
        for target in targets
    }
    handles = {target: PystrayHandle(icon) for target, icon in icons.items()}

    presenter = select_presenter(
        kind,
        handles,
        renderer=IconRenderer(font_path=_font_path()),
        arrows=DirectionIconSet(),
        icon_dir=data_dir / STORAGE.ICON_DIR,
    )
    event_bus = EventBus(async_mode=False)
    deps = create_dependencies(presenter, data_dir=data_dir, event_bus=event_bus)
    controller = AppController(deps, event_bus)

    # All cycles and menu actions run on this one queue
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="refresh")
    dispatch = executor_dispatcher(executor)

    def reload_settings() -> None:
        url = deps.settings.reload()
        event_bus.publish(EventType.SETTINGS_CHANGED, {NIGHTSCOUT.SETTINGS_KEY: url},
                          source="settings-file")

    def quit_app() -> None:
        logger.info("Application shutting down...")
        controller.stop()
        executor.shutdown(wait=False)
        for icon in icons.values():
            icon.stop()

    callbacks = MenuCallbacks(
        refresh_now=lambda: dispatch(controller.run_cycle),
        reload_settings=lambda: dispatch(reload_settings),
        quit_app=quit_app,
    )
    menu = to_pystray_menu(MenuBuilder().build_main_menu(callbacks, kind))
    for icon in icons.values():
        icon.menu = menu

    main_icon, *other_icons = icons.values()
    for icon in other_icons:
        icon.run_detached()

    def setup(icon) -> None:
        icon.visible = True
        controller.start(dispatch=dispatch)

    _install_signal_handlers(quit_app)
    main_icon.run(setup=setup)


def main():
    """Entry point for the application."""
    data_dir = Path.home() / STORAGE.DATA_DIR_NAME
    setup_logging(data_dir=data_dir, debug="--debug" in sys.argv[1:], console_output=True)
    logger.info("Nightscout Tray starting...")

    kind = resolve_platform_kind()
    try:
        if sys.platform == "darwin":
            run_status_bar(data_dir)
        else:
            run_system_tray(data_dir, kind)
    except Exception as e:
        logger.critical(f"Application crashed: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main()
