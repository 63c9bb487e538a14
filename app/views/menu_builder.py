"""Menu building utilities for Nightscout Tray.

The menu is described once as a list of MenuEntry objects and converted
to the toolkit of the running platform (rumps on macOS, pystray
elsewhere). The toolkits are imported only by their converter.

Usage:
    from app.views.menu_builder import MenuBuilder, MenuCallbacks

    entries = MenuBuilder().build_main_menu(callbacks, kind)
    menu = to_rumps_menu(entries)
"""
from dataclasses import dataclass
from typing import Callable, List, Optional

from app.views.tray import PlatformKind
from config import get_logger

logger = get_logger(__name__)


@dataclass
class MenuCallbacks:
    """Container for menu item callbacks.

    Callbacks take no arguments; the converters adapt them to each
    toolkit's calling convention.
    """
    refresh_now: Optional[Callable[[], None]] = None
    edit_url: Optional[Callable[[], None]] = None
    reload_settings: Optional[Callable[[], None]] = None
    quit_app: Optional[Callable[[], None]] = None


@dataclass(frozen=True)
class MenuEntry:
    """One menu row; a separator when title is None."""
    title: Optional[str] = None
    callback: Optional[Callable[[], None]] = None
    key: Optional[str] = None

    @property
    def is_separator(self) -> bool:
        return self.title is None


SEPARATOR = MenuEntry()


class MenuBuilder:
    """Builds the context menu structure."""

    def build_main_menu(self, callbacks: MenuCallbacks, kind: PlatformKind) -> List[MenuEntry]:
        """Build the context menu for a platform kind.

        Args:
            callbacks: Container with callback functions for menu items.
            kind: Presentation kind; decides how the URL is edited.

        Returns:
            Menu entries in display order, always ending with Quit.
        """
        entries: List[MenuEntry] = []

        if callbacks.refresh_now:
            entries.append(MenuEntry("Refresh Now", callbacks.refresh_now))

        if kind is PlatformKind.TEXT and callbacks.edit_url:
            entries.append(MenuEntry("Nightscout URL...", callbacks.edit_url))
        elif callbacks.reload_settings:
            entries.append(MenuEntry("Reload Settings", callbacks.reload_settings))

        if entries:
            entries.append(SEPARATOR)
        entries.append(MenuEntry("Quit", callbacks.quit_app, key="q"))

        logger.debug(f"Built menu with {len(entries)} entries")
        return entries


def to_rumps_menu(entries: List[MenuEntry]) -> list:
    """Convert entries to rumps menu items."""
    import rumps

    menu = []
    for entry in entries:
        if entry.is_separator:
            menu.append(rumps.separator)
            continue
        callback = entry.callback
        item = rumps.MenuItem(
            entry.title,
            callback=(lambda _, cb=callback: cb()) if callback else None,
            key=entry.key,
        )
        menu.append(item)
    return menu


def to_pystray_menu(entries: List[MenuEntry]):
    """Convert entries to a pystray.Menu."""
    import pystray

    items = []
    for entry in entries:
        if entry.is_separator:
            items.append(pystray.Menu.SEPARATOR)
            continue
        callback = entry.callback
        items.append(pystray.MenuItem(
            entry.title,
            (lambda icon, item, cb=callback: cb()) if callback else None,
            enabled=callback is not None,
        ))
    return pystray.Menu(*items)
