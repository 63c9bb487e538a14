"""Tests for menu building."""

import sys
from unittest.mock import MagicMock, patch

from app.views.menu_builder import (
    SEPARATOR,
    MenuBuilder,
    MenuCallbacks,
    MenuEntry,
    to_pystray_menu,
    to_rumps_menu,
)
from app.views.tray import PlatformKind


def titles(entries):
    return [e.title for e in entries]


class TestMenuBuilder:
    """Tests for MenuBuilder.build_main_menu."""

    def test_text_menu(self):
        callbacks = MenuCallbacks(refresh_now=MagicMock(), edit_url=MagicMock(),
                                  reload_settings=MagicMock(), quit_app=MagicMock())

        entries = MenuBuilder().build_main_menu(callbacks, PlatformKind.TEXT)

        assert titles(entries) == ["Refresh Now", "Nightscout URL...", None, "Quit"]

    def test_icon_menu(self):
        callbacks = MenuCallbacks(refresh_now=MagicMock(), reload_settings=MagicMock(),
                                  quit_app=MagicMock())

        entries = MenuBuilder().build_main_menu(callbacks, PlatformKind.ICONS)

        assert titles(entries) == ["Refresh Now", "Reload Settings", None, "Quit"]

    def test_quit_only(self):
        quit_app = MagicMock()

        entries = MenuBuilder().build_main_menu(MenuCallbacks(quit_app=quit_app),
                                                PlatformKind.ICONS)

        assert entries == [MenuEntry("Quit", quit_app, key="q")]

    def test_separator(self):
        assert SEPARATOR.is_separator
        assert not MenuEntry("Quit").is_separator


class TestConverters:
    """Tests for toolkit converters."""

    def test_rumps(self):
        mock_rumps = MagicMock()
        refresh = MagicMock()
        entries = [MenuEntry("Refresh Now", refresh), SEPARATOR, MenuEntry("Quit", key="q")]

        with patch.dict(sys.modules, {"rumps": mock_rumps}):
            menu = to_rumps_menu(entries)

        assert len(menu) == 3
        assert menu[1] is mock_rumps.separator
        first_call = mock_rumps.MenuItem.call_args_list[0]
        assert first_call.args[0] == "Refresh Now"
        first_call.kwargs["callback"]("sender")
        refresh.assert_called_once_with()
        assert mock_rumps.MenuItem.call_args_list[1].kwargs["key"] == "q"

    def test_pystray(self):
        mock_pystray = MagicMock()
        refresh = MagicMock()
        entries = [MenuEntry("Refresh Now", refresh), SEPARATOR, MenuEntry("Quit")]

        with patch.dict(sys.modules, {"pystray": mock_pystray}):
            menu = to_pystray_menu(entries)

        assert menu is mock_pystray.Menu.return_value
        items = mock_pystray.Menu.call_args.args
        assert items[1] is mock_pystray.Menu.SEPARATOR
        refresh_call, quit_call = mock_pystray.MenuItem.call_args_list
        refresh_call.args[1]("icon", "item")
        refresh.assert_called_once_with()
        assert quit_call.kwargs["enabled"] is False
