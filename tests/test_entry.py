"""Tests for the nightscout_tray entry point."""

from types import SimpleNamespace
from unittest.mock import patch

import pytest

import nightscout_tray
from app.views.tray import PlatformKind
from config import COLORS, UI


class TestMain:
    """Tests for main() backend selection."""

    @patch("nightscout_tray.setup_logging")
    @patch("nightscout_tray.run_status_bar")
    def test_macos_uses_status_bar(self, mock_status_bar, mock_logging):
        with patch.object(nightscout_tray.sys, "platform", "darwin"), \
                patch.object(nightscout_tray.sys, "argv", ["nightscout_tray.py"]):
            nightscout_tray.main()

        mock_status_bar.assert_called_once()
        assert mock_logging.call_args.kwargs["debug"] is False

    @patch("nightscout_tray.setup_logging")
    @patch("nightscout_tray.run_system_tray")
    def test_windows_uses_icons(self, mock_system_tray, mock_logging):
        with patch.object(nightscout_tray.sys, "platform", "win32"), \
                patch.object(nightscout_tray.sys, "argv", ["nightscout_tray.py", "--debug"]):
            nightscout_tray.main()

        assert mock_system_tray.call_args.args[1] is PlatformKind.ICONS
        assert mock_logging.call_args.kwargs["debug"] is True

    @patch("nightscout_tray.setup_logging")
    @patch("nightscout_tray.run_system_tray")
    def test_unknown_platform_uses_single_text_icon(self, mock_system_tray, mock_logging):
        with patch.object(nightscout_tray.sys, "platform", "sunos5"), \
                patch.object(nightscout_tray.sys, "argv", ["nightscout_tray.py"]):
            nightscout_tray.main()

        assert mock_system_tray.call_args.args[1] is PlatformKind.TEXT

    @patch("nightscout_tray.setup_logging")
    @patch("nightscout_tray.run_system_tray", side_effect=RuntimeError("no display"))
    def test_crash_is_reraised(self, mock_system_tray, mock_logging):
        with patch.object(nightscout_tray.sys, "platform", "linux"), \
                patch.object(nightscout_tray.sys, "argv", ["nightscout_tray.py"]):
            with pytest.raises(RuntimeError):
                nightscout_tray.main()


def test_blank_icon():
    img = nightscout_tray._blank_icon()
    assert img.size == (UI.ICON_SIZE, UI.ICON_SIZE)
    assert img.getpixel((8, 8)) == COLORS.ICON_BACKGROUND_RGBA


def test_font_asset_is_optional(temp_data_dir):
    missing = SimpleNamespace(font_path=temp_data_dir / "fonts" / "tahoma.pil")
    with patch.object(nightscout_tray, "ASSETS", missing):
        assert nightscout_tray._font_path() is None

    font = temp_data_dir / "tahoma.pil"
    font.write_bytes(b"PILfont")
    with patch.object(nightscout_tray, "ASSETS", SimpleNamespace(font_path=font)):
        assert nightscout_tray._font_path() == font
