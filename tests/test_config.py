"""Tests for configuration, exceptions, and logging."""

import logging

import pytest

from config import (
    INTERVALS,
    NIGHTSCOUT,
    STORAGE,
    UI,
    ConfigurationError,
    FetchError,
    LogContext,
    MissingDataError,
    NightscoutTrayError,
    RenderError,
    UnsupportedPlatformError,
    get_logger,
    setup_logging,
)
from config.logging_config import ROOT_LOGGER_NAME


class TestConstants:
    """Tests for configuration constants."""

    def test_refresh_interval(self):
        assert INTERVALS.REFRESH_SECONDS == 10.0

    def test_fetch_timeout_bounded(self):
        assert 0 < INTERVALS.FETCH_TIMEOUT_SECONDS < 60

    def test_icon_geometry(self):
        assert UI.ICON_SIZE == 16
        assert (UI.TEXT_BOX_WIDTH, UI.TEXT_BOX_HEIGHT) == (17, 16)
        assert (UI.TEXT_OFFSET_X, UI.TEXT_OFFSET_Y) == (-1, 0)

    def test_properties_path(self):
        assert NIGHTSCOUT.PROPERTIES_PATH == "/api/v2/properties"
        assert NIGHTSCOUT.SETTINGS_KEY == "nightscoutUrl"
        assert not NIGHTSCOUT.DEFAULT_BASE_URL.endswith("/")

    def test_constants_are_frozen(self):
        with pytest.raises(AttributeError):
            INTERVALS.REFRESH_SECONDS = 1.0


class TestExceptions:
    """Tests for the exception hierarchy."""

    @pytest.mark.parametrize("exc_class", [
        FetchError, MissingDataError, RenderError,
        UnsupportedPlatformError, ConfigurationError,
    ])
    def test_inherits_base(self, exc_class):
        assert issubclass(exc_class, NightscoutTrayError)

    def test_message_only(self):
        error = FetchError("offline")
        assert str(error) == "offline"
        assert error.details == {}

    def test_details_in_str(self):
        error = RenderError("Could not write icon", {"path": "/tmp/x.png"})
        assert "Could not write icon" in str(error)
        assert "/tmp/x.png" in str(error)


class TestLogging:
    """Tests for logging setup."""

    def test_get_logger_is_namespaced(self):
        logger = get_logger("app.views.icons")
        assert logger.name == f"{ROOT_LOGGER_NAME}.views.icons"

    def test_get_logger_cached(self):
        assert get_logger("nightscout.client") is get_logger("nightscout.client")

    def test_setup_writes_log_file(self, temp_data_dir):
        root = setup_logging(data_dir=temp_data_dir, console_output=False)
        try:
            root.info("hello")
            for handler in root.handlers:
                handler.flush()
            assert (temp_data_dir / STORAGE.LOG_FILE).exists()
        finally:
            for handler in list(root.handlers):
                handler.close()
            root.handlers.clear()

    def test_setup_replaces_handlers(self, temp_data_dir):
        setup_logging(data_dir=temp_data_dir, console_output=True)
        root = setup_logging(data_dir=temp_data_dir, console_output=True)
        try:
            assert len(root.handlers) == 2
        finally:
            for handler in list(root.handlers):
                handler.close()
            root.handlers.clear()

    def test_debug_level(self, temp_data_dir):
        root = setup_logging(data_dir=temp_data_dir, debug=True, log_to_file=False)
        try:
            assert root.level == logging.DEBUG
        finally:
            root.handlers.clear()
            root.setLevel(logging.INFO)


class TestLogContext:
    """Tests for LogContext."""

    def test_records_duration(self):
        with LogContext(get_logger("tests.context"), "Operation") as ctx:
            pass
        assert ctx.duration_ms is not None
        assert ctx.duration_ms >= 0

    def test_does_not_suppress(self):
        with pytest.raises(ValueError):
            with LogContext(get_logger("tests.context"), "Operation"):
                raise ValueError("boom")
