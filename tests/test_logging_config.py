"""
Tests for the console logging setup.
"""
import logging

import pytest

from app.core.logging_config import (
    QUIET_LOGGERS,
    ColoredFormatter,
    get_logger,
    is_app_logger,
    resolve_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_logging():
    """Put the root handlers and library levels back after each test"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    library_levels = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, saved in library_levels.items():
        logging.getLogger(name).setLevel(saved)


def make_record(name="app.services.rbac_service", level=logging.WARNING, msg="role not found"):
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


class TestSetupLogging:

    def test_installs_single_handler_at_level(self):
        setup_logging(log_level="debug", force_configure=True, use_colors=False)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, ColoredFormatter)

    def test_unknown_level_falls_back_to_info(self):
        assert resolve_level("chatty") == logging.INFO
        assert resolve_level("error") == logging.ERROR

    def test_existing_configuration_kept_without_force(self):
        setup_logging(log_level="ERROR", force_configure=True, use_colors=False)
        handler = logging.getLogger().handlers[0]
        setup_logging(log_level="DEBUG", use_colors=False)
        assert logging.getLogger().handlers == [handler]
        assert logging.getLogger().level == logging.ERROR

    def test_libraries_quieted_unless_sql_requested(self):
        setup_logging(log_level="DEBUG", force_configure=True, use_colors=False, log_sql=False)
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

        setup_logging(log_level="DEBUG", force_configure=True, use_colors=False, log_sql=True)
        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO
        assert logging.getLogger("uvicorn.access").level == logging.WARNING


class TestFormatter:

    def test_plain_output_without_colors(self):
        formatter = ColoredFormatter("%(name)s %(levelname)s %(message)s", use_colors=False)
        assert formatter.format(make_record()) == "app.services.rbac_service WARNING role not found"

    def test_colors_leave_the_record_untouched(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")
        monkeypatch.delenv("NO_COLOR", raising=False)
        formatter = ColoredFormatter("%(name)s %(levelname)s %(message)s")
        record = make_record()

        output = formatter.format(record)
        assert "\033[33mWARNING" in output
        assert ColoredFormatter.APP_NAME_COLOR + "app.services.rbac_service" in output
        assert record.levelname == "WARNING"
        assert record.name == "app.services.rbac_service"

    def test_library_names_colored_apart(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")
        monkeypatch.delenv("NO_COLOR", raising=False)
        formatter = ColoredFormatter("%(name)s")
        output = formatter.format(make_record(name="sqlalchemy.engine.Engine"))
        assert output.startswith(ColoredFormatter.LIBRARY_NAME_COLOR)

    def test_no_color_wins(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert ColoredFormatter(use_colors=True).use_colors is False


class TestLoggers:

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("app.services.rbac_service", True),
            ("common_utils.auth.permission_checker", True),
            ("main", True),
            ("application", False),
            ("sqlalchemy.engine", False),
        ],
    )
    def test_is_app_logger(self, name, expected):
        assert is_app_logger(name) is expected

    def test_get_logger_propagates_to_root(self):
        logger = get_logger("app.services.menu_tree_service")
        assert logger.handlers == []
        assert logger.propagate is True
