"""
Console logging for the RBAC service.

Application loggers (``app.*``, ``common_utils.*``, ``main``) follow
``LOG_LEVEL``; driver and server chatter is held at WARNING unless
``LOG_SQL`` asks for the SQLAlchemy statements.
"""
import logging
import os
import sys
from typing import Dict, Optional

from app.config import settings

APP_LOGGER_PREFIXES = ("app", "common_utils", "main")

QUIET_LOGGERS: Dict[str, int] = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "multipart": logging.WARNING,
    "httpx": logging.WARNING,
}

DEFAULT_FORMAT = (
    '%(asctime)s │ %(name)-32s │ %(levelname)-8s │ %(message)s'
)

RESET = '\033[0m'


def is_app_logger(name: str) -> bool:
    return any(name == prefix or name.startswith(prefix + ".") for prefix in APP_LOGGER_PREFIXES)


def resolve_level(log_level: Optional[str]) -> int:
    """Level name to number; unknown names fall back to INFO"""
    level = logging.getLevelName((log_level or settings.LOG_LEVEL).upper())
    return level if isinstance(level, int) else logging.INFO


class ColoredFormatter(logging.Formatter):
    """Colors the level, and tells service loggers apart from library ones"""

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[1;91m',
        'CRITICAL': '\033[1;95m',
    }
    APP_NAME_COLOR = '\033[94m'
    LIBRARY_NAME_COLOR = '\033[90m'

    def __init__(self, format_string: str = DEFAULT_FORMAT, use_colors: bool = True):
        super().__init__(format_string)
        self.use_colors = use_colors and self._terminal_supports_colors()

    @staticmethod
    def _terminal_supports_colors() -> bool:
        if os.environ.get('NO_COLOR'):
            return False
        if os.environ.get('FORCE_COLOR'):
            return True
        return os.environ.get('TERM') != 'dumb' and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)
        # Color a copy so other handlers see the plain record
        record = logging.makeLogRecord(record.__dict__)
        level_color = self.LEVEL_COLORS.get(record.levelname, RESET)
        name_color = self.APP_NAME_COLOR if is_app_logger(record.name) else self.LIBRARY_NAME_COLOR
        record.levelname = f"{level_color}{record.levelname}{RESET}"
        record.name = f"{name_color}{record.name}{RESET}"
        return super().format(record)


def setup_logging(
    log_level: Optional[str] = None,
    format_string: Optional[str] = None,
    force_configure: bool = False,
    use_colors: Optional[bool] = None,
    log_sql: Optional[bool] = None,
) -> None:
    """
    Install one stdout handler on the root logger and quiet the noisy
    libraries. Arguments left as None come from settings.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers and not force_configure:
        return

    numeric_level = resolve_level(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(numeric_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(ColoredFormatter(
        format_string or DEFAULT_FORMAT,
        use_colors=settings.LOG_COLORS if use_colors is None else use_colors,
    ))
    root_logger.addHandler(console_handler)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
    if settings.LOG_SQL if log_sql is None else log_sql:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    root_logger.debug(f"Logging configured with level {logging.getLevelName(numeric_level)}")


def get_logger(name: str) -> logging.Logger:
    """Named logger that writes through the root handler only"""
    logger = logging.getLogger(name)
    logger.handlers = []
    logger.propagate = True
    return logger
