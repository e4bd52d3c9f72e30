"""Logging configuration for the marketplace.

Standard library logging owns the handlers (stdout plus rotating files);
structlog formats events on top of it. Production and staging emit one JSON
object per line, every other environment gets the coloured console renderer.

Environment:
    LOG_LEVEL              explicit level, overrides the per-environment default
    ENVIRONMENT            development | test | staging | production
    PROTEAN_ENV            used when ENVIRONMENT is not set
    MARKETPLACE_LOG_DIR    directory for log files (default: logs)
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

_DEFAULT_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_JSON_ENVIRONMENTS = {"production", "staging"}

# Chatty third-party loggers kept at WARNING regardless of our level
_QUIET_LOGGERS = ("asyncio", "urllib3", "protean", "sqlalchemy.engine", "uvicorn.access")

_MAX_BYTES = 10 * 1024 * 1024
_BACKUP_COUNT = 5


def current_environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """LOG_LEVEL if set, else the default for the current environment."""
    return os.getenv("LOG_LEVEL", _DEFAULT_LEVELS.get(current_environment(), "INFO")).upper()


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(log_dir: str | None = None, log_file_prefix: str = "marketplace") -> None:
    """Route the root logger to stdout, ``<prefix>.log`` and ``<prefix>_error.log``."""
    level = get_log_level()
    log_path = Path(log_dir or os.getenv("MARKETPLACE_LOG_DIR", "logs"))
    log_path.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _rotating_file(log_path / f"{log_file_prefix}.log", level),
        _rotating_file(log_path / f"{log_file_prefix}_error.log", logging.ERROR),
    ]

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer(environment: str):
    if environment in _JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def setup_structlog() -> None:
    """Install the structlog processor chain for the current environment."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            _renderer(current_environment()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: str | None = None, log_file_prefix: str = "marketplace") -> None:
    """Configure stdlib handlers and structlog in one go."""
    setup_stdlib_logging(log_dir=log_dir, log_file_prefix=log_file_prefix)
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
