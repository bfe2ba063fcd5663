"""loguru setup shared by the HTTP app and the tests.

Every record carries the correlation id of the request that produced it.
Messages pass through ``sanitize_record`` before reaching any sink, so
passwords, session tokens and verification codes never land on disk.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_NO_CORRELATION = "-"
_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default=_NO_CORRELATION)

# Chatty third-party loggers routed through loguru.
_QUIET_LOGGERS = {
    "werkzeug": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "PIL": logging.WARNING,
}


@dataclass(frozen=True)
class LogSettings:
    level: str
    file: Path
    rotation: str
    retention: str

    @classmethod
    def from_env(cls, level: str | None = None, *, debug_mode: bool = False) -> LogSettings:
        default_file = Path(__file__).resolve().parents[2] / "instance" / "app.log"
        return cls(
            level=(level or os.getenv("LOG_LEVEL") or ("DEBUG" if debug_mode else "INFO")).upper(),
            file=Path(os.getenv("LOG_FILE") or default_file),
            rotation=os.getenv("LOG_ROTATION", "10 MB"),
            retention=os.getenv("LOG_RETENTION", "14 days"),
        )


class _InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.opt(depth=6, exception=record.exc_info).bind(
            correlation_id=_CORRELATION_ID.get()
        ).log(level, record.getMessage())


class ContextualLogger:
    """Binds the current correlation id on every attribute access."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(correlation_id=_CORRELATION_ID.get()), name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or _NO_CORRELATION)


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def clear_correlation_id() -> None:
    _CORRELATION_ID.set(_NO_CORRELATION)


@contextmanager
def correlation_scope(value: str) -> Iterator[str]:
    token = _CORRELATION_ID.set(value)
    try:
        yield value
    finally:
        _CORRELATION_ID.reset(token)


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> LogSettings:
    settings = LogSettings.from_env(level, debug_mode=debug_mode)
    settings.file.parent.mkdir(parents=True, exist_ok=True)

    _logger.remove()
    _logger.configure(extra={"correlation_id": _NO_CORRELATION}, patcher=sanitize_record)
    _logger.add(sys.stderr, level=settings.level, format=_FMT, backtrace=False, diagnose=False)
    _logger.add(
        settings.file,
        level=settings.level,
        format=_FMT,
        colorize=False,
        backtrace=False,
        diagnose=False,
        enqueue=True,
        rotation=settings.rotation,
        retention=settings.retention,
        encoding="utf-8",
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
    return settings


logger = ContextualLogger()

__all__ = [
    "LogSettings",
    "clear_correlation_id",
    "correlation_scope",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
