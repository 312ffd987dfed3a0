from __future__ import annotations

import copy
import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

REQUEST_ID: ContextVar[str] = ContextVar("request_id", default="-")

LOGGER_NAME = "uvicorn"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (shadow built-in name)
        record.request_id = REQUEST_ID.get("-")
        return True


class ColorFormatter(logging.Formatter):
    """
    Console-only ANSI formatter: blue timestamp, per-level color.
    Disabled when NO_COLOR is set or the stream is not a TTY.
    """

    _RESET = "\x1b[0m"
    _DIM = "\x1b[2m"
    _BLUE = "\x1b[34m"

    _LEVEL_COLORS: dict[int, str] = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[35m",
    }

    def __init__(self, *args, enable_color: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.enable_color = enable_color

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        ts = super().formatTime(record, datefmt)
        return f"{self._BLUE}{ts}{self._RESET}" if self.enable_color else ts

    def format(self, record: logging.LogRecord) -> str:
        if not self.enable_color:
            return super().format(record)
        r = copy.copy(record)
        color = self._LEVEL_COLORS.get(r.levelno, "\x1b[37m")
        r.levelname = f"{color}{r.levelname}{self._RESET}"
        r.request_id = f"{self._DIM}{getattr(r, 'request_id', '-')}{self._RESET}"
        return super().format(r)


def _should_enable_color(stream) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _parse_level(level: str) -> int:
    lvl = (level or "INFO").upper()
    return logging.getLevelNamesMapping().get(lvl, logging.INFO)


def configure_logging(
    *,
    log_dir: str | Path | None = None,
    log_file: str = "rxtrain.log",
    level: str | None = None,
    console: bool | None = None,
) -> logging.Logger:
    """
    Rotating file log under LOG_DIR plus an optional console handler (LOG_CONSOLE=1).
    Idempotent: safe to call multiple times.
    """
    from api.config import settings

    logger = logging.getLogger(LOGGER_NAME)
    if getattr(logger, "_configured", False):
        return logger

    numeric_level = _parse_level(level or settings.log_level)
    logger.setLevel(numeric_level)
    logger.propagate = False

    directory = Path(log_dir or settings.log_dir)
    directory.mkdir(parents=True, exist_ok=True)

    fmt = (
        "%(asctime)s %(levelname)-8s %(name)s "
        "pid=%(process)d request_id=%(request_id)s src=%(filename)s:%(lineno)d "
        "%(message)s"
    )
    datefmt = "%Y-%m-%d %H:%M:%S"
    request_filter = RequestIdFilter()

    fh = RotatingFileHandler(
        filename=str(directory / log_file),
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=10,
        encoding="utf-8",
    )
    fh.setLevel(numeric_level)
    fh.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
    fh.addFilter(request_filter)
    logger.addHandler(fh)

    if console if console is not None else os.getenv("LOG_CONSOLE") == "1":
        ch = logging.StreamHandler(sys.stdout)
        ch.setLevel(numeric_level)
        ch.setFormatter(ColorFormatter(fmt=fmt, datefmt=datefmt, enable_color=_should_enable_color(sys.stdout)))
        ch.addFilter(request_filter)
        logger.addHandler(ch)

    logger._configured = True  # type: ignore[attr-defined]
    return logger


def set_request_id(request_id: Optional[str] = None) -> str:
    rid = request_id or str(uuid.uuid4())
    REQUEST_ID.set(rid)
    return rid


def clear_request_id() -> None:
    REQUEST_ID.set("-")


class log_request:
    """
    Time a block and log its outcome:
      with log_request(logger, "team analytics"):
          ...
    """

    def __init__(self, logger: logging.Logger, name: str):
        self.logger = logger
        self.name = name
        self.start = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        self.logger.debug("start %s", self.name)
        return self

    def __exit__(self, exc_type, exc, tb):
        dur_ms = int((time.perf_counter() - self.start) * 1000)
        if exc is None:
            self.logger.info("%s ok duration_ms=%s", self.name, dur_ms)
        else:
            self.logger.error("%s failed duration_ms=%s error=%s", self.name, dur_ms, exc)
        return False
