"""Logging setup.

Log files live in `log_dir` (default `data/logs`, relative to CWD) and are
rotated daily by TimedRotatingFileHandler; a console handler mirrors
everything to stderr for container logs.

- Rotation: daily (midnight, UTC).
- Retention: `retention_days` rotated files (default 30).
- Level: `level` (default INFO); unknown names fall back to INFO.

Never log passwords or bind credentials.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler

_LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Installed handlers, removed again on reconfiguration.
_file_handler: logging.Handler | None = None
_console_handler: logging.Handler | None = None


def parse_level(level: str | None) -> int:
    level_str = (level or "INFO").strip().upper()
    if level_str not in _LEVELS:
        level_str = "INFO"
    return getattr(logging, level_str)


def setup_logging(
    level: str = "INFO",
    log_dir: str | None = "data/logs",
    retention_days: int = 30,
) -> None:
    """Configure the root logger.

    `log_dir=None` disables the file handler (console only).
    """
    global _file_handler, _console_handler

    log_level = parse_level(level)
    retention_days = max(1, min(365, int(retention_days or 30)))

    root = logging.getLogger()

    if _file_handler is not None and _file_handler in root.handlers:
        root.removeHandler(_file_handler)
        _file_handler.close()
    _file_handler = None
    if _console_handler is not None and _console_handler in root.handlers:
        root.removeHandler(_console_handler)
    _console_handler = None

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = TimedRotatingFileHandler(
            os.path.join(log_dir, "dirauth.log"),
            when="midnight",
            interval=1,
            backupCount=retention_days,
            encoding="utf-8",
            utc=True,
        )
        fh.suffix = "%Y-%m-%d"
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)
        _file_handler = fh

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)
    _console_handler = ch

    root.setLevel(log_level)

    # ldap3 has its own (very chatty) logging; keep it quiet unless debugging
    logging.getLogger("ldap3").setLevel(max(log_level, logging.WARNING))
    logging.getLogger("uvicorn.access").setLevel(max(log_level, logging.WARNING))

    logging.getLogger("dirauth").info(
        "Logging configured: level=%s, dir=%s, retention=%d days",
        logging.getLevelName(log_level), log_dir or "-", retention_days,
    )
