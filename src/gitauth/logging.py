"""Application logging helpers."""

from __future__ import annotations

import logging as py_logging
import sys
from pathlib import Path
from typing import TextIO

from gitauth.security import mask_secrets

LOG_LEVELS = {
    "DEBUG": py_logging.DEBUG,
    "INFO": py_logging.INFO,
    "WARN": py_logging.WARNING,
    "WARNING": py_logging.WARNING,
    "ERROR": py_logging.ERROR,
}
LOGGER_NAME = "gitauth"
DEFAULT_LOG_PATH = Path("~/.config/gitauth/logs/gitauth.log")
_FALLBACK_LOG_PATH = Path(".gitauth/logs/gitauth.log")
_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"


def default_log_path() -> Path:
    try:
        resolved = DEFAULT_LOG_PATH.expanduser()
    except RuntimeError:
        resolved = (Path.cwd() / _FALLBACK_LOG_PATH).resolve()
    else:
        if not resolved.is_absolute():
            resolved = resolved.resolve()
    return resolved


class SecretMaskingFilter(py_logging.Filter):
    """Rewrite each record so URL credentials, bearer headers and GitHub tokens are masked."""

    def filter(self, record: py_logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_secrets(message)
        if masked != message:
            record.msg = masked
            record.args = None
        if record.exc_info and not record.exc_text:
            record.exc_text = py_logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = mask_secrets(record.exc_text)
        return True


def _resolve_level(level: str) -> int:
    normalized = level.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    return LOG_LEVELS.get(normalized, py_logging.INFO)


def configure_logging(
    level: str = "INFO",
    stream: TextIO | None = None,
    *,
    log_file: str | Path | None = None,
) -> py_logging.Logger:
    resolved = _resolve_level(level)

    logger = py_logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()
    formatter = py_logging.Formatter(_FORMAT)
    masking = SecretMaskingFilter()

    handler = py_logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(formatter)
    handler.addFilter(masking)
    logger.addHandler(handler)

    if log_file:
        try:
            log_path = Path(log_file).expanduser()
        except RuntimeError:
            log_path = Path(log_file)
        if not log_path.is_absolute():
            log_path = log_path.resolve()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = py_logging.FileHandler(log_path, encoding="utf-8")
        except OSError:
            pass
        else:
            file_handler.setLevel(py_logging.DEBUG)
            file_handler.setFormatter(formatter)
            file_handler.addFilter(masking)
            logger.addHandler(file_handler)

    logger.propagate = False
    return logger
