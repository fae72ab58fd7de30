"""Application-wide logger set up with a rotating file handler."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from core.settings import LOGGING


def _ensure_root_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGING.logger_name)
    if not logger.handlers:
        LOGGING.log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            LOGGING.log_path,
            maxBytes=LOGGING.max_bytes,
            backupCount=LOGGING.backup_count,
            encoding="utf-8",
        )
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(LOGGING.level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return ``apexhour.<name>``; the parent logger is configured on first use."""
    _ensure_root_logger()
    return logging.getLogger(f"{LOGGING.logger_name}.{name}")


__all__ = ["get_logger"]
