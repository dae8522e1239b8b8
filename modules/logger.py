"""
ログ設定モジュール
Logger factory: console plus a rotating file per logger name.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

import config

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def get_logger(name: str, log_dir: Optional[str] = None, level: Optional[str] = None) -> logging.Logger:
    """
    Creates a logger that writes to stdout and <log_dir>/<name>.log
    (rotating: 5MB x 5 files). Calling twice returns the same logger.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    log_dir = log_dir or config.LOG_DIR
    log_level = _LEVELS.get((level or config.LOG_LEVEL).upper(), logging.INFO)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    try:
        os.makedirs(log_dir, exist_ok=True)
        fh = RotatingFileHandler(
            filename=os.path.join(log_dir, f"{name}.log"),
            maxBytes=5_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        fh.setFormatter(fmt)
        fh.setLevel(log_level)
        logger.addHandler(fh)
    except OSError as e:
        # read-only install dir: console only
        logging.getLogger(__name__).warning("File logging disabled for %s: %s", name, e)

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    ch.setLevel(log_level)
    logger.addHandler(ch)

    logger.setLevel(log_level)
    logger.propagate = False
    return logger
