"""Logging helpers (internal).

Lightweight singleton logger honoring the level from
`custom_logo.config.log_level_name()`. Child loggers are named
``custom_logo.<component>`` so the host can silence them as a group.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from custom_logo import config as app_config

_LOCK = threading.Lock()
_PRIMARY: Optional[logging.Logger] = None
ROOT_NAME = "custom_logo"


def get_logger(name: str = ROOT_NAME) -> logging.Logger:
    global _PRIMARY
    if name == ROOT_NAME and _PRIMARY is not None:
        return _PRIMARY
    with _LOCK:
        if name == ROOT_NAME and _PRIMARY is not None:
            return _PRIMARY
        full_name = name if name.startswith(ROOT_NAME) else f"{ROOT_NAME}.{name}"
        logger = logging.getLogger(full_name)
        level_name = app_config.log_level_name()
        level = getattr(logging, level_name, logging.INFO)
        logger.setLevel(level)
        if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("[custom_logo] %(asctime)s %(levelname)s %(name)s %(message)s"))
            logger.addHandler(handler)
        logger.propagate = False
        if name == ROOT_NAME:
            _PRIMARY = logger
        return logger


__all__ = ["get_logger"]
