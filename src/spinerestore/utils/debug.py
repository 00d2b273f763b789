"""Universal debug/logging utility for spinerestore.

Configures the package logger. Debug output is controlled by the
SPINERESTORE_DEBUG environment variable.
Modules log through ``logging.getLogger(__name__)``; everything lives under the
``spinerestore`` logger configured here.
"""

import logging
import os
from typing import Optional

LOGGER_NAME = "spinerestore"
DEBUG_ON = os.getenv("SPINERESTORE_DEBUG", "0") == "1"

_logger: Optional[logging.Logger] = None


def setup_logger(level: Optional[int] = None) -> logging.Logger:
    global _logger
    if _logger is not None:
        if level is not None:
            _logger.setLevel(level)
        return _logger
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("[%(levelname)s] %(asctime)s %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    if level is None:
        level = logging.DEBUG if DEBUG_ON else logging.INFO
    logger.setLevel(level)
    _logger = logger
    return logger

