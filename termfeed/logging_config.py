"""Logging setup for termfeed.

The terminal belongs to the UI while the reader runs, so log records go to a
rotating file in the data directory instead of stderr.
"""

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from termfeed.config import AppConfig, get_config

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

logger = logging.getLogger("termfeed")


def setup_logging(config: Optional[AppConfig] = None) -> logging.Logger:
    """Configure the ``termfeed`` logger hierarchy.

    Safe to call more than once; previously installed handlers are replaced.

    Args:
        config: Optional configuration (uses the process-wide one if omitted)

    Returns:
        The package root logger
    """
    if config is None:
        config = get_config()

    level = logging.getLevelName(config.log_level)
    if not isinstance(level, int):
        level = logging.INFO

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    try:
        config.data_dir.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            config.log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
        )
    except OSError:
        # Unwritable data dir: keep running without a log file.
        handler = logging.NullHandler()

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    logger.debug(f"Logging initialized at level {config.log_level} -> {config.log_path}")
    return logger
