import logging
from typing import Optional

from zonestore.core.config import settings

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

logger = logging.getLogger("zonestore")


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """Attach console (and optionally file) handlers to the package logger.

    Defaults come from settings; calling it twice does not duplicate handlers.
    """
    level = level or settings.LOG_LEVEL
    log_file = log_file or settings.LOG_FILE

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level.upper())
    return logger
