import logging
import sys

from servemux.constants import LOG_FORMAT, DATE_FORMAT, LOG_LEVEL


def setup_logging(level=LOG_LEVEL):
    """
    Send all records to stdout in the listener log format.

    Args:
        level: logging level name or number; defaults to LOG_LEVEL

    Returns:
        logging.Logger: the configured root logger
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    # calling this twice must not duplicate output
    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    logger.debug("Logging set to %s", logging.getLevelName(logger.level))

    return logger
