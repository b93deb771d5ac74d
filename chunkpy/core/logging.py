"""Logger factory for the chunkpy.* namespace."""

import logging


def get_logger(name: str) -> logging.Logger:
    """Return a chunkpy logger that stays quiet until the application configures logging.

    Engine, transport and source modules call this at import time. Their
    records propagate to the root logger, so logging.basicConfig() or
    chunkpy.setup_logging() is enough to see per-chunk debug output. If
    nothing is configured yet, the logger is held at WARNING so retries
    and best-effort failures are the only records that surface.

    Args:
        name: Dotted logger name, e.g. 'chunkpy.upload.engine'

    Returns:
        The logger
    """
    logger = logging.getLogger(name)
    logger.propagate = True

    # explicit levels from setup_logging() win
    if not logging.getLogger().handlers and logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)

    return logger
