import logging
from logging.handlers import RotatingFileHandler

from . import config


def setup_logging():
    """Attach file and console handlers to the "architect" logger tree.

    Every module logs through a child logger ("architect.<module>"), so
    handlers live only here. Safe to call more than once.
    """
    logger = logging.getLogger("architect")

    # Guard against duplicate handlers on repeated calls
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter("%(asctime)s | %(name)s | %(levelname)s | %(message)s")

    # File handler: rotating, DEBUG level
    config.LOG_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        config.LOG_DIR / "architect.log",
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=3,
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Console handler: WARNING level (keep terminal quiet)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger
