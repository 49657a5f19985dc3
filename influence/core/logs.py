"""
logging setup for influence.
"""

import logging
from typing import Optional, Union

logger = logging.getLogger("influence")


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None
):
    """
    setup influence logging.
    call once at startup.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    formatter = logging.Formatter(
        "%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    # repeated calls replace handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    logger.setLevel(level)
    logger.addHandler(console_handler)

    # file handler if specified
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    return logger
