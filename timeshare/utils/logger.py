"""
Module-level structured logging.
"""

import logging
import sys

from timeshare.config import settings


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(f"timeshare.{name}")

    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        fmt = logging.Formatter(
            "[%(asctime)s] %(levelname)-8s %(name)-25s  %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        console = logging.StreamHandler(sys.stdout)
        console.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
        console.setFormatter(fmt)
        logger.addHandler(console)

        if settings.LOG_FILE:
            file_handler = logging.FileHandler(settings.LOG_FILE, encoding="utf-8")
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(fmt)
            logger.addHandler(file_handler)

    return logger
