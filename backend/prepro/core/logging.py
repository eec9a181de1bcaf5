import logging
import sys

from prepro.core.config import settings


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(f"prepro.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        fmt = "%(asctime)s [%(name)s] %(levelname)s %(message)s"
        handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
        level = settings.LOG_LEVEL.upper()
        logger.setLevel(getattr(logging, level, logging.INFO))
    return logger
