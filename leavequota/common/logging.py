"""Logging setup — stdlib logging configured once from settings.LOG_LEVEL."""

import logging

from leavequota.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger. Safe to call more than once."""
    name = (level or settings.LOG_LEVEL or "info").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
    logging.getLogger("leavequota").setLevel(getattr(logging, name, logging.INFO))
