"""Console logging helpers shared by the sync scripts."""

import logging

import config

LOGGER_NAME = "app_event_sync"

logger = logging.getLogger(LOGGER_NAME)
if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    logger.addHandler(_handler)
logger.setLevel(getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO))


def debug(msg: str) -> None:
    logger.debug(msg)


def info(msg: str) -> None:
    logger.info(msg)


def ok(msg: str) -> None:
    logger.info(f"[OK] {msg}")


def warn(msg: str) -> None:
    logger.warning(msg)


def error(msg: str) -> None:
    logger.error(msg)
