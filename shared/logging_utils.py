"""Root logger setup shared by the API process and scripts."""

from __future__ import annotations

import logging

from shared import config

_LOGGER_INITIALISED = False


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once, using ``LOG_LEVEL`` when no level is given."""

    global _LOGGER_INITIALISED
    if _LOGGER_INITIALISED:
        return

    level_name = (level or config.log_level()).upper()
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True
