from __future__ import annotations

import logging

from context_engine.config.settings import get_settings

LOGGER_NAME = "context_engine"


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a single stream handler to the ``context_engine`` logger tree."""
    engine_logger = logging.getLogger(LOGGER_NAME)
    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if not engine_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(levelname)s:     %(name)s - %(message)s")
        )
        engine_logger.addHandler(handler)
    engine_logger.setLevel(level)
    engine_logger.propagate = False
    return engine_logger
