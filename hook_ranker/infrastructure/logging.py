from __future__ import annotations

import logging
import os


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, configuring the root handler once from HOOK_RANKER_LOG_LEVEL.

    Provider HTTP chatter (urllib3 connection logs) is kept at WARNING so that
    ranking logs stay readable at DEBUG.
    """
    logger = logging.getLogger(name)
    if not logger.handlers and not logging.getLogger().handlers:
        level = os.getenv("HOOK_RANKER_LOG_LEVEL", "INFO").upper()
        logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(levelname)s | %(name)s | %(message)s")
        logging.getLogger("urllib3").setLevel(logging.WARNING)
    return logger
