# qteleport/logging_config.py
from __future__ import annotations

import logging

from qteleport.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def setup_logging(level: str | int | None = None) -> None:
    """
    Configure the root handler and the level of the ``qteleport`` loggers.

    Safe to call more than once: the handler is installed on the first call,
    later calls only adjust the level.
    """
    global _configured

    if level is None:
        level = get_settings().LOG_LEVEL
    if isinstance(level, str):
        level = level.upper()

    if not _configured:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        _configured = True
    logging.getLogger("qteleport").setLevel(level)
