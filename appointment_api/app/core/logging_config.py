"""
Logging configuration for the Appointment API.

``setup_logging`` takes the application ``Settings`` and installs a
console handler, plus a file handler when ``LOG_FILE`` is set, on the
root logger.  ``DEBUG=true`` forces the ``DEBUG`` level whatever
``LOG_LEVEL`` says.  Handlers are tagged by name so that calling
``create_app`` more than once (tests, reloads) does not duplicate
output.
"""

import logging
from pathlib import Path
from typing import List

from .config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER = "appointment_api.console"
FILE_HANDLER = "appointment_api.file"


def resolve_level(config: Settings) -> int:
    """Numeric log level for ``config``; unknown names fall back to INFO."""
    if config.debug:
        return logging.DEBUG
    level = logging.getLevelName(config.log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(config: Settings) -> List[logging.Handler]:
    """Configure the root logger from ``config``.

    Returns the handlers that were added; an empty list means logging
    had already been configured by an earlier call.
    """
    root = logging.getLogger()
    root.setLevel(resolve_level(config))
    if any(h.get_name() == CONSOLE_HANDLER for h in root.handlers):
        return []

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.set_name(CONSOLE_HANDLER)
    added: List[logging.Handler] = [console_handler]

    if config.log_file:
        file_handler = logging.FileHandler(Path(config.log_file).resolve(), encoding="utf-8")
        file_handler.set_name(FILE_HANDLER)
        added.append(file_handler)

    for handler in added:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return added
