"""Logging for tmux-op.

Popups, key binding and detached clear timers are separate processes that
append to the same rotating file, so every line carries the process id and
the CLI command that wrote it.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "tmux_op"
LOG_FORMAT = "%(asctime)s %(process)d %(command)s %(levelname)s %(name)s: %(message)s"


class CommandFilter(logging.Filter):
    """Stamp records with the name of the running CLI command."""

    def __init__(self, command: str) -> None:
        """Initialize with the command name, or "-" outside a command."""
        super().__init__()
        self.command = command

    def filter(self, record: logging.LogRecord) -> bool:
        """Add the ``command`` attribute used by LOG_FORMAT."""
        record.command = self.command
        return True


def setup_logging(log_path: Path, command: str | None) -> None:
    """Attach the rotating file handler to the ``tmux_op`` logger, once per process.

    Item titles and vault names may be logged. Secrets must never reach this logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return

    handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.addFilter(CommandFilter(command or "-"))

    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    logger.debug("Logging to %s", log_path)
