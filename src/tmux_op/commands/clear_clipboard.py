"""Hidden CLI command: delayed clipboard clear run by the auto-clear timer."""

import logging
import subprocess  # nosec B404
import time

import typer

from tmux_op import clipboard

logger = logging.getLogger(__name__)


def clear_clipboard(
    delay: int = typer.Option(..., "--delay", help="Seconds to wait before clearing"),
    epoch: int = typer.Option(0, "--epoch", help="Copy epoch this timer belongs to"),
) -> None:
    """Wait, then clear the clipboard. Not intended for manual use."""
    time.sleep(max(delay, 0))
    try:
        clipboard.clear()
    except (OSError, subprocess.CalledProcessError):
        logger.exception("Failed to clear clipboard (epoch %d)", epoch)
        return
    logger.info("Clipboard cleared (epoch %d)", epoch)
