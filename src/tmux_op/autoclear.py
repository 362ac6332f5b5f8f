"""Clipboard lifecycle: copy a secret, then clear it after a delay.

The clear runs in a detached ``tmux-op clear-clipboard`` process so it survives the
popup closing. Within one invocation a newer copy terminates the older timer;
separate invocations are not coordinated, so an older timer from another popup
can still clear a newer value.
"""

import logging
import subprocess  # nosec B404
from dataclasses import dataclass

from tmux_op import clipboard

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClearTimer:
    """A pending detached clipboard clear."""

    epoch: int
    delay: int
    process: subprocess.Popen[bytes]

    @property
    def pending(self) -> bool:
        """Whether the timer process has not finished yet."""
        return self.process.poll() is None

    def cancel(self) -> None:
        """Stop the timer before it fires."""
        if self.pending:
            self.process.terminate()


class ClipboardLifecycle:
    """Copies secrets to the clipboard and schedules their removal."""

    def __init__(self, base_args: list[str]) -> None:
        """Initialize the lifecycle.

        Args:
            base_args: CLI prefix used to launch the detached clear command (e.g. ``["tmux-op"]``).

        """
        self._base_args = base_args
        self._epoch = 0
        self._timer: ClearTimer | None = None

    @property
    def epoch(self) -> int:
        """Number of copies made through this lifecycle."""
        return self._epoch

    def copy(self, secret: str) -> None:
        """Copy a secret to the clipboard and start a new copy epoch.

        Raises:
            OpError: No clipboard tool available (code: ``clipboard_unavailable``).
            subprocess.CalledProcessError: The clipboard tool failed.

        """
        clipboard.copy(secret)
        self._epoch += 1

    def schedule_clear(self, delay: int) -> ClearTimer | None:
        """Schedule a detached clipboard clear after ``delay`` seconds and return immediately.

        A delay of zero or less leaves the clipboard untouched. A timer left over from an
        earlier copy is cancelled so it cannot wipe the current value.
        """
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if delay <= 0:
            return None

        args = [*self._base_args, "clear-clipboard", "--delay", str(delay), "--epoch", str(self._epoch)]
        try:
            # S603: args are controlled literals - our own CLI entry point
            process = subprocess.Popen(  # noqa: S603  # nosec B603
                args,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError:
            logger.exception("Failed to start clipboard clear timer")
            return None
        self._timer = ClearTimer(epoch=self._epoch, delay=delay, process=process)
        logger.info("Scheduled clipboard clear in %ds (epoch %d, pid %d)", delay, self._epoch, process.pid)
        return self._timer
