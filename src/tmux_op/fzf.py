"""Interactive item selection through fzf."""

import logging
import subprocess  # nosec B404
from collections.abc import Sequence

from tmux_op.errors import OpError
from tmux_op.items import Item

logger = logging.getLogger(__name__)

# fzf exit codes meaning "nothing chosen": no match, interrupted with Esc/Ctrl-C
_NO_SELECTION_CODES = (1, 130)


def fzf_args(prompt: str) -> list[str]:
    """fzf arguments: show title and vault, keep the id hidden."""
    return [
        "fzf",
        "--layout=reverse",
        "--border",
        f"--prompt={prompt}",
        "--delimiter=\t",
        "--with-nth=1,2",
        "--preview=echo {1}",
        "--preview-window=up:3:wrap",
    ]


class Selector:
    """Runs fzf over a list of items and returns the user's pick."""

    def __init__(self, prompt: str = "1Password > ") -> None:
        """Initialize the selector with the fzf prompt text."""
        self._prompt = prompt

    def select(self, items: Sequence[Item]) -> Item | None:
        """Let the user pick one item. Return None if the selection was cancelled or empty.

        Raises:
            OpError: fzf failed for a reason other than cancellation (code: ``selector_error``).

        """
        lines = "\n".join(item.fzf_line() for item in items) + "\n"
        try:
            # S603: args are controlled literals plus the prompt; fzf draws its UI on /dev/tty
            result = subprocess.run(fzf_args(self._prompt), input=lines.encode(), stdout=subprocess.PIPE, check=False)  # noqa: S603  # nosec B603
        except OSError as e:
            raise OpError("selector_error", f"Could not run fzf: {e.strerror or type(e).__name__}") from None
        if result.returncode in _NO_SELECTION_CODES:
            return None
        if result.returncode != 0:
            raise OpError("selector_error", f"fzf exited with status {result.returncode}")

        selected = result.stdout.decode(errors="replace").rstrip("\n")
        if not selected:
            return None
        for item in items:
            if item.fzf_line() == selected:
                return item
        logger.warning("fzf returned a line that matches no listed item")
        return None
