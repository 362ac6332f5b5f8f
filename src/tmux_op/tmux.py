"""tmux host: global options, pane injection, popup key bindings."""

import logging
import shlex
import subprocess  # nosec B404

from tmux_op.errors import OpError

logger = logging.getLogger(__name__)

# Named buffer used to move a password into a pane without putting it on a command line
PASTE_BUFFER = "tmux-op"


def parse_options(text: str) -> dict[str, str]:
    """Parse ``tmux show-options`` output into a name -> value mapping.

    Lines look like ``@1password-key u`` or ``@1password-vault ""``; values are
    shell-quoted by tmux. An option set to an empty string maps to ``""``.
    """
    options: dict[str, str] = {}
    for line in text.splitlines():
        try:
            parts = shlex.split(line)
        except ValueError:
            logger.warning("Skipping unparsable tmux option line")
            continue
        if not parts:
            continue
        options[parts[0]] = " ".join(parts[1:])
    return options


class Tmux:
    """Thin wrapper over the tmux command line."""

    def __init__(self, tmux_cmd: str = "tmux") -> None:
        """Initialize with the tmux executable."""
        self._tmux_cmd = tmux_cmd

    def global_options(self) -> dict[str, str]:
        """Read all global options in a single call. Empty when tmux is unavailable."""
        try:
            result = self._run(["show-options", "-g"], check=False)
        except OSError:
            logger.warning("tmux not available, using default options")
            return {}
        if result.returncode != 0:
            logger.warning("tmux show-options failed, using default options")
            return {}
        return parse_options(result.stdout.decode(errors="replace"))

    def send_text(self, text: str, target: str | None = None) -> None:
        """Type text into a pane as if the user had entered it.

        The text reaches tmux through stdin into a named buffer that is deleted on paste.

        Raises:
            OpError: tmux refused the buffer or the paste (code: ``pane_injection_failed``).

        """
        paste = ["paste-buffer", "-d", "-b", PASTE_BUFFER]
        if target:
            paste.extend(["-t", target])
        try:
            self._run(["load-buffer", "-b", PASTE_BUFFER, "-"], input_=text.encode(), check=True)
            self._run(paste, check=True)
        except (OSError, subprocess.CalledProcessError):
            self._delete_buffer()
            raise OpError("pane_injection_failed", "Failed to send password to pane") from None

    def _delete_buffer(self) -> None:
        """Drop the paste buffer after a failed paste so the password does not linger in tmux."""
        try:
            self._run(["delete-buffer", "-b", PASTE_BUFFER], check=False)
        except OSError:
            logger.warning("Could not delete tmux buffer %s", PASTE_BUFFER)

    def bind_popup(self, key: str, command: str, *, width: str, height: str) -> None:
        """Bind a prefix key to open ``command`` in a popup that closes when it exits.

        Raises:
            subprocess.CalledProcessError: tmux rejected the binding.

        """
        self._run(["bind-key", key, "display-popup", "-E", "-w", width, "-h", height, command], check=True)
        logger.info("Bound %r to %s", key, command)

    def _run(self, args: list[str], *, input_: bytes | None = None, check: bool) -> subprocess.CompletedProcess[bytes]:
        # S603: argv list, no shell
        return subprocess.run([self._tmux_cmd, *args], input=input_, capture_output=True, check=check)  # noqa: S603  # nosec B603
