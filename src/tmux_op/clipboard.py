"""Clipboard utility: copy and clear text via the first available system tool."""

import shutil
import subprocess  # nosec B404

from tmux_op.errors import OpError

# Preference order: WSL, macOS, X11
COPY_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("clip.exe",),
    ("pbcopy",),
    ("xclip", "-selection", "clipboard"),
)


def copy_command() -> list[str] | None:
    """Return the first available clipboard copy command, or None."""
    for cmd in COPY_COMMANDS:
        if shutil.which(cmd[0]):
            return list(cmd)
    return None


def copy(text: str) -> None:
    """Copy text to the system clipboard. The text goes through stdin, never argv.

    Raises:
        OpError: No supported clipboard tool is installed (code: ``clipboard_unavailable``).
        subprocess.CalledProcessError: The clipboard tool failed.

    """
    cmd = copy_command()
    if cmd is None:
        raise OpError("clipboard_unavailable", "No clipboard command found (clip.exe, pbcopy or xclip)")
    # S603: args are controlled literals - hardcoded clipboard commands
    subprocess.run(cmd, input=text.encode(), check=True)  # noqa: S603  # nosec B603


def clear() -> None:
    """Clear the system clipboard. No-op if no clipboard tool is available."""
    cmd = copy_command()
    if cmd is None:
        return
    # S603: args are controlled literals - hardcoded clipboard commands
    subprocess.run(cmd, input=b"", check=True)  # noqa: S603  # nosec B603
