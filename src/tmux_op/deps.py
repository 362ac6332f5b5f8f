"""External tool dependency check."""

import shutil

from tmux_op.errors import OpError
from tmux_op.op import find_op


def check_dependencies() -> str:
    """Verify every required tool is installed and return the 1Password CLI command.

    Raises:
        OpError: One or more tools are missing; all of them are named (code: ``dependency_missing``).

    """
    missing: list[str] = []
    op_cmd = find_op()
    if op_cmd is None:
        missing.append("op (1Password CLI)")
    if not shutil.which("fzf"):
        missing.append("fzf")
    if op_cmd is None or missing:
        raise OpError("dependency_missing", f"Missing dependencies: {', '.join(missing)}")
    return op_cmd
