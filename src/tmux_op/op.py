"""1Password CLI client: list items, read a password field, read an OTP code."""

import logging
import re
import shutil
import subprocess  # nosec B404

from tmux_op.errors import OpError
from tmux_op.items import Item, ItemList, parse_items

logger = logging.getLogger(__name__)

# Windows binary first so WSL uses the desktop app integration
OP_COMMANDS = ("op.exe", "op")

OTP_PATTERN = re.compile(r"[0-9]{6,8}")

TROUBLESHOOTING = """Troubleshooting:
1. Check 1Password app is running
2. Enable: Settings > Developer > 'Integrate with 1Password CLI'
3. Run: op signin"""

OTP_HINT = """Note: This item may not have OTP/2FA configured
Or the item name may contain special characters"""

_AUTH_MARKERS = ("not currently signed in", "sign in", "signin", "authorization", "unauthorized", "session expired", "locked")
_NOT_FOUND_MARKERS = ("isn't an item", "not found", "no item")


def find_op() -> str | None:
    """Return the first available 1Password CLI command, or None."""
    for cmd in OP_COMMANDS:
        if shutil.which(cmd):
            return cmd
    return None


def first_line(text: str) -> str:
    """First non-empty line of tool output."""
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def classify_failure(output: str) -> OpError:
    """Map a failed op invocation to an OpError using its first output line."""
    line = first_line(output) or "op exited with an error"
    lowered = line.lower()
    if any(marker in lowered for marker in _AUTH_MARKERS):
        code = "auth_required"
    elif any(marker in lowered for marker in _NOT_FOUND_MARKERS):
        code = "not_found"
    else:
        code = "tool_error"
    return OpError(code, f"1Password CLI error: {line}", TROUBLESHOOTING)


class OpClient:
    """Runs the 1Password CLI. Arguments are always passed as a list, never through a shell."""

    def __init__(self, op_cmd: str, *, account: str = "") -> None:
        """Initialize the client.

        Args:
            op_cmd: 1Password CLI executable (``op`` or ``op.exe``).
            account: Optional account shorthand, email or ID passed as ``--account``.

        """
        self._op_cmd = op_cmd
        self._account = account

    def list_items(self, *, vault: str = "", categories: str = "") -> ItemList:
        """List item metadata, optionally filtered by vault and categories.

        Raises:
            OpError: op failed (code: ``auth_required``, ``not_found`` or ``tool_error``)
                or returned something other than a JSON array (code: ``tool_error``).

        """
        args = ["item", "list", "--format=json"]
        if vault:
            args.extend(["--vault", vault])
        if self._account:
            args.extend(["--account", self._account])
        if categories:
            args.extend(["--categories", categories])

        result = self._run(args)
        if result.returncode != 0:
            raise classify_failure(result.stderr.decode(errors="replace") or result.stdout.decode(errors="replace"))
        try:
            items = parse_items(result.stdout)
        except ValueError:
            line = first_line(result.stdout.decode(errors="replace")) or "empty response"
            raise OpError("tool_error", f"1Password CLI error: {line}", TROUBLESHOOTING) from None
        logger.info("Listed %d items", len(items))
        return items

    def read_password(self, item: Item) -> str:
        """Read the password field of an item via ``op read``.

        Raises:
            OpError: op failed (see ``classify_failure``) or returned nothing usable (code: ``secret_fetch_failed``).

        """
        args = ["read", item.reference]
        if self._account:
            args.extend(["--account", self._account])

        result = self._run(args)
        stderr = result.stderr.decode(errors="replace")
        if result.returncode != 0 and first_line(stderr):
            raise classify_failure(stderr)
        if result.returncode != 0:
            raise OpError("secret_fetch_failed", "Failed to get password")
        try:
            # op read appends a single newline; anything else belongs to the password
            password = result.stdout.decode().removesuffix("\n").removesuffix("\r")
        except UnicodeDecodeError:
            raise OpError("secret_fetch_failed", "Failed to get password: output is not valid UTF-8") from None
        if not password:
            raise OpError("secret_fetch_failed", "Failed to get password")
        return password

    def read_otp(self, title: str, *, vault: str = "") -> str:
        """Read the current OTP code of an item.

        A failed op call is never taken for a code. A successful one must still print 6 to 8 digits.

        Raises:
            OpError: op failed or printed nothing (code: ``secret_fetch_failed``)
                or printed a malformed code (code: ``invalid_otp_format``).

        """
        args = ["item", "get", title, "--otp"]
        if vault:
            args.extend(["--vault", vault])
        if self._account:
            args.extend(["--account", self._account])

        result = self._run(args)
        code = result.stdout.decode(errors="replace").strip()
        error = first_line(result.stderr.decode(errors="replace"))
        if result.returncode != 0 or not code:
            message = f"Failed to get OTP code: {error}" if error else "Failed to get OTP code"
            raise OpError("secret_fetch_failed", message, OTP_HINT)
        if not OTP_PATTERN.fullmatch(code):
            raise OpError("invalid_otp_format", "Failed to get OTP code: not a 6-8 digit code", OTP_HINT)
        return code

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[bytes]:
        logger.debug("Running %s %s", self._op_cmd, args[0:2])
        try:
            # S603: argv list built from discrete tokens, no shell involved
            return subprocess.run([self._op_cmd, *args], capture_output=True, check=False)  # noqa: S603  # nosec B603
        except OSError as e:
            reason = e.strerror or type(e).__name__
            logger.warning("Could not start %s: %s", self._op_cmd, reason)
            raise OpError("tool_error", f"Could not run {self._op_cmd}: {reason}", TROUBLESHOOTING) from None
