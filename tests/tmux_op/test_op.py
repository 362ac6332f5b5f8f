"""Tests for the 1Password CLI client."""

import json
import subprocess

import pytest
from conftest import FakeRun

from tmux_op.errors import OpError
from tmux_op.items import Item
from tmux_op.op import OpClient, classify_failure, find_op

LIST_JSON = json.dumps(
    [
        {"id": "a1", "title": "GitHub", "vault": {"name": "Work"}},
        {"id": "b2", "title": "Bank", "vault": {"name": "Personal"}},
    ]
).encode()
GITHUB = Item("GitHub", "Work", "a1")


class TestFindOp:
    """CLI command detection."""

    def test_prefers_windows_binary(self, installed: set[str]) -> None:
        """op.exe wins over op (WSL)."""
        installed.update({"op", "op.exe"})
        assert find_op() == "op.exe"

    def test_op(self, installed: set[str]) -> None:
        """Plain op is used when op.exe is absent."""
        installed.add("op")
        assert find_op() == "op"

    def test_missing(self, installed: set[str]) -> None:
        """None when no CLI is installed."""
        assert find_op() is None


class TestListItems:
    """op item list."""

    def test_args_with_filters(self, fake_run: FakeRun) -> None:
        """Every filter is a discrete argv token."""
        fake_run.queue(stdout=LIST_JSON)
        OpClient("op", account="me@example.com").list_items(vault="Work; rm -rf ~", categories="Login")
        assert fake_run.argvs[0] == [
            "op", "item", "list", "--format=json",
            "--vault", "Work; rm -rf ~",
            "--account", "me@example.com",
            "--categories", "Login",
        ]  # fmt: skip

    def test_args_without_filters(self, fake_run: FakeRun) -> None:
        """Empty filters are omitted."""
        fake_run.queue(stdout=LIST_JSON)
        OpClient("op").list_items()
        assert fake_run.argvs[0] == ["op", "item", "list", "--format=json"]

    def test_never_uses_shell(self, fake_run: FakeRun) -> None:
        """op runs without a shell."""
        fake_run.queue(stdout=LIST_JSON)
        OpClient("op").list_items()
        assert not fake_run.calls[0][1].get("shell")

    def test_parses_items(self, fake_run: FakeRun) -> None:
        """Items come back in order."""
        fake_run.queue(stdout=LIST_JSON)
        items = OpClient("op").list_items()
        assert [(i.title, i.vault_name, i.id) for i in items] == [("GitHub", "Work", "a1"), ("Bank", "Personal", "b2")]

    def test_auth_error(self, fake_run: FakeRun) -> None:
        """Sign-in failures are auth_required and show only the first line."""
        fake_run.queue(returncode=1, stderr=b"[ERROR] 2024/01/01 You are not currently signed in.\nmore detail\n")
        with pytest.raises(OpError) as exc_info:
            OpClient("op").list_items()
        assert exc_info.value.code == "auth_required"
        assert "more detail" not in str(exc_info.value)
        assert "op signin" in exc_info.value.hint

    def test_invalid_json(self, fake_run: FakeRun) -> None:
        """Unparsable output is a tool error."""
        fake_run.queue(stdout=b"garbage\n")
        with pytest.raises(OpError) as exc_info:
            OpClient("op").list_items()
        assert exc_info.value.code == "tool_error"
        assert "garbage" in str(exc_info.value)


class TestCannotStart:
    """op that exists on PATH but cannot be executed."""

    @pytest.fixture(autouse=True)
    def broken_op(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def run(args: list[str], **kwargs: object) -> subprocess.CompletedProcess[bytes]:
            raise OSError(8, "Exec format error")

        monkeypatch.setattr(subprocess, "run", run)

    def test_list_items(self) -> None:
        """Listing reports a tool error with the OS reason."""
        with pytest.raises(OpError) as exc_info:
            OpClient("op.exe").list_items()
        assert exc_info.value.code == "tool_error"
        assert "Exec format error" in str(exc_info.value)
        assert "op signin" in exc_info.value.hint

    def test_read_password(self) -> None:
        """Reading a password reports the same tool error."""
        with pytest.raises(OpError) as exc_info:
            OpClient("op").read_password(GITHUB)
        assert exc_info.value.code == "tool_error"


class TestClassifyFailure:
    """Error classification from op output."""

    def test_not_found(self) -> None:
        """Unknown item is not_found."""
        assert classify_failure('[ERROR] "Nope" isn\'t an item.').code == "not_found"

    def test_other(self) -> None:
        """Anything else is a generic tool error."""
        assert classify_failure("[ERROR] connection reset").code == "tool_error"

    def test_empty_output(self) -> None:
        """No output still yields a message."""
        error = classify_failure("")
        assert error.code == "tool_error"
        assert str(error)


class TestReadPassword:
    """op read."""

    def test_reference_and_account(self, fake_run: FakeRun) -> None:
        """Reads op://vault/title/password with --account."""
        fake_run.queue(stdout=b"hunter2\n")
        OpClient("op", account="me").read_password(GITHUB)
        assert fake_run.argvs[0] == ["op", "read", "op://Work/GitHub/password", "--account", "me"]

    def test_strips_one_newline(self, fake_run: FakeRun) -> None:
        """Only the trailing newline is removed; spaces are part of the password."""
        fake_run.queue(stdout=b" pass word \n")
        assert OpClient("op").read_password(GITHUB) == " pass word "

    def test_empty(self, fake_run: FakeRun) -> None:
        """Empty output is secret_fetch_failed."""
        fake_run.queue(stdout=b"\n")
        with pytest.raises(OpError) as exc_info:
            OpClient("op").read_password(GITHUB)
        assert exc_info.value.code == "secret_fetch_failed"

    def test_failure(self, fake_run: FakeRun) -> None:
        """Non-zero exit with an error line is classified."""
        fake_run.queue(returncode=1, stderr=b"[ERROR] could not read secret: item not found\n")
        with pytest.raises(OpError) as exc_info:
            OpClient("op").read_password(GITHUB)
        assert exc_info.value.code == "not_found"

    def test_silent_failure_ignores_output(self, fake_run: FakeRun) -> None:
        """A non-zero exit without an error line is never taken for a password."""
        fake_run.queue(returncode=1, stdout=b"hunter2\n")
        with pytest.raises(OpError) as exc_info:
            OpClient("op").read_password(GITHUB)
        assert exc_info.value.code == "secret_fetch_failed"

    def test_not_utf8(self, fake_run: FakeRun) -> None:
        """Undecodable output is secret_fetch_failed and its bytes stay out of the message."""
        fake_run.queue(stdout=b"\xff\xfesecret\n")
        with pytest.raises(OpError) as exc_info:
            OpClient("op").read_password(GITHUB)
        assert exc_info.value.code == "secret_fetch_failed"
        assert "secret" not in str(exc_info.value)


class TestReadOtp:
    """op item get --otp."""

    def test_args(self, fake_run: FakeRun) -> None:
        """Title, vault and account are discrete tokens."""
        fake_run.queue(stdout=b"123456\n")
        OpClient("op", account="me").read_otp("GitHub", vault="Work")
        assert fake_run.argvs[0] == ["op", "item", "get", "GitHub", "--otp", "--vault", "Work", "--account", "me"]

    @pytest.mark.parametrize("code", ["123456", "1234567", "12345678"])
    def test_accepted(self, fake_run: FakeRun, code: str) -> None:
        """6 to 8 digits are accepted."""
        fake_run.queue(stdout=f"{code}\n".encode())
        assert OpClient("op").read_otp("GitHub") == code

    @pytest.mark.parametrize("output", [b"12345\n", b"abc123\n", b"123456789\n", b"123 456\n"])
    def test_invalid_format(self, fake_run: FakeRun, output: bytes) -> None:
        """Anything else is invalid_otp_format."""
        fake_run.queue(stdout=output)
        with pytest.raises(OpError) as exc_info:
            OpClient("op").read_otp("GitHub")
        assert exc_info.value.code == "invalid_otp_format"

    def test_invalid_format_despite_success(self, fake_run: FakeRun) -> None:
        """Exit status 0 does not make a malformed code valid."""
        fake_run.queue(returncode=0, stdout=b"otpauth://totp/x\n")
        with pytest.raises(OpError) as exc_info:
            OpClient("op").read_otp("GitHub")
        assert exc_info.value.code == "invalid_otp_format"

    def test_failed_exit_with_digits(self, fake_run: FakeRun) -> None:
        """Six digits from a failed op call are not a code."""
        fake_run.queue(returncode=1, stdout=b"123456\n", stderr=b"[ERROR] session expired\n")
        with pytest.raises(OpError) as exc_info:
            OpClient("op").read_otp("GitHub")
        assert exc_info.value.code == "secret_fetch_failed"
        assert "session expired" in str(exc_info.value)

    def test_empty(self, fake_run: FakeRun) -> None:
        """Empty output is secret_fetch_failed, with op's error line."""
        fake_run.queue(returncode=1, stderr=b"[ERROR] item has no one-time password\n")
        with pytest.raises(OpError) as exc_info:
            OpClient("op").read_otp("GitHub")
        assert exc_info.value.code == "secret_fetch_failed"
        assert "no one-time password" in str(exc_info.value)
