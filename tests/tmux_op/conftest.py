"""Shared fixtures: fake external processes."""

import subprocess
from dataclasses import dataclass, field
from typing import Any

import pytest


@dataclass
class FakeRun:
    """Stand-in for subprocess.run that records calls and replays queued results."""

    calls: list[tuple[list[str], dict[str, Any]]] = field(default_factory=list)
    results: list[subprocess.CompletedProcess[bytes]] = field(default_factory=list)

    def queue(self, returncode: int = 0, stdout: bytes = b"", stderr: bytes = b"") -> None:
        """Queue the result of the next call."""
        self.results.append(subprocess.CompletedProcess([], returncode, stdout, stderr))

    def __call__(self, args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[bytes]:
        self.calls.append((list(args), kwargs))
        result = self.results.pop(0) if self.results else subprocess.CompletedProcess(args, 0, b"", b"")
        if kwargs.get("check") and result.returncode != 0:
            raise subprocess.CalledProcessError(result.returncode, args)
        return result

    @property
    def argvs(self) -> list[list[str]]:
        """Argument lists of all recorded calls."""
        return [args for args, _ in self.calls]


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> FakeRun:
    """Replace subprocess.run for every module."""
    fake = FakeRun()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def installed(monkeypatch: pytest.MonkeyPatch) -> set[str]:
    """Control which external tools shutil.which can find."""
    available: set[str] = set()

    def which(cmd: str) -> str | None:
        return f"/usr/bin/{cmd}" if cmd in available else None

    monkeypatch.setattr("shutil.which", which)
    return available
