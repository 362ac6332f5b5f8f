"""User-facing output inside the tmux popup."""

# ruff: noqa: T201 - this module is the output layer; print() is its sole mechanism for producing CLI output.

import logging
import sys
from typing import NoReturn

import typer

logger = logging.getLogger(__name__)


class Output:
    """Handles all CLI output for the popup flows."""

    def __init__(self, *, pause_on_error: bool) -> None:
        """Initialize output handler.

        Args:
            pause_on_error: If True, wait for a key press before exiting on error so the popup stays readable.

        """
        self._pause_on_error = pause_on_error

    def print_error_and_exit(self, code: str, message: str, hint: str = "") -> NoReturn:
        """Print an error with optional troubleshooting hint and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        logger.error("%s: %s", code, message)
        print(f"Error: {message}", file=sys.stderr)
        if hint:
            print(f"\n{hint}", file=sys.stderr)
        self._pause()
        raise typer.Exit(code=1)

    def _pause(self) -> None:
        if not self._pause_on_error:
            return
        print("\nPress any key to close...", file=sys.stderr)
        typer.getchar()

    # --- Progress ---

    def print_fetching(self) -> None:
        """Print item list fetch notice."""
        print("Fetching items from 1Password...")

    def print_using_cache(self, age: float, max_age: int) -> None:
        """Print cache hit notice."""
        if max_age <= 0:
            print("Using cached data (never expires)...")
        else:
            print(f"Using cached data (age: {int(age)}s)...")

    # --- Delivery ---

    def print_copied(self, what: str, clear_after: int) -> None:
        """Print clipboard copy confirmation."""
        if clear_after > 0:
            print(f"✓ {what} copied to clipboard (auto-clear in {clear_after}s)")
        else:
            print(f"✓ {what} copied to clipboard")

    def print_sent_to_pane(self) -> None:
        """Print pane injection confirmation."""
        print("✓ Password sent to pane")
