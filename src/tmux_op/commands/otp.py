"""Pick an item and copy its one-time passcode."""

import typer

from tmux_op.app_context import use_context
from tmux_op.flows import OtpRetrievalFlow


def otp(ctx: typer.Context) -> None:
    """Pick an item with fzf and copy its current OTP code."""
    use_context(ctx).run_flow(OtpRetrievalFlow)
