"""Pick an item and deliver its password."""

import typer

from tmux_op.app_context import use_context
from tmux_op.flows import RetrievalFlow


def password(ctx: typer.Context) -> None:
    """Pick an item with fzf and copy its password or type it into the pane."""
    use_context(ctx).run_flow(RetrievalFlow)
