"""CLI entry point for tmux-op."""

import sys
from pathlib import Path
from typing import Annotated

import typer

from tmux_op.app_context import AppContext
from tmux_op.commands.bind import bind
from tmux_op.commands.clear_clipboard import clear_clipboard
from tmux_op.commands.otp import otp
from tmux_op.commands.password import password
from tmux_op.config import Config
from tmux_op.log import setup_logging
from tmux_op.output import Output
from tmux_op.tmux import Tmux

app = typer.Typer(no_args_is_help=True)


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path.")] = None,
) -> None:
    """1Password passwords and OTP codes in a tmux popup."""
    cfg = Config.build(Tmux().global_options(), data_dir)
    cfg.data_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
    setup_logging(cfg.log_path, ctx.invoked_subcommand)
    ctx.obj = AppContext(out=Output(pause_on_error=sys.stdin.isatty()), cfg=cfg)


# Popups
app.command()(password)
app.command()(otp)

# Plugin setup
app.command()(bind)
app.command("clear-clipboard", hidden=True)(clear_clipboard)
