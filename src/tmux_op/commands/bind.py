"""Register the popup key bindings in tmux."""

import shlex
import subprocess  # nosec B404

import typer

from tmux_op.app_context import use_context
from tmux_op.tmux import Tmux


def bind(ctx: typer.Context) -> None:
    """Bind the password and OTP popups to their configured keys."""
    app = use_context(ctx)
    cfg = app.cfg
    tmux = Tmux()
    bindings = [
        (cfg.password_enable, cfg.password_key, "password"),
        (cfg.otp_enable, cfg.otp_key, "otp"),
    ]
    for enabled, key, command in bindings:
        if not enabled or not key:
            continue
        popup_command = shlex.join([*cfg.cli_base_args(), command])
        try:
            tmux.bind_popup(key, popup_command, width=cfg.popup_width, height=cfg.popup_height)
        except (OSError, subprocess.CalledProcessError):
            app.out.print_error_and_exit("bind_failed", f"Failed to bind key '{key}'")
