"""Centralized application configuration, sourced from tmux global options."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".local" / "tmux-op"

# Config field -> (tmux option, default value)
OPTIONS: dict[str, tuple[str, str]] = {
    "password_enable": ("@1password-password-enable", "on"),
    "otp_enable": ("@1password-otp-enable", "on"),
    "password_key": ("@1password-key", "u"),
    "otp_key": ("@1password-otp-key", "o"),
    "popup_width": ("@1password-popup-width", "80%"),
    "popup_height": ("@1password-popup-height", "60%"),
    "copy_to_clipboard": ("@1password-copy-to-clipboard", "off"),
    "auto_clear_seconds": ("@1password-auto-clear-seconds", "30"),
    "otp_auto_clear_seconds": ("@1password-otp-auto-clear-seconds", "10"),
    "categories": ("@1password-categories", "Login"),
    "vault": ("@1password-vault", ""),
    "account": ("@1password-account", ""),
    "use_cache": ("@1password-use-cache", "off"),
    "cache_age": ("@1password-cache-age", "300"),
}

# An explicitly empty key binding disables it instead of falling back to the default.
_KEY_FIELDS = frozenset({"password_key", "otp_key"})


class Config(BaseModel):
    """Application-wide configuration."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = Field(description="Base directory for all application data")
    password_enable: bool = Field(default=True, description="Bind the password popup")
    otp_enable: bool = Field(default=True, description="Bind the OTP popup")
    password_key: str = Field(default="u", description="Key for the password popup (empty = unbound)")
    otp_key: str = Field(default="o", description="Key for the OTP popup (empty = unbound)")
    popup_width: str = Field(default="80%", description="Popup width")
    popup_height: str = Field(default="60%", description="Popup height")
    copy_to_clipboard: bool = Field(default=False, description="Copy passwords instead of typing them into the pane")
    auto_clear_seconds: int = Field(default=30, description="Password clipboard auto-clear delay (<= 0 = never)")
    otp_auto_clear_seconds: int = Field(default=10, description="OTP clipboard auto-clear delay (<= 0 = never)")
    categories: str = Field(default="Login", description="Item category filter")
    vault: str = Field(default="", description="Vault filter")
    account: str = Field(default="", description="1Password account")
    use_cache: bool = Field(default=False, description="Cache the item list")
    cache_age: int = Field(default=300, description="Cache max age in seconds (<= 0 = never expires)")
    target_pane: str | None = Field(default=None, description="Pane that receives typed passwords")

    @computed_field(description="Item list cache file")
    @property
    def cache_path(self) -> Path:
        """Item list cache file."""
        return self.data_dir / "cache.json"

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.data_dir / "tmux-op.log"

    def cli_base_args(self) -> list[str]:
        """Build CLI base args, including --data-dir only when non-default."""
        args: list[str] = ["tmux-op"]
        if self.data_dir != DEFAULT_DATA_DIR:
            args.extend(["--data-dir", str(self.data_dir)])
        return args

    @classmethod
    def build(cls, options: Mapping[str, str], data_dir: Path | None = None) -> Self:
        """Build a Config from tmux global options, falling back to defaults.

        Values that fail validation are replaced by their defaults.
        """
        kwargs: dict[str, Any] = {
            "data_dir": data_dir if data_dir is not None else DEFAULT_DATA_DIR,
            "target_pane": os.environ.get("TMUX_PANE") or None,
        }
        for field, (option, default) in OPTIONS.items():
            value = options.get(option)
            if value is None or (value == "" and field not in _KEY_FIELDS):
                value = default
            kwargs[field] = value

        try:
            return cls(**kwargs)
        except ValidationError as e:
            for error in e.errors():
                field = str(error["loc"][0])
                if field in OPTIONS:
                    logger.warning("Invalid value for %s, using default", OPTIONS[field][0])
                    kwargs[field] = OPTIONS[field][1]
            return cls(**kwargs)
