"""Password and OTP retrieval flows.

Each flow runs once per popup: list items (cache or op) -> select with fzf ->
fetch the secret -> deliver it -> schedule the clipboard clear. Any OpError
ends the flow; an empty selection ends it quietly.
"""

import logging
import subprocess  # nosec B404
from enum import StrEnum
from typing import Self

from tmux_op.autoclear import ClipboardLifecycle
from tmux_op.cache import MetadataCache
from tmux_op.config import Config
from tmux_op.deps import check_dependencies
from tmux_op.errors import OpError
from tmux_op.fzf import Selector
from tmux_op.items import Item, ItemList
from tmux_op.op import OpClient
from tmux_op.output import Output
from tmux_op.tmux import Tmux

logger = logging.getLogger(__name__)


class Outcome(StrEnum):
    """How a flow finished."""

    CANCELLED = "cancelled"
    COPIED = "copied"
    SENT = "sent"


class RetrievalFlow:
    """Fetch an item's password and copy it or type it into the active pane."""

    prompt = "1Password > "

    def __init__(
        self,
        cfg: Config,
        out: Output,
        *,
        op: OpClient,
        selector: Selector,
        lifecycle: ClipboardLifecycle,
        tmux: Tmux,
        cache: MetadataCache | None = None,
    ) -> None:
        """Initialize the flow with its collaborators.

        Args:
            cfg: Configuration snapshot for this invocation.
            out: Popup output.
            op: 1Password CLI client.
            selector: fzf selector.
            lifecycle: Clipboard copy and auto-clear.
            tmux: tmux host used for pane injection.
            cache: Item list cache, or None when caching is disabled.

        """
        self._cfg = cfg
        self._out = out
        self._op = op
        self._selector = selector
        self._lifecycle = lifecycle
        self._tmux = tmux
        self._cache = cache

    @classmethod
    def create(cls, cfg: Config, out: Output) -> Self:
        """Check dependencies and wire the flow with real collaborators.

        Raises:
            OpError: A required tool is missing (code: ``dependency_missing``).

        """
        op_cmd = check_dependencies()
        return cls(
            cfg,
            out,
            op=OpClient(op_cmd, account=cfg.account),
            selector=Selector(cls.prompt),
            lifecycle=ClipboardLifecycle(cfg.cli_base_args()),
            tmux=Tmux(),
            cache=MetadataCache(cfg.cache_path, cfg.cache_age) if cfg.use_cache else None,
        )

    def run(self) -> Outcome:
        """Run the flow to completion.

        Raises:
            OpError: Any step failed.

        """
        items = self.list_items()
        if not items:
            raise OpError("no_items", "No items found in 1Password")

        item = self._selector.select(items.items)
        if item is None:
            logger.info("Selection cancelled")
            return Outcome.CANCELLED

        logger.info("Selected %r in vault %r", item.title, item.vault_name)
        secret = self.fetch(item)
        return self.deliver(secret)

    def list_items(self) -> ItemList:
        """Item list from the cache when enabled and fresh, otherwise from op (written through)."""
        if self._cache is not None:
            cached = self._cache.read()
            if cached is not None:
                self._out.print_using_cache(cached.cached_age or 0.0, self._cache.max_age)
                return cached

        self._out.print_fetching()
        items = self._op.list_items(vault=self._cfg.vault, categories=self._cfg.categories)
        if self._cache is not None:
            self._cache.write(items.payload)
        return items

    def fetch(self, item: Item) -> str:
        """Fetch the secret for the selected item."""
        return self._op.read_password(item)

    def deliver(self, secret: str) -> Outcome:
        """Copy the password (with auto-clear) or type it into the target pane."""
        if not self._cfg.copy_to_clipboard:
            self._tmux.send_text(secret, self._cfg.target_pane)
            self._out.print_sent_to_pane()
            return Outcome.SENT
        self._copy_and_schedule(secret, "Password", self._cfg.auto_clear_seconds)
        return Outcome.COPIED

    def _copy_and_schedule(self, secret: str, what: str, clear_after: int) -> None:
        try:
            self._lifecycle.copy(secret)
        except (OSError, subprocess.CalledProcessError):
            raise OpError("clipboard_failed", "Clipboard command failed") from None
        self._out.print_copied(what, clear_after)
        self._lifecycle.schedule_clear(clear_after)


class OtpRetrievalFlow(RetrievalFlow):
    """Fetch an item's current one-time passcode and copy it to the clipboard."""

    prompt = "1Password OTP > "

    def fetch(self, item: Item) -> str:
        """Fetch the OTP code, scoped to the selected item's vault."""
        return self._op.read_otp(item.title, vault=item.vault_name or self._cfg.vault)

    def deliver(self, secret: str) -> Outcome:
        """OTP codes always go to the clipboard."""
        self._copy_and_schedule(secret, "OTP code", self._cfg.otp_auto_clear_seconds)
        return Outcome.COPIED
