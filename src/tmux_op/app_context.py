"""Per-invocation state handed from the CLI callback to the commands."""

import logging
from dataclasses import dataclass

import typer

from tmux_op.config import Config
from tmux_op.errors import OpError
from tmux_op.flows import Outcome, RetrievalFlow
from tmux_op.output import Output

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AppContext:
    """Output and configuration built once by the CLI callback."""

    out: Output
    cfg: Config

    def run_flow(self, flow_cls: type[RetrievalFlow]) -> Outcome:
        """Run a retrieval flow to completion.

        Any OpError is reported in the popup and ends the process with exit code 1.
        """
        try:
            outcome = flow_cls.create(self.cfg, self.out).run()
        except OpError as e:
            self.out.print_error_and_exit(e.code, str(e), e.hint)
        logger.info("%s finished: %s", flow_cls.__name__, outcome)
        return outcome


def use_context(ctx: typer.Context) -> AppContext:
    """AppContext stored by the CLI callback."""
    app: AppContext = ctx.obj
    return app
