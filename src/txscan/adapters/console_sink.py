from __future__ import annotations
import logging
from rich.console import Console
from ..domain.models import Block, Match, Transaction
from ..ports.sink import MatchSink

log = logging.getLogger(__name__)

class ConsoleMatchSink(MatchSink):
    """Prints one line per match on stdout."""
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False, soft_wrap=True)

    async def emit(self, block: Block, tx: Transaction) -> None:
        self.console.print(Match.of(block, tx).line(), markup=False, emoji=False, soft_wrap=True)

class LoggingMatchSink(MatchSink):
    """Routes matches through logging instead, for servers run without a terminal."""
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or log

    async def emit(self, block: Block, tx: Transaction) -> None:
        self.logger.info("%s", Match.of(block, tx).line())
