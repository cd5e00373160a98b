"""
Logging setup.

    >>> from txscan.logger import configure_logging
    >>> configure_logging("DEBUG")

Modules only ever call `logging.getLogger(__name__)`; this module wires the
root logger to a rich console handler once per process.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s - %(message)s"
LOG_DATE_FORMAT = "[%Y-%m-%d %H:%M:%S]"

_lock = threading.Lock()
_configured = False
_handler: RichHandler | None = None


def configure_logging(level: str = "INFO", *, force: bool = False) -> None:
    global _configured, _handler
    with _lock:
        if _configured and not force:
            return
        numeric_level = getattr(logging, str(level).upper(), logging.INFO)

        root = logging.getLogger()
        root.setLevel(numeric_level)
        root.handlers.clear()

        # keep request chatter out of the scan output
        for lib in ("httpx", "httpcore", "hpack", "uvicorn.access"):
            logging.getLogger(lib).setLevel(logging.WARNING)

        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            markup=False,
            log_time_format=LOG_DATE_FORMAT,
        )
        handler.setLevel(numeric_level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        _handler = handler
        _configured = True


@contextmanager
def use_console(console: Console) -> Iterator[None]:
    """Route log records through `console` for a while, e.g. the one a live progress bar draws on."""
    if _handler is None:
        yield
        return
    previous = _handler.console
    _handler.console = console
    try:
        yield
    finally:
        _handler.console = previous
