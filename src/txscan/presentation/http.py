from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import BackgroundTasks, FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from ..adapters.console_sink import ConsoleMatchSink, LoggingMatchSink
from ..adapters.rpc_httpx import HttpxRPC
from ..application.chain_reader import RPCChainReader
from ..application.planning import clamp_range, parse_block_param
from ..application.scanner import BlockScanner, Pacer
from ..config import Settings
from ..domain.errors import ChainError
from ..ports.rpc import ChainReader
from ..ports.sink import MatchSink

log = logging.getLogger(__name__)

MISSING_PARAMS = "Please provide address, startBlock, and endBlock parameters"


async def _run_scan(scanner: BlockScanner, address: str, start_block: int, end_block: int, sink: MatchSink) -> None:
    try:
        await scanner.scan(address, start_block, end_block, sink)
    except Exception:
        # nobody awaits this task; make sure a crash is at least visible
        log.exception("scan of %s over %d..%d aborted", address, start_block, end_block)


def create_app(
    settings: Settings | None = None,
    *,
    reader: ChainReader | None = None,
    pacer: Pacer | None = None,
    sink: MatchSink | None = None,
) -> FastAPI:
    """
    Build the trigger app. With no `reader` a pooled HttpxRPC client is opened
    on startup and closed on shutdown; tests pass their own reader and pacer.
    """
    settings = settings or Settings.load()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        rpc: HttpxRPC | None = None
        chain = reader
        if chain is None:
            rpc = HttpxRPC(settings.rpc_url, timeout_s=settings.timeout_s, http2=settings.http2)
            chain = RPCChainReader(rpc)
        app.state.reader = chain
        app.state.scanner = BlockScanner(chain, pacer or Pacer(settings.pacing_s))
        app.state.sink = sink or (LoggingMatchSink() if settings.sink == "log" else ConsoleMatchSink())
        log.info("trigger ready, node=%s pacing=%.1fs", settings.rpc_url, settings.pacing_s)
        try:
            yield
        finally:
            if rpc is not None:
                await rpc.aclose()

    app = FastAPI(title="txscan", lifespan=lifespan)

    @app.get("/fetch-transactions", response_class=PlainTextResponse)
    async def fetch_transactions(request: Request, background_tasks: BackgroundTasks) -> PlainTextResponse:
        q = request.query_params
        address = q.get("address", "")
        start_param = q.get("startBlock", "")
        end_param = q.get("endBlock", "")

        if not address or not start_param or not end_param:
            return PlainTextResponse(MISSING_PARAMS, status_code=status.HTTP_400_BAD_REQUEST)
        try:
            start_block = parse_block_param(start_param)
        except ValueError:
            return PlainTextResponse("Invalid startBlock parameter", status_code=status.HTTP_400_BAD_REQUEST)
        try:
            end_block = parse_block_param(end_param)
        except ValueError:
            return PlainTextResponse("Invalid endBlock parameter", status_code=status.HTTP_400_BAD_REQUEST)

        try:
            latest = await request.app.state.reader.get_latest_block_number()
        except ChainError as e:
            log.error("head lookup failed: %s", e)
            return PlainTextResponse(f"Error fetching latest block number: {e}",
                                     status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

        rng = clamp_range(start_block, end_block, latest)
        if rng.end != end_block:
            log.info("endBlock %d clamped to head %d", end_block, rng.end)

        background_tasks.add_task(_run_scan, request.app.state.scanner, address, rng.start, rng.end, request.app.state.sink)
        return PlainTextResponse(f"Fetching transactions for address: {address} from block {rng.start} to {rng.end}")

    @app.get("/healthz")
    async def healthz() -> dict[str, bool]:
        return {"ok": True}

    return app
