import asyncio
import click
from rich.console import Console
from rich.progress import (
    Progress, BarColumn, TextColumn, TimeElapsedColumn,
    TimeRemainingColumn, MofNCompleteColumn, SpinnerColumn
)
from .config import Settings
from .logger import configure_logging, use_console

console = Console()

def _open_rpc(settings):
    from .adapters.rpc_httpx import HttpxRPC
    return HttpxRPC(settings.rpc_url, timeout_s=settings.timeout_s, http2=settings.http2)

def _rpc_option(f):
    return click.option("--rpc", "rpc_url", default=None, help="JSON-RPC endpoint URL (default: TXSCAN_RPC_URL)")(f)

@click.group()
@click.option("--log-level", default=None, help="DEBUG, INFO, WARNING, ... (default: LOG_LEVEL)")
@click.option("--env-file", default=".env", show_default=True, help="dotenv file merged under the environment")
@click.pass_context
def cli(ctx, log_level, env_file):
    """txscan — scan an EVM chain for transactions touching an address."""
    try:
        settings = Settings.load(env_file, log_level=log_level.upper() if log_level else None)
    except ValueError as e:
        raise click.UsageError(str(e))
    configure_logging(settings.log_level)
    ctx.obj = settings

@cli.command("serve")
@_rpc_option
@click.option("--host", default=None, help="Bind address (default: TXSCAN_HOST)")
@click.option("--port", type=int, default=None, help="Bind port (default: TXSCAN_PORT)")
@click.option("--pacing", "pacing_s", type=float, default=None, help="Seconds between block fetches")
@click.option("--timeout", "timeout_s", type=float, default=None, help="Per-request RPC timeout in seconds")
@click.pass_obj
def serve_cmd(settings, rpc_url, host, port, pacing_s, timeout_s):
    """Run the HTTP trigger (GET /fetch-transactions)."""
    import uvicorn
    from .presentation.http import create_app

    settings = settings.with_overrides(rpc_url=rpc_url, host=host, port=port, pacing_s=pacing_s, timeout_s=timeout_s)
    console.print(f"Server is running on {settings.host}:{settings.port}...")
    # log_config=None keeps our rich handler in charge
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)

@cli.command("head")
@_rpc_option
@click.pass_obj
def head_cmd(settings, rpc_url):
    """Print the latest block number the node reports."""
    from .application.chain_reader import RPCChainReader
    from .domain.errors import ChainError

    settings = settings.with_overrides(rpc_url=rpc_url)

    async def run() -> int:
        async with _open_rpc(settings) as rpc:
            return await RPCChainReader(rpc).get_latest_block_number()

    try:
        click.echo(asyncio.run(run()))
    except ChainError as e:
        raise click.ClickException(f"Error fetching latest block number: {e}")

@cli.command("scan")
@_rpc_option
@click.option("--address", required=True, help="Account address, matched verbatim against from/to")
@click.option("--from-block", type=click.IntRange(min=0), required=True)
@click.option("--to-block", type=click.IntRange(min=0), required=True)
@click.option("--pacing", "pacing_s", type=float, default=None, help="Seconds between block fetches")
@click.pass_obj
def scan_cmd(settings, rpc_url, address, from_block, to_block, pacing_s):
    """Scan a block range in the foreground with a live progress bar."""
    from .adapters.console_sink import ConsoleMatchSink
    from .application.chain_reader import RPCChainReader
    from .application.planning import clamp_range
    from .application.scanner import BlockScanner, Pacer
    from .domain.errors import ChainError

    settings = settings.with_overrides(rpc_url=rpc_url, pacing_s=pacing_s)

    async def run():
        async with _open_rpc(settings) as rpc:
            reader = RPCChainReader(rpc)
            try:
                latest = await reader.get_latest_block_number()
            except ChainError as e:
                raise click.ClickException(f"Error fetching latest block number: {e}")
            rng = clamp_range(from_block, to_block, latest)
            if rng.end != to_block:
                console.print(f"[yellow]to-block clamped to head[/] {rng.end:,}")

            progress = Progress(SpinnerColumn(),
                                TextColumn("[bold]scanning[/]"),
                                BarColumn(),
                                MofNCompleteColumn(),
                                TextColumn("•"),
                                TimeElapsedColumn(),
                                TextColumn("→"),
                                TimeRemainingColumn(),
                                TextColumn(" • {task.description}"),
                                console=console,
                                transient=False,
                                expand=True,
                                )
            with progress, use_console(progress.console):
                task = progress.add_task(description=f"{rng.start:,}-{rng.end:,}", total=rng.span())
                scanner = BlockScanner(reader, Pacer(settings.pacing_s))
                stats = await scanner.scan(
                    address, rng.start, rng.end, ConsoleMatchSink(progress.console),
                    on_block=lambda n, ok: progress.advance(task, 1),
                )

        console.print(
            f"[bold]summary[/]: "
            f"[green]blocks_ok[/]={stats.blocks_ok}  "
            f"[red]blocks_failed[/]={stats.blocks_failed}  "
            f"transactions_seen={stats.transactions_seen}  "
            f"[yellow]matches[/]={stats.matches}"
        )

    asyncio.run(run())

if __name__ == "__main__":
    cli()
