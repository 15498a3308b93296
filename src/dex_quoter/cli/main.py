"""CLI for the DEX quote engine."""

import asyncio
import json
import logging
from decimal import Decimal
from enum import StrEnum

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from dex_quoter.config import ScanSettings, load_engine_config, load_scan_settings
from dex_quoter.core import QuoteAction, QuoteEngine, QuoteError, QuoteOutcome, QuoteRequest, QuoteResult
from dex_quoter.core.models import Chain, Token
from dex_quoter.data import get_all_supported_chains, get_chain_config
from dex_quoter.providers import build_default_registry
from dex_quoter.transport import HttpxTransport

app = typer.Typer(
    name="dex-quoter",
    help="Quote token swaps across DEX aggregators and compare the results",
    add_completion=False,
)

console = Console()


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def _configure_logging(level: str) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


async def _run_quotes(
    requests: list[QuoteRequest],
    settings: ScanSettings,
    use_fallback: bool,
) -> list[QuoteOutcome]:
    config = load_engine_config()
    registry = build_default_registry()
    async with HttpxTransport() as transport:
        engine = QuoteEngine.from_config(registry, transport, config)
        return list(
            await asyncio.gather(*(engine.quote(request, settings, use_fallback=use_fallback) for request in requests))
        )


@app.command()
def quote(
    amount: str = typer.Argument(..., help="Amount of the input token (human units)"),
    token_in: str = typer.Option(..., "--token-in", help="Input token address"),
    decimals_in: int = typer.Option(..., "--decimals-in", help="Input token decimals"),
    token_out: str = typer.Option(..., "--token-out", help="Output token address"),
    decimals_out: int = typer.Option(..., "--decimals-out", help="Output token decimals"),
    symbol_in: str | None = typer.Option(None, "--symbol-in", help="Input token symbol, for provider links"),
    symbol_out: str | None = typer.Option(None, "--symbol-out", help="Output token symbol, for provider links"),
    chain: str = typer.Option("ethereum", "--chain", "-c", help="Chain name"),
    provider: list[str] | None = typer.Option(None, "--provider", "-p", help="Provider to query (repeatable)"),
    action: QuoteAction = typer.Option(QuoteAction.TOKEN_TO_PAIR, "--action", help="Route direction"),
    wallet: str | None = typer.Option(None, "--wallet", "-w", help="Sender wallet address"),
    fallback: bool = typer.Option(False, "--fallback", help="Quote through the fallback service"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
) -> None:
    """
    Quote one swap across several providers concurrently.

    Examples:

        # 1 ETH -> USDT on Ethereum, every provider
        dex-quoter quote 1 --token-in 0xC02a... --decimals-in 18 --token-out 0xdAC1... --decimals-out 6

        # Only KyberSwap and Odos, as JSON
        dex-quoter quote 1 ... -p kyber -p odos --format json
    """
    _configure_logging("DEBUG" if debug else load_engine_config().log_level)

    try:
        chain_config = get_chain_config(chain)
    except KeyError:
        console.print(f"[bold red]Unknown chain:[/bold red] {chain}")
        raise typer.Exit(code=1)

    registry = build_default_registry()
    providers = provider or [name for name in registry.list_providers() if not registry.get(name).alias_of]
    settings = load_scan_settings()

    try:
        requests = [
            QuoteRequest(
                source_token=Token(address=token_in, decimals=decimals_in),
                dest_token=Token(address=token_out, decimals=decimals_out),
                amount_in=Decimal(amount),
                chain=Chain(id=int(chain_config["chain_id"]), name=chain.lower()),
                provider=name,
                action=action,
                wallet_address=wallet,
                correlation_id=f"{name}:{index}",
                source_symbol=symbol_in,
                dest_symbol=symbol_out,
            )
            for index, name in enumerate(providers)
        ]
    except Exception as e:
        console.print(f"[bold red]Invalid request:[/bold red] {e}")
        raise typer.Exit(code=1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"Quoting {len(requests)} providers on {chain}...", total=None)
        outcomes = asyncio.run(_run_quotes(requests, settings, fallback))

    if format == OutputFormat.JSON:
        _output_json(outcomes)
    else:
        _output_table(outcomes)


@app.command()
def list_providers() -> None:
    """List all registered providers."""
    registry = build_default_registry()

    table = Table(title="Providers", show_header=True, header_style="bold magenta")
    table.add_column("Provider", style="cyan")
    table.add_column("Strategy", style="green")
    table.add_column("Proxy", style="yellow")
    table.add_column("Fallback", style="yellow")

    for name in registry.list_providers():
        entry = registry.get(name)
        resolved = registry.resolve(name)
        strategy = resolved.strategy.label if resolved else "-"
        if entry.alias_of:
            strategy = f"{strategy} (alias of {entry.alias_of})"
        table.add_row(
            name,
            strategy,
            "yes" if resolved and resolved.proxy_enabled else "no",
            "yes" if resolved and resolved.fallback_allowed else "no",
        )

    console.print(table)


@app.command()
def list_chains() -> None:
    """List all configured chains."""
    table = Table(title="Supported Chains", show_header=True, header_style="bold magenta")
    table.add_column("Chain", style="cyan")
    table.add_column("Chain ID", style="green", justify="right")
    table.add_column("Fallback Fee", style="yellow", justify="right")

    for chain in get_all_supported_chains():
        config = get_chain_config(chain)
        table.add_row(chain, str(config["chain_id"]), f"${Decimal(str(config['fallback_fee_usd'])):,.2f}")

    console.print(table)


def _output_table(outcomes: list[QuoteOutcome]) -> None:
    """Output quotes as rich tables, best quote first."""
    results = sorted(
        (o for o in outcomes if isinstance(o, QuoteResult)),
        key=lambda r: r.amount_out,
        reverse=True,
    )
    errors = [o for o in outcomes if isinstance(o, QuoteError)]

    if results:
        table = Table(title="Quotes", show_header=True, header_style="bold magenta")
        table.add_column("Provider", style="cyan")
        table.add_column("Amount Out", style="bold green", justify="right")
        table.add_column("Fee (USD)", style="yellow", justify="right")
        for result in results:
            table.add_row(result.provider_label, f"{result.amount_out:,.6f}", f"${result.fee_estimate_usd:,.2f}")
        console.print(table)
    else:
        console.print("\n[yellow]No quotes received[/yellow]")

    if errors:
        error_table = Table(title="Errors", show_header=True, header_style="bold red")
        error_table.add_column("Provider", style="cyan")
        error_table.add_column("Class", style="red")
        error_table.add_column("Message", style="white")
        error_table.add_column("Link", style="dim")
        for error in errors:
            error_table.add_row(
                error.provider_label,
                error.classification.value,
                error.message,
                error.provider_deep_link or "-",
            )
        console.print(error_table)


def _output_json(outcomes: list[QuoteOutcome]) -> None:
    """Output quotes as JSON."""
    data = [outcome.model_dump(mode="json") for outcome in outcomes]
    console.print_json(json.dumps(data))


if __name__ == "__main__":
    app()
