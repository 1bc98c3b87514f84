"""Typer-based CLI for inspecting exchanges through the unified clients."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import typer
from rich.console import Console
from rich.table import Table

from .errors import ExchangeError

app = typer.Typer(help="Unified cryptocurrency exchange client CLI")
console = Console()
logger = logging.getLogger(__name__)


def _load_settings(config_path: Optional[Path] = None):
    from .config import load_settings
    return load_settings(config_path)


def _create_client(settings, exchange: str):
    from .exchanges.init import create_client_from_settings
    return create_client_from_settings(settings, exchange)


def _configure_logging() -> None:
    from .logging import configure_logging
    configure_logging()


def run_cli(argv: list[str] | None = None) -> None:
    """Run CLI with optional argv parameter."""
    app(argv)


def _run(exchange: str, config: Optional[Path], action: Callable[[Any], Awaitable[None]]) -> None:
    """Build a client for ``exchange``, run ``action`` with it and close it."""
    _configure_logging()

    async def runner() -> None:
        client = _create_client(_load_settings(config), exchange)
        try:
            await action(client)
        finally:
            await client.close()

    try:
        asyncio.run(runner())
    except (ExchangeError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def pairs(
    exchange: str = typer.Argument(..., help="Exchange name"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """List the currency pairs an exchange trades."""

    async def action(client) -> None:
        table = Table(title=f"{exchange} currency pairs")
        table.add_column("Trading")
        table.add_column("Settlement")
        for pair in await client.currency_pairs():
            table.add_row(pair.trading, pair.settlement)
        console.print(table)

    _run(exchange, config, action)


@app.command()
def rates(
    exchange: str = typer.Argument(..., help="Exchange name"),
    trading: Optional[str] = typer.Option(None, help="Only show this trading currency"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Show last price and volume for every market."""

    async def action(client) -> None:
        rate_map = await client.rate_map()
        volume_map = await client.volume_map()
        table = Table(title=f"{exchange} rates")
        table.add_column("Market")
        table.add_column("Rate", justify="right")
        table.add_column("Volume", justify="right")
        for trading_ccy in sorted(rate_map):
            if trading and trading_ccy != trading.upper():
                continue
            for settlement, rate in sorted(rate_map[trading_ccy].items()):
                volume = volume_map.get(trading_ccy, {}).get(settlement)
                table.add_row(
                    f"{trading_ccy}/{settlement}",
                    f"{rate:g}",
                    "-" if volume is None else f"{volume:g}",
                )
        console.print(table)

    _run(exchange, config, action)


@app.command()
def board(
    exchange: str = typer.Argument(..., help="Exchange name"),
    trading: str = typer.Argument(..., help="Trading currency"),
    settlement: str = typer.Argument(..., help="Settlement currency"),
    depth: int = typer.Option(10, min=1, help="Levels to show per side"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Show an order book snapshot."""

    async def action(client) -> None:
        snapshot = await client.board(trading, settlement)
        table = Table(title=f"{exchange} {trading.upper()}/{settlement.upper()}")
        table.add_column("Side")
        table.add_column("Price", justify="right")
        table.add_column("Amount", justify="right")
        asks = sorted(snapshot.asks, key=lambda o: o.price)[:depth]
        bids = sorted(snapshot.bids, key=lambda o: o.price, reverse=True)[:depth]
        for order in reversed(asks):
            table.add_row("[red]ask[/red]", f"{order.price:g}", f"{order.amount:g}")
        for order in bids:
            table.add_row("[green]bid[/green]", f"{order.price:g}", f"{order.amount:g}")
        console.print(table)

    _run(exchange, config, action)


@app.command()
def balances(
    exchange: str = typer.Argument(..., help="Exchange name"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Show account balances (requires credentials in the config)."""

    async def action(client) -> None:
        if not hasattr(client, "complete_balances"):
            raise ValueError(f"No credentials configured for {exchange}")
        table = Table(title=f"{exchange} balances")
        table.add_column("Currency")
        table.add_column("Available", justify="right")
        table.add_column("On orders", justify="right")
        for currency, balance in sorted((await client.complete_balances()).items()):
            table.add_row(currency, f"{balance.available:g}", f"{balance.on_orders:g}")
        console.print(table)

    _run(exchange, config, action)
