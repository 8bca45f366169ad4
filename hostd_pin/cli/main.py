from __future__ import annotations

import asyncio
from decimal import Decimal, InvalidOperation
from typing import Optional

import typer

from hostd_pin.app import PinApp
from hostd_pin.config import load_config
from hostd_pin.pricing.conversion import convert_prices
from hostd_pin.providers import get_provider
from hostd_pin.utils.errors import (
    ConfigurationError,
    ConversionFailure,
    QuoteUnavailable,
)
from hostd_pin.utils.logging import setup_logging


app = typer.Typer(add_completion=False, help="Pin hostd prices to a fiat target")

CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="Path to the config file (default: config.yml)"
)


def _load(config_path: Optional[str]):
    try:
        return load_config(config_path)
    except ConfigurationError as e:
        typer.secho(f"Configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)


@app.command("run")
def run(config_path: Optional[str] = CONFIG_OPTION):
    """Track the exchange rate and keep host prices pinned to the targets."""
    cfg = _load(config_path)
    setup_logging(
        level=cfg.logging.level,
        log_file=cfg.logging.file,
        format_type=cfg.logging.format,
        enabled=cfg.logging.enabled,
    )

    try:
        asyncio.run(PinApp(cfg).run())
    except ConfigurationError as e:
        typer.secho(f"Configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    except QuoteUnavailable as e:
        typer.secho(f"Failed to get initial exchange rate: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("quote")
def quote(
    currency: str = typer.Option("usd", "--currency", help="Fiat currency code"),
    base_url: str = typer.Option(
        "https://api.siacentral.com/v2", "--base-url", help="Quote API base URL"
    ),
):
    """Print the current exchange rate for one Siacoin."""
    provider = get_provider("siacentral", base_url=base_url)
    try:
        rate = asyncio.run(provider.get_quote(currency))
    except QuoteUnavailable as e:
        typer.secho(f"Failed to get exchange rate: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.echo(f"1 SC = {rate} {currency.upper()}")


@app.command("prices")
def prices(
    config_path: Optional[str] = CONFIG_OPTION,
    rate: Optional[str] = typer.Option(
        None, "--rate", "-r", help="Exchange rate to convert at; fetched when omitted"
    ),
):
    """Print the host prices the configured targets convert to, without pushing them."""
    cfg = _load(config_path)

    if rate is None:
        provider = get_provider(
            cfg.quote.provider, base_url=cfg.quote.base_url, timeout=cfg.quote.timeout
        )
        try:
            value = asyncio.run(provider.get_quote(cfg.currency))
        except QuoteUnavailable as e:
            typer.secho(f"Failed to get exchange rate: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
    else:
        try:
            value = Decimal(rate)
        except InvalidOperation:
            typer.secho(f"Invalid rate: {rate}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=2)

    try:
        host_prices = convert_prices(cfg.prices, value)
    except ConversionFailure as e:
        typer.secho(f"Conversion failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"rate:    {value} {cfg.currency.upper()}/SC")
    typer.echo(f"storage: {host_prices.storage} H/byte/block")
    typer.echo(f"ingress: {host_prices.ingress} H/byte")
    typer.echo(f"egress:  {host_prices.egress} H/byte")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
