"""Main CLI entry point."""

import logging

import click

from t212taxes.config import BASE_CURRENCY_ENV_VAR, get_base_currency
from t212taxes.domain.errors import ValidationError

# Import and register all commands at module level
from t212taxes.cli.commands import (
    reports,
    gains,
    portfolio,
    income,
    summary,
)


@click.group()
@click.option(
    "--currency",
    help=f"Base currency for calculations (overrides {BASE_CURRENCY_ENV_VAR} environment variable)",
    envvar=BASE_CURRENCY_ENV_VAR,
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, currency: str | None, verbose: bool):
    """T212 Taxes - Trading 212 ledger reports.

    Build yearly cash-flow reports, FIFO capital gains, year-end portfolio
    valuations and income reports from normalized transaction records
    stored as JSON.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        ctx.obj["currency"] = get_base_currency(currency)
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="--currency")


# Register all commands
reports.register_commands(cli)
gains.register_commands(cli)
portfolio.register_commands(cli)
income.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
