"""FIFO capital gains command."""

import click

from t212taxes.cli.error_handling import handle_domain_error
from t212taxes.cli.loading import load_transactions
from t212taxes.cli.serialization import dump_json
from t212taxes.domain.capital_gains import CapitalGainsService
from t212taxes.domain.diagnostics import Diagnostics
from t212taxes.domain.errors import DomainError


@click.command("gains")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def gains(ctx, input_file: str):
    """Show realized gains and losses matched first-in-first-out."""
    service = CapitalGainsService(ctx.obj["currency"])

    try:
        transactions = load_transactions(input_file)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    diagnostics = Diagnostics()
    total_gains, total_losses = service.capital_gains(transactions, diagnostics)
    click.echo(
        dump_json(
            {
                "currency": service.base_currency,
                "total_gains": total_gains,
                "total_losses": total_losses,
                "net_gain_loss": total_gains - total_losses,
                "oversold_shares": diagnostics.oversold_shares,
            }
        )
    )


def register_commands(cli):
    """Register gains command with main CLI."""
    cli.add_command(gains)
