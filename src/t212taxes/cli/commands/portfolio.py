"""Portfolio valuation command."""

import click

from t212taxes.cli.error_handling import handle_domain_error
from t212taxes.cli.loading import load_transactions
from t212taxes.cli.serialization import dump_json
from t212taxes.domain.errors import DomainError
from t212taxes.domain.portfolio import PortfolioService


@click.command("portfolio")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--year",
    type=click.IntRange(1, 9999),
    help="Only show the snapshot at the end of this year",
)
@click.pass_context
def portfolio(ctx, input_file: str, year: int | None):
    """Show year-end portfolio snapshots with unrealized gains."""
    service = PortfolioService(ctx.obj["currency"])

    try:
        transactions = load_transactions(input_file)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if year is not None:
        click.echo(dump_json(service.end_of_year_portfolio(transactions, year)))
    else:
        click.echo(dump_json(service.valuation_report(transactions)))


def register_commands(cli):
    """Register portfolio command with main CLI."""
    cli.add_command(portfolio)
