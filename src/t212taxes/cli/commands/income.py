"""Dividend and interest income command."""

import click

from t212taxes.cli.error_handling import handle_domain_error
from t212taxes.cli.loading import load_transactions
from t212taxes.cli.serialization import dump_json
from t212taxes.domain.errors import DomainError
from t212taxes.domain.income import IncomeService

DEFAULT_TOP_PAYERS = 10


@click.command("income")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--top-payers",
    type=int,
    default=DEFAULT_TOP_PAYERS,
    show_default=True,
    help="Number of top dividend payers to include (0 for all)",
)
@click.pass_context
def income(ctx, input_file: str, top_payers: int):
    """Show dividend and interest income."""
    service = IncomeService(ctx.obj["currency"])

    try:
        transactions = load_transactions(input_file)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    dividend_records = service.extract_dividend_records(transactions)
    interest_records = service.extract_interest_records(transactions)
    click.echo(
        dump_json(
            {
                "report": service.income_report(transactions),
                "top_dividend_payers": service.top_dividend_payers(
                    dividend_records, top_payers
                ),
                "monthly_breakdown": service.monthly_income_breakdown(
                    dividend_records, interest_records
                ),
            }
        )
    )


def register_commands(cli):
    """Register income command with main CLI."""
    cli.add_command(income)
