"""Yearly and overall report command."""

import click

from t212taxes.cli.error_handling import handle_domain_error
from t212taxes.cli.loading import load_transactions
from t212taxes.cli.serialization import dump_json
from t212taxes.domain.errors import DomainError
from t212taxes.domain.reports import ReportService


@click.command("yearly")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def yearly(ctx, input_file: str):
    """Show per-year cash-flow reports and the all-time summary."""
    service = ReportService(ctx.obj["currency"])

    try:
        transactions = load_transactions(input_file)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    yearly_reports = service.yearly_reports(transactions)
    click.echo(
        dump_json(
            {
                "yearly_reports": yearly_reports,
                "overall": service.overall_report(yearly_reports),
            }
        )
    )


def register_commands(cli):
    """Register report command with main CLI."""
    cli.add_command(yearly)
