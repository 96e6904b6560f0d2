"""Transaction collection summary command."""

import click

from t212taxes.cli.error_handling import handle_domain_error
from t212taxes.cli.loading import load_transactions
from t212taxes.cli.serialization import dump_json
from t212taxes.domain.errors import DomainError
from t212taxes.domain.processing import summarize_transactions


@click.command("summary")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def summary(ctx, input_file: str):
    """Show transaction count, instrument count and date range."""
    try:
        transactions = load_transactions(input_file)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(dump_json(summarize_transactions(transactions)))


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
