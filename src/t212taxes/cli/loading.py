"""Loading of transaction records for CLI commands."""

import json
from pathlib import Path

import click

from t212taxes.domain.entities import Transaction
from t212taxes.domain.errors import ValidationError
from t212taxes.domain.records import RecordMappingService


def read_records(input_path: str) -> list[dict]:
    """Read records from a JSON file.

    The file holds either a list of records or an object with a
    ``transactions`` list.

    Raises:
        ValidationError: If the file is not valid JSON or has another shape
    """
    try:
        data = json.loads(Path(input_path).read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"Invalid JSON in {input_path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("transactions")
    if not isinstance(data, list):
        raise ValidationError(
            f"Expected a list of records or an object with 'transactions' in {input_path}"
        )
    return data


def load_transactions(input_path: str) -> tuple[Transaction, ...]:
    """Read and map records, echoing rejected ones to stderr."""
    result = RecordMappingService().map_records(read_records(input_path))
    if result.errors:
        click.echo(f"Skipped {len(result.errors)} invalid records:", err=True)
        for error in result.errors:
            click.echo(f"  {error}", err=True)
    return result.transactions
