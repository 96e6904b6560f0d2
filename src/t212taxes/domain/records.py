"""Mapping of collaborator records to Transaction entities."""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from t212taxes.domain import errors
from t212taxes.domain.entities import Transaction
from t212taxes.domain.errors import ValidationError
from t212taxes.utils.amount_parser import parse_optional_amount
from t212taxes.utils.date_parser import parse_timestamp

logger = logging.getLogger(__name__)

# Trading 212 export column -> Transaction field
EXPORT_COLUMNS = {
    "Action": "action",
    "Time": "time",
    "ISIN": "isin",
    "Ticker": "ticker",
    "Name": "name",
    "Notes": "notes",
    "ID": "id",
    "No. of shares": "shares",
    "Price / share": "price_per_share",
    "Currency (Price / share)": "currency_price_per_share",
    "Exchange rate": "exchange_rate",
    "Result": "result",
    "Currency (Result)": "currency_result",
    "Total": "total",
    "Currency (Total)": "currency_total",
    "Withholding tax": "withholding_tax",
    "Currency (Withholding tax)": "currency_withholding_tax",
    "Charge amount": "charge_amount",
    "Currency (Charge amount)": "currency_charge_amount",
    "Deposit fee": "deposit_fee",
    "Currency (Deposit fee)": "currency_deposit_fee",
    "Currency conversion fee": "currency_conversion_fee",
    "Currency (Currency conversion fee)": "currency_currency_conversion_fee",
}

DECIMAL_FIELDS = frozenset(
    {
        "shares",
        "price_per_share",
        "exchange_rate",
        "result",
        "total",
        "withholding_tax",
        "charge_amount",
        "deposit_fee",
        "currency_conversion_fee",
    }
)
TEXT_FIELDS = frozenset(EXPORT_COLUMNS.values()) - DECIMAL_FIELDS - {"action", "time"}


@dataclass(frozen=True)
class MappingResult:
    """Outcome of mapping a batch of records."""

    transactions: tuple[Transaction, ...] = ()
    errors: tuple[str, ...] = field(default_factory=tuple)


class RecordMappingService:
    """Service for turning already-read ledger records into transactions.

    Records are mappings keyed by export column names ("No. of shares") or
    by Transaction field names ("shares"). Unknown keys are ignored.
    """

    def map_records(self, records: Iterable[Mapping[str, Any]]) -> MappingResult:
        """Map a batch of records, collecting errors instead of raising.

        Args:
            records: Records in ledger order

        Returns:
            MappingResult with transactions in input order and one error
            message per rejected record
        """
        transactions = []
        failures = []

        for record_num, record in enumerate(records, start=1):
            try:
                transactions.append(self.map_record(record))
            except ValidationError as e:
                failures.append(f"Record {record_num}: {e}")

        if failures:
            logger.debug("Rejected %d of %d records", len(failures), record_num)

        return MappingResult(transactions=tuple(transactions), errors=tuple(failures))

    def map_record(self, record: Mapping[str, Any]) -> Transaction:
        """Map a single record.

        Args:
            record: Record keyed by export column or field name

        Returns:
            Transaction entity

        Raises:
            ValidationError: If action or time is missing or a value cannot be parsed
        """
        if not isinstance(record, Mapping):
            raise ValidationError(f"Expected a mapping, got {type(record).__name__}")

        values = self.normalize_keys(record)

        action = values.pop("action", None)
        if not isinstance(action, str) or not action.strip():
            raise ValidationError(errors.missing_field("action"))

        raw_time = values.pop("time", None)
        if raw_time is None or (isinstance(raw_time, str) and not raw_time.strip()):
            raise ValidationError(errors.missing_field("time"))
        try:
            time = parse_timestamp(raw_time)
        except (ValueError, TypeError) as e:
            raise ValidationError(errors.invalid_field("time", raw_time, e)) from e

        fields: dict[str, Any] = {}
        for name, value in values.items():
            if name in DECIMAL_FIELDS:
                try:
                    fields[name] = parse_optional_amount(value)
                except (ValueError, TypeError) as e:
                    raise ValidationError(errors.invalid_field(name, value, e)) from e
            else:
                fields[name] = self.clean_text(value)

        return Transaction(action=action.strip(), time=time, **fields)

    def normalize_keys(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Translate export column names to field names, dropping unknown keys."""
        values: dict[str, Any] = {}
        for key, value in record.items():
            name = EXPORT_COLUMNS.get(key, key)
            if name in DECIMAL_FIELDS or name in TEXT_FIELDS or name in ("action", "time"):
                values[name] = value
        return values

    def clean_text(self, value: Any) -> str | None:
        """Strip text values; blanks become None."""
        if value is None:
            return None
        text = str(value).strip()
        return text or None
