"""JSON serialization of report entities."""

import dataclasses
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any


def to_jsonable(value: Any) -> Any:
    """Convert report entities into JSON-compatible structures.

    Decimals become strings to keep their exact value, datetimes become
    ISO 8601 strings, and mapping keys are stringified.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)
        }
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def dump_json(value: Any) -> str:
    """Serialize a report entity to indented JSON."""
    return json.dumps(to_jsonable(value), indent=2)
