"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


def missing_field(field_name: str) -> str:
    """Return message for a record without a required field."""
    return f"Missing {field_name}"


def invalid_field(field_name: str, value: object, reason: object) -> str:
    """Return message for a field value that could not be parsed."""
    return f"Invalid {field_name} '{value}': {reason}"


def invalid_currency(currency: str) -> str:
    """Return message for a malformed currency code."""
    return f"Invalid currency code '{currency}': expected three letters such as EUR"
