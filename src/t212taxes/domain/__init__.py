"""Domain layer for t212taxes application."""

from t212taxes.domain.currency import CurrencyNormalizer
from t212taxes.domain.reports import ReportService
from t212taxes.domain.capital_gains import CapitalGainsService
from t212taxes.domain.portfolio import PortfolioService
from t212taxes.domain.income import IncomeService
from t212taxes.domain.records import RecordMappingService
from t212taxes.domain.diagnostics import Diagnostics

__all__ = [
    "CurrencyNormalizer",
    "ReportService",
    "CapitalGainsService",
    "PortfolioService",
    "IncomeService",
    "RecordMappingService",
    "Diagnostics",
]
