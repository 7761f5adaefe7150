"""Core business logic package for the budget ledger."""

from .analytics import SummaryService
from .currency import CurrencyConverter, SUPPORTED_CURRENCIES, convert
from .exceptions import MalformedDataError, PersistenceError, RecordNotFoundError, ValidationError
from .models import AppData, CategoryAnalytics, CategoryTotal, Entry, MonthlyTrend, Summary, Trip, TripExpense
from .services import LedgerService, TripService
from .storage import JSONStorage
from .store import RecordStore

__all__ = [
    "AppData",
    "CategoryAnalytics",
    "CategoryTotal",
    "CurrencyConverter",
    "Entry",
    "JSONStorage",
    "LedgerService",
    "MalformedDataError",
    "MonthlyTrend",
    "PersistenceError",
    "RecordNotFoundError",
    "RecordStore",
    "SUPPORTED_CURRENCIES",
    "Summary",
    "SummaryService",
    "Trip",
    "TripExpense",
    "TripService",
    "ValidationError",
    "convert",
]
