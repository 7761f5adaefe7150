"""Period and category aggregation over ledger entries.

All totals are reported in the display currency selected at the time of the
call. Entries whose date is not a valid ``YYYY-MM-DD`` string are skipped by
every date-filtered aggregation without raising.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .currency import CurrencyConverter
from .exceptions import ValidationError
from .models import (
    CategoryAnalytics,
    CategoryTotal,
    Entry,
    MonthlyTrend,
    Summary,
    parse_entry_date,
)
from .store import RecordStore
from .validators import validate_int_range, validate_non_negative_int

MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# Trends step back a fixed number of days rather than by calendar month.
TREND_STEP_DAYS = 30

DatePredicate = Callable[[date], bool]


class SummaryService:
    """Read-only aggregations over the entries held by a RecordStore."""

    def __init__(self, store: RecordStore, converter: Optional[CurrencyConverter] = None) -> None:
        self._store = store
        self._converter = converter or CurrencyConverter()

    def weekly_summary(self, week: int, year: int) -> Summary:
        week = validate_int_range(week, "week", range(1, 54))
        year = _validate_year(year)

        def in_week(day: date) -> bool:
            iso_year, iso_week, _ = day.isocalendar()
            return iso_week == week and iso_year == year

        return self._summarise(in_week)

    def monthly_summary(self, month: int, year: int) -> Summary:
        month = validate_int_range(month, "month", range(1, 13))
        year = _validate_year(year)
        return self._summarise(_in_month(month, year))

    def category_analytics(
        self, month: Optional[int] = None, year: Optional[int] = None
    ) -> CategoryAnalytics:
        """Break income and expenses down by category.

        The period filter applies only when both ``month`` and ``year`` are
        given. Without it every entry counts, including those whose date
        cannot be parsed.
        """
        predicate: Optional[DatePredicate] = None
        if month is not None and year is not None:
            predicate = _in_month(
                validate_int_range(month, "month", range(1, 13)), _validate_year(year)
            )

        with self._store.session() as data:
            currency = data.selected_currency
            entries = list(data.entries)

        if predicate is not None:
            entries = list(_matching(entries, predicate))

        income: Dict[str, Tuple[float, int]] = {}
        expenses: Dict[str, Tuple[float, int]] = {}
        for entry in entries:
            amount = self._converter.convert(entry.amount, entry.currency, currency)
            bucket = income if entry.is_income else expenses
            total, count = bucket.get(entry.category, (0.0, 0))
            bucket[entry.category] = (total + amount, count + 1)

        total_income = sum(total for total, _ in income.values())
        total_expenses = sum(total for total, _ in expenses.values())
        return CategoryAnalytics(
            income_by_category=_breakdown(income, total_income),
            expense_by_category=_breakdown(expenses, total_expenses),
            total_income=total_income,
            total_expenses=total_expenses,
            currency=currency,
        )

    def monthly_trends(self, months: int, today: Optional[date] = None) -> List[MonthlyTrend]:
        """Income and expenses for the last ``months`` months, oldest first.

        Each point is found by stepping back ``30 * i`` days from ``today``,
        so a short month can be skipped or a month reported twice.
        """
        months = validate_non_negative_int(months, "months")
        anchor = today or date.today()

        with self._store.session() as data:
            currency = data.selected_currency
            entries = list(data.entries)

        trends: List[MonthlyTrend] = []
        for offset in reversed(range(months)):
            target = anchor - timedelta(days=TREND_STEP_DAYS * offset)
            income, expenses = self._totals(
                _matching(entries, _in_month(target.month, target.year)), currency
            )
            trends.append(
                MonthlyTrend(
                    month=target.month,
                    year=target.year,
                    month_name=MONTH_NAMES[target.month - 1],
                    income=income,
                    expenses=expenses,
                    net=income - expenses,
                )
            )
        return trends

    # Internal helpers -----------------------------------------------------
    def _summarise(self, predicate: DatePredicate) -> Summary:
        with self._store.session() as data:
            currency = data.selected_currency
            income, expenses = self._totals(_matching(data.entries, predicate), currency)
        return Summary(
            total_income=income,
            total_expenses=expenses,
            net_balance=income - expenses,
            currency=currency,
        )

    def _totals(self, entries: Iterable[Entry], currency: str) -> Tuple[float, float]:
        income = 0.0
        expenses = 0.0
        for entry in entries:
            amount = self._converter.convert(entry.amount, entry.currency, currency)
            if entry.is_income:
                income += amount
            else:
                expenses += amount
        return income, expenses


def _in_month(month: int, year: int) -> DatePredicate:
    def predicate(day: date) -> bool:
        return day.month == month and day.year == year

    return predicate


def _matching(entries: Iterable[Entry], predicate: DatePredicate) -> Iterable[Entry]:
    for entry in entries:
        day = parse_entry_date(entry.date)
        if day is not None and predicate(day):
            yield entry


def _breakdown(groups: Dict[str, Tuple[float, int]], kind_total: float) -> List[CategoryTotal]:
    return [
        CategoryTotal(
            category=category,
            total=total,
            count=count,
            percentage=(total / kind_total * 100) if kind_total > 0 else 0.0,
        )
        for category, (total, count) in groups.items()
    ]


def _validate_year(year: object) -> int:
    if isinstance(year, bool) or not isinstance(year, int):
        raise ValidationError("year must be an integer")
    return year
