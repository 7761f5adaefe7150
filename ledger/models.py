"""Data models for the budget ledger domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from .currency import DEFAULT_CURRENCY

__all__ = [
    "AppData",
    "CategoryAnalytics",
    "CategoryTotal",
    "Entry",
    "MonthlyTrend",
    "Summary",
    "Trip",
    "TripExpense",
    "parse_entry_date",
    "INCOME",
    "EXPENSE",
    "ENTRY_TYPES",
]

INCOME = "income"
EXPENSE = "expense"
ENTRY_TYPES = (INCOME, EXPENSE)

DATE_FORMAT = "%Y-%m-%d"


def parse_entry_date(value: object) -> Optional[date]:
    """Parse a stored ``YYYY-MM-DD`` date, returning None when it is unusable."""
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None


@dataclass(frozen=True)
class Entry:
    id: str
    type: str
    amount: float
    currency: str
    category: str
    date: str
    description: str

    @property
    def is_income(self) -> bool:
        return self.type == INCOME

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the entry to JSON-friendly natives."""
        return {
            "id": self.id,
            "type": self.type,
            "amount": self.amount,
            "currency": self.currency,
            "category": self.category,
            "date": self.date,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        """Hydrate an Entry from JSON-native data."""
        return cls(
            id=_text(data["id"]),
            type=_text(data["type"]),
            amount=_number(data["amount"]),
            currency=_text(data["currency"]),
            category=_text(data["category"]),
            date=_text(data["date"]),
            description=_text(data["description"]),
        )


@dataclass(frozen=True)
class TripExpense:
    id: str
    amount: float
    category: str
    description: str
    date: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "category": self.category,
            "description": self.description,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TripExpense":
        return cls(
            id=_text(data["id"]),
            amount=_number(data["amount"]),
            category=_text(data["category"]),
            description=_text(data["description"]),
            date=_text(data["date"]),
        )


@dataclass(frozen=True)
class Trip:
    id: str
    name: str
    destination: str
    budget: float
    currency: str
    start_date: str
    end_date: str
    expenses: Tuple[TripExpense, ...] = ()
    total_spent: float = 0.0

    def find_expense(self, expense_id: str) -> Optional[TripExpense]:
        for expense in self.expenses:
            if expense.id == expense_id:
                return expense
        return None

    @property
    def remaining(self) -> float:
        return self.budget - self.total_spent

    @property
    def progress(self) -> float:
        """Share of the budget spent, as a percentage capped at 100."""
        if self.budget <= 0:
            return 0.0
        return min(self.total_spent / self.budget * 100, 100.0)

    @property
    def over_budget(self) -> bool:
        return self.total_spent > self.budget

    def summary_dict(self) -> Dict[str, Any]:
        """Serialised trip plus the derived budget figures shown to callers."""
        return {
            **self.to_dict(),
            "remaining": self.remaining,
            "progress": self.progress,
            "over_budget": self.over_budget,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the trip, expenses included, to JSON-friendly natives."""
        return {
            "id": self.id,
            "name": self.name,
            "destination": self.destination,
            "budget": self.budget,
            "currency": self.currency,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "expenses": [expense.to_dict() for expense in self.expenses],
            "total_spent": self.total_spent,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Trip":
        return cls(
            id=_text(data["id"]),
            name=_text(data["name"]),
            destination=_text(data["destination"]),
            budget=_number(data["budget"]),
            currency=_text(data["currency"]),
            start_date=_text(data["start_date"]),
            end_date=_text(data["end_date"]),
            expenses=tuple(TripExpense.from_dict(item) for item in _list(data["expenses"])),
            total_spent=_number(data["total_spent"]),
        )


@dataclass
class AppData:
    """Complete ledger state as held by the record store and persisted to disk."""

    selected_currency: str = DEFAULT_CURRENCY
    entries: List[Entry] = field(default_factory=list)
    trips: List[Trip] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selected_currency": self.selected_currency,
            "entries": [entry.to_dict() for entry in self.entries],
            "trips": [trip.to_dict() for trip in self.trips],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppData":
        """Hydrate ledger state; snapshots written before trips existed have no ``trips`` key."""
        if not isinstance(data, dict):
            raise TypeError("ledger snapshot must be a JSON object")
        return cls(
            selected_currency=_text(data["selected_currency"]),
            entries=[Entry.from_dict(item) for item in _list(data["entries"])],
            trips=[Trip.from_dict(item) for item in _list(data.get("trips", []))],
        )


@dataclass(frozen=True)
class Summary:
    total_income: float
    total_expenses: float
    net_balance: float
    currency: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_income": self.total_income,
            "total_expenses": self.total_expenses,
            "net_balance": self.net_balance,
            "currency": self.currency,
        }


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: float
    count: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "total": self.total,
            "count": self.count,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class CategoryAnalytics:
    income_by_category: List[CategoryTotal]
    expense_by_category: List[CategoryTotal]
    total_income: float
    total_expenses: float
    currency: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "income_by_category": [item.to_dict() for item in self.income_by_category],
            "expense_by_category": [item.to_dict() for item in self.expense_by_category],
            "total_income": self.total_income,
            "total_expenses": self.total_expenses,
            "currency": self.currency,
        }


@dataclass(frozen=True)
class MonthlyTrend:
    month: int
    year: int
    month_name: str
    income: float
    expenses: float
    net: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "year": self.year,
            "month_name": self.month_name,
            "income": self.income,
            "expenses": self.expenses,
            "net": self.net,
        }


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected string, got {type(value).__name__}")
    return value


def _number(value: Any) -> float:
    # bool is an int subclass but never a valid amount.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected number, got {type(value).__name__}")
    return float(value)


def _list(value: Any) -> List[Any]:
    if not isinstance(value, list):
        raise TypeError(f"expected list, got {type(value).__name__}")
    return value
