"""Business services for entries, display currency and trips."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from uuid import uuid4

from .currency import CurrencyConverter
from .exceptions import RecordNotFoundError
from .export import export_entries_csv
from .models import AppData, CategoryTotal, Entry, Trip, TripExpense
from .store import RecordStore
from .validators import parse_amount, validate_currency, validate_entry_type, validate_text

logger = logging.getLogger(__name__)


class LedgerService:
    """Manages income/expense entries and the selected display currency."""

    def __init__(self, store: RecordStore, converter: Optional[CurrencyConverter] = None) -> None:
        self._store = store
        self._converter = converter or CurrencyConverter()

    # Public API -----------------------------------------------------------
    def load(self) -> AppData:
        return self._store.load()

    def save(self) -> None:
        self._store.save()

    def add_entry(
        self,
        entry_type: object,
        amount: object,
        category: object,
        date: object,
        description: object = "",
    ) -> Entry:
        # Amount is checked before the type so a doubly-invalid call reports the amount.
        value = parse_amount(amount, "amount")
        kind = validate_entry_type(entry_type)
        category_text = validate_text(category, "category")
        date_text = validate_text(date, "date")
        description_text = validate_text(description, "description")

        with self._store.session() as data:
            entry = Entry(
                id=str(uuid4()),
                type=kind,
                amount=value,
                currency=data.selected_currency,
                category=category_text,
                date=date_text,
                description=description_text,
            )
            data.entries.append(entry)
            logger.debug("Added %s entry %s", entry.type, entry.id)
            self._store.persist(data)
        return entry

    def delete_entry(self, entry_id: str) -> None:
        with self._store.session() as data:
            remaining = [entry for entry in data.entries if entry.id != entry_id]
            if len(remaining) == len(data.entries):
                raise RecordNotFoundError(f"Entry {entry_id} not found")
            data.entries = remaining
            logger.debug("Deleted entry %s", entry_id)
            self._store.persist(data)

    def list_entries(self) -> List[Entry]:
        """Return every entry with its amount projected into the display currency."""
        with self._store.session() as data:
            target = data.selected_currency
            return [self._project(entry, target) for entry in data.entries]

    def get_currency(self) -> str:
        with self._store.session() as data:
            return data.selected_currency

    def set_currency(self, code: object) -> None:
        currency = validate_currency(code)
        with self._store.session() as data:
            # Stored records keep their own currency; reads project on the fly.
            data.selected_currency = currency
            self._store.persist(data)

    def export_csv(self, directory: Path, now: Optional[datetime] = None) -> Path:
        with self._store.session() as data:
            entries = list(data.entries)
        path = export_entries_csv(entries, directory, now=now)
        logger.info("Exported %d entries to %s", len(entries), path)
        return path

    # Internal helpers -----------------------------------------------------
    def _project(self, entry: Entry, target: str) -> Entry:
        if entry.currency == target:
            return entry
        return replace(
            entry,
            amount=self._converter.convert(entry.amount, entry.currency, target),
            currency=target,
        )


class TripService:
    """Manages trip budgets and their expenses."""

    def __init__(self, store: RecordStore, converter: Optional[CurrencyConverter] = None) -> None:
        self._store = store
        self._converter = converter or CurrencyConverter()

    def create_trip(
        self,
        name: object,
        destination: object,
        budget: object,
        start_date: object,
        end_date: object,
    ) -> Trip:
        value = parse_amount(budget, "budget")
        name_text = validate_text(name, "name")
        destination_text = validate_text(destination, "destination")
        start_text = validate_text(start_date, "start_date")
        end_text = validate_text(end_date, "end_date")

        with self._store.session() as data:
            trip = Trip(
                id=str(uuid4()),
                name=name_text,
                destination=destination_text,
                budget=value,
                currency=data.selected_currency,
                start_date=start_text,
                end_date=end_text,
                expenses=(),
                total_spent=0.0,
            )
            data.trips.append(trip)
            logger.debug("Created trip %s", trip.id)
            self._store.persist(data)
        return trip

    def delete_trip(self, trip_id: str) -> None:
        with self._store.session() as data:
            remaining = [trip for trip in data.trips if trip.id != trip_id]
            if len(remaining) == len(data.trips):
                raise RecordNotFoundError(f"Trip {trip_id} not found")
            data.trips = remaining
            self._store.persist(data)

    def add_trip_expense(
        self,
        trip_id: str,
        amount: object,
        category: object,
        description: object,
        date: object,
    ) -> TripExpense:
        with self._store.session() as data:
            index, trip = self._get_or_raise(data, trip_id)
            value = parse_amount(amount, "amount")
            category_text = validate_text(category, "category")
            description_text = validate_text(description, "description")
            date_text = validate_text(date, "date")
            expense = TripExpense(
                id=str(uuid4()),
                amount=value,
                category=category_text,
                description=description_text,
                date=date_text,
            )
            # Amount is in the trip's own currency; no conversion on write.
            data.trips[index] = replace(
                trip,
                expenses=(*trip.expenses, expense),
                total_spent=trip.total_spent + value,
            )
            self._store.persist(data)
        return expense

    def delete_trip_expense(self, trip_id: str, expense_id: str) -> None:
        with self._store.session() as data:
            index, trip = self._get_or_raise(data, trip_id)
            expense = trip.find_expense(expense_id)
            if expense is None:
                raise RecordNotFoundError(f"Expense {expense_id} not found in trip {trip_id}")
            data.trips[index] = replace(
                trip,
                expenses=tuple(item for item in trip.expenses if item.id != expense_id),
                total_spent=trip.total_spent - expense.amount,
            )
            self._store.persist(data)

    def list(self) -> List[Trip]:
        """Return all trips with money fields projected into the display currency."""
        with self._store.session() as data:
            target = data.selected_currency
            return [self._project(trip, target) for trip in data.trips]

    def trip_breakdown(self, trip_id: str) -> List[CategoryTotal]:
        """Spend per category within one trip, in the display currency.

        Percentages are shares of the trip's total spend; all zero when nothing is spent.
        """
        with self._store.session() as data:
            _, trip = self._get_or_raise(data, trip_id)
            projected = self._project(trip, data.selected_currency)

        groups: Dict[str, Tuple[float, int]] = {}
        for expense in projected.expenses:
            total, count = groups.get(expense.category, (0.0, 0))
            groups[expense.category] = (total + expense.amount, count + 1)

        spent = projected.total_spent
        return [
            CategoryTotal(
                category=category,
                total=total,
                count=count,
                percentage=(total / spent * 100) if spent > 0 else 0.0,
            )
            for category, (total, count) in groups.items()
        ]

    def _project(self, trip: Trip, target: str) -> Trip:
        if trip.currency == target:
            return trip

        def convert(amount: float) -> float:
            return self._converter.convert(amount, trip.currency, target)

        return replace(
            trip,
            budget=convert(trip.budget),
            total_spent=convert(trip.total_spent),
            expenses=tuple(replace(item, amount=convert(item.amount)) for item in trip.expenses),
            currency=target,
        )

    @staticmethod
    def _get_or_raise(data: AppData, trip_id: str):
        for index, trip in enumerate(data.trips):
            if trip.id == trip_id:
                return index, trip
        raise RecordNotFoundError(f"Trip {trip_id} not found")
