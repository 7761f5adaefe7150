"""Trip budget operation and projection tests."""

from __future__ import annotations

import pytest

from ledger.exceptions import RecordNotFoundError, ValidationError
from ledger.models import Trip
from ledger.services import LedgerService, TripService
from ledger.store import RecordStore

RATE = 11.7


def _create(trips: TripService, budget: float = 10000) -> Trip:
    return trips.create_trip("Summer", "Rome", budget, "2024-07-01", "2024-07-14")


def _stored(store: RecordStore, trip_id: str) -> Trip:
    return next(trip for trip in store.snapshot().trips if trip.id == trip_id)


def test_create_trip(trips: TripService) -> None:
    """A new trip starts empty in the selected currency."""
    trip = _create(trips)
    assert trip.currency == "NOK"
    assert trip.expenses == ()
    assert trip.total_spent == 0
    assert trips.list() == [trip]


@pytest.mark.parametrize("budget", [0, -100])
def test_create_trip_rejects_non_positive_budget(
    trips: TripService, store: RecordStore, budget: float
) -> None:
    """Zero or negative budgets are rejected and no trip is added."""
    with pytest.raises(ValidationError):
        _create(trips, budget)
    assert store.snapshot().trips == []


def test_total_spent_tracks_expenses(trips: TripService, store: RecordStore) -> None:
    """The running total equals the sum of expenses after adds and deletes."""
    trip = _create(trips)
    first = trips.add_trip_expense(trip.id, 250.5, "Food", "Pizza", "2024-07-02")
    second = trips.add_trip_expense(trip.id, 1200, "Accommodation", "Hotel", "2024-07-01")
    trips.add_trip_expense(trip.id, 80, "Transport", "Bus", "2024-07-03")

    stored = _stored(store, trip.id)
    assert stored.total_spent == pytest.approx(sum(e.amount for e in stored.expenses))

    trips.delete_trip_expense(trip.id, second.id)
    stored = _stored(store, trip.id)
    assert [e.category for e in stored.expenses] == ["Food", "Transport"]
    assert stored.total_spent == pytest.approx(sum(e.amount for e in stored.expenses))

    trips.delete_trip_expense(trip.id, first.id)
    remaining = _stored(store, trip.id).expenses[0]
    trips.delete_trip_expense(trip.id, remaining.id)
    stored = _stored(store, trip.id)
    assert stored.expenses == ()
    assert stored.total_spent == pytest.approx(0)


def test_add_expense_to_unknown_trip(trips: TripService) -> None:
    """An unknown trip is reported before the amount is checked."""
    with pytest.raises(RecordNotFoundError):
        trips.add_trip_expense("missing", 0, "Food", "", "2024-07-02")


def test_add_expense_rejects_non_positive_amount(trips: TripService, store: RecordStore) -> None:
    """Expense amounts must be positive and the trip stays untouched."""
    trip = _create(trips)
    with pytest.raises(ValidationError):
        trips.add_trip_expense(trip.id, -5, "Food", "", "2024-07-02")
    assert _stored(store, trip.id) == trip


def test_delete_unknown_trip_or_expense(trips: TripService, store: RecordStore) -> None:
    """Missing ids raise RecordNotFoundError and change nothing."""
    trip = _create(trips)
    trips.add_trip_expense(trip.id, 100, "Food", "", "2024-07-02")
    before = store.snapshot()

    with pytest.raises(RecordNotFoundError):
        trips.delete_trip("missing")
    with pytest.raises(RecordNotFoundError):
        trips.delete_trip_expense("missing", "x")
    with pytest.raises(RecordNotFoundError):
        trips.delete_trip_expense(trip.id, "missing")

    assert store.snapshot() == before


def test_delete_trip(trips: TripService, store: RecordStore) -> None:
    """Deleting a trip removes it with its expenses."""
    trip = _create(trips)
    trips.delete_trip(trip.id)
    assert store.snapshot().trips == []


def test_list_projects_into_display_currency(
    trips: TripService, ledger: LedgerService, store: RecordStore
) -> None:
    """Listing converts budget, spend and expenses without mutating storage."""
    trip = _create(trips, budget=11700)
    trips.add_trip_expense(trip.id, 117, "Food", "Dinner", "2024-07-02")
    ledger.set_currency("EUR")

    projected = trips.list()[0]

    assert projected.currency == "EUR"
    assert projected.budget == pytest.approx(1000)
    assert projected.total_spent == pytest.approx(10)
    assert projected.expenses[0].amount == pytest.approx(10)
    stored = _stored(store, trip.id)
    assert stored.currency == "NOK"
    assert stored.budget == 11700
    assert stored.expenses[0].amount == 117


def test_expense_amount_is_in_trip_currency(
    trips: TripService, ledger: LedgerService, store: RecordStore
) -> None:
    """Expenses are added in the trip's own currency regardless of display currency."""
    trip = _create(trips)
    ledger.set_currency("EUR")
    trips.add_trip_expense(trip.id, 50, "Food", "", "2024-07-02")

    stored = _stored(store, trip.id)
    assert stored.total_spent == 50
    assert stored.remaining == 10000 - 50


def test_unknown_trip_reported_before_text_checks(trips: TripService) -> None:
    """A missing trip wins over malformed expense fields."""
    with pytest.raises(RecordNotFoundError):
        trips.add_trip_expense("missing", 10, 123, None, "2024-07-02")


def test_listed_trip_cannot_alter_stored_expenses(trips: TripService, store: RecordStore) -> None:
    """Expenses handed to callers are immutable, so the stored total stays consistent."""
    trip = _create(trips)
    trips.add_trip_expense(trip.id, 100, "Food", "", "2024-07-02")

    listed = trips.list()[0]
    with pytest.raises(AttributeError):
        listed.expenses.clear()  # type: ignore[attr-defined]

    stored = _stored(store, trip.id)
    assert len(stored.expenses) == 1
    assert stored.total_spent == sum(e.amount for e in stored.expenses)


def test_progress_and_over_budget(trips: TripService, store: RecordStore) -> None:
    """Progress is the spent share of the budget capped at 100."""
    trip = _create(trips, budget=1000)
    assert trip.progress == 0
    assert not trip.over_budget

    trips.add_trip_expense(trip.id, 800, "Accommodation", "", "2024-07-01")
    stored = _stored(store, trip.id)
    assert stored.progress == pytest.approx(80)
    assert not stored.over_budget

    trips.add_trip_expense(trip.id, 400, "Food", "", "2024-07-02")
    stored = _stored(store, trip.id)
    assert stored.progress == 100
    assert stored.over_budget
    assert stored.remaining == pytest.approx(-200)


def test_progress_with_zero_budget() -> None:
    """A zero budget reports no progress instead of dividing by zero."""
    trip = Trip(
        id="t", name="n", destination="d", budget=0, currency="NOK",
        start_date="", end_date="",
    )
    assert trip.progress == 0
    assert not trip.over_budget


def test_summary_dict_adds_derived_fields(trips: TripService) -> None:
    """The caller-facing dict carries remaining, progress and over_budget."""
    trip = _create(trips, budget=200)
    trips.add_trip_expense(trip.id, 50, "Food", "", "2024-07-02")

    data = trips.list()[0].summary_dict()

    assert data["remaining"] == 150
    assert data["progress"] == pytest.approx(25)
    assert data["over_budget"] is False
    assert "progress" not in trips.list()[0].to_dict()


def test_trip_breakdown(trips: TripService) -> None:
    """Spend is grouped by category with each share of the trip total."""
    trip = _create(trips)
    trips.add_trip_expense(trip.id, 300, "Food", "", "2024-07-02")
    trips.add_trip_expense(trip.id, 100, "Food", "", "2024-07-03")
    trips.add_trip_expense(trip.id, 100, "Transport", "", "2024-07-03")

    breakdown = {item.category: item for item in trips.trip_breakdown(trip.id)}

    assert breakdown["Food"].total == 400
    assert breakdown["Food"].count == 2
    assert breakdown["Food"].percentage == pytest.approx(80)
    assert breakdown["Transport"].percentage == pytest.approx(20)


def test_trip_breakdown_in_display_currency(trips: TripService, ledger: LedgerService) -> None:
    """Breakdown totals are converted into the display currency."""
    trip = _create(trips)
    trips.add_trip_expense(trip.id, 117, "Food", "", "2024-07-02")
    ledger.set_currency("EUR")

    (item,) = trips.trip_breakdown(trip.id)

    assert item.total == pytest.approx(10)
    assert item.percentage == pytest.approx(100)


def test_trip_breakdown_empty_and_missing(trips: TripService) -> None:
    """A trip without expenses has no categories; unknown trips raise."""
    trip = _create(trips)
    assert trips.trip_breakdown(trip.id) == []
    with pytest.raises(RecordNotFoundError):
        trips.trip_breakdown("missing")
