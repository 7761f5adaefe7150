"""Console interface for the budget ledger."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Tuple

from ledger.analytics import SummaryService
from ledger.config import Settings
from ledger.currency import CurrencyConverter, SUPPORTED_CURRENCIES
from ledger.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from ledger.models import ENTRY_TYPES, CategoryTotal, Entry, Summary, Trip
from ledger.services import LedgerService, TripService
from ledger.storage import JSONStorage
from ledger.store import RecordStore

DATE_FORMAT = "%Y-%m-%d"


def _parse_date(value: str) -> str:
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        ) from exc
    return value


def _parse_amount(value: str) -> float:
    try:
        amount = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("Amount must be a numeric value") from exc
    if amount <= 0:
        raise argparse.ArgumentTypeError("Amount must be greater than zero")
    return amount


def _load_services(settings: Settings) -> Tuple[LedgerService, TripService, SummaryService]:
    store = RecordStore(JSONStorage(settings.data_dir))
    store.load()
    converter = CurrencyConverter(settings.nok_per_eur)
    return (
        LedgerService(store, converter),
        TripService(store, converter),
        SummaryService(store, converter),
    )


def _format_entry(entry: Entry) -> str:
    return (
        f"[{entry.id}] {entry.date} {entry.type:<7} {entry.amount:.2f} {entry.currency}\n"
        f"  Category: {entry.category} | Description: {entry.description or '-'}\n"
    )


def _format_summary(title: str, summary: Summary) -> str:
    return (
        f"{title}\n"
        f"  Income:   {summary.total_income:.2f} {summary.currency}\n"
        f"  Expenses: {summary.total_expenses:.2f} {summary.currency}\n"
        f"  Net:      {summary.net_balance:.2f} {summary.currency}"
    )


def _format_categories(title: str, items: List[CategoryTotal], currency: str) -> str:
    lines = [title]
    if not items:
        lines.append("  (none)")
    for item in sorted(items, key=lambda cat: cat.total, reverse=True):
        lines.append(
            f"  {item.category:<16} {item.total:>10.2f} {currency} "
            f"({item.count}) {item.percentage:5.1f}%"
        )
    return "\n".join(lines)


def _format_trip(trip: Trip) -> str:
    lines = [
        f"[{trip.id}] {trip.name} -> {trip.destination} ({trip.start_date} - {trip.end_date})",
        f"  Budget: {trip.budget:.2f} {trip.currency} | Spent: {trip.total_spent:.2f} | "
        f"Remaining: {trip.remaining:.2f} | Used: {trip.progress:.1f}%"
        + (" | OVER BUDGET" if trip.over_budget else ""),
    ]
    for expense in trip.expenses:
        lines.append(
            f"    [{expense.id}] {expense.date} {expense.amount:.2f} "
            f"{expense.category} {expense.description or '-'}"
        )
    return "\n".join(lines) + "\n"


def handle_entry(args: argparse.Namespace, ledger: LedgerService) -> None:
    if args.command == "add":
        entry = ledger.add_entry(
            args.type, args.amount, args.category, args.date, args.description
        )
        print("Entry added:\n" + _format_entry(entry))
    elif args.command == "list":
        entries = ledger.list_entries()
        if not entries:
            print("No entries found.")
            return
        print(f"Found {len(entries)} entries:")
        for entry in entries:
            print(_format_entry(entry))
    elif args.command == "delete":
        ledger.delete_entry(args.id)
        print(f"Entry {args.id} deleted.")


def handle_summary(args: argparse.Namespace, summaries: SummaryService) -> None:
    today = date.today()
    if args.command == "weekly":
        iso_year, iso_week, _ = today.isocalendar()
        week = iso_week if args.week is None else args.week
        year = iso_year if args.year is None else args.year
        print(_format_summary(f"Week {week}, {year}", summaries.weekly_summary(week, year)))
    elif args.command == "monthly":
        month = today.month if args.month is None else args.month
        year = today.year if args.year is None else args.year
        print(_format_summary(f"{month:02d}/{year}", summaries.monthly_summary(month, year)))
    elif args.command == "categories":
        analytics = summaries.category_analytics(args.month, args.year)
        print(_format_categories("Income by category", analytics.income_by_category, analytics.currency))
        print(_format_categories("Expenses by category", analytics.expense_by_category, analytics.currency))
    elif args.command == "trends":
        for trend in summaries.monthly_trends(args.months):
            print(
                f"{trend.month_name} {trend.year}: income {trend.income:.2f} "
                f"expenses {trend.expenses:.2f} net {trend.net:+.2f}"
            )


def handle_currency(args: argparse.Namespace, ledger: LedgerService) -> None:
    if args.command == "set":
        ledger.set_currency(args.code)
        print(f"Display currency set to {args.code}.")
    else:
        print(ledger.get_currency())


def handle_trip(args: argparse.Namespace, trips: TripService) -> None:
    if args.command == "create":
        trip = trips.create_trip(
            args.name, args.destination, args.budget, args.start_date, args.end_date
        )
        print("Trip created:\n" + _format_trip(trip))
    elif args.command == "list":
        projected = trips.list()
        if not projected:
            print("No trips found.")
            return
        for trip in projected:
            print(_format_trip(trip))
    elif args.command == "delete":
        trips.delete_trip(args.id)
        print(f"Trip {args.id} deleted.")
    elif args.command == "add-expense":
        expense = trips.add_trip_expense(
            args.trip_id, args.amount, args.category, args.description, args.date
        )
        print(f"Expense {expense.id} added to trip {args.trip_id}.")
    elif args.command == "delete-expense":
        trips.delete_trip_expense(args.trip_id, args.expense_id)
        print(f"Expense {args.expense_id} deleted from trip {args.trip_id}.")
    elif args.command == "breakdown":
        items = trips.trip_breakdown(args.trip_id)
        trip = next(item for item in trips.list() if item.id == args.trip_id)
        print(_format_categories(f"{trip.name} spend by category", items, trip.currency))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Budget Ledger CLI")
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding budget_data.json (default: $BUDGET_LEDGER_DATA_DIR or ~/.budsjetto)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="entity", required=True)

    entry_parser = subparsers.add_parser("entry", help="Manage income and expense entries")
    entry_sub = entry_parser.add_subparsers(dest="command", required=True)

    entry_add = entry_sub.add_parser("add", help="Add a new entry")
    entry_add.add_argument("type", choices=ENTRY_TYPES)
    entry_add.add_argument("amount", type=_parse_amount)
    entry_add.add_argument("category")
    entry_add.add_argument("date", type=_parse_date)
    entry_add.add_argument("--description", default="")

    entry_sub.add_parser("list", help="List entries in the display currency")

    entry_delete = entry_sub.add_parser("delete", help="Delete an entry")
    entry_delete.add_argument("id")

    summary_parser = subparsers.add_parser("summary", help="Summaries and analytics")
    summary_sub = summary_parser.add_subparsers(dest="command", required=True)

    weekly = summary_sub.add_parser("weekly", help="Totals for an ISO week")
    weekly.add_argument("--week", type=int)
    weekly.add_argument("--year", type=int)

    monthly = summary_sub.add_parser("monthly", help="Totals for a calendar month")
    monthly.add_argument("--month", type=int)
    monthly.add_argument("--year", type=int)

    categories = summary_sub.add_parser("categories", help="Breakdown by category")
    categories.add_argument("--month", type=int)
    categories.add_argument("--year", type=int)

    trends = summary_sub.add_parser("trends", help="Month-by-month income and expenses")
    trends.add_argument("--months", type=int, default=6)

    currency_parser = subparsers.add_parser("currency", help="Show or change the display currency")
    currency_sub = currency_parser.add_subparsers(dest="command", required=True)
    currency_sub.add_parser("get", help="Show the display currency")
    currency_set = currency_sub.add_parser("set", help="Change the display currency")
    currency_set.add_argument("code", choices=SUPPORTED_CURRENCIES)

    trip_parser = subparsers.add_parser("trip", help="Manage trip budgets")
    trip_sub = trip_parser.add_subparsers(dest="command", required=True)

    trip_create = trip_sub.add_parser("create", help="Create a trip budget")
    trip_create.add_argument("name")
    trip_create.add_argument("destination")
    trip_create.add_argument("budget", type=_parse_amount)
    trip_create.add_argument("start_date", type=_parse_date)
    trip_create.add_argument("end_date", type=_parse_date)

    trip_sub.add_parser("list", help="List trips in the display currency")

    trip_delete = trip_sub.add_parser("delete", help="Delete a trip")
    trip_delete.add_argument("id")

    trip_expense = trip_sub.add_parser("add-expense", help="Add an expense to a trip")
    trip_expense.add_argument("trip_id")
    trip_expense.add_argument("amount", type=_parse_amount)
    trip_expense.add_argument("category")
    trip_expense.add_argument("date", type=_parse_date)
    trip_expense.add_argument("--description", default="")

    trip_expense_delete = trip_sub.add_parser("delete-expense", help="Delete a trip expense")
    trip_expense_delete.add_argument("trip_id")
    trip_expense_delete.add_argument("expense_id")

    trip_breakdown = trip_sub.add_parser("breakdown", help="Show a trip's spend by category")
    trip_breakdown.add_argument("trip_id")

    subparsers.add_parser("export", help="Export entries to a CSV file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Settings.from_env(data_dir=args.data_dir)
        ledger, trips, summaries = _load_services(settings)
        if args.entity == "entry":
            handle_entry(args, ledger)
        elif args.entity == "summary":
            handle_summary(args, summaries)
        elif args.entity == "currency":
            handle_currency(args, ledger)
        elif args.entity == "trip":
            handle_trip(args, trips)
        elif args.entity == "export":
            path = ledger.export_csv(settings.export_dir)
            print(f"Exported entries to {path}")
        else:  # pragma: no cover - argparse should prevent this
            parser.error(f"Unknown entity: {args.entity}")
            return 2
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
