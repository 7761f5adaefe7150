"""Flask REST API exposing the budget ledger services."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from ledger.analytics import SummaryService
from ledger.config import Settings
from ledger.currency import CurrencyConverter
from ledger.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from ledger.services import LedgerService, TripService
from ledger.storage import JSONStorage
from ledger.store import RecordStore


def create_app(data_dir: Optional[Path] = None, settings: Optional[Settings] = None) -> Flask:
    app = Flask(__name__)

    env_name = os.getenv("BUDGET_LEDGER_ENV", "prod").lower()
    if env_name in {"dev", "development"}:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    else:
        allowed_origins = os.getenv("BUDGET_LEDGER_ALLOWED_ORIGINS")
        if allowed_origins:
            origins = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
            CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)
        else:
            CORS(app)

    settings = settings or Settings.from_env(data_dir=data_dir)
    store = RecordStore(JSONStorage(settings.data_dir))
    store.load()
    converter = CurrencyConverter(settings.nok_per_eur)
    ledger = LedgerService(store, converter)
    trips = TripService(store, converter)
    summaries = SummaryService(store, converter)

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _int_arg(name: str, default: Optional[int] = None) -> Optional[int]:
        raw = request.args.get(name)
        if raw in (None, ""):
            return default
        try:
            return int(raw)
        except ValueError as exc:
            raise ValidationError(f"{name} must be an integer") from exc

    def _required_int_arg(name: str) -> int:
        value = _int_arg(name)
        if value is None:
            raise ValidationError(f"{name} is required")
        return value

    @app.post("/load")
    def load_data():
        return _success(ledger.load().to_dict())

    @app.post("/save")
    def save_data():
        ledger.save()
        return _success({}, 204)

    @app.get("/entries")
    def list_entries():
        entries = ledger.list_entries()
        return _success({"items": [entry.to_dict() for entry in entries]})

    @app.post("/entries")
    def create_entry():
        payload = _json_body()
        entry = ledger.add_entry(
            payload.get("type"),
            payload.get("amount"),
            payload.get("category"),
            payload.get("date"),
            payload.get("description"),
        )
        return _success(entry.to_dict(), 201)

    @app.delete("/entries/<entry_id>")
    def delete_entry(entry_id: str):
        ledger.delete_entry(entry_id)
        return _success({}, 204)

    @app.get("/summary/weekly")
    def weekly_summary():
        summary = summaries.weekly_summary(_required_int_arg("week"), _required_int_arg("year"))
        return _success(summary.to_dict())

    @app.get("/summary/monthly")
    def monthly_summary():
        summary = summaries.monthly_summary(_required_int_arg("month"), _required_int_arg("year"))
        return _success(summary.to_dict())

    @app.get("/analytics/categories")
    def category_analytics():
        analytics = summaries.category_analytics(_int_arg("month"), _int_arg("year"))
        return _success(analytics.to_dict())

    @app.get("/analytics/trends")
    def monthly_trends():
        trends = summaries.monthly_trends(_int_arg("months", 6))
        return _success({"items": [trend.to_dict() for trend in trends]})

    @app.get("/currency")
    def get_currency():
        return _success({"currency": ledger.get_currency()})

    @app.put("/currency")
    def set_currency():
        payload = _json_body()
        ledger.set_currency(payload.get("currency"))
        return _success({"currency": ledger.get_currency()})

    @app.post("/export")
    def export_csv():
        path = ledger.export_csv(settings.export_dir)
        return _success({"path": str(path)}, 201)

    @app.get("/trips")
    def list_trips():
        return _success({"items": [trip.summary_dict() for trip in trips.list()]})

    @app.get("/trips/<trip_id>/breakdown")
    def trip_breakdown(trip_id: str):
        items = trips.trip_breakdown(trip_id)
        return _success({"items": [item.to_dict() for item in items], "currency": ledger.get_currency()})

    @app.post("/trips")
    def create_trip():
        payload = _json_body()
        trip = trips.create_trip(
            payload.get("name"),
            payload.get("destination"),
            payload.get("budget"),
            payload.get("start_date"),
            payload.get("end_date"),
        )
        return _success(trip.to_dict(), 201)

    @app.delete("/trips/<trip_id>")
    def delete_trip(trip_id: str):
        trips.delete_trip(trip_id)
        return _success({}, 204)

    @app.post("/trips/<trip_id>/expenses")
    def add_trip_expense(trip_id: str):
        payload = _json_body()
        expense = trips.add_trip_expense(
            trip_id,
            payload.get("amount"),
            payload.get("category"),
            payload.get("description"),
            payload.get("date"),
        )
        return _success(expense.to_dict(), 201)

    @app.delete("/trips/<trip_id>/expenses/<expense_id>")
    def delete_trip_expense(trip_id: str, expense_id: str):
        trips.delete_trip_expense(trip_id, expense_id)
        return _success({}, 204)

    return app
