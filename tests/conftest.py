"""Pytest fixtures for ledger tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from ledger.analytics import SummaryService
from ledger.currency import CurrencyConverter
from ledger.services import LedgerService, TripService
from ledger.storage import JSONStorage
from ledger.store import RecordStore

RATE = 11.7


@pytest.fixture
def storage(tmp_path: Path) -> JSONStorage:
    return JSONStorage(tmp_path / "data")


@pytest.fixture
def store(storage: JSONStorage) -> RecordStore:
    record_store = RecordStore(storage)
    record_store.load()
    return record_store


@pytest.fixture
def converter() -> CurrencyConverter:
    return CurrencyConverter(RATE)


@pytest.fixture
def ledger(store: RecordStore, converter: CurrencyConverter) -> LedgerService:
    return LedgerService(store, converter)


@pytest.fixture
def trips(store: RecordStore, converter: CurrencyConverter) -> TripService:
    return TripService(store, converter)


@pytest.fixture
def summaries(store: RecordStore, converter: CurrencyConverter) -> SummaryService:
    return SummaryService(store, converter)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "BUDGET_LEDGER_DATA_DIR",
        "BUDGET_LEDGER_EXPORT_DIR",
        "BUDGET_LEDGER_NOK_PER_EUR",
        "BUDGET_LEDGER_ENV",
        "BUDGET_LEDGER_ALLOWED_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
