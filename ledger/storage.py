"""Persistence utilities for the budget ledger core services."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import MalformedDataError, PersistenceError

DATA_FILENAME = "budget_data.json"


class JSONStorage:
    """Single-file JSON snapshot storage with crash-safe writes."""

    def __init__(self, base_path: Path, filename: str = DATA_FILENAME) -> None:
        self._base_path = Path(base_path)
        self._filename = filename
        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Unable to create data directory {self._base_path}") from exc

    def load(self) -> Optional[Dict[str, Any]]:
        """Return the stored snapshot, or None when nothing has been saved yet."""
        path = self.path
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedDataError(f"Corrupted JSON data in {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

        if not isinstance(payload, dict):
            raise MalformedDataError(f"Expected object payload in {path}")
        return payload

    def save(self, snapshot: Dict[str, Any]) -> None:
        path = self.path
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(snapshot, handle, indent=2, ensure_ascii=False)
                handle.flush()
            # Use replace for atomic move on POSIX.
            temp_path.replace(path)
        except OSError as exc:
            raise PersistenceError(f"Unable to write to {path}") from exc

    @property
    def base_path(self) -> Path:
        return self._base_path

    @property
    def path(self) -> Path:
        return self._base_path / self._filename
