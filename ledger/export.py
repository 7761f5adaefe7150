"""CSV export of ledger entries."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from .exceptions import PersistenceError
from .models import Entry

CSV_HEADER = "ID,Type,Amount,Currency,Category,Date,Description"


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def render_entries_csv(entries: Iterable[Entry]) -> str:
    lines = [CSV_HEADER]
    for entry in entries:
        lines.append(
            f"{entry.id},{entry.type},{entry.amount:.2f},{entry.currency},"
            f"{entry.category},{entry.date},{_quote(entry.description)}"
        )
    return "\n".join(lines) + "\n"


def export_filename(now: datetime) -> str:
    return f"budget_export_{now:%Y%m%d_%H%M%S}.csv"


def export_entries_csv(
    entries: Iterable[Entry], directory: Path, now: Optional[datetime] = None
) -> Path:
    """Write entries to a timestamped CSV file in ``directory`` and return its path."""
    stamp = now or datetime.now()
    path = Path(directory) / export_filename(stamp)
    content = render_entries_csv(entries)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Unable to write export to {path}") from exc
    return path
