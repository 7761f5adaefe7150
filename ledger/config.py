"""Environment-driven settings for the budget ledger."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .currency import DEFAULT_NOK_PER_EUR
from .exceptions import ValidationError

DATA_DIR_ENV = "BUDGET_LEDGER_DATA_DIR"
EXPORT_DIR_ENV = "BUDGET_LEDGER_EXPORT_DIR"
RATE_ENV = "BUDGET_LEDGER_NOK_PER_EUR"

DEFAULT_DATA_DIRNAME = ".budsjetto"


def default_data_dir() -> Path:
    return Path.home() / DEFAULT_DATA_DIRNAME


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    export_dir: Path
    nok_per_eur: float = DEFAULT_NOK_PER_EUR

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        data_dir: Optional[Path] = None,
    ) -> "Settings":
        """Build settings from environment variables; ``data_dir`` overrides the environment."""
        env = os.environ if environ is None else environ

        if data_dir is None:
            raw_dir = env.get(DATA_DIR_ENV)
            data_dir = Path(raw_dir).expanduser() if raw_dir else default_data_dir()

        raw_export = env.get(EXPORT_DIR_ENV)
        export_dir = Path(raw_export).expanduser() if raw_export else data_dir / "exports"

        raw_rate = env.get(RATE_ENV)
        if raw_rate:
            try:
                rate = float(raw_rate)
            except ValueError as exc:
                raise ValidationError(f"{RATE_ENV} must be a number, got {raw_rate!r}") from exc
        else:
            rate = DEFAULT_NOK_PER_EUR

        return cls(data_dir=Path(data_dir), export_dir=export_dir, nok_per_eur=rate)
