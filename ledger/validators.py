"""Validation helpers shared across ledger services."""

from __future__ import annotations

import math
from typing import Iterable

from .currency import SUPPORTED_CURRENCIES
from .exceptions import ValidationError
from .models import ENTRY_TYPES


def parse_amount(raw: object, field: str) -> float:
    """Convert raw input to a positive, finite float."""
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be a numeric value")
    try:
        amount = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a numeric value") from exc

    if math.isnan(amount) or math.isinf(amount):
        raise ValidationError(f"{field} must be a finite number")
    if amount <= 0:
        raise ValidationError(f"{field} must be positive")
    return amount


def validate_entry_type(value: object) -> str:
    if value not in ENTRY_TYPES:
        raise ValidationError("invalid type")
    return value  # type: ignore[return-value]


def validate_currency(code: object) -> str:
    if code not in SUPPORTED_CURRENCIES:
        raise ValidationError(
            f"currency must be one of: {', '.join(SUPPORTED_CURRENCIES)}"
        )
    return code  # type: ignore[return-value]


def validate_text(value: object, field: str) -> str:
    """Accept free-form text; None is treated as empty."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value


def validate_int_range(value: object, field: str, allowed: Iterable[int]) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if value not in allowed:
        raise ValidationError(f"{field} is out of range")
    return value


def validate_non_negative_int(value: object, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if value < 0:
        raise ValidationError(f"{field} must not be negative")
    return value
