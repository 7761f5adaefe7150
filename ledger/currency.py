"""Conversion between the two currencies the ledger supports."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .exceptions import ValidationError

NOK = "NOK"
EUR = "EUR"
SUPPORTED_CURRENCIES = (NOK, EUR)
DEFAULT_CURRENCY = NOK

# Norwegian kroner per euro.
DEFAULT_NOK_PER_EUR = 11.7


@dataclass(frozen=True)
class CurrencyConverter:
    """Bilateral NOK/EUR converter driven by a single configured rate.

    Both directions are derived from ``nok_per_eur`` so a round trip
    returns the original amount up to floating point rounding.
    """

    nok_per_eur: float = DEFAULT_NOK_PER_EUR

    def __post_init__(self) -> None:
        if not isinstance(self.nok_per_eur, (int, float)) or isinstance(self.nok_per_eur, bool):
            raise ValidationError("nok_per_eur must be a numeric value")
        if not math.isfinite(self.nok_per_eur) or self.nok_per_eur <= 0:
            raise ValidationError("nok_per_eur must be a positive finite number")

    def convert(self, amount: float, source: str, target: str) -> float:
        if source == target:
            return amount
        if (source, target) == (NOK, EUR):
            return amount / self.nok_per_eur
        if (source, target) == (EUR, NOK):
            return amount * self.nok_per_eur
        # Unknown pairs pass through untouched.
        return amount


_default_converter = CurrencyConverter()


def convert(amount: float, source: str, target: str) -> float:
    """Convert with the default rate table."""
    return _default_converter.convert(amount, source, target)


def is_supported(code: object) -> bool:
    return code in SUPPORTED_CURRENCIES
