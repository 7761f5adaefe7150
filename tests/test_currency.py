"""Currency converter tests."""

from __future__ import annotations

import pytest

from ledger.currency import EUR, NOK, CurrencyConverter, convert
from ledger.exceptions import ValidationError


def test_same_currency_is_identity() -> None:
    """Converting to the same currency returns the exact input."""
    converter = CurrencyConverter(11.7)
    for amount in (0.1, 1 / 3, 123456.789):
        assert converter.convert(amount, NOK, NOK) is amount
        assert converter.convert(amount, EUR, EUR) is amount


def test_directions_share_one_rate() -> None:
    """NOK to EUR divides and EUR to NOK multiplies by the same rate."""
    converter = CurrencyConverter(11.7)
    assert converter.convert(117.0, NOK, EUR) == pytest.approx(10.0)
    assert converter.convert(10.0, EUR, NOK) == pytest.approx(117.0)


@pytest.mark.parametrize("rate", [10.0, 11.7])
@pytest.mark.parametrize("source,target", [(NOK, EUR), (EUR, NOK)])
def test_round_trip_returns_original(rate: float, source: str, target: str) -> None:
    """Converting there and back recovers the amount within float tolerance."""
    converter = CurrencyConverter(rate)
    amount = 249.99
    there = converter.convert(amount, source, target)
    assert converter.convert(there, target, source) == pytest.approx(amount)


def test_unknown_pair_passes_through() -> None:
    """Pairs outside NOK/EUR are returned unchanged without raising."""
    converter = CurrencyConverter(11.7)
    assert converter.convert(50.0, "USD", EUR) == 50.0
    assert converter.convert(50.0, NOK, "SEK") == 50.0


def test_module_level_convert_uses_default_rate() -> None:
    """The module helper converts with the default NOK per EUR rate."""
    assert convert(117.0, NOK, EUR) == pytest.approx(10.0)


@pytest.mark.parametrize("rate", [0, -1.5, float("nan"), float("inf")])
def test_rejects_invalid_rate(rate: float) -> None:
    """A rate must be a positive finite number."""
    with pytest.raises(ValidationError):
        CurrencyConverter(rate)
