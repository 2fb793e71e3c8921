"""
Currency service: exchange rates and amount conversion.

This module provides:
- RatesProvider: the interface any exchange-rate source implements
- StaticRatesProvider: default provider backed by SUPPORTED_CURRENCIES
- CurrencyService: lookups and ``convert`` for account currency changes

Conversion goes through USD: ``amount / rate(from) * rate(to)``, rounded
to 2 decimals with ROUND_HALF_UP (half away from zero). Converting to the
same currency returns the amount untouched.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from src.exceptions import InvalidInputError
from src.schemas.currency import SUPPORTED_CURRENCIES, Currency

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def round2(amount: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


class RatesProvider(Protocol):
    """Source of exchange rates (units of a currency per 1 USD)."""

    def rate_of(self, code: str) -> Decimal:
        """
        Rate of ``code`` against USD.

        Raises:
            KeyError: If the currency is unknown to the provider
        """
        ...


class StaticRatesProvider:
    """
    Rates provider backed by a fixed table.

    Args:
        currencies: Catalogue to serve (defaults to SUPPORTED_CURRENCIES)
    """

    def __init__(self, currencies: tuple[Currency, ...] = SUPPORTED_CURRENCIES):
        self._rates = {c.code: c.rate for c in currencies}

    def rate_of(self, code: str) -> Decimal:
        return self._rates[code.upper()]


class CurrencyService:
    """
    Currency lookups and conversion.

    Injectable service; swap the rates provider to plug in live rates.

    Usage:
        currency_service = CurrencyService()
        currency_service.convert(Decimal("100.00"), "USD", "EUR")  # Decimal("92.00")
    """

    def __init__(
        self,
        rates: RatesProvider | None = None,
        currencies: tuple[Currency, ...] = SUPPORTED_CURRENCIES,
    ):
        """
        Initialize CurrencyService.

        Args:
            rates: Exchange-rate source (static table by default)
            currencies: Catalogue returned by ``get_all``
        """
        self._currencies = currencies
        self.rates = rates or StaticRatesProvider(currencies)

    def get_all(self) -> list[Currency]:
        """Get all supported currencies (a copy)."""
        return list(self._currencies)

    def get_by_code(self, code: str) -> Currency | None:
        """Get currency by ISO 4217 code (case-insensitive)."""
        code_upper = code.upper()
        return next((c for c in self._currencies if c.code == code_upper), None)

    def is_supported(self, code: str) -> bool:
        return self.get_by_code(code) is not None

    def convert(self, amount: Decimal, from_code: str, to_code: str) -> Decimal:
        """
        Convert an amount between two currencies.

        Args:
            amount: Amount in ``from_code``
            from_code: Source currency
            to_code: Target currency

        Returns:
            Amount in ``to_code`` rounded to cents; ``amount`` itself
            (unchanged, not re-rounded) when both codes are equal

        Raises:
            InvalidInputError: If either currency has no rate

        Example:
            >>> CurrencyService().convert(Decimal("100.00"), "USD", "EUR")
            Decimal('92.00')
        """
        if from_code.upper() == to_code.upper():
            return amount

        try:
            from_rate = self.rates.rate_of(from_code)
            to_rate = self.rates.rate_of(to_code)
        except KeyError as e:
            raise InvalidInputError(
                field="currency",
                message=f"No exchange rate for currency {e.args[0]}",
            ) from e

        return round2(amount / from_rate * to_rate)
