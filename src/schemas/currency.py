"""
Currency schemas and the supported currency catalogue.

This module provides:
- Currency model (code, symbol, name, rate against USD)
- SUPPORTED_CURRENCIES: the default catalogue used by the static rates
  provider and by request validation
- Response schema for the currency metadata endpoint
"""

from decimal import Decimal

from pydantic import BaseModel, Field


class Currency(BaseModel):
    """
    ISO 4217 currency with its exchange rate.

    ``rate`` is the amount of this currency worth one US dollar.
    """

    code: str = Field(min_length=3, max_length=3, description="ISO 4217 currency code")
    symbol: str = Field(min_length=1, description="Currency symbol")
    name: str = Field(min_length=1, description="Full currency name")
    rate: Decimal = Field(gt=0, description="Units of this currency per 1 USD")

    model_config = {"frozen": True}

    @classmethod
    def create(cls, code: str, symbol: str, name: str, rate: str) -> "Currency":
        """
        Factory method for creating currency instances.

        Args:
            code: ISO 4217 code (converted to uppercase)
            symbol: Currency symbol
            name: Full currency name
            rate: Units per USD, as a string to keep it exact
        """
        return cls(code=code.upper(), symbol=symbol, name=name, rate=Decimal(rate))


SUPPORTED_CURRENCIES: tuple[Currency, ...] = (
    Currency.create("USD", "$", "US Dollar", "1"),
    Currency.create("EUR", "€", "Euro", "0.92"),
    Currency.create("GBP", "£", "Pound Sterling", "0.79"),
    Currency.create("MXN", "$", "Mexican Peso", "17.15"),
    Currency.create("ARS", "$", "Argentine Peso", "350.00"),
    Currency.create("BRL", "R$", "Brazilian Real", "4.97"),
    Currency.create("COP", "$", "Colombian Peso", "3950.00"),
)

SUPPORTED_CURRENCY_CODES: frozenset[str] = frozenset(c.code for c in SUPPORTED_CURRENCIES)


def validate_currency_code(value: str) -> str:
    """
    Normalize and check a currency code for request schemas.

    Raises:
        ValueError: If the code is not in the supported catalogue
    """
    code = value.strip().upper()
    if code not in SUPPORTED_CURRENCY_CODES:
        supported = ", ".join(sorted(SUPPORTED_CURRENCY_CODES))
        raise ValueError(f"Unsupported currency '{value}'. Supported: {supported}")
    return code


class CurrenciesResponse(BaseModel):
    """Response schema for currency list."""

    currencies: list[Currency] = Field(description="List of supported currencies")
