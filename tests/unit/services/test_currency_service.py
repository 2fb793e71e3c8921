"""
Unit tests for currency service.

Tests the CurrencyService and Currency model to ensure:
- The catalogue is complete and immutable
- Lookups are case-insensitive
- Conversion goes through USD and rounds half away from zero
- A custom rates provider can be plugged in
"""

from decimal import Decimal

import pytest

from src.exceptions import InvalidInputError
from src.schemas.currency import SUPPORTED_CURRENCIES, Currency, validate_currency_code
from src.services.currency_service import CurrencyService, StaticRatesProvider, round2


class FixedRates:
    """Rates provider with a hand-picked table."""

    def __init__(self, rates: dict[str, str]):
        self._rates = {code: Decimal(rate) for code, rate in rates.items()}

    def rate_of(self, code: str) -> Decimal:
        return self._rates[code.upper()]


class TestCurrency:
    """Test cases for Currency Pydantic model."""

    def test_currency_create_factory(self):
        """Test Currency.create() converts code to uppercase and keeps the rate exact."""
        currency = Currency.create("eur", "€", "Euro", "0.92")
        assert currency.code == "EUR"
        assert currency.rate == Decimal("0.92")

    def test_currency_is_frozen(self):
        currency = Currency.create("USD", "$", "US Dollar", "1")

        with pytest.raises(Exception):  # Pydantic raises ValidationError for frozen models
            currency.code = "EUR"

    def test_rate_must_be_positive(self):
        with pytest.raises(Exception):
            Currency(code="USD", symbol="$", name="US Dollar", rate=Decimal("0"))

    def test_validate_currency_code_normalizes(self):
        assert validate_currency_code(" gbp ") == "GBP"

    def test_validate_currency_code_rejects_unknown(self):
        with pytest.raises(ValueError, match="Unsupported currency"):
            validate_currency_code("JPY")


class TestCurrencyServiceLookups:
    """Test catalogue lookups."""

    def test_get_all_returns_catalogue(self):
        service = CurrencyService()

        codes = [c.code for c in service.get_all()]

        assert codes == ["USD", "EUR", "GBP", "MXN", "ARS", "BRL", "COP"]

    def test_get_all_returns_copy(self):
        service = CurrencyService()

        currencies = service.get_all()
        currencies.clear()

        assert len(service.get_all()) == len(SUPPORTED_CURRENCIES)

    def test_get_by_code_case_insensitive(self):
        service = CurrencyService()

        assert service.get_by_code("mxn").name == "Mexican Peso"
        assert service.get_by_code("XYZ") is None

    def test_is_supported(self):
        service = CurrencyService()

        assert service.is_supported("COP") is True
        assert service.is_supported("CHF") is False


class TestCurrencyConversion:
    """Test CurrencyService.convert."""

    def test_usd_to_eur(self):
        service = CurrencyService()

        assert service.convert(Decimal("100.00"), "USD", "EUR") == Decimal("92.00")

    def test_eur_to_usd(self):
        service = CurrencyService()

        assert service.convert(Decimal("92.00"), "EUR", "USD") == Decimal("100.00")

    def test_cross_rate_goes_through_usd(self):
        service = CurrencyService()

        # 100 / 0.79 * 0.92 = 116.4556...
        assert service.convert(Decimal("100.00"), "GBP", "EUR") == Decimal("116.46")

    def test_same_currency_returns_amount_untouched(self):
        service = CurrencyService()
        amount = Decimal("10.005")

        assert service.convert(amount, "EUR", "eur") is amount

    def test_rounds_half_away_from_zero(self):
        service = CurrencyService(rates=FixedRates({"AAA": "1", "BBB": "0.5"}))

        assert service.convert(Decimal("0.05"), "AAA", "BBB") == Decimal("0.03")

    def test_result_has_two_decimals(self):
        service = CurrencyService()

        result = service.convert(Decimal("1"), "USD", "ARS")

        assert result == Decimal("350.00")
        assert result.as_tuple().exponent == -2

    def test_unknown_currency_raises(self):
        service = CurrencyService()

        with pytest.raises(InvalidInputError) as exc_info:
            service.convert(Decimal("1.00"), "USD", "JPY")

        assert "JPY" in exc_info.value.message

    def test_static_provider_is_case_insensitive(self):
        provider = StaticRatesProvider()

        assert provider.rate_of("brl") == Decimal("4.97")


class TestRound2:
    def test_round2(self):
        assert round2(Decimal("2.675")) == Decimal("2.68")
        assert round2(Decimal("2.674")) == Decimal("2.67")


RATES = {c.code: c.rate for c in SUPPORTED_CURRENCIES}
CURRENCY_PAIRS = [(a, b) for a in RATES for b in RATES if a != b]
SAMPLE_AMOUNTS = [Decimal(cents) / 100 for cents in range(1, 501)] + [
    Decimal("123.45"),
    Decimal("9999.99"),
    Decimal("1234567.89"),
]


class TestRoundTripDrift:
    """A -> B -> A drifts by at most 0.01 USD, or one cent of A where that is worth more."""

    @pytest.mark.parametrize(("source", "target"), CURRENCY_PAIRS)
    def test_drift_in_usd(self, source, target):
        service = CurrencyService()
        # One cent of EUR or GBP is worth more than 0.01 USD
        allowed = max(Decimal("0.01"), Decimal("0.01") / RATES[source])

        for original in SAMPLE_AMOUNTS:
            back = service.convert(service.convert(original, source, target), target, source)

            assert abs(back - original) / RATES[source] <= allowed, (source, target, original)
            assert back.as_tuple().exponent == -2

    def test_sub_cent_leg_costs_one_euro_cent(self):
        service = CurrencyService()

        pounds = service.convert(Decimal("0.04"), "EUR", "GBP")
        back = service.convert(pounds, "GBP", "EUR")

        assert pounds == Decimal("0.03")
        assert back == Decimal("0.03")

    def test_same_currency_has_no_drift(self):
        service = CurrencyService()

        for original in SAMPLE_AMOUNTS:
            assert service.convert(original, "COP", "COP") is original
