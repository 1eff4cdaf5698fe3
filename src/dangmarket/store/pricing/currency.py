"""Fixed-rate currency conversion between NPR, USD and INR.

Rates are published configuration (NPR per one unit of the foreign
currency), never fetched live. Build the converter from settings with
``dangmarket.store.conf.get_currency_converter()``.
"""

import logging
from decimal import Decimal, InvalidOperation

from .exceptions import ConfigurationError, UnsupportedCurrencyError
from .money import INR, NPR, USD, round_money, round_npr, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_RATES = {
    USD: Decimal("133.5"),
    INR: Decimal("1.6"),
}

_SYMBOLS = {
    USD: "$",
    INR: "₹",
}


class CurrencyConverter:
    """Converts amounts using a fixed table of NPR-per-unit rates."""

    def __init__(self, rates: dict | None = None):
        table = DEFAULT_RATES if rates is None else rates
        errors = []
        parsed = {}
        for code, rate in table.items():
            code = str(code).upper()
            try:
                value = to_decimal(rate)
            except InvalidOperation:
                errors.append(f"rate for {code} is not numeric ({rate!r})")
                continue
            if value <= 0:
                errors.append(f"rate for {code} must be positive (got {value})")
                continue
            parsed[code] = value
        if errors:
            raise ConfigurationError("Invalid exchange rate table", errors=errors)

        parsed[NPR] = Decimal("1")
        self._rates = parsed

    @property
    def currencies(self) -> list[str]:
        return sorted(self._rates)

    def rate(self, currency: str) -> Decimal:
        """NPR per one unit of ``currency``."""
        try:
            return self._rates[str(currency).upper()]
        except KeyError:
            raise UnsupportedCurrencyError(currency) from None

    def convert(self, amount, from_currency: str, to_currency: str) -> Decimal:
        """Convert between any two configured currencies.

        NPR results are whole rupees; other currencies keep two places.
        """
        value = to_decimal(amount)
        source_rate = self.rate(from_currency)
        target_rate = self.rate(to_currency)

        converted = value * source_rate / target_rate
        if str(to_currency).upper() == NPR:
            return round_npr(converted)
        return round_money(converted, 2)

    def to_usd(self, amount_npr) -> Decimal:
        return self.convert(amount_npr, NPR, USD)

    def to_npr(self, amount_usd) -> Decimal:
        return self.convert(amount_usd, USD, NPR)

    def __repr__(self):
        rates = ", ".join(f"{code}={rate}" for code, rate in sorted(self._rates.items()))
        return f"<CurrencyConverter {rates}>"


def format_currency(amount, currency: str = NPR) -> str:
    """Format an amount for display: ``Rs. 1,000``, ``$7.49``, ``₹12.50``."""
    try:
        value = to_decimal(amount)
    except InvalidOperation:
        logger.debug("Formatting non-numeric amount %r as zero", amount)
        value = Decimal("0")

    code = str(currency).upper()
    if code == NPR:
        return f"Rs. {round_npr(value):,}"
    symbol = _SYMBOLS.get(code, f"{code} ")
    return f"{symbol}{round_money(value, 2):,}"
