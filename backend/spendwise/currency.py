"""
Currency table and conversion.

Rates are units of a currency per 1 USD, so converting ``amount`` from X to Y
is ``amount / rate[X] * rate[Y]``.
"""

import logging
from dataclasses import replace
from typing import Iterable, Mapping

from .domain import Currency

logger = logging.getLogger(__name__)

DEFAULT_CURRENCIES: tuple[Currency, ...] = (
    Currency("USD", "US Dollar", "$", 1.0),
    Currency("EUR", "Euro", "€", 0.91),
    Currency("GBP", "British Pound", "£", 0.78),
    Currency("JPY", "Japanese Yen", "¥", 149.5),
    Currency("CAD", "Canadian Dollar", "C$", 1.36),
    Currency("AUD", "Australian Dollar", "A$", 1.52),
    Currency("CHF", "Swiss Franc", "Fr", 0.89),
    Currency("CNY", "Chinese Yuan", "¥", 7.23),
    Currency("HKD", "Hong Kong Dollar", "HK$", 7.81),
    Currency("SGD", "Singapore Dollar", "S$", 1.34),
    Currency("AED", "UAE Dirham", "د.إ", 3.67),
    Currency("SAR", "Saudi Riyal", "﷼", 3.75),
    Currency("QAR", "Qatari Riyal", "ر.ق", 3.64),
    Currency("KWD", "Kuwaiti Dinar", "د.ك", 0.31),
    Currency("BHD", "Bahraini Dinar", "د.ب", 0.38),
    Currency("OMR", "Omani Rial", "ر.ع", 0.38),
    Currency("EGP", "Egyptian Pound", "ج.م", 30.90),
    Currency("JOD", "Jordanian Dinar", "د.ا", 0.71),
    Currency("MAD", "Moroccan Dirham", "د.م.", 9.95),
    Currency("ILS", "Israeli New Shekel", "₪", 3.65),
    Currency("INR", "Indian Rupee", "₹", 83.5),
    Currency("IDR", "Indonesian Rupiah", "Rp", 15600),
    Currency("MYR", "Malaysian Ringgit", "RM", 4.65),
    Currency("PHP", "Philippine Peso", "₱", 56.5),
    Currency("THB", "Thai Baht", "฿", 35.2),
    Currency("KRW", "South Korean Won", "₩", 1350),
    Currency("PKR", "Pakistani Rupee", "₨", 278),
    Currency("SEK", "Swedish Krona", "kr", 10.42),
    Currency("NOK", "Norwegian Krone", "kr", 10.65),
    Currency("DKK", "Danish Krone", "kr", 6.8),
    Currency("PLN", "Polish Złoty", "zł", 3.95),
    Currency("CZK", "Czech Koruna", "Kč", 22.8),
)

RateTable = Mapping[str, Currency]


def rate_table(currencies: Iterable[Currency] = DEFAULT_CURRENCIES) -> dict[str, Currency]:
    """Index currencies by code."""
    return {c.code: c for c in currencies}


def apply_rate_overrides(
    currencies: Iterable[Currency],
    overrides: Mapping[str, float],
) -> list[Currency]:
    """Replace the rate of every currency named in ``overrides``."""
    return [
        replace(c, rate=overrides[c.code]) if c.code in overrides else c
        for c in currencies
    ]


def can_convert(from_code: str | None, to_code: str | None, rates: RateTable) -> bool:
    """True when both currencies are known with a usable (non-zero) rate."""
    if from_code == to_code:
        return True
    source = rates.get(from_code) if from_code else None
    target = rates.get(to_code) if to_code else None
    return bool(source and source.rate and target and target.rate)


def convert(amount: float, from_code: str | None, to_code: str | None, rates: RateTable) -> float:
    """
    Convert ``amount`` between currencies.

    When either rate is unknown the raw amount is returned unchanged and a
    warning is logged.
    """
    if not from_code or not to_code or from_code == to_code:
        return amount
    if not can_convert(from_code, to_code, rates):
        logger.warning(
            "No rate for %s -> %s; using unconverted amount %s",
            from_code, to_code, amount,
        )
        return amount
    return (amount / rates[from_code].rate) * rates[to_code].rate


def convert_cents(cents: int, from_code: str | None, to_code: str | None, rates: RateTable) -> int:
    """Integer-cents variant of ``convert``, rounded to the nearest cent."""
    if not from_code or not to_code or from_code == to_code:
        return cents
    return int(round(convert(cents / 100.0, from_code, to_code, rates) * 100))


def format_amount(amount: float, code: str, rates: RateTable) -> str:
    currency = rates.get(code)
    symbol = currency.symbol if currency else "$"
    return f"{symbol}{amount:.2f}"
