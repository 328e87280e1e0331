"""Money value object for monetary amounts with currency.

Amounts are exact counts of minor units (cents for USD, yen for JPY) held in
Python ``int``; no binary floating point ever enters the money path. On the
wire an amount travels as a decimal string of digits (``"4999"``) next to an
uppercase ISO 4217 code (``"USD"``).
"""

import re
from decimal import Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Integer, String

from catalogue.domain import catalogue
from shared.errors import CurrencyMismatch

CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")
MINOR_UNITS = re.compile(r"^[0-9]+$")

# Minor-unit exponents that differ from the usual 2
ZERO_DECIMAL_CURRENCIES = frozenset(
    {"BIF", "CLP", "DJF", "GNF", "JPY", "KMF", "KRW", "MGA", "PYG", "RWF", "UGX", "VND", "VUV", "XAF", "XOF", "XPF"}
)
THREE_DECIMAL_CURRENCIES = frozenset({"BHD", "JOD", "KWD", "OMR", "TND"})

CURRENCY_SYMBOLS = {"USD": "$", "CAD": "CA$", "AUD": "A$", "EUR": "€", "GBP": "£", "JPY": "¥", "INR": "₹"}

# locale -> (grouping separator, decimal separator, symbol first)
_LOCALE_FORMATS = {
    "en-US": (",", ".", True),
    "en-GB": (",", ".", True),
    "en-CA": (",", ".", True),
    "en-AU": (",", ".", True),
    "ja-JP": (",", ".", True),
    "de-DE": (".", ",", False),
    "es-ES": (".", ",", False),
    "it-IT": (".", ",", False),
    "nl-NL": (".", ",", False),
    "fr-FR": (" ", ",", False),
}


def normalize_currency(code):
    """Uppercase and strip a currency code; validation happens in ``Money``."""
    return (code or "").strip().upper()


def currency_exponent(currency):
    if currency in ZERO_DECIMAL_CURRENCIES:
        return 0
    if currency in THREE_DECIMAL_CURRENCIES:
        return 3
    return 2


@catalogue.value_object
class Money:
    """Value object representing an exact amount of minor units in one currency."""

    amount: Integer(required=True, min_value=0)
    currency: String(required=True, max_length=3)

    @invariant.post
    def currency_must_be_iso_4217_code(self):
        if not CURRENCY_CODE.match(self.currency or ""):
            raise ValidationError({"currency": [f"Currency must be a 3-letter uppercase code, got '{self.currency}'"]})

    @classmethod
    def zero(cls, currency):
        return cls(amount=0, currency=currency)

    @classmethod
    def parse(cls, amount, currency):
        """Build Money from its wire form: a digits-only string and a currency code."""
        text = str(amount).strip()
        if isinstance(amount, float) or not MINOR_UNITS.match(text):
            raise ValidationError({"amount": [f"Amount must be a whole number of minor units, got '{amount}'"]})
        return cls(amount=int(text), currency=normalize_currency(currency))

    def to_minor_units(self):
        return str(self.amount)

    def add(self, other):
        if other.currency != self.currency:
            raise CurrencyMismatch(self.currency, other.currency)
        return type(self)(amount=self.amount + other.amount, currency=self.currency)

    def multiply(self, quantity):
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError(f"Money can only be multiplied by an integer quantity, got {quantity!r}")
        if quantity < 0:
            raise ValueError(f"Money cannot be multiplied by a negative quantity ({quantity})")
        return type(self)(amount=self.amount * quantity, currency=self.currency)


def sum_money(amounts, currency=None):
    """Sum amounts that all share one currency.

    ``currency`` is required when ``amounts`` may be empty and, when given,
    every amount must be in it.
    """
    total = Money.zero(currency) if currency is not None else None
    for money in amounts:
        total = money if total is None else total.add(money)
    if total is None:
        raise ValueError("A currency is required to sum an empty list of amounts")
    return total


def format_money(amount, currency, locale="en-US"):
    """Render minor units for display, e.g. ``format_money(4999, "USD")`` -> ``"$49.99"``."""
    currency = normalize_currency(currency)
    group_sep, decimal_sep, symbol_first = _LOCALE_FORMATS.get(locale, _LOCALE_FORMATS["en-US"])
    exponent = currency_exponent(currency)

    value = Decimal(int(amount)).scaleb(-exponent)
    whole, _, fraction = f"{value:,.{exponent}f}".partition(".")
    text = whole.replace(",", group_sep)
    if exponent:
        text = f"{text}{decimal_sep}{fraction}"

    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol is None:
        return f"{text} {currency}"
    return f"{symbol}{text}" if symbol_first else f"{text} {symbol}"
