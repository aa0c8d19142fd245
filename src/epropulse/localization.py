"""Country, currency and phone-prefix lookup, plus price formatting."""

import locale
import math
import os
import re

from schemas.locale import LocaleInfo

FALLBACK = LocaleInfo(
    country_code="US",
    currency_code="USD",
    currency_symbol="$",
    phone_prefix="+1",
    currency_label="USD",
)


def _xof(code: str, prefix: str) -> LocaleInfo:
    return LocaleInfo(
        country_code=code,
        currency_code="XOF",
        currency_symbol="FCFA",
        phone_prefix=prefix,
        currency_label="FCFA (XOF)",
    )


def _eur(code: str, prefix: str) -> LocaleInfo:
    return LocaleInfo(
        country_code=code,
        currency_code="EUR",
        currency_symbol="€",
        phone_prefix=prefix,
        currency_label="Euro (EUR)",
    )


LOCALE_TABLE: dict[str, LocaleInfo] = {
    # West Africa, CFA franc BCEAO
    "BJ": _xof("BJ", "+229"),
    "NE": _xof("NE", "+227"),
    "TG": _xof("TG", "+228"),
    "CI": _xof("CI", "+225"),
    "SN": _xof("SN", "+221"),
    "FR": _eur("FR", "+33"),
    "BE": _eur("BE", "+32"),
    "DE": _eur("DE", "+49"),
    "US": FALLBACK,
    "GB": LocaleInfo(
        country_code="GB",
        currency_code="GBP",
        currency_symbol="£",
        phone_prefix="+44",
        currency_label="GBP",
    ),
    "CM": LocaleInfo(
        country_code="CM",
        currency_code="XAF",
        currency_symbol="FCFA",
        phone_prefix="+237",
        currency_label="FCFA (XAF)",
    ),
}

REGIONAL_INDICATOR_A = 0x1F1E6

# language[-_]REGION, optionally followed by .encoding or @modifier
_LOCALE_TAG = re.compile(r"^[A-Za-z]{2,3}[-_]([A-Za-z]{2})(?:[.@].*)?$")

_LOCALE_ENV_VARS = ("LC_ALL", "LC_MESSAGES", "LANG")


def resolve_locale(country_code: str | None = None) -> LocaleInfo:
    """Return the locale record for a country, or the US fallback.

    Examples:
        >>> resolve_locale("bj").currency_code
        'XOF'
        >>> resolve_locale("ZZ").currency_code
        'USD'
    """
    if not country_code:
        return FALLBACK
    return LOCALE_TABLE.get(country_code.upper(), FALLBACK)


def _region_from_tag(tag: str | None) -> str | None:
    if not tag:
        return None
    match = _LOCALE_TAG.match(tag.strip())
    if match is None:
        return None
    return match.group(1).upper()


def detect_user_country_code(locale_tag: str | None = None) -> str | None:
    """Extract a two-letter region from a locale identifier.

    With no argument the process locale is inspected (LC_ALL, LC_MESSAGES,
    LANG, then the active locale). Returns None when no region is embedded.

    Examples:
        >>> detect_user_country_code("fr-BJ")
        'BJ'
        >>> detect_user_country_code("fr") is None
        True
    """
    if locale_tag is not None:
        return _region_from_tag(locale_tag)

    for var in _LOCALE_ENV_VARS:
        region = _region_from_tag(os.environ.get(var))
        if region:
            return region

    try:
        language_code, _ = locale.getlocale()
    except ValueError:
        return None
    return _region_from_tag(language_code)


def country_code_to_flag_emoji(code: str | None) -> str:
    """Map a country code to its flag as regional indicator symbols.

    Examples:
        >>> country_code_to_flag_emoji("BJ") == "\\U0001F1E7\\U0001F1EF"
        True
        >>> country_code_to_flag_emoji("")
        ''
    """
    if not code:
        return ""
    return "".join(
        chr(REGIONAL_INDICATOR_A + ord(letter) - ord("A")) for letter in code.upper()
    )


def format_price(value: float) -> str:
    """Format a price the fr-FR way, with at most two decimals.

    Examples:
        >>> format_price(15000)
        '15\\u202f000'
        >>> format_price(1234.5)
        '1\\u202f234,5'
    """
    rounded = round(float(value), 2)
    text = f"{rounded:,.2f}".rstrip("0").rstrip(".")
    return text.replace(",", "\u202f").replace(".", ",")


def discount_percentage(price: float, original_price: float | None) -> int:
    """Whole-percent discount, 0 when the product is not on sale."""
    if not original_price or original_price <= price:
        return 0
    return math.floor((original_price - price) / original_price * 100 + 0.5)
