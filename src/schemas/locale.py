"""Locale and currency records."""

from pydantic import BaseModel


class LocaleInfo(BaseModel):
    """Currency and phone conventions for a country."""

    country_code: str
    currency_code: str
    currency_symbol: str | None = None
    phone_prefix: str | None = None
    currency_label: str | None = None

    model_config = {"frozen": True}
