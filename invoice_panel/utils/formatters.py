"""
Template formatting helpers.
Amounts with two decimals and dates in French order (DD/MM/YYYY).
"""
import math
from datetime import date, datetime
from typing import Union, Optional

from invoice_panel.services.totals_service import format_amount


def amount(value: Union[int, float, str, None]) -> str:
    """
    Format an amount with exactly 2 decimals.

    Examples:
        amount(30) -> "30.00"
        amount(19.5) -> "19.50"
        amount(None) -> "-"
    """
    if value is None or value == "":
        return "-"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "-"
    if math.isnan(number) or math.isinf(number):
        return "-"
    return format_amount(number)


def money(value: Union[int, float, str, None], currency: str = '') -> str:
    """Amount followed by the panel currency: money(36) -> "36.00 Fcfa"."""
    formatted = amount(value)
    if formatted == "-" or not currency:
        return formatted
    return f"{formatted} {currency}"


def _to_date(value: Union[date, datetime, str, None]) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        # Backend sends ISO strings, either plain dates or full timestamps
        try:
            return datetime.fromisoformat(value[:10]).date()
        except ValueError:
            return None
    return None


def date_fr(value: Union[date, datetime, str, None]) -> str:
    """
    Format a date as DD/MM/YYYY.

    Examples:
        date_fr(date(2026, 1, 12)) -> "12/01/2026"
        date_fr("2026-01-12T10:00:00.000Z") -> "12/01/2026"
        date_fr(None) -> "-"
    """
    parsed = _to_date(value)
    if parsed is None:
        return "-"
    return parsed.strftime("%d/%m/%Y")
