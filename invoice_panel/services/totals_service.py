"""Invoice totals: subtotal, tax and grand total derived from the current lines."""
import math
from typing import Any, Iterable, NamedTuple

from invoice_panel.models import LineItem


class Totals(NamedTuple):
    subtotal: float
    tax_amount: float
    total: float


def parse_tax_rate(value: Any) -> float:
    """
    Parse a tax rate typed by the user ("20", "5.5", "5,5").

    Anything that is not a finite number yields 0.0 so that a bad input never
    leaks a non-numeric value into the invoice.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(',', '.')
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(rate) or math.isinf(rate):
        return 0.0
    return rate


def calculate_totals(items: Iterable[LineItem], tax_rate: Any) -> Totals:
    """
    Derive totals from the lines and the tax rate.

    Recomputed from scratch on every call and kept at full precision; rounding
    to two decimals belongs to the presentation layer.
    """
    subtotal = sum((item.line_total for item in items), 0.0)
    tax_amount = subtotal * parse_tax_rate(tax_rate) / 100
    return Totals(subtotal=subtotal, tax_amount=tax_amount, total=subtotal + tax_amount)


def format_amount(value: float) -> str:
    """Two fractional digits, for display and export only."""
    return f"{value:.2f}"
