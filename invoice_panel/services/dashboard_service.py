"""Dashboard aggregates and invoice list filtering."""
from typing import Any, Dict, Iterable, List, Optional

from invoice_panel.models import Invoice, InvoiceStatus


def filter_invoices(invoices: Iterable[Invoice], search_query: str = '', status: Optional[str] = None) -> List[Invoice]:
    """
    Filter invoices by number or client name (case-insensitive) and by status.

    `status` of None, '' or 'all' keeps every status.
    """
    filtered = list(invoices)

    needle = (search_query or '').strip().lower()
    if needle:
        filtered = [
            inv for inv in filtered
            if needle in (inv.invoice_number or '').lower()
            or (inv.client is not None and needle in inv.client.name.lower())
        ]

    if status and status != 'all':
        filtered = [inv for inv in filtered if inv.status == status]

    return filtered


def summarize_invoices(invoices: Iterable[Invoice]) -> Dict[str, Any]:
    """Count and summed total shown under invoice tables."""
    invoices = list(invoices)
    return {
        'count': len(invoices),
        'total': sum((inv.total for inv in invoices), 0.0),
    }


def get_dashboard_stats(clients: list, products: list, invoices: Iterable[Invoice]) -> Dict[str, Any]:
    """KPIs for the user dashboard."""
    invoices = list(invoices)
    by_status = {status.value: 0 for status in InvoiceStatus}
    for inv in invoices:
        by_status[inv.status] = by_status.get(inv.status, 0) + 1

    paid_revenue = sum((inv.total for inv in invoices if inv.status == InvoiceStatus.PAID.value), 0.0)
    outstanding = sum((inv.total for inv in invoices if inv.status == InvoiceStatus.SENT.value), 0.0)

    return {
        'clients_count': len(clients),
        'products_count': len(products),
        'invoices_count': len(invoices),
        'invoices_by_status': by_status,
        'paid_revenue': paid_revenue,
        'outstanding_amount': outstanding,
    }
