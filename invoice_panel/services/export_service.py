"""CSV export of invoice lists."""
import csv
from io import StringIO
from typing import Iterable

from invoice_panel.models import Invoice
from invoice_panel.services.invoice_status_service import status_label
from invoice_panel.services.totals_service import format_amount
from invoice_panel.utils.formatters import date_fr

CSV_HEADERS = ['Numéro', 'Client', 'Date', 'Montant HT', 'TVA', 'Montant TTC', 'Statut']


def invoices_to_csv(invoices: Iterable[Invoice]) -> str:
    """One row per invoice, amounts with two decimals, French status labels."""
    output = StringIO()
    writer = csv.writer(output, lineterminator='\n')
    writer.writerow(CSV_HEADERS)
    for invoice in invoices:
        writer.writerow([
            invoice.invoice_number,
            invoice.client_name,
            date_fr(invoice.issue_date),
            format_amount(invoice.subtotal),
            format_amount(invoice.tax_amount),
            format_amount(invoice.total),
            status_label(invoice.status),
        ])
    return output.getvalue()
