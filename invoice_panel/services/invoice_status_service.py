"""Invoice status policy: draft -> sent -> paid -> draft."""
from invoice_panel.exceptions import BusinessLogicError
from invoice_panel.models import InvoiceStatus

STATUS_CYCLE = {
    InvoiceStatus.DRAFT: InvoiceStatus.SENT,
    InvoiceStatus.SENT: InvoiceStatus.PAID,
    InvoiceStatus.PAID: InvoiceStatus.DRAFT,
}

STATUS_LABELS = {
    InvoiceStatus.DRAFT: 'Brouillon',
    InvoiceStatus.SENT: 'Envoyée',
    InvoiceStatus.PAID: 'Payée',
}

# Label of the button that moves an invoice out of each status
ACTION_LABELS = {
    InvoiceStatus.DRAFT: 'Marquer envoyée',
    InvoiceStatus.SENT: 'Marquer payée',
    InvoiceStatus.PAID: 'Remettre brouillon',
}


def parse_status(value) -> InvoiceStatus:
    if isinstance(value, InvoiceStatus):
        return value
    try:
        return InvoiceStatus(str(value).lower())
    except ValueError:
        raise BusinessLogicError(f'Statut de facture inconnu : {value}')


def next_status(value) -> InvoiceStatus:
    """Status an invoice moves to when the user advances it."""
    return STATUS_CYCLE[parse_status(value)]


def status_label(value) -> str:
    try:
        return STATUS_LABELS[parse_status(value)]
    except BusinessLogicError:
        return str(value)


def action_label(value) -> str:
    try:
        return ACTION_LABELS[parse_status(value)]
    except BusinessLogicError:
        return ''
