"""Submission gate - validates a draft and hands it to the backend exactly once."""
import logging
from typing import Any, Dict, List

from invoice_panel.api.client import ApiResponse, InvoiceApi
from invoice_panel.exceptions import BusinessLogicError
from invoice_panel.models import InvoiceStatus
from invoice_panel.services.line_item_store import LineItemStore
from invoice_panel.services.totals_service import calculate_totals, parse_tax_rate

logger = logging.getLogger(__name__)

MISSING_CLIENT = 'Veuillez sélectionner un client'
MISSING_ITEMS = 'Veuillez ajouter au moins un article'


def validate_draft(draft: Dict[str, Any]) -> List[str]:
    """Return the user-facing reasons the draft cannot be submitted (empty when valid)."""
    errors = []
    if not draft.get('client_id'):
        errors.append(MISSING_CLIENT)
    if not draft.get('items'):
        errors.append(MISSING_ITEMS)
    return errors


def build_invoice_payload(draft: Dict[str, Any]) -> Dict[str, Any]:
    """Serialize the draft into the backend's invoice creation document."""
    store = LineItemStore.from_list(draft.get('items', []))
    totals = calculate_totals(store, draft.get('tax_rate'))

    payload = {
        'clientId': draft['client_id'],
        'items': [item.to_api() for item in store],
        'subtotal': totals.subtotal,
        'taxRate': parse_tax_rate(draft.get('tax_rate')),
        'taxAmount': totals.tax_amount,
        'total': totals.total,
        'issueDate': draft.get('issue_date'),
        'status': InvoiceStatus.DRAFT.value,
    }
    if draft.get('due_date'):
        payload['dueDate'] = draft['due_date']
    if draft.get('notes'):
        payload['notes'] = draft['notes']
    return payload


def submit_invoice(draft: Dict[str, Any], gateway: InvoiceApi) -> ApiResponse:
    """
    Validate and send the draft.

    Raises:
        BusinessLogicError: When the draft has no client or no items

    Returns:
        The gateway response. A failed call is returned as-is (no retry) so the
        caller can report it while the draft stays editable.
    """
    errors = validate_draft(draft)
    if errors:
        raise BusinessLogicError(', '.join(errors))

    payload = build_invoice_payload(draft)
    logger.info(
        f"[INVOICE] Submitting invoice for client {payload['clientId']} "
        f"({len(payload['items'])} items, total {payload['total']:.2f})"
    )
    response = gateway.create(payload)
    if not response.success:
        logger.warning(f"[INVOICE] Submission failed: {response.error}")
    return response
