"""Invoice draft kept in the Flask session while the user composes it."""
from datetime import date
from typing import Dict, Iterable, Optional

from flask import session

from invoice_panel.models import Product
from invoice_panel.services.line_item_store import LineItemStore

DRAFT_KEY = 'invoice_draft'


def _empty_draft(tax_rate: str) -> dict:
    return {
        'client_id': '',
        'issue_date': date.today().isoformat(),
        'due_date': '',
        'notes': '',
        'tax_rate': tax_rate,
        'items': [],
    }


def get_invoice_draft(default_tax_rate: str = '20') -> dict:
    """Get invoice draft from session, creating an empty one on first access."""
    if DRAFT_KEY not in session:
        session[DRAFT_KEY] = _empty_draft(default_tax_rate)
    return session[DRAFT_KEY]


def save_invoice_draft(draft: dict) -> None:
    """Save invoice draft to session."""
    session[DRAFT_KEY] = draft
    session.modified = True


def clear_invoice_draft() -> None:
    """Discard the draft; the next visit to the editor starts empty."""
    session.pop(DRAFT_KEY, None)
    session.modified = True


def update_draft_header(draft: dict, form) -> dict:
    """Copy header fields (client, dates, tax rate, notes) from a submitted form."""
    for field in ('client_id', 'issue_date', 'due_date', 'notes', 'tax_rate'):
        if field in form:
            draft[field] = (form.get(field) or '').strip()
    return draft


def load_store(draft: dict, catalog: Optional[Iterable[Product]] = None) -> LineItemStore:
    """Rebuild the line item store of a draft against the current catalog."""
    return LineItemStore.from_list(draft.get('items', []), catalog)


def store_items(draft: dict, store: LineItemStore) -> dict:
    draft['items'] = store.to_list()
    return draft


ROW_FIELDS = ('product_id', 'quantity', 'unit_price')
ROW_FIELD_PREFIX = 'items-'


def line_edits(form) -> Dict[int, dict]:
    """Row fields submitted as `items-<index>-<field>`, grouped by line index."""
    edits: Dict[int, dict] = {}
    for key in form:
        if not key.startswith(ROW_FIELD_PREFIX):
            continue
        index, _, field = key[len(ROW_FIELD_PREFIX):].partition('-')
        if index.isdigit() and field in ROW_FIELDS:
            edits.setdefault(int(index), {})[field] = form.get(key)
    return edits


def apply_row_edit(store: LineItemStore, index: int, row: dict) -> None:
    """
    Apply the submitted fields of one line.

    When the row switches product, the catalog price wins over the unit price
    that was rendered for the previous product.
    """
    product_changed = 'product_id' in row and row['product_id'] != store[index].product_id
    if product_changed:
        store.update_item(index, 'product_id', row['product_id'])
    if 'quantity' in row:
        store.update_item(index, 'quantity', row['quantity'])
    if 'unit_price' in row and not product_changed:
        store.update_item(index, 'unit_price', row['unit_price'])


def apply_line_edits(store: LineItemStore, edits: Dict[int, dict]) -> None:
    # Indices from a stale page may no longer exist
    for index, row in sorted(edits.items()):
        if 0 <= index < len(store):
            apply_row_edit(store, index, row)
