"""Invoice and line item records."""
import enum
from dataclasses import dataclass, field
from typing import List, Optional

from invoice_panel.models._fields import pick_id, optional_str, to_float, to_int
from invoice_panel.models.client import Client


class InvoiceStatus(enum.Enum):
    """Invoice lifecycle status as stored by the backend."""
    DRAFT = 'draft'
    SENT = 'sent'
    PAID = 'paid'


def billable(value) -> float:
    """Amount a quantity or price contributes to a line total (NaN/negative count as 0)."""
    number = to_float(value)
    return number if number > 0 else 0.0


@dataclass
class LineItem:
    """One product/quantity/price entry. `line_total` is always quantity x unit price."""

    product_id: str
    product_name: str
    quantity: int = 1
    unit_price: float = 0.0
    line_total: float = 0.0

    def recompute_total(self) -> float:
        self.line_total = billable(self.quantity) * billable(self.unit_price)
        return self.line_total

    @classmethod
    def from_api(cls, data: dict) -> 'LineItem':
        item = cls(
            product_id=str(data.get('productId') or ''),
            product_name=data.get('productName', ''),
            quantity=to_int(data.get('quantity'), 0),
            unit_price=to_float(data.get('unitPrice')),
        )
        total = data.get('total', data.get('lineTotal'))
        item.line_total = to_float(total) if total is not None else item.recompute_total()
        return item

    def to_api(self) -> dict:
        return {
            'productId': self.product_id,
            'productName': self.product_name,
            'quantity': self.quantity,
            'unitPrice': self.unit_price,
            'total': self.line_total,
        }


@dataclass
class Invoice:
    id: str
    invoice_number: str
    client_id: str
    client: Optional[Client] = None
    user_id: Optional[str] = None
    items: List[LineItem] = field(default_factory=list)
    subtotal: float = 0.0
    tax_rate: float = 0.0
    tax_amount: float = 0.0
    total: float = 0.0
    status: str = InvoiceStatus.DRAFT.value
    issue_date: Optional[str] = None
    due_date: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def client_name(self) -> str:
        return self.client.name if self.client else 'N/A'

    @classmethod
    def from_api(cls, data: dict) -> 'Invoice':
        # The backend either embeds the client or populates clientId with it
        raw_client = data.get('client')
        raw_client_id = data.get('clientId')
        if raw_client is None and isinstance(raw_client_id, dict):
            raw_client = raw_client_id
        client = Client.from_api(raw_client) if isinstance(raw_client, dict) else None
        client_id = client.id if client else str(raw_client_id or '')

        return cls(
            id=pick_id(data),
            invoice_number=data.get('invoiceNumber', ''),
            client_id=client_id,
            client=client,
            user_id=optional_str(data.get('userId')),
            items=[LineItem.from_api(item) for item in data.get('items') or []],
            subtotal=to_float(data.get('subtotal')),
            tax_rate=to_float(data.get('taxRate')),
            tax_amount=to_float(data.get('taxAmount')),
            total=to_float(data.get('total')),
            status=data.get('status') or InvoiceStatus.DRAFT.value,
            issue_date=optional_str(data.get('issueDate')),
            due_date=optional_str(data.get('dueDate')),
            notes=optional_str(data.get('notes')),
            created_at=optional_str(data.get('createdAt')),
        )

    def __repr__(self):
        return f"<Invoice(id={self.id}, number='{self.invoice_number}', status='{self.status}')>"
