"""Product (catalog entry) record."""
from dataclasses import dataclass
from typing import Optional

from invoice_panel.models._fields import pick_id, optional_str, to_float


@dataclass
class Product:
    """Sellable product or service. `price` is the default unit price for new lines."""

    id: str
    name: str
    price: float = 0.0
    description: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> 'Product':
        return cls(
            id=pick_id(data),
            name=data.get('name') or '',
            price=to_float(data.get('price')),
            description=optional_str(data.get('description')),
            user_id=optional_str(data.get('userId')),
            created_at=optional_str(data.get('createdAt')),
        )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"
