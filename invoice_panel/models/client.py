"""Client (customer) record."""
from dataclasses import dataclass
from typing import Optional

from invoice_panel.models._fields import pick_id, optional_str


@dataclass
class Client:
    id: str
    name: str
    email: str = ''
    phone: Optional[str] = None
    address: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> 'Client':
        return cls(
            id=pick_id(data),
            name=data.get('name') or '',
            email=data.get('email') or '',
            phone=optional_str(data.get('phone')),
            address=optional_str(data.get('address')),
            user_id=optional_str(data.get('userId')),
            created_at=optional_str(data.get('createdAt')),
        )

    def __repr__(self):
        return f"<Client(id={self.id}, name='{self.name}')>"
