"""User record as exposed by the backend `/auth` endpoints."""
from dataclasses import dataclass, asdict
from typing import Optional

from invoice_panel.models._fields import pick_id, optional_str

ROLE_ADMIN = 'admin'
ROLE_USER = 'user'


@dataclass
class User:
    """Panel account. `role` is either 'admin' or 'user'."""

    id: str
    email: str
    name: str
    role: str = ROLE_USER
    is_active: bool = True
    created_at: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_api(cls, data: dict) -> 'User':
        return cls(
            id=pick_id(data),
            email=data.get('email') or '',
            name=data.get('name') or '',
            role=data.get('role') or ROLE_USER,
            is_active=bool(data.get('isActive', True)),
            created_at=optional_str(data.get('createdAt')),
        )

    def to_session(self) -> dict:
        return asdict(self)

    @classmethod
    def from_session(cls, data: dict) -> 'User':
        return cls(**data)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
