"""Models package - backend records and local SQLAlchemy models."""
# Backend records
from invoice_panel.models.user import User, ROLE_ADMIN, ROLE_USER
from invoice_panel.models.client import Client
from invoice_panel.models.product import Product
from invoice_panel.models.invoice import Invoice, InvoiceStatus, LineItem

# Local settings
from invoice_panel.models.app_setting import AppSetting

__all__ = [
    'User', 'ROLE_ADMIN', 'ROLE_USER',
    'Client', 'Product', 'Invoice', 'InvoiceStatus', 'LineItem',
    'AppSetting',
]
