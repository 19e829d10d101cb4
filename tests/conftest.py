import json
from collections import namedtuple
from urllib.parse import urlsplit

import pytest
import requests

from invoice_panel import create_app
from invoice_panel.database import get_session
from invoice_panel.models import AppSetting, User


Call = namedtuple('Call', ['method', 'path', 'json', 'headers'])


class FakeBackend:
    """
    Stand-in for the invoicing REST backend.

    Routes are registered per (method, path); unknown routes answer 404 with a
    backend-style `{"message": ...}` body. Every call is recorded.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, body=None, status=200, content=None, raises=None):
        self.routes[(method.upper(), path)] = (status, body, content, raises)

    def calls_to(self, method, path):
        return [c for c in self.calls if c.method == method.upper() and c.path == path]

    def handle(self, method, url, **kwargs):
        method = method.upper()
        path = urlsplit(url).path
        self.calls.append(Call(method, path, kwargs.get('json'), kwargs.get('headers') or {}))

        status, body, content, raises = self.routes.get(
            (method, path), (404, {'message': 'Route introuvable'}, None, None)
        )
        if raises is not None:
            raise raises

        response = requests.Response()
        response.status_code = status
        response.url = url
        if content is not None:
            response._content = content
            response.headers['Content-Type'] = 'application/pdf'
        else:
            response._content = json.dumps(body).encode('utf-8')
            response.headers['Content-Type'] = 'application/json'
        return response


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing."""
    app = create_app('config.TestConfig')
    return app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Database session for panel settings; saved settings are wiped afterwards."""
    session = get_session()
    yield session
    session.rollback()
    session.query(AppSetting).delete()
    session.commit()
    session.close()


@pytest.fixture(scope='function')
def fake_backend(monkeypatch):
    """Route every outgoing HTTP call to an in-memory backend."""
    backend = FakeBackend()

    def fake_request(http_session, method, url, **kwargs):
        return backend.handle(method, url, **kwargs)

    monkeypatch.setattr(requests.Session, 'request', fake_request)
    return backend


@pytest.fixture
def regular_user():
    return User(id='u1', email='user@test.com', name='User One', role='user')


@pytest.fixture
def admin_user():
    return User(id='a1', email='admin@test.com', name='Admin', role='admin')


@pytest.fixture(scope='function')
def authenticated_client(client, fake_backend, regular_user):
    """Test client logged in as a regular user."""
    with client.session_transaction() as sess:
        sess['token'] = 'user-token'
        sess['user'] = regular_user.to_session()
    return client


@pytest.fixture(scope='function')
def admin_client(client, fake_backend, admin_user):
    """Test client logged in as an administrator."""
    with client.session_transaction() as sess:
        sess['token'] = 'admin-token'
        sess['user'] = admin_user.to_session()
    return client


@pytest.fixture
def catalog_payload():
    """Backend documents for a small catalog."""
    return [
        {'_id': 'p1', 'name': 'Widget', 'price': 10, 'description': 'Petit widget'},
        {'_id': 'p2', 'name': 'Gadget', 'price': 4.5},
    ]


@pytest.fixture
def clients_payload():
    return [
        {'_id': 'c1', 'name': 'Acme', 'email': 'contact@acme.test', 'phone': '0102030405'},
        {'_id': 'c2', 'name': 'Globex', 'email': 'hello@globex.test'},
    ]


@pytest.fixture
def invoices_payload():
    return [
        {
            '_id': 'i1', 'invoiceNumber': 'FAC-0001', 'clientId': {'_id': 'c1', 'name': 'Acme'},
            'items': [{'productId': 'p1', 'productName': 'Widget', 'quantity': 3, 'unitPrice': 10, 'total': 30}],
            'subtotal': 30, 'taxRate': 20, 'taxAmount': 6, 'total': 36,
            'status': 'draft', 'issueDate': '2026-01-12T00:00:00.000Z',
        },
        {
            '_id': 'i2', 'invoiceNumber': 'FAC-0002', 'client': {'_id': 'c2', 'name': 'Globex'},
            'items': [], 'subtotal': 100, 'taxRate': 0, 'taxAmount': 0, 'total': 100,
            'status': 'sent', 'issueDate': '2026-02-01',
        },
        {
            '_id': 'i3', 'invoiceNumber': 'FAC-0003', 'clientId': {'_id': 'c1', 'name': 'Acme'},
            'items': [], 'subtotal': 50, 'taxRate': 20, 'taxAmount': 10, 'total': 60,
            'status': 'paid', 'issueDate': '2026-03-05',
        },
    ]


@pytest.fixture
def populated_backend(fake_backend, catalog_payload, clients_payload, invoices_payload):
    """Backend with clients, products and invoices loaded."""
    fake_backend.add('GET', '/produit', {'data': catalog_payload})
    fake_backend.add('GET', '/clients', {'data': clients_payload})
    fake_backend.add('GET', '/factures', {'data': invoices_payload})
    for invoice in invoices_payload:
        fake_backend.add('GET', f"/factures/{invoice['_id']}", {'data': invoice})
    return fake_backend
