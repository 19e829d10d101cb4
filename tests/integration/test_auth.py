"""
Integration tests for authentication and authorization.
"""

import pytest
import requests


LOGIN_OK = {
    'data': {
        'token': 'jwt-token',
        'user': {'_id': 'u1', 'email': 'user@test.com', 'name': 'User One', 'role': 'user'},
    }
}


class TestLogin:
    """Test login functionality."""

    def test_login_page_renders(self, client):
        response = client.get('/login')

        assert response.status_code == 200
        assert b'Connexion' in response.data

    def test_login_with_valid_credentials(self, client, fake_backend):
        """Successful login stores the token and redirects a user to the dashboard."""
        fake_backend.add('POST', '/auth/login', LOGIN_OK)

        response = client.post('/login', data={'email': 'user@test.com', 'password': 'secret1'})

        assert response.status_code == 302
        assert response.location.endswith('/dashboard/')
        with client.session_transaction() as sess:
            assert sess['token'] == 'jwt-token'
            assert sess['user']['email'] == 'user@test.com'

    def test_admin_lands_on_admin_dashboard(self, client, fake_backend):
        payload = {'data': {'token': 't', 'user': {'_id': 'a1', 'email': 'admin@test.com', 'role': 'admin'}}}
        fake_backend.add('POST', '/auth/login', payload)

        response = client.post('/login', data={'email': 'admin@test.com', 'password': 'secret1'})

        assert '/admin/' in response.location

    def test_login_follows_relative_next(self, client, fake_backend):
        fake_backend.add('POST', '/auth/login', LOGIN_OK)

        response = client.post('/login?next=/invoices/new', data={'email': 'user@test.com', 'password': 'x'})

        assert response.location.endswith('/invoices/new')

    def test_login_ignores_external_next(self, client, fake_backend):
        fake_backend.add('POST', '/auth/login', LOGIN_OK)

        response = client.post('/login?next=//evil.test/', data={'email': 'user@test.com', 'password': 'x'})

        assert 'evil.test' not in response.location

    def test_login_with_wrong_password_shows_backend_message(self, client, fake_backend):
        fake_backend.add('POST', '/auth/login', {'message': 'Compte désactivé'}, status=401)

        response = client.post('/login', data={'email': 'user@test.com', 'password': 'wrong'})

        assert response.status_code == 401
        assert 'Compte désactivé' in response.get_data(as_text=True)
        with client.session_transaction() as sess:
            assert 'token' not in sess

    def test_login_with_invalid_email_is_rejected_locally(self, client, fake_backend):
        response = client.post('/login', data={'email': 'not-an-email', 'password': 'x'})

        assert response.status_code == 400
        assert fake_backend.calls == []

    def test_backend_unreachable(self, client, fake_backend):
        fake_backend.add('POST', '/auth/login', raises=requests.ConnectionError())

        response = client.post('/login', data={'email': 'user@test.com', 'password': 'x'})

        assert response.status_code == 401
        assert 'Erreur de connexion au serveur' in response.get_data(as_text=True)


class TestLogout:

    def test_logout_clears_session_and_draft(self, authenticated_client):
        with authenticated_client.session_transaction() as sess:
            sess['invoice_draft'] = {'items': []}

        response = authenticated_client.post('/logout')

        assert response.status_code == 302
        with authenticated_client.session_transaction() as sess:
            assert 'token' not in sess
            assert 'invoice_draft' not in sess


class TestAccessControl:

    @pytest.mark.parametrize('url', ['/dashboard/', '/clients/', '/products/', '/invoices/', '/invoices/new'])
    def test_protected_pages_redirect_to_login(self, client, url):
        response = client.get(url)

        assert response.status_code == 302
        assert '/login' in response.location

    def test_htmx_request_gets_hx_redirect(self, client):
        response = client.get('/invoices/', headers={'HX-Request': 'true'})

        assert '/login' in response.headers['HX-Redirect']

    def test_regular_user_cannot_open_admin(self, authenticated_client):
        response = authenticated_client.get('/admin/users')

        assert response.status_code == 403

    def test_root_redirects_admin_to_admin_panel(self, admin_client):
        assert '/admin/' in admin_client.get('/').location

    def test_anonymous_root_goes_to_login(self, app):
        response = app.test_client().get('/')

        assert '/login' in response.location

    def test_backend_receives_session_token(self, authenticated_client, fake_backend):
        fake_backend.add('GET', '/produit', {'data': []})

        authenticated_client.get('/products/')

        headers = fake_backend.calls_to('GET', '/produit')[0].headers
        assert headers['Authorization'] == 'Bearer user-token'
