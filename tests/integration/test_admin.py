"""
Integration tests for the admin backoffice.
"""

from invoice_panel.models import AppSetting


USERS = [
    {'_id': 'a1', 'email': 'admin@test.com', 'name': 'Admin', 'role': 'admin', 'isActive': True},
    {'_id': 'u1', 'email': 'user@test.com', 'name': 'User One', 'role': 'user', 'isActive': True},
    {'_id': 'u2', 'email': 'old@test.com', 'name': 'Old User', 'role': 'user', 'isActive': False},
]


def _flashes(client):
    with client.session_transaction() as sess:
        return [message for _, message in sess.get('_flashes', [])]


class TestAdminDashboard:

    def test_dashboard_counts(self, admin_client, populated_backend):
        populated_backend.add('GET', '/auth/users', {'data': USERS})

        response = admin_client.get('/admin/')

        assert response.status_code == 200
        body = response.get_data(as_text=True)
        assert 'Utilisateurs : 3 (2 actifs)' in body
        assert '60.00 Fcfa' in body

    def test_all_invoices(self, admin_client, populated_backend):
        body = admin_client.get('/admin/invoices?status=sent').get_data(as_text=True)

        assert 'FAC-0002' in body
        assert 'FAC-0001' not in body


class TestUserManagement:

    def test_list_users(self, admin_client, fake_backend):
        fake_backend.add('GET', '/auth/users', {'data': USERS})

        body = admin_client.get('/admin/users').get_data(as_text=True)

        assert 'old@test.com' in body
        assert 'Inactif' in body

    def test_create_user(self, admin_client, fake_backend):
        fake_backend.add('POST', '/auth/register', {'data': {'_id': 'u3'}}, status=201)

        response = admin_client.post('/admin/users/new', data={
            'name': 'New User', 'email': 'new@test.com', 'password': 'secret1', 'role': 'user',
        })

        assert response.status_code == 302
        payload = fake_backend.calls_to('POST', '/auth/register')[0].json
        assert payload == {'name': 'New User', 'email': 'new@test.com', 'role': 'user', 'password': 'secret1'}

    def test_create_user_requires_password(self, admin_client, fake_backend):
        response = admin_client.post('/admin/users/new', data={
            'name': 'New User', 'email': 'new@test.com', 'password': '', 'role': 'user',
        })

        assert response.status_code == 400
        assert fake_backend.calls_to('POST', '/auth/register') == []

    def test_edit_user_without_password_keeps_it(self, admin_client, fake_backend):
        fake_backend.add('GET', '/auth/users', {'data': USERS})
        fake_backend.add('PUT', '/auth/u1', {'data': {}})

        admin_client.post('/admin/users/u1/edit', data={
            'name': 'User Renamed', 'email': 'user@test.com', 'password': '', 'role': 'admin',
        })

        payload = fake_backend.calls_to('PUT', '/auth/u1')[0].json
        assert payload == {'name': 'User Renamed', 'email': 'user@test.com', 'role': 'admin'}

    def test_edit_form_is_prefilled(self, admin_client, fake_backend):
        fake_backend.add('GET', '/auth/users', {'data': USERS})

        body = admin_client.get('/admin/users/u2/edit').get_data(as_text=True)

        assert 'old@test.com' in body

    def test_toggle_status(self, admin_client, fake_backend):
        fake_backend.add('PATCH', '/auth/u2/toggle-status', {'data': {'isActive': True}})

        admin_client.post('/admin/users/u2/toggle-status')

        assert len(fake_backend.calls_to('PATCH', '/auth/u2/toggle-status')) == 1

    def test_admin_cannot_delete_own_account(self, admin_client, fake_backend):
        response = admin_client.post('/admin/users/a1/delete')

        assert response.status_code == 302
        assert 'Vous ne pouvez pas supprimer votre propre compte' in _flashes(admin_client)
        assert fake_backend.calls_to('DELETE', '/auth/a1') == []

    def test_delete_user_backend_error(self, admin_client, fake_backend):
        fake_backend.add('DELETE', '/auth/u1', {'message': 'Utilisateur introuvable'}, status=404)

        admin_client.post('/admin/users/u1/delete')

        assert 'Utilisateur introuvable' in _flashes(admin_client)


class TestSettings:

    def test_settings_page_shows_defaults(self, admin_client, session):
        body = admin_client.get('/admin/settings').get_data(as_text=True)

        assert 'value="20"' in body
        assert 'value="FAC"' in body

    def test_save_settings(self, admin_client, session):
        response = admin_client.post('/admin/settings', data={
            'default_tax_rate': '18', 'invoice_prefix': 'INV', 'footer_text': 'Merci',
        })

        assert response.status_code == 302
        saved = {row.key: row.value for row in session.query(AppSetting).all()}
        assert saved == {'default_tax_rate': '18', 'invoice_prefix': 'INV', 'footer_text': 'Merci'}

    def test_out_of_range_tax_rate_is_rejected(self, admin_client, session):
        response = admin_client.post('/admin/settings', data={
            'default_tax_rate': '150', 'invoice_prefix': 'INV', 'footer_text': '',
        })

        assert response.status_code == 400
        assert session.query(AppSetting).count() == 0
