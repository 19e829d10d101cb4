from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app, Response
from typing import List, Union

from invoice_panel.api import get_api, load_records
from invoice_panel.exceptions import BusinessLogicError, NotFoundError
from invoice_panel.forms.panel_forms import ClientForm
from invoice_panel.middleware import require_login
from invoice_panel.models import Client

clients_bp = Blueprint('clients', __name__, url_prefix='/clients')


def _load_clients() -> List[Client]:
    response = get_api().clients.get_all()
    if not response.success:
        flash(response.error or 'Impossible de charger les clients', 'danger')
    return load_records(response, Client.from_api)


def _get_client_or_404(client_id: str) -> Client:
    """The backend only lists clients, so a single client is picked from the list."""
    client = next((c for c in _load_clients() if c.id == client_id), None)
    if client is None:
        raise NotFoundError('Client introuvable')
    return client


def _search(clients: List[Client], query: str) -> List[Client]:
    needle = query.lower()
    return [
        c for c in clients
        if needle in c.name.lower()
        or needle in (c.email or '').lower()
        or needle in (c.phone or '').lower()
    ]


@clients_bp.route('/')
@require_login
def list_clients() -> str:
    """List clients, optionally filtered by name, email or phone."""
    search_query = request.args.get('q', '').strip()
    clients = _load_clients()
    if search_query:
        clients = _search(clients, search_query)

    is_htmx = request.headers.get('HX-Request') == 'true'
    template = 'clients/_list_table.html' if is_htmx else 'clients/list.html'
    return render_template(template, clients=clients, search_query=search_query)


@clients_bp.route('/new', methods=['GET', 'POST'])
@require_login
def create_client() -> Union[str, Response, tuple]:
    """Create a new client."""
    form = ClientForm()
    if request.method == 'POST':
        if not form.validate_on_submit():
            return render_template('clients/form.html', form=form, client=None, action='new'), 400

        response = get_api().clients.create(form.to_payload())
        if not response.success:
            current_app.logger.warning(f"Error creating client: {response.error}")
            raise BusinessLogicError(response.error or 'Impossible de créer le client')

        flash(f'Client "{form.name.data.strip()}" créé avec succès', 'success')
        return redirect(url_for('clients.list_clients'))

    return render_template('clients/form.html', form=form, client=None, action='new')


@clients_bp.route('/<client_id>/edit', methods=['GET', 'POST'])
@require_login
def edit_client(client_id: str) -> Union[str, Response, tuple]:
    """Show and process the edit form of a client."""
    client = _get_client_or_404(client_id)
    form = ClientForm(obj=client)

    if request.method == 'POST':
        if not form.validate_on_submit():
            return render_template('clients/form.html', form=form, client=client, action='edit'), 400

        response = get_api().clients.update(client_id, form.to_payload())
        if not response.success:
            current_app.logger.warning(f"Error updating client {client_id}: {response.error}")
            raise BusinessLogicError(response.error or 'Impossible de modifier le client.')

        flash('Client modifié avec succès.', 'success')
        return redirect(url_for('clients.list_clients'))

    return render_template('clients/form.html', form=form, client=client, action='edit')


@clients_bp.route('/<client_id>/delete', methods=['POST'])
@require_login
def delete_client(client_id: str) -> Response:
    """Delete a client."""
    response = get_api().clients.delete(client_id)
    if not response.success:
        raise BusinessLogicError(response.error or 'Impossible de supprimer le client')

    flash('Client supprimé', 'success')
    return redirect(url_for('clients.list_clients'))
