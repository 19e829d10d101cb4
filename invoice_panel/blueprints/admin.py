"""
Admin Blueprint - Backoffice for panel administrators.

Routes:
- /admin, /admin/dashboard - Global KPIs
- /admin/users - Account list
- /admin/users/new - Create account
- /admin/users/<id>/edit - Edit account
- /admin/users/<id>/delete - Delete account
- /admin/users/<id>/toggle-status - Activate / deactivate account
- /admin/invoices - Every invoice visible to the administrator
- /admin/settings - Panel settings (tax rate, invoice prefix, footer)
"""

from flask import Blueprint, render_template, request, redirect, url_for, flash, g, current_app, Response
from typing import List, Union

from invoice_panel.api import get_api, load_records
from invoice_panel.database import get_session
from invoice_panel.decorators.admin_security import admin_required
from invoice_panel.exceptions import BusinessLogicError, NotFoundError, UnauthorizedError
from invoice_panel.forms.panel_forms import SettingsForm, UserForm
from invoice_panel.models import Client, Invoice, Product, User
from invoice_panel.services.dashboard_service import filter_invoices, get_dashboard_stats, summarize_invoices
from invoice_panel.services.settings_service import get_settings, save_settings


admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


def _load_users() -> List[User]:
    response = get_api().users.get_all()
    if not response.success:
        flash(response.error or 'Impossible de charger les utilisateurs', 'danger')
    return load_records(response, User.from_api)


def _get_user_or_404(user_id: str) -> User:
    user = next((u for u in _load_users() if u.id == user_id), None)
    if user is None:
        raise NotFoundError('Utilisateur introuvable')
    return user


@admin_bp.route('/')
@admin_bp.route('/dashboard')
@admin_required
def dashboard() -> str:
    """Admin dashboard - global KPIs."""
    api = get_api()
    users = _load_users()
    clients = load_records(api.clients.get_all(), Client.from_api)
    products = load_records(api.products.get_all(), Product.from_api)
    invoices = load_records(api.invoices.get_all(), Invoice.from_api)

    stats = get_dashboard_stats(clients, products, invoices)
    stats['users_count'] = len(users)
    stats['active_users_count'] = sum(1 for u in users if u.is_active)

    return render_template('admin/dashboard.html', stats=stats)


@admin_bp.route('/users')
@admin_required
def list_users() -> str:
    return render_template('admin/users/list.html', users=_load_users())


@admin_bp.route('/users/new', methods=['GET', 'POST'])
@admin_required
def create_user() -> Union[str, Response, tuple]:
    """Create an account. A password is mandatory on creation."""
    form = UserForm()
    if request.method == 'POST':
        if not form.validate_on_submit():
            return render_template('admin/users/form.html', form=form, user=None, action='new'), 400
        if not form.password.data:
            flash('Le mot de passe est requis', 'danger')
            return render_template('admin/users/form.html', form=form, user=None, action='new'), 400

        response = get_api().users.create(form.to_payload())
        if not response.success:
            current_app.logger.warning(f"[ADMIN] Error creating user {form.email.data}: {response.error}")
            raise BusinessLogicError(response.error or "Impossible de créer l'utilisateur")

        current_app.logger.info(f"[ADMIN] {g.user.email} created user {form.email.data.strip()}")
        flash('Utilisateur créé avec succès', 'success')
        return redirect(url_for('admin.list_users'))

    return render_template('admin/users/form.html', form=form, user=None, action='new')


@admin_bp.route('/users/<user_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_user(user_id: str) -> Union[str, Response, tuple]:
    """Edit an account. Leaving the password empty keeps the current one."""
    user = _get_user_or_404(user_id)
    form = UserForm(obj=user)

    if request.method == 'POST':
        if not form.validate_on_submit():
            return render_template('admin/users/form.html', form=form, user=user, action='edit'), 400

        response = get_api().users.update(user_id, form.to_payload())
        if not response.success:
            raise BusinessLogicError(response.error or "Impossible de modifier l'utilisateur")

        current_app.logger.info(f"[ADMIN] {g.user.email} updated user {user.email}")
        flash('Utilisateur modifié avec succès', 'success')
        return redirect(url_for('admin.list_users'))

    return render_template('admin/users/form.html', form=form, user=user, action='edit')


@admin_bp.route('/users/<user_id>/delete', methods=['POST'])
@admin_required
def delete_user(user_id: str) -> Response:
    if user_id == g.user.id:
        raise UnauthorizedError('Vous ne pouvez pas supprimer votre propre compte')

    response = get_api().users.delete(user_id)
    if not response.success:
        raise BusinessLogicError(response.error or "Impossible de supprimer l'utilisateur")

    current_app.logger.info(f"[ADMIN] {g.user.email} deleted user {user_id}")
    flash('Utilisateur supprimé', 'success')
    return redirect(url_for('admin.list_users'))


@admin_bp.route('/users/<user_id>/toggle-status', methods=['POST'])
@admin_required
def toggle_user_status(user_id: str) -> Response:
    """Activate or deactivate an account."""
    if user_id == g.user.id:
        raise UnauthorizedError('Vous ne pouvez pas désactiver votre propre compte')

    response = get_api().users.toggle_status(user_id)
    if not response.success:
        raise BusinessLogicError(response.error or 'Impossible de changer le statut')

    flash("Statut de l'utilisateur mis à jour", 'success')
    return redirect(url_for('admin.list_users'))


@admin_bp.route('/invoices')
@admin_required
def list_invoices() -> str:
    search_query = request.args.get('q', '').strip()
    status = request.args.get('status', 'all').strip() or 'all'

    response = get_api().invoices.get_all()
    if not response.success:
        flash(response.error or 'Impossible de charger les factures', 'danger')
    invoices = filter_invoices(load_records(response, Invoice.from_api), search_query, status)

    return render_template('admin/invoices.html',
                           invoices=invoices,
                           summary=summarize_invoices(invoices),
                           search_query=search_query,
                           selected_status=status)


@admin_bp.route('/settings', methods=['GET', 'POST'])
@admin_required
def settings() -> Union[str, Response, tuple]:
    """Panel settings stored locally."""
    session_db = get_session()
    current = get_settings(session_db)
    form = SettingsForm(data=current)

    if request.method == 'POST':
        if not form.validate_on_submit():
            return render_template('admin/settings.html', form=form), 400

        try:
            save_settings(session_db, {
                'default_tax_rate': form.default_tax_rate.data,
                'invoice_prefix': form.invoice_prefix.data,
                'footer_text': form.footer_text.data,
            })
        except BusinessLogicError as e:
            flash(e.message, 'danger')
            return render_template('admin/settings.html', form=form), 400

        flash('Paramètres enregistrés', 'success')
        return redirect(url_for('admin.settings'))

    return render_template('admin/settings.html', form=form)
