"""
Authentication blueprint.
Handles login and logout against the backend `/auth` endpoints.
"""

from flask import Blueprint, render_template, request, redirect, url_for, flash, g, Response
from typing import Optional, Union
import logging

from invoice_panel.api import get_api
from invoice_panel.forms.panel_forms import LoginForm
from invoice_panel.middleware import login_user, logout_user
from invoice_panel.models import User

logger = logging.getLogger(__name__)


auth_bp = Blueprint('auth', __name__)


def _home_for(user: User) -> str:
    """Admins land on the admin panel, everyone else on their dashboard."""
    if user.is_admin:
        return url_for('admin.dashboard')
    return url_for('dashboard.index')


def _safe_next(target: Optional[str]) -> Optional[str]:
    """Only follow relative redirects after login."""
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return None


@auth_bp.route('/')
def index() -> Response:
    if g.user:
        return redirect(_home_for(g.user))
    return redirect(url_for('auth.login'))


@auth_bp.route('/login', methods=['GET', 'POST'])
def login() -> Union[str, Response, tuple]:
    """Login page - exchanges credentials for a backend token kept in the session."""
    if g.user:
        return redirect(_home_for(g.user))

    form = LoginForm()
    if request.method == 'POST':
        if not form.validate_on_submit():
            for errors in form.errors.values():
                for error in errors:
                    flash(error, 'danger')
            return render_template('auth/login.html', form=form), 400

        api = get_api()
        response = api.auth.login(form.email.data.strip(), form.password.data)
        data = response.data if isinstance(response.data, dict) else {}

        if not response.success or not data.get('token') or not isinstance(data.get('user'), dict):
            logger.info(f"Failed login for {form.email.data.strip()}: {response.error}")
            flash(response.error or 'Email ou mot de passe incorrect.', 'danger')
            return render_template('auth/login.html', form=form), 401

        user = User.from_api(data['user'])
        login_user(user, data['token'])
        api.token = data['token']

        logger.info(f"User {user.email} logged in (role={user.role})")
        flash(f'Bienvenue, {user.name or user.email} !', 'success')
        return redirect(_safe_next(request.args.get('next')) or _home_for(user))

    return render_template('auth/login.html', form=form)


@auth_bp.route('/logout', methods=['POST'])
def logout() -> Response:
    """Drop the session token. Any unsaved invoice draft is discarded with it."""
    logout_user()
    flash('Vous êtes déconnecté.', 'success')
    return redirect(url_for('auth.login'))
