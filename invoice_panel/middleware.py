"""Middleware for authentication context."""
from functools import wraps
from flask import session, g, redirect, url_for, flash, request, current_app
from invoice_panel.models import User


def load_current_user():
    """
    Load current user into g (Flask's per-request global).

    Called before each request. The user record and bearer token are stored in
    the session at login; g.user stays None for anonymous requests.
    """
    g.user = None

    try:
        user_data = session.get('user')
        if user_data and session.get('token'):
            g.user = User.from_session(user_data)
    except (TypeError, KeyError) as e:
        # Stale session layout from an older release: force a fresh login
        current_app.logger.warning(f"Discarding unreadable session user: {e}")
        session.pop('user', None)
        session.pop('token', None)


def login_user(user: User, token: str) -> None:
    session.clear()
    session['token'] = token
    session['user'] = user.to_session()
    session.permanent = True
    g.user = user


def logout_user() -> None:
    session.clear()
    g.user = None


def require_login(f):
    """
    Decorator: Require user to be logged in.

    Redirects to login page if not authenticated.
    Sets next parameter to return to original page after login.
    Handles HTMX requests with an HX-Redirect header.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.user is None:
            login_url = url_for('auth.login', next=request.url)
            if request.headers.get('HX-Request'):
                response = redirect(login_url)
                response.headers['HX-Redirect'] = login_url
                return response

            flash('Veuillez vous connecter pour accéder à cette page.', 'warning')
            return redirect(login_url)
        return f(*args, **kwargs)
    return decorated_function
