"""
Admin security decorators.
Provides authorization for admin panel routes.
"""

from functools import wraps
from flask import redirect, url_for, flash, request, g, abort


def admin_required(f):
    """
    Decorator: Require an authenticated user with the 'admin' role.

    Anonymous visitors are sent to the login page; authenticated non-admins
    get a 403. The backend enforces the same rule on its side.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get('user') is None:
            if request.headers.get('HX-Request'):
                response = redirect(url_for('auth.login'))
                response.headers['HX-Redirect'] = url_for('auth.login')
                return response

            flash('Veuillez vous connecter en tant qu\'administrateur.', 'warning')
            return redirect(url_for('auth.login', next=request.url))

        if not g.user.is_admin:
            flash("Vous n'avez pas les droits d'administration.", 'danger')
            abort(403)

        return f(*args, **kwargs)

    return decorated_function
