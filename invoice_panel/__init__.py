"""Flask application factory."""
from flask import Flask, g, render_template, request, redirect, flash, jsonify
from flask_wtf.csrf import CSRFProtect, CSRFError
from invoice_panel.database import init_db


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize CSRF protection
    CSRFProtect(app)

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        app.logger.warning(f"CSRF Error: {e.description}")
        if request.is_json or request.headers.get('HX-Request'):
            return jsonify({'status': 'error', 'message': 'La session a expiré. Rechargez la page.'}), 400
        flash('Votre session a expiré ou le formulaire est invalide. Veuillez réessayer.', 'warning')
        return redirect(request.referrer or '/')

    # Production: Enable ProxyFix for HTTPS behind a reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=0)

    # Initialize database (panel settings only)
    init_db(app)

    # Register Jinja filters for formatting
    from invoice_panel.utils.formatters import amount, money, date_fr
    from invoice_panel.services.invoice_status_service import status_label, action_label

    app.jinja_env.filters['amount'] = amount
    app.jinja_env.filters['money'] = lambda value: money(value, app.config.get('CURRENCY_LABEL', ''))
    app.jinja_env.filters['date_fr'] = date_fr
    app.jinja_env.filters['status_label'] = status_label
    app.jinja_env.filters['status_action'] = action_label

    from invoice_panel.middleware import load_current_user

    @app.before_request
    def before_request_handler():
        """Load the logged-in user for each request."""
        load_current_user()

    @app.context_processor
    def inject_panel_context():
        return {
            'current_user': g.get('user'),
            'currency': app.config.get('CURRENCY_LABEL', ''),
        }

    # Error Handlers
    from invoice_panel.exceptions import PanelError

    @app.errorhandler(PanelError)
    def handle_panel_error(error):
        """Handle custom application exceptions."""
        app.logger.error(f"PanelError [{error.status_code}]: {error.message}")

        if request.is_json:
            return jsonify(error.to_dict()), error.status_code

        # For regular requests: flash message and redirect back
        flash(error.message, 'danger')
        return redirect(request.referrer or '/')

    @app.errorhandler(403)
    def forbidden_error(error):
        if request.is_json:
            return jsonify({'status': 'error', 'message': 'Forbidden'}), 403
        return render_template('errors/403.html'), 403

    @app.errorhandler(404)
    def not_found_error(error):
        if request.is_json:
            return jsonify({'status': 'error', 'message': 'Not Found'}), 404
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f"Unhandled Exception: {error}")
        if request.is_json:
            return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500
        return render_template('errors/500.html'), 500

    # Register blueprints
    from invoice_panel.blueprints.auth import auth_bp
    from invoice_panel.blueprints.dashboard import dashboard_bp
    from invoice_panel.blueprints.clients import clients_bp
    from invoice_panel.blueprints.products import products_bp
    from invoice_panel.blueprints.invoices import invoices_bp
    from invoice_panel.blueprints.admin import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(clients_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(invoices_bp)
    app.register_blueprint(admin_bp)

    from invoice_panel.cli_commands import init_cli_commands
    init_cli_commands(app)

    app.logger.info(f"API_BASE_URL={app.config.get('API_BASE_URL')}")

    return app
