"""
Flask CLI commands for panel maintenance.

Commands:
- flask check-api: Check that the invoicing backend answers
- flask show-settings: Print the panel settings stored locally
"""

import click
import requests
from flask import current_app
from invoice_panel.database import get_session
from invoice_panel.services.settings_service import get_settings


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('check-api')
    def check_api():
        """Ping the backend configured in API_BASE_URL."""
        base_url = current_app.config['API_BASE_URL']
        timeout = current_app.config.get('API_TIMEOUT', 10)

        try:
            response = requests.get(base_url, timeout=timeout)
        except requests.RequestException as e:
            click.echo(click.style(f'❌ Backend injoignable ({base_url}) : {e}', fg='red'))
            raise SystemExit(1)

        click.echo(click.style(f'✅ Backend joignable : {base_url}', fg='green', bold=True))
        click.echo(f'   HTTP {response.status_code}')

    @app.cli.command('show-settings')
    def show_settings():
        """Print panel settings (saved values or config defaults)."""
        settings = get_settings(get_session())
        for key, value in settings.items():
            click.echo(f'{key}: {value}')
