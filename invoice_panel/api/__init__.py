"""Backend gateway: REST client bound to the current request."""
from flask import current_app, g, session

from invoice_panel.api.client import ApiClient, ApiResponse, CONNECTION_ERROR, GENERIC_ERROR


def get_api() -> ApiClient:
    """Return the backend client for this request, authenticated with the session token."""
    if 'api' not in g:
        g.api = ApiClient(
            base_url=current_app.config['API_BASE_URL'],
            token=session.get('token'),
            timeout=current_app.config.get('API_TIMEOUT', 10),
        )
    return g.api


def load_records(response: ApiResponse, factory) -> list:
    """Map a successful list response to records; failed or malformed responses yield []."""
    if not response.success or not isinstance(response.data, list):
        return []
    return [factory(row) for row in response.data if isinstance(row, dict)]


__all__ = ['ApiClient', 'ApiResponse', 'CONNECTION_ERROR', 'GENERIC_ERROR', 'get_api', 'load_records']
