"""REST client for the invoicing backend."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

GENERIC_ERROR = 'Une erreur est survenue'
CONNECTION_ERROR = 'Erreur de connexion au serveur'


@dataclass
class ApiResponse:
    """Outcome of a backend call. Failures carry a user-facing `error` instead of raising."""

    success: bool
    data: Any = None
    message: Optional[str] = None
    error: Optional[str] = None


class ApiClient:
    """Client for the invoicing backend REST API."""

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10):
        """
        Initialize backend client.

        Args:
            base_url: Backend root URL (no trailing slash)
            token: Bearer token of the logged-in user, if any
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.http = requests.Session()

        self.auth = AuthApi(self)
        self.users = UserApi(self)
        self.clients = ClientApi(self)
        self.products = ProductApi(self)
        self.invoices = InvoiceApi(self)

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {'Content-Type': 'application/json'}
        if extra:
            headers.update(extra)
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def request(self, method: str, endpoint: str, json: Optional[dict] = None) -> ApiResponse:
        """
        Call a JSON endpoint.

        Returns:
            ApiResponse with `data` unwrapped from the backend's `{"data": ...}`
            envelope when present. Never raises on HTTP or network errors.
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"[API] {method} {endpoint}")

        try:
            response = self.http.request(
                method, url, json=json, headers=self._headers(), timeout=self.timeout
            )
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"[API] {method} {endpoint} failed: {e}")
            return ApiResponse(success=False, error=CONNECTION_ERROR)

        message = body.get('message') if isinstance(body, dict) else None

        if not response.ok:
            logger.warning(f"[API] {method} {endpoint} -> {response.status_code}: {message}")
            return ApiResponse(success=False, error=message or GENERIC_ERROR)

        data = body
        if isinstance(body, dict) and body.get('data') is not None:
            data = body['data']
        return ApiResponse(success=True, data=data, message=message)

    def download(self, endpoint: str) -> bytes:
        """
        Fetch a binary resource.

        Raises:
            requests.RequestException: On network failure or non-2xx status
        """
        url = f"{self.base_url}{endpoint}"
        logger.info(f"[API] Downloading {endpoint}")
        try:
            response = self.http.get(url, headers=self._headers(), timeout=self.timeout)
            response.raise_for_status()
            return response.content
        except requests.HTTPError as e:
            logger.error(f"[API] Error downloading {endpoint}: {e.response.status_code}")
            raise
        except requests.RequestException as e:
            logger.error(f"[API] Unexpected error downloading {endpoint}: {str(e)}")
            raise


class _Resource:
    def __init__(self, client: ApiClient):
        self.client = client


class AuthApi(_Resource):

    def login(self, email: str, password: str) -> ApiResponse:
        return self.client.request('POST', '/auth/login', {'email': email, 'password': password})

    def register(self, user_data: dict) -> ApiResponse:
        return self.client.request('POST', '/auth/register', user_data)

    def me(self) -> ApiResponse:
        return self.client.request('GET', '/auth/me')


class UserApi(_Resource):
    """User management endpoints (admin only on the backend side)."""

    def get_all(self) -> ApiResponse:
        return self.client.request('GET', '/auth/users')

    def create(self, user_data: dict) -> ApiResponse:
        return self.client.request('POST', '/auth/register', user_data)

    def update(self, user_id: str, user_data: dict) -> ApiResponse:
        return self.client.request('PUT', f'/auth/{user_id}', user_data)

    def delete(self, user_id: str) -> ApiResponse:
        return self.client.request('DELETE', f'/auth/{user_id}')

    def toggle_status(self, user_id: str) -> ApiResponse:
        return self.client.request('PATCH', f'/auth/{user_id}/toggle-status')


class _CrudResource(_Resource):
    """Backend collections follow `<base>`, `<base>/creer`, `<base>/<id>`."""

    base_path = ''

    def get_all(self) -> ApiResponse:
        return self.client.request('GET', self.base_path)

    def get_by_id(self, item_id: str) -> ApiResponse:
        return self.client.request('GET', f'{self.base_path}/{item_id}')

    def create(self, payload: dict) -> ApiResponse:
        return self.client.request('POST', f'{self.base_path}/creer', payload)

    def update(self, item_id: str, payload: dict) -> ApiResponse:
        return self.client.request('PUT', f'{self.base_path}/{item_id}', payload)

    def delete(self, item_id: str) -> ApiResponse:
        return self.client.request('DELETE', f'{self.base_path}/{item_id}')


class ClientApi(_CrudResource):
    base_path = '/clients'


class ProductApi(_CrudResource):
    base_path = '/produit'


class InvoiceApi(_CrudResource):
    base_path = '/factures'

    def update_status(self, invoice_id: str, status: str) -> ApiResponse:
        return self.client.request('PATCH', f'/factures/{invoice_id}/status', {'status': status})

    def download_pdf(self, invoice_id: str) -> bytes:
        return self.client.download(f'/factures/{invoice_id}/pdf')
