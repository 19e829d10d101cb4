"""Custom exceptions for the invoice panel."""

class PanelError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="Une erreur interne est survenue", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv

class BusinessLogicError(PanelError):
    """Exception raised for business logic violations."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)

class NotFoundError(PanelError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Ressource introuvable", payload=None):
        super().__init__(message, 404, payload)

class UnauthorizedError(PanelError):
    """Raised when a user lacks permission for an action."""
    def __init__(self, message="Accès non autorisé"):
        super().__init__(message, 403)

class GatewayError(PanelError):
    """Raised when the remote backend rejects or fails a call the view cannot do without."""
    def __init__(self, message="Erreur de connexion au serveur", payload=None):
        super().__init__(message, 502, payload)
