"""Configuration module for Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Session Configuration (Production-safe defaults)
    SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', 'false').lower() == 'true'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv('SESSION_COOKIE_SAMESITE', 'Lax')
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours

    # Preferred URL scheme (for url_for with _external=True)
    PREFERRED_URL_SCHEME = os.getenv('PREFERRED_URL_SCHEME', 'http')

    # Remote REST backend (clients, products, invoices, users)
    API_BASE_URL = os.getenv('API_BASE_URL', 'https://facturationback.onrender.com').rstrip('/')
    API_TIMEOUT = float(os.getenv('API_TIMEOUT', '10'))

    # Local database - only holds panel settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///invoice_panel.db')
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', 'false').lower() == 'true'

    # Invoicing defaults (overridable from the admin settings page)
    DEFAULT_TAX_RATE = os.getenv('DEFAULT_TAX_RATE', '20')
    INVOICE_PREFIX = os.getenv('INVOICE_PREFIX', 'FAC')
    CURRENCY_LABEL = os.getenv('CURRENCY_LABEL', 'Fcfa')

    # Business Information (for locally printed invoices)
    BUSINESS_NAME = os.getenv('BUSINESS_NAME', 'Mon Entreprise')
    BUSINESS_ADDRESS = os.getenv('BUSINESS_ADDRESS', '')
    BUSINESS_PHONE = os.getenv('BUSINESS_PHONE', '')
    BUSINESS_EMAIL = os.getenv('BUSINESS_EMAIL', '')


class TestConfig(Config):
    """Configuration used by the test suite."""

    TESTING = True
    DEBUG = False
    WTF_CSRF_ENABLED = False
    API_BASE_URL = 'http://backend.test'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ECHO = False
