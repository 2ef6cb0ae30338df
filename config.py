"""Configuration constants and runtime profiles for the app."""
import os


def _normalized_database_url() -> str:
    url = os.environ.get('DATABASE_URL', 'sqlite:///guia.db')
    if url.startswith('postgres://'):
        return url.replace('postgres://', 'postgresql://', 1)
    return url


class BaseConfig:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key-change-in-production')
    SQLALCHEMY_DATABASE_URI = _normalized_database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10MB max photo upload
    STRUCTURED_LOGGING = os.environ.get('STRUCTURED_LOGGING', '1') == '1'
    SENTRY_DSN = os.environ.get('SENTRY_DSN', '').strip()

    # Admin self-service creation
    ADMIN_CREATION_KEY = os.environ.get('ADMIN_CREATION_KEY', '')
    BLOCK_SUSPICIOUS_CLIENTS = os.environ.get('BLOCK_SUSPICIOUS_CLIENTS', '0') == '1'

    # Photo bucket (any S3-compatible endpoint)
    STORAGE_BUCKET = os.environ.get('STORAGE_BUCKET', 'photos-guia-tnn').strip()
    STORAGE_ENDPOINT_URL = os.environ.get('STORAGE_ENDPOINT_URL', '').strip()
    STORAGE_REGION = os.environ.get('STORAGE_REGION', '').strip()
    STORAGE_ACCESS_KEY_ID = os.environ.get('STORAGE_ACCESS_KEY_ID', '').strip()
    STORAGE_SECRET_ACCESS_KEY = os.environ.get('STORAGE_SECRET_ACCESS_KEY', '').strip()
    STORAGE_PUBLIC_BASE_URL = os.environ.get('STORAGE_PUBLIC_BASE_URL', '').strip()
    STORAGE_CACHE_CONTROL = os.environ.get('STORAGE_CACHE_CONTROL', 'max-age=3600')

    PHOTOS_PAGE_SIZE = int(os.environ.get('PHOTOS_PAGE_SIZE', '10'))
    PHOTOS_MAX_PAGE_SIZE = 100


class DevelopmentConfig(BaseConfig):
    ENV_NAME = 'development'


class ProductionConfig(BaseConfig):
    ENV_NAME = 'production'


def get_config():
    env = os.environ.get('FLASK_ENV', '').strip().lower()
    if env == 'production' or os.environ.get('PRODUCTION', '').strip() == '1':
        return ProductionConfig
    return DevelopmentConfig


def validate_runtime(app_config) -> None:
    """Fail fast for production misconfiguration."""
    env_name = app_config.get('ENV_NAME', 'development')
    if env_name != 'production':
        return

    secret = app_config.get('SECRET_KEY') or ''
    weak_values = {'dev-key-change-in-production', 'changeme', 'secret', 'default'}
    if len(secret) < 16 or secret.lower() in weak_values:
        raise RuntimeError('Invalid SECRET_KEY for production. Set a strong random secret.')

    admin_key = app_config.get('ADMIN_CREATION_KEY') or ''
    if len(admin_key) < 16:
        raise RuntimeError('ADMIN_CREATION_KEY must be at least 16 characters in production.')


# Photo uploads
ALLOWED_IMAGE_EXTENSIONS = {'jpg', 'jpeg', 'png', 'gif', 'webp'}
DEFAULT_PHOTO_CATEGORY = 'general'

# Quick navigation cards on the home page
QUICK_NAV_CARDS = [
    {'key': 'comercios', 'href': '/comercios', 'color': 'blue'},
    {'key': 'eventos', 'href': '/eventos', 'color': 'green'},
    {'key': 'fotos', 'href': '/fotos', 'color': 'amber'},
]
