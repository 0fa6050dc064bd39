# pet_ledger/core/config.py

import os
from datetime import timedelta

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).lower() in ('true', '1', 'yes')


class Config:
    """Settings shared by every environment."""
    # signs the access/refresh tokens issued by /api/auth/session
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=14)

    # 'firestore' in production, 'json' for local development
    DATA_BACKEND = os.getenv('DATA_BACKEND', 'firestore')
    DATA_DIR = os.getenv('DATA_DIR', os.path.join(BASE_DIR, 'data'))

    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID', 'my-pet-ledger')
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

    # When False, identity-provider tokens are decoded without signature checks
    VERIFY_ID_TOKENS = _env_flag('VERIFY_ID_TOKENS', 'true')


class DevelopmentConfig(Config):
    """Local development: JSON files and unverified ID tokens."""
    DEBUG = True
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'dev-secret-key')
    DATA_BACKEND = os.getenv('DATA_BACKEND', 'json')
    VERIFY_ID_TOKENS = _env_flag('VERIFY_ID_TOKENS', 'false')


class TestingConfig(Config):
    """Test settings. DATA_DIR is normally overridden with a temp directory."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = 'test-secret-key-for-the-pet-ledger-suite'
    DATA_BACKEND = 'json'
    VERIFY_ID_TOKENS = False


class ProductionConfig(Config):
    DEBUG = False


# FLASK_ENV (or the name passed to create_app) selects one of these
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
