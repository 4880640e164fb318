import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default='false'):
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key')

    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'postgresql://localhost/paystore_dev')
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Inbound JSON bodies are capped at 1 MB
    MAX_CONTENT_LENGTH = 1024 * 1024

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Daraja call timeouts (seconds). Credentials are resolved per request
    # by ConfigService, not from here.
    DARAJA_OAUTH_TIMEOUT = 15
    DARAJA_STK_TIMEOUT = 20

    # Celery
    CELERY_BROKER_URL = os.getenv('CELERY_BROKER_URL', 'redis://localhost:6379/0')
    CELERY_RESULT_BACKEND = os.getenv('CELERY_RESULT_BACKEND', 'redis://localhost:6379/0')
    CELERY_TASK_ALWAYS_EAGER = False

    # Re-run the pending lookup for callbacks that beat their CheckoutRequestID
    DEFERRED_RECONCILIATION_ENABLED = _env_flag('DEFERRED_RECONCILIATION_ENABLED')
    DEFERRED_RECONCILIATION_DELAY = int(os.getenv('DEFERRED_RECONCILIATION_DELAY', 30))
    DEFERRED_RECONCILIATION_MAX_ATTEMPTS = int(os.getenv('DEFERRED_RECONCILIATION_MAX_ATTEMPTS', 5))


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    CELERY_BROKER_URL = 'memory://'
    CELERY_RESULT_BACKEND = 'cache+memory://'
    CELERY_TASK_ALWAYS_EAGER = True
    DEFERRED_RECONCILIATION_ENABLED = False


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
