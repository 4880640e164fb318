"""
Standalone Server
Validates the store credential, builds the app and serves it
"""

import json
import os
import sys

from paystore import create_app
from paystore.extensions import db
from paystore.utils.logger import get_logger

logger = get_logger(__name__)

STORE_CREDENTIALS_ENV = 'STORE_CREDENTIALS_JSON'
DEFAULT_PORT = 10000


class StartupError(Exception):
    """Raised when the server cannot start with the given environment"""
    pass


def load_store_credentials(environ=None) -> dict:
    """
    Parse the mandatory document-store credential

    The variable holds a JSON object such as
    {"database_uri": "postgresql://...", "engine_options": {"pool_size": 5}}

    Returns:
        Flask config overrides for the store

    Raises:
        StartupError: variable missing, malformed, or without database_uri
    """
    environ = os.environ if environ is None else environ

    raw = environ.get(STORE_CREDENTIALS_ENV)
    if not raw:
        raise StartupError(f'{STORE_CREDENTIALS_ENV} is not set')

    try:
        credentials = json.loads(raw)
    except ValueError as e:
        raise StartupError(f'Failed to parse {STORE_CREDENTIALS_ENV}: {e}') from e

    if not isinstance(credentials, dict) or not credentials.get('database_uri'):
        raise StartupError(f'{STORE_CREDENTIALS_ENV} must be a JSON object with a database_uri')

    engine_options = credentials.get('engine_options') or {}
    if not isinstance(engine_options, dict):
        raise StartupError(f'{STORE_CREDENTIALS_ENV} engine_options must be a JSON object')

    return {
        'SQLALCHEMY_DATABASE_URI': credentials['database_uri'],
        'SQLALCHEMY_ENGINE_OPTIONS': engine_options,
    }


def build_app(environ=None):
    """Create the app for the standalone server, exiting non-zero on bad startup config"""
    environ = os.environ if environ is None else environ

    try:
        overrides = load_store_credentials(environ)
    except StartupError as e:
        logger.error(f'{e}. Exiting.')
        sys.exit(1)

    app = create_app(environ.get('FLASK_ENV', 'production'), overrides=overrides)
    with app.app_context():
        db.create_all()
    return app


def main():
    app = build_app()
    port = int(os.getenv('PORT', DEFAULT_PORT))
    logger.info(f'Server listening on port {port}')
    app.run(host='0.0.0.0', port=port)
