"""
Config Service
Resolves the Daraja credential bundle for a single request
"""

import os
from typing import Mapping, NamedTuple, Optional

from paystore.extensions import db
from paystore.errors import ConfigurationError
from paystore.models import AppConfigDocument
from paystore.utils.logger import get_logger

logger = get_logger(__name__)

FALLBACK_CONFIG_KEY = 'daraja'

# Bundle field -> environment variable
ENV_KEYS = {
    'consumer_key': 'DARAJA_CONSUMER_KEY',
    'consumer_secret': 'DARAJA_CONSUMER_SECRET',
    'passkey': 'DARAJA_PASSKEY',
    'paybill': 'DARAJA_PAYBILL',
    'oauth_url': 'DARAJA_OAUTHURL',
    'stk_url': 'DARAJA_STKURL',
    'callback_url': 'DARAJA_CALLBACKURL',
}

# Bundle field -> field name in the app_config/daraja document
DOCUMENT_KEYS = {
    'consumer_key': 'consumerKey',
    'consumer_secret': 'consumerSecret',
    'passkey': 'passkey',
    'paybill': 'paybill',
    'oauth_url': 'oauthurl',
    'stk_url': 'stkurl',
    'callback_url': 'callbackurl',
}


class DarajaCredentials(NamedTuple):
    consumer_key: str
    consumer_secret: str
    passkey: str
    paybill: str
    oauth_url: str
    stk_url: str
    callback_url: str


def _bundle_from(source: Mapping, keys: Mapping[str, str]) -> Optional[DarajaCredentials]:
    """Build a bundle only when every field is present; never a partial one."""
    values = {field: source.get(name) for field, name in keys.items()}
    if not all(values.values()):
        return None
    values['paybill'] = str(values['paybill'])
    return DarajaCredentials(**values)


class ConfigService:
    """Credential resolution: environment first, then the fallback document"""

    @staticmethod
    def load_from_document() -> Optional[DarajaCredentials]:
        """
        Read the fallback credentials from the app_config/daraja document

        Returns:
            DarajaCredentials, or None if the document is absent or incomplete
        """
        document = db.session.get(AppConfigDocument, FALLBACK_CONFIG_KEY)
        if document is None or not isinstance(document.data, dict):
            return None
        return _bundle_from(document.data, DOCUMENT_KEYS)

    @staticmethod
    def get_daraja_config(environ: Optional[Mapping[str, str]] = None) -> DarajaCredentials:
        """
        Resolve the Daraja credentials

        Args:
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Complete DarajaCredentials

        Raises:
            ConfigurationError: if neither source is complete
        """
        environ = os.environ if environ is None else environ

        credentials = _bundle_from(environ, ENV_KEYS)
        if credentials:
            return credentials

        credentials = ConfigService.load_from_document()
        if credentials:
            logger.debug('Daraja credentials resolved from app_config/%s', FALLBACK_CONFIG_KEY)
            return credentials

        raise ConfigurationError(
            'Daraja config missing. Set the DARAJA_* environment secrets '
            f'or populate app_config/{FALLBACK_CONFIG_KEY} in the document store.'
        )
