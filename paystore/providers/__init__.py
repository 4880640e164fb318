from flask import current_app

from paystore.providers.mpesa_provider import DarajaClient, OAUTH_TIMEOUT, STK_TIMEOUT


def get_daraja_client(credentials) -> DarajaClient:
    """
    Build a Daraja client for one resolved credential bundle.

    Args:
        credentials: DarajaCredentials from ConfigService

    Returns:
        DarajaClient using the timeouts from Flask app config
    """
    return DarajaClient(
        credentials,
        oauth_timeout=current_app.config.get('DARAJA_OAUTH_TIMEOUT', OAUTH_TIMEOUT),
        stk_timeout=current_app.config.get('DARAJA_STK_TIMEOUT', STK_TIMEOUT),
    )
