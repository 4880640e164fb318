"""
Pytest Configuration and Fixtures
"""
import pytest

from paystore import create_app
from paystore.extensions import db as _db
from paystore.models import PendingTransaction, AppConfigDocument
from paystore.services.config_service import ENV_KEYS


DARAJA_ENV = {
    'DARAJA_CONSUMER_KEY': 'test_consumer_key',
    'DARAJA_CONSUMER_SECRET': 'test_consumer_secret',
    'DARAJA_PASSKEY': 'test_passkey',
    'DARAJA_PAYBILL': '174379',
    'DARAJA_OAUTHURL': 'https://sandbox.safaricom.co.ke/oauth/v1/generate?grant_type=client_credentials',
    'DARAJA_STKURL': 'https://sandbox.safaricom.co.ke/mpesa/stkpush/v1/processrequest',
    'DARAJA_CALLBACKURL': 'https://example.com/darajaCallback',
}


@pytest.fixture(scope='session')
def app():
    """Create application for testing"""
    app = create_app('testing')

    # Establish application context
    ctx = app.app_context()
    ctx.push()

    yield app

    ctx.pop()


@pytest.fixture(scope='function')
def db(app):
    """Fresh schema for every test"""
    _db.create_all()

    yield _db

    _db.session.remove()
    _db.drop_all()


@pytest.fixture(scope='function')
def session(db):
    return db.session


@pytest.fixture(scope='function')
def client(app, db):
    """Create a test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def daraja_env(monkeypatch):
    """Complete set of DARAJA_* environment secrets"""
    for name, value in DARAJA_ENV.items():
        monkeypatch.setenv(name, value)
    return dict(DARAJA_ENV)


@pytest.fixture(scope='function')
def clean_env(monkeypatch):
    """No DARAJA_* environment secrets at all"""
    for name in ENV_KEYS.values():
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope='function')
def fallback_config(session):
    """The app_config/daraja fallback document"""
    document = AppConfigDocument(
        key='daraja',
        data={
            'consumerKey': 'doc_consumer_key',
            'consumerSecret': 'doc_consumer_secret',
            'passkey': 'doc_passkey',
            'paybill': 600000,
            'oauthurl': 'https://api.safaricom.co.ke/oauth/v1/generate?grant_type=client_credentials',
            'stkurl': 'https://api.safaricom.co.ke/mpesa/stkpush/v1/processrequest',
            'callbackurl': 'https://example.com/darajaCallback',
        }
    )
    session.add(document)
    session.commit()
    return document


@pytest.fixture(scope='function')
def sample_pending(session):
    """A pending transaction waiting for its callback"""
    pending = PendingTransaction(
        uid='user-1',
        msisdn='254712345678',
        amount=100,
        checkout_request_id='abc123',
        status='pending',
        request_body={'Amount': 100}
    )
    session.add(pending)
    session.commit()
    return pending
