from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

from paystore.extentions.celery_extention import create_celery

db = SQLAlchemy()
celery_app = create_celery()

# Document payloads: JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONDocument = JSON().with_variant(JSONB(), 'postgresql')


def setup_store(app):
    """
    Bind the document store to the app once per process.

    Safe to call repeatedly; later calls return the already-bound handle.
    """
    if 'sqlalchemy' not in app.extensions:
        db.init_app(app)
    return db
