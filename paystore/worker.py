"""
Celery worker entrypoint

    celery -A paystore.worker worker

Needs the same STORE_CREDENTIALS_JSON as the web server.
"""

from paystore.extensions import celery_app
from paystore.server import build_app

app = build_app()

# Register task modules with the worker
import paystore.tasks.reconcile_callback_task  # noqa: E402,F401

celery = celery_app
