from flask import current_app

from paystore.extensions import celery_app, db
from paystore.models import CallbackResult
from paystore.services.callback_service import CallbackService
from paystore.utils.logger import get_logger

logger = get_logger(__name__)


@celery_app.task(name='reconcile_callback_task')
def reconcile_callback(checkout_request_id: str, attempt: int = 1) -> bool:
    """
    Retry reconciliation of a stored callback with its pending transaction

    Args:
        checkout_request_id: Key of the stored CallbackResult
        attempt: 1-based attempt counter

    Returns:
        True if a pending transaction was updated, False otherwise
    """
    callback_result = db.session.get(CallbackResult, checkout_request_id)

    if not callback_result:
        logger.warning(f'Deferred reconciliation: callback {checkout_request_id} not found')
        return False

    pending = CallbackService.reconcile(
        checkout_request_id,
        callback_result.result_code,
        callback_result.result_desc
    )
    if pending is not None:
        return True

    max_attempts = current_app.config.get('DEFERRED_RECONCILIATION_MAX_ATTEMPTS', 5)
    if attempt >= max_attempts:
        logger.warning(
            f'Deferred reconciliation gave up on {checkout_request_id} after {attempt} attempts'
        )
        return False

    CallbackService.schedule_deferred_reconciliation(checkout_request_id, attempt + 1)
    return False
