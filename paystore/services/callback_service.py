"""
Callback Service
Persists Daraja STK callbacks and reconciles them with pending transactions
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from flask import current_app

from paystore.extensions import db
from paystore.models import CallbackResult, PendingTransaction, TransactionStatus
from paystore.services.payment_service import PaymentService
from paystore.utils.logger import get_logger

logger = get_logger(__name__)

# Candidate spellings per logical field, in priority order
CHECKOUT_REQUEST_ID_FIELDS = ('CheckoutRequestID', 'checkoutRequestID')
RESULT_CODE_FIELDS = ('ResultCode', 'resultCode')
RESULT_DESC_FIELDS = ('ResultDesc', 'resultDesc')


def extract_stk_callback(body: Any) -> Dict[str, Any]:
    """
    Locate the stkCallback payload inside an inbound body

    Checked in order: Body.stkCallback, StkCallback, stkCallback, then the
    body itself when it is already flat.
    """
    if not isinstance(body, dict):
        return {}

    envelope = body.get('Body')
    if isinstance(envelope, dict) and isinstance(envelope.get('stkCallback'), dict):
        return envelope['stkCallback']

    for key in ('StkCallback', 'stkCallback'):
        if isinstance(body.get(key), dict):
            return body[key]

    return body


def first_present(payload: Dict[str, Any], keys: Sequence[str], default=None):
    """Value of the first key that is present and neither None nor an empty string"""
    for key in keys:
        value = payload.get(key)
        if value is not None and value != '':
            return value
    return default


def is_success_code(result_code: Any) -> bool:
    """ResultCode 0 means success, whether sent as a number or as "0"."""
    if isinstance(result_code, bool):
        return False
    if isinstance(result_code, int):
        return result_code == 0
    if isinstance(result_code, str):
        return result_code.strip() == '0'
    return False


def _as_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


class CallbackService:
    """Service for Daraja STK callbacks"""

    @staticmethod
    def receive_callback(body: Any) -> CallbackResult:
        """
        Store an inbound callback and reconcile it when possible

        The callback result is always written, even when no pending
        transaction matches. A CheckoutRequestID keys the record, so a
        re-delivery overwrites it; without one every delivery gets a fresh key.

        Args:
            body: Parsed JSON body as sent by Daraja

        Returns:
            The stored CallbackResult
        """
        payload = extract_stk_callback(body)

        checkout_request_id = first_present(payload, CHECKOUT_REQUEST_ID_FIELDS)
        result_code = first_present(payload, RESULT_CODE_FIELDS)
        result_desc = first_present(payload, RESULT_DESC_FIELDS)

        checkout_request_id = _as_text(checkout_request_id)
        doc_id = checkout_request_id or uuid.uuid4().hex

        callback_result = db.session.merge(CallbackResult(
            id=doc_id,
            raw=body,
            checkout_request_id=checkout_request_id,
            result_code=_as_text(result_code),
            result_desc=_as_text(result_desc),
            received_at=datetime.now(timezone.utc)
        ))
        db.session.commit()

        if not checkout_request_id:
            logger.warning(f'Callback {doc_id} carries no CheckoutRequestID; stored unreconciled')
            return callback_result

        pending = CallbackService.reconcile(checkout_request_id, result_code, result_desc)

        if pending is None:
            logger.info(f'No pending transaction for CheckoutRequestID {checkout_request_id}')
            if current_app.config.get('DEFERRED_RECONCILIATION_ENABLED'):
                CallbackService.schedule_deferred_reconciliation(checkout_request_id)

        return callback_result

    @staticmethod
    def reconcile(
            checkout_request_id: str,
            result_code: Any,
            result_desc: Any
    ) -> Optional[PendingTransaction]:
        """
        Apply a callback outcome to its pending transaction

        Returns:
            The updated PendingTransaction, or None when nothing matches
        """
        pending = PaymentService.get_pending_by_checkout_id(checkout_request_id)
        if pending is None:
            return None

        pending.status = (
            TransactionStatus.SUCCESS if is_success_code(result_code) else TransactionStatus.FAILED
        ).value
        pending.result_code = _as_text(result_code)
        pending.result_desc = _as_text(result_desc)
        pending.callback_at = datetime.now(timezone.utc)
        db.session.commit()

        logger.info(f'Pending transaction {pending.id} reconciled: {pending.status}')
        return pending

    @staticmethod
    def schedule_deferred_reconciliation(checkout_request_id: str, attempt: int = 1):
        """Queue another lookup for a callback that arrived before its pending record was keyed"""
        from paystore.tasks.reconcile_callback_task import reconcile_callback

        reconcile_callback.apply_async(
            args=[checkout_request_id, attempt],
            countdown=current_app.config.get('DEFERRED_RECONCILIATION_DELAY', 30)
        )
