from datetime import datetime, timezone
from typing import Any, Dict, Optional

from paystore.extensions import db
from paystore.models import PendingTransaction, TransactionStatus
from paystore.providers import get_daraja_client
from paystore.providers.mpesa_provider import (
    normalize_phone_for_daraja,
    utc_timestamp,
    extract_checkout_request_id,
)
from paystore.services.config_service import ConfigService
from paystore.utils.logger import get_logger

logger = get_logger(__name__)


class PaymentService:
    """STK push initiation"""

    @staticmethod
    def initiate_stk_push(
            phone: str,
            amount: int,
            uid: Optional[str] = None,
            account_ref: Optional[str] = None,
            description: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Submit an STK push and track it as a pending transaction

        The pending record is committed with status 'initiated' before the
        push request goes out, then updated with whatever Daraja answered.

        Args:
            phone: Payer phone in any supported local or international format
            amount: Positive integer amount
            uid: Owning user id, if known
            account_ref: AccountReference shown to the payer (defaults to the phone)
            description: TransactionDesc (defaults to "Payment")

        Returns:
            Dict with ok, status, data and checkoutRequestId

        Raises:
            ValidationError: unsupported phone format
            ConfigurationError: no complete Daraja credentials
            PaymentProviderError: token acquisition or transport failure
        """
        msisdn = normalize_phone_for_daraja(phone)

        credentials = ConfigService.get_daraja_config()
        client = get_daraja_client(credentials)
        token = client.obtain_token()

        timestamp = utc_timestamp()
        stk_body = client.build_stk_payload(
            phone=msisdn,
            amount=amount,
            timestamp=timestamp,
            account_reference=account_ref,
            transaction_desc=description
        )

        pending = PendingTransaction(
            uid=uid or None,
            msisdn=msisdn,
            amount=amount,
            checkout_request_id=None,
            status=TransactionStatus.INITIATED.value,
            request_body=stk_body
        )
        db.session.add(pending)
        db.session.commit()

        response = client.submit_stk_push(token, stk_body)
        checkout_request_id = extract_checkout_request_id(response.body)

        pending.checkout_request_id = checkout_request_id
        pending.status = (TransactionStatus.PENDING if response.ok else TransactionStatus.FAILED).value
        pending.response_status = response.status_code
        pending.response_body = response.body
        pending.updated_at = datetime.now(timezone.utc)
        db.session.commit()

        logger.info(
            f'STK push {pending.id} -> HTTP {response.status_code}, '
            f'status={pending.status}, checkoutRequestId={checkout_request_id}'
        )

        return {
            'ok': True,
            'status': response.status_code,
            'data': response.body,
            'checkoutRequestId': checkout_request_id
        }

    @staticmethod
    def get_pending_by_checkout_id(checkout_request_id: str) -> Optional[PendingTransaction]:
        """
        Find the pending transaction for a CheckoutRequestID

        At most one match is expected; the oldest wins if there are several.
        """
        return PendingTransaction.query.filter_by(
            checkout_request_id=checkout_request_id
        ).order_by(PendingTransaction.created_at).first()
