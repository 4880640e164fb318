import uuid
from datetime import datetime, timezone
from enum import Enum

from paystore.extensions import db, JSONDocument


def _utcnow():
    return datetime.now(timezone.utc)


class TransactionStatus(str, Enum):
    INITIATED = 'initiated'
    PENDING = 'pending'
    SUCCESS = 'success'
    FAILED = 'failed'


class PendingTransaction(db.Model):
    __tablename__ = 'payments_pending'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Payer
    uid = db.Column(db.String(128), index=True)
    msisdn = db.Column(db.String(20), nullable=False)
    amount = db.Column(db.Integer, nullable=False)

    # Join key for the asynchronous callback
    checkout_request_id = db.Column(db.String(128), index=True)
    status = db.Column(db.String(20), nullable=False, default=TransactionStatus.INITIATED.value)

    # Snapshots
    request_body = db.Column(JSONDocument)
    response_status = db.Column(db.Integer)
    response_body = db.Column(JSONDocument)

    # Callback outcome
    result_code = db.Column(db.String(32))
    result_desc = db.Column(db.Text)

    # Timestamps
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True))
    callback_at = db.Column(db.DateTime(timezone=True))

    def __repr__(self):
        return f'<PendingTransaction {self.id} - {self.status}>'
