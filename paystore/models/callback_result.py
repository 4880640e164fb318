from datetime import datetime, timezone

from paystore.extensions import db, JSONDocument


class CallbackResult(db.Model):
    __tablename__ = 'payments_results'

    # CheckoutRequestID when the callback carries one, otherwise a generated key
    id = db.Column(db.String(128), primary_key=True)

    raw = db.Column(JSONDocument)
    checkout_request_id = db.Column(db.String(128), index=True)
    result_code = db.Column(db.String(32))
    result_desc = db.Column(db.Text)

    received_at = db.Column(db.DateTime(timezone=True), nullable=False,
                            default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f'<CallbackResult {self.id} - {self.result_code}>'
