from flask import Blueprint, request, jsonify
from marshmallow import ValidationError as SchemaValidationError

from paystore.errors import ValidationError
from paystore.schemas.payment_schema import StkPushRequestSchema
from paystore.services.payment_service import PaymentService
from paystore.utils.logger import get_logger

payments_bp = Blueprint('payments', __name__)
logger = get_logger(__name__)

stk_push_schema = StkPushRequestSchema()


def _request_fields():
    """JSON body when it has content, then a form body, otherwise the query string"""
    body = request.get_json(silent=True)
    if isinstance(body, dict) and body:
        return body
    form = request.form.to_dict()
    if form:
        return form
    return request.args.to_dict()


@payments_bp.route('/stkPush', methods=['POST', 'OPTIONS'])
def stk_push():
    """
    Initiate an STK push

    Body (JSON or form-encoded) or query string:
        {
            "phone": "0712345678",
            "amount": "100",
            "uid": "user-123",          // optional
            "accountRef": "INV-42",     // optional, defaults to the phone
            "description": "Order 42"   // optional, defaults to "Payment"
        }

    Returns:
        200 {ok, status, data, checkoutRequestId} once Daraja answered,
        whatever its HTTP status; 400 on bad input; 502 on failures
        before an answer was obtained
    """
    if request.method == 'OPTIONS':
        return '', 204

    try:
        data = stk_push_schema.load(_request_fields())
    except SchemaValidationError as e:
        return jsonify({
            'error': 'phone and amount required' if '_schema' in e.messages else 'Invalid request',
            'details': e.messages
        }), 400

    try:
        result = PaymentService.initiate_stk_push(
            phone=data['phone'],
            amount=data['amount'],
            uid=data.get('uid'),
            account_ref=data.get('account_ref'),
            description=data.get('description')
        )
        return jsonify(result), 200

    except ValidationError as e:
        return jsonify({
            'error': e.message
        }), 400

    except Exception as e:
        logger.exception('stkPush error')
        return jsonify({
            'error': 'stk_push_failed',
            'details': str(e)
        }), 502
