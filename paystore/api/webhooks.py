"""
Callback API Endpoints
Receives asynchronous STK push results from Daraja
"""

from flask import Blueprint, request

from paystore.services.callback_service import CallbackService
from paystore.utils.logger import get_logger

webhooks_bp = Blueprint('webhooks', __name__)
logger = get_logger(__name__)


def _plain(text, status):
    return text, status, {'Content-Type': 'text/plain; charset=utf-8'}


@webhooks_bp.route('/darajaCallback', methods=['POST', 'OPTIONS'])
def daraja_callback():
    """
    Receive a Daraja STK callback

    Body:
        Any of
            {"Body": {"stkCallback": {...}}}
            {"StkCallback": {...}} / {"stkCallback": {...}}
            {...}  (already flat)

    Returns:
        200 "OK" whenever the callback was stored, matched or not, so
        Daraja stops re-sending it; 500 "error" asks Daraja to retry
    """
    if request.method == 'OPTIONS':
        return '', 204

    try:
        body = request.get_json(silent=True)
        if body is None:
            body = {}

        CallbackService.receive_callback(body)
        return _plain('OK', 200)

    except Exception:
        logger.exception('darajaCallback error')
        return _plain('error', 500)
