"""
Health Check Endpoints
"""

from datetime import datetime, timezone

from flask import Blueprint, jsonify
from sqlalchemy import text

from paystore.extensions import db

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Basic health check endpoint

    Returns:
        200 if the document store answers
        503 otherwise
    """
    checks = {}
    healthy = True

    try:
        db.session.execute(text('SELECT 1'))
        checks['database'] = {
            'status': 'healthy',
            'message': 'Database connection OK'
        }
    except Exception as e:
        db.session.rollback()
        checks['database'] = {
            'status': 'unhealthy',
            'message': f'Database error: {e.__class__.__name__}'
        }
        healthy = False

    return jsonify({
        'ok': healthy,
        'status': 'healthy' if healthy else 'unhealthy',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'checks': checks
    }), 200 if healthy else 503


@health_bp.route('/', methods=['GET'])
def index():
    return 'PayStore STK backend running', 200, {'Content-Type': 'text/plain; charset=utf-8'}
