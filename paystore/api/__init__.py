"""
API Blueprints Package
Registers all API blueprints
"""

from paystore.api.payments import payments_bp
from paystore.api.webhooks import webhooks_bp
from paystore.api.health import health_bp

# Export blueprints
__all__ = [
    'payments_bp',
    'webhooks_bp',
    'health_bp',
    'register_blueprints'
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app

    Routes sit at the root so the Daraja CallBackURL stays /darajaCallback.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(payments_bp)
    app.register_blueprint(webhooks_bp)
    app.register_blueprint(health_bp)
