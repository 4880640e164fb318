from flask import Flask, jsonify
from flask_cors import CORS

from paystore.extensions import celery_app, setup_store
from paystore.extentions.celery_extention import init_celery
from paystore.config import config


def create_app(config_name='development', overrides=None):
    """Application factory pattern"""
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    if overrides:
        app.config.update(overrides)

    # Initialize extensions
    setup_store(app)
    init_celery(celery_app, app)
    CORS(app, send_wildcard=True)

    from paystore.utils.logger import RequestLogger
    RequestLogger(app)

    # Register blueprints
    from paystore.api import register_blueprints
    register_blueprints(app)

    # Make sure the models are registered before create_all()
    from paystore import models  # noqa: F401

    # Error handlers
    register_error_handlers(app)

    return app


def register_error_handlers(app):
    """Register error handlers"""
    from paystore.errors import AppError

    @app.errorhandler(AppError)
    def app_error(error):
        return jsonify({'error': error.error, 'message': error.message}), error.status_code

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({'error': 'Bad request', 'message': str(error)}), 400

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not found', 'message': str(error)}), 404

    @app.errorhandler(413)
    def payload_too_large(error):
        return jsonify({'error': 'Payload too large', 'message': str(error)}), 413

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({'error': 'Internal server error'}), 500
