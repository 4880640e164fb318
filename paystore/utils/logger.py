"""
Logging Configuration
Centralized logging setup for the STK bridge
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

LOG_DIR = 'logs'
LOG_FILE = 'paystore.log'


def _log_level() -> int:
    return getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper(), logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        level = _log_level()
        logger.setLevel(level)

        # Console handler
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(
            '%(levelname)s - %(name)s - %(message)s'
        ))
        logger.addHandler(console_handler)

        # File handler (if logs directory can be used)
        try:
            os.makedirs(LOG_DIR, exist_ok=True)
        except OSError:
            pass

        if os.path.isdir(LOG_DIR) and os.access(LOG_DIR, os.W_OK):
            file_handler = RotatingFileHandler(
                os.path.join(LOG_DIR, LOG_FILE),
                maxBytes=10485760,  # 10MB
                backupCount=10
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            logger.addHandler(file_handler)

    return logger


class RequestLogger:
    """Middleware to log all requests"""

    def __init__(self, app=None):
        self.app = app
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize request logging"""

        @app.after_request
        def log_response(response):
            from flask import request
            logger = get_logger('paystore.request')
            logger.info(
                f'{request.method} {request.path} - '
                f'Status: {response.status_code} - '
                f'IP: {request.remote_addr}'
            )
            return response
