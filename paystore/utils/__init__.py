"""
Utils Package
Utility functions and helpers
"""

from paystore.utils.logger import get_logger, RequestLogger
from paystore.utils.validators import parse_amount, is_blank

__all__ = [
    'get_logger',
    'RequestLogger',
    'parse_amount',
    'is_blank',
]
