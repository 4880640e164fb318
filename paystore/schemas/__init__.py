"""
Schemas Package
Marshmallow schemas for request validation
"""

from paystore.schemas.payment_schema import StkPushRequestSchema

__all__ = [
    'StkPushRequestSchema',
]
