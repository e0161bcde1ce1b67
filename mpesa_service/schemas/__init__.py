"""
Schemas Package
Marshmallow schemas for credential loading and Daraja response parsing
"""

from mpesa_service.schemas.credential_schema import CredentialSetSchema
from mpesa_service.schemas.daraja_schema import (
    TokenResponseSchema,
    StkPushResponseSchema,
    StkStatusResponseSchema,
    ConversationResponseSchema,
    QRCodeResponseSchema
)

__all__ = [
    'CredentialSetSchema',
    'TokenResponseSchema',
    'StkPushResponseSchema',
    'StkStatusResponseSchema',
    'ConversationResponseSchema',
    'QRCodeResponseSchema'
]
