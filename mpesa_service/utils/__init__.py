"""
Utils Package
Utility functions and helpers
"""

from mpesa_service.utils.encryption import encrypt_value, decrypt_value, get_encryption_key
from mpesa_service.utils.logger import get_logger, configure_app_logging
from mpesa_service.utils.validators import (
    validate_phone_number,
    normalise_phone,
    to_amount,
    is_valid_url
)

__all__ = [
    'encrypt_value',
    'decrypt_value',
    'get_encryption_key',
    'get_logger',
    'configure_app_logging',
    'validate_phone_number',
    'normalise_phone',
    'to_amount',
    'is_valid_url'
]
