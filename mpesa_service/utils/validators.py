"""
Validators
Phone, amount and URL checks shared by the Daraja request builders
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from marshmallow import ValidationError, validate

# Safaricom MSISDNs in international form: 254 followed by 7XXXXXXXX or 1XXXXXXXX
_MSISDN_RE = re.compile(r'^254[17]\d{8}$')
_HTTP_URL = validate.URL(relative=False, schemes={'http', 'https'}, require_tld=False)


def normalise_phone(phone) -> str:
    """
    Rewrite a Kenyan number into the 2547XXXXXXXX form Daraja expects.

    0712345678, +254712345678, 712345678 and "254 712 345 678" all become
    254712345678. Anything else is returned stripped but otherwise untouched.
    """
    if not phone:
        return ""

    digits = re.sub(r'[\s\-()]', '', str(phone))
    digits = digits[1:] if digits.startswith('+') else digits

    if digits.startswith('0'):
        return '254' + digits[1:]
    if digits.startswith('254'):
        return digits
    return '254' + digits


def validate_phone_number(phone: str) -> Tuple[bool, Optional[str]]:
    """
    Check an already normalised number

    Returns:
        (is_valid, error_message)
    """
    if not phone:
        return False, "Phone number is required"
    if not phone.isdigit():
        return False, "Phone number must contain digits only"
    if not _MSISDN_RE.match(phone):
        return False, f"Phone number {phone} is not a valid Kenyan mobile number (2547XXXXXXXX)"
    return True, None


def to_amount(value) -> Decimal:
    """
    Convert a money value to a two-place Decimal.

    Raises:
        ValueError: if the value is not numeric or not positive
    """
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, float, str)):
        raise ValueError(f"Amount must be a number, got {type(value).__name__}")

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount format: {value!r}") from e

    if not amount.is_finite() or amount <= 0:
        raise ValueError("Amount must be greater than 0")

    return amount.quantize(Decimal("0.01"))


def is_valid_url(url: Optional[str]) -> bool:
    """True for absolute http(s) URLs with a host."""
    if not url:
        return False
    try:
        _HTTP_URL(url)
    except ValidationError:
        return False
    return True
