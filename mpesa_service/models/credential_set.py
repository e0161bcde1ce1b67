from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from mpesa_service.models.enums import Environment, ShortcodeType
from mpesa_service.utils.validators import is_valid_url


@dataclass(frozen=True)
class CredentialSet:
    """
    Immutable snapshot of one shortcode's Daraja configuration.

    Handed to the token manager, request builder and gateway for a single
    call; stores produce a fresh snapshot on every lookup.
    """

    id: str
    shortcode: str
    api_key: str
    api_secret: str
    callback_url: str
    shortcode_type: ShortcodeType = ShortcodeType.PAYBILL
    environment: Environment = Environment.SANDBOX
    passkey: Optional[str] = None
    business_name: Optional[str] = None
    confirmation_url: Optional[str] = None
    validation_url: Optional[str] = None
    result_url: Optional[str] = None
    queue_timeout_url: Optional[str] = None
    initiator_name: Optional[str] = None
    initiator_password: Optional[str] = None
    min_amount: Optional[Decimal] = Decimal("1.00")
    max_amount: Optional[Decimal] = Decimal("70000.00")
    is_active: bool = True
    account_reference: Optional[str] = None
    transaction_desc: Optional[str] = "Payment"

    @property
    def is_sandbox(self) -> bool:
        return self.environment == Environment.SANDBOX

    @property
    def stk_push_enabled(self) -> bool:
        return bool(self.passkey and self.passkey.strip())

    def is_amount_range_valid(self) -> bool:
        if self.min_amount is None or self.max_amount is None:
            return True
        return self.max_amount > self.min_amount

    def validation_errors(self) -> List[str]:
        """Return every configuration problem; empty when the set is usable."""
        errors = []

        if not self.shortcode:
            errors.append("shortcode is required")
        if not self.api_key or not self.api_secret:
            errors.append("api_key and api_secret are required")
        if not self.is_amount_range_valid():
            errors.append(
                f"max_amount ({self.max_amount}) must be greater than min_amount ({self.min_amount})"
            )
        if not is_valid_url(self.callback_url):
            errors.append("callback_url must be an absolute http(s) URL")

        for name in ("confirmation_url", "validation_url", "result_url", "queue_timeout_url"):
            value = getattr(self, name)
            if value and not is_valid_url(value):
                errors.append(f"{name} must be an absolute http(s) URL")

        return errors

    def __repr__(self):
        return f'<CredentialSet {self.id} shortcode={self.shortcode} env={self.environment.value}>'
