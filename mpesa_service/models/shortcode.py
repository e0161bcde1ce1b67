import uuid
from datetime import datetime
from decimal import Decimal

from mpesa_service.extensions import db
from mpesa_service.models.credential_set import CredentialSet
from mpesa_service.models.enums import Environment, ShortcodeType
from mpesa_service.utils.encryption import encrypt_value, decrypt_value


class ShortCode(db.Model):
    __tablename__ = 'mpesa_shortcodes'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    shortcode = db.Column(db.String(10), nullable=False, index=True)
    shortcode_type = db.Column(db.String(20), nullable=False, default=ShortcodeType.PAYBILL.value)
    business_name = db.Column(db.String(255))
    environment = db.Column(db.String(20), nullable=False, default=Environment.SANDBOX.value)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    # Encrypted credentials
    _consumer_key = db.Column('consumer_key', db.String(500))
    _consumer_secret = db.Column('consumer_secret', db.String(500))
    _passkey = db.Column('passkey', db.String(500))
    _initiator_password = db.Column('initiator_password', db.String(500))

    initiator_name = db.Column(db.String(100))

    # Callback URLs
    callback_url = db.Column(db.String(500), nullable=False)
    confirmation_url = db.Column(db.String(500))
    validation_url = db.Column(db.String(500))
    result_url = db.Column(db.String(500))
    queue_timeout_url = db.Column(db.String(500))

    min_amount = db.Column(db.Numeric(10, 2), default=Decimal('1.00'))
    max_amount = db.Column(db.Numeric(10, 2), default=Decimal('70000.00'))

    account_reference = db.Column(db.String(50))
    transaction_desc = db.Column(db.String(100), default='Payment')

    # Timestamps
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    @staticmethod
    def _decrypt(value):
        return decrypt_value(value) if value else None

    @staticmethod
    def _encrypt(value):
        return encrypt_value(value) if value else None

    @property
    def consumer_key(self):
        return self._decrypt(self._consumer_key)

    @consumer_key.setter
    def consumer_key(self, value):
        self._consumer_key = self._encrypt(value)

    @property
    def consumer_secret(self):
        return self._decrypt(self._consumer_secret)

    @consumer_secret.setter
    def consumer_secret(self, value):
        self._consumer_secret = self._encrypt(value)

    @property
    def passkey(self):
        return self._decrypt(self._passkey)

    @passkey.setter
    def passkey(self, value):
        self._passkey = self._encrypt(value)

    @property
    def initiator_password(self):
        return self._decrypt(self._initiator_password)

    @initiator_password.setter
    def initiator_password(self, value):
        self._initiator_password = self._encrypt(value)

    def to_credential_set(self) -> CredentialSet:
        """Snapshot this row, with secrets decrypted, for a single Daraja call."""
        return CredentialSet(
            id=self.id,
            shortcode=self.shortcode,
            shortcode_type=ShortcodeType(self.shortcode_type),
            environment=Environment(self.environment),
            api_key=self.consumer_key,
            api_secret=self.consumer_secret,
            passkey=self.passkey,
            business_name=self.business_name,
            callback_url=self.callback_url,
            confirmation_url=self.confirmation_url,
            validation_url=self.validation_url,
            result_url=self.result_url,
            queue_timeout_url=self.queue_timeout_url,
            initiator_name=self.initiator_name,
            initiator_password=self.initiator_password,
            min_amount=Decimal(self.min_amount) if self.min_amount is not None else None,
            max_amount=Decimal(self.max_amount) if self.max_amount is not None else None,
            is_active=bool(self.is_active),
            account_reference=self.account_reference,
            transaction_desc=self.transaction_desc,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'shortcode': self.shortcode,
            'shortcode_type': self.shortcode_type,
            'business_name': self.business_name,
            'environment': self.environment,
            'is_active': self.is_active,
            'callback_url': self.callback_url,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<ShortCode {self.shortcode} ({self.environment})>'
