import uuid

from marshmallow import Schema, fields, validate, post_load, ValidationError, EXCLUDE

from mpesa_service.models.credential_set import CredentialSet
from mpesa_service.models.enums import Environment, ShortcodeType


class CredentialSetSchema(Schema):
    """Load shortcode configuration mappings into validated CredentialSet snapshots"""

    class Meta:
        unknown = EXCLUDE

    id = fields.String(load_default=lambda: str(uuid.uuid4()))
    shortcode = fields.String(
        required=True,
        validate=validate.Regexp(r'^[0-9]{5,10}$', error='Shortcode must be 5-10 digits')
    )
    shortcode_type = fields.Enum(ShortcodeType, by_value=True, load_default=ShortcodeType.PAYBILL)
    environment = fields.Enum(Environment, by_value=True, load_default=Environment.SANDBOX)
    business_name = fields.String(load_default=None, allow_none=True)
    api_key = fields.String(required=True)
    api_secret = fields.String(required=True)
    passkey = fields.String(load_default=None, allow_none=True)
    callback_url = fields.String(required=True)
    confirmation_url = fields.String(load_default=None, allow_none=True)
    validation_url = fields.String(load_default=None, allow_none=True)
    result_url = fields.String(load_default=None, allow_none=True)
    queue_timeout_url = fields.String(load_default=None, allow_none=True)
    initiator_name = fields.String(load_default=None, allow_none=True)
    initiator_password = fields.String(load_default=None, allow_none=True)
    min_amount = fields.Decimal(places=2, load_default=None, allow_none=True)
    max_amount = fields.Decimal(places=2, load_default=None, allow_none=True)
    is_active = fields.Boolean(load_default=True)
    account_reference = fields.String(load_default=None, allow_none=True)
    transaction_desc = fields.String(load_default='Payment', allow_none=True)

    @post_load
    def make_credential_set(self, data, **kwargs):
        credential = CredentialSet(**data)
        errors = credential.validation_errors()
        if errors:
            raise ValidationError(errors)
        return credential
