"""
Daraja wire schemas

Marshmallow schemas that turn Daraja's PascalCase JSON into the typed
response models. Unknown keys are dropped; codes are normalised to strings
because Daraja sends them both as "0" and 0.
"""

from marshmallow import Schema, fields, EXCLUDE, post_load, pre_load

from mpesa_service.models.responses import (
    TokenResponse,
    StkPushResponse,
    StkStatusResponse,
    ConversationResponse,
    QRCodeResponse,
)


def _as_str(value):
    return None if value is None else str(value)


class DarajaSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class TokenResponseSchema(DarajaSchema):
    """OAuth token response; expires_in arrives as a string ("3599")."""
    access_token = fields.String(load_default=None, allow_none=True)
    expires_in = fields.Integer(load_default=None, allow_none=True)
    token_type = fields.String(load_default=None, allow_none=True)

    @post_load
    def make_token(self, data, **kwargs):
        return TokenResponse(**data)


class StkPushResponseSchema(DarajaSchema):
    merchant_request_id = fields.String(data_key='MerchantRequestID', load_default=None, allow_none=True)
    checkout_request_id = fields.String(data_key='CheckoutRequestID', load_default=None, allow_none=True)
    response_code = fields.Raw(data_key='ResponseCode', load_default=None, allow_none=True)
    response_description = fields.String(data_key='ResponseDescription', load_default=None, allow_none=True)
    customer_message = fields.String(data_key='CustomerMessage', load_default=None, allow_none=True)

    @post_load
    def make_response(self, data, **kwargs):
        data['response_code'] = _as_str(data['response_code'])
        return StkPushResponse(**data)


class StkStatusResponseSchema(DarajaSchema):
    merchant_request_id = fields.String(data_key='MerchantRequestID', load_default=None, allow_none=True)
    checkout_request_id = fields.String(data_key='CheckoutRequestID', load_default=None, allow_none=True)
    response_code = fields.Raw(data_key='ResponseCode', load_default=None, allow_none=True)
    response_description = fields.String(data_key='ResponseDescription', load_default=None, allow_none=True)
    result_code = fields.Raw(data_key='ResultCode', load_default=None, allow_none=True)
    result_desc = fields.String(data_key='ResultDesc', load_default=None, allow_none=True)

    @post_load
    def make_response(self, data, **kwargs):
        data['response_code'] = _as_str(data['response_code'])
        data['result_code'] = _as_str(data['result_code'])
        return StkStatusResponse(**data)


class ConversationResponseSchema(DarajaSchema):
    conversation_id = fields.String(data_key='ConversationID', load_default=None, allow_none=True)
    originator_conversation_id = fields.String(
        data_key='OriginatorConversationID', load_default=None, allow_none=True
    )
    response_code = fields.Raw(data_key='ResponseCode', load_default=None, allow_none=True)
    response_description = fields.String(data_key='ResponseDescription', load_default=None, allow_none=True)

    @pre_load
    def fix_originator_key(self, data, **kwargs):
        # Some Daraja endpoints misspell the key as "OriginatorCoversationID"
        if isinstance(data, dict) and 'OriginatorCoversationID' in data \
                and 'OriginatorConversationID' not in data:
            data = dict(data)
            data['OriginatorConversationID'] = data.pop('OriginatorCoversationID')
        return data

    @post_load
    def make_response(self, data, **kwargs):
        data['response_code'] = _as_str(data['response_code'])
        return ConversationResponse(**data)


class QRCodeResponseSchema(DarajaSchema):
    response_code = fields.Raw(data_key='ResponseCode', load_default=None, allow_none=True)
    request_id = fields.String(data_key='RequestID', load_default=None, allow_none=True)
    response_description = fields.String(data_key='ResponseDescription', load_default=None, allow_none=True)
    qr_code = fields.String(data_key='QRCode', load_default=None, allow_none=True)

    @post_load
    def make_response(self, data, **kwargs):
        data['response_code'] = _as_str(data['response_code'])
        return QRCodeResponse(**data)
