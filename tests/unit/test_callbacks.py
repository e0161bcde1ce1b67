"""
Unit Tests for callback acknowledgments and shared validators
"""

from decimal import Decimal

import pytest

from mpesa_service.daraja.callbacks import (
    RESULT_CODE_ERROR,
    RESULT_CODE_SUCCESS,
    ack_response,
    callback_ack,
)
from mpesa_service.utils.validators import is_valid_url, normalise_phone, to_amount, validate_phone_number


class TestCallbackAck:

    def test_success(self):
        assert callback_ack() == {"ResultCode": "00000000", "ResultDesc": "Success"}

    def test_error(self):
        assert callback_ack(False, "Could not process") == {
            "ResultCode": RESULT_CODE_ERROR,
            "ResultDesc": "Could not process",
        }

    def test_response_is_always_200(self, app):
        for success in (True, False):
            response, status = ack_response(success)
            assert status == 200
            assert response.get_json()["ResultCode"] == (RESULT_CODE_SUCCESS if success else RESULT_CODE_ERROR)


class TestValidators:

    @pytest.mark.parametrize("raw, expected", [
        ("254712345678", "254712345678"),
        ("+254712345678", "254712345678"),
        ("0712345678", "254712345678"),
        ("712345678", "254712345678"),
        ("254-712-345-678", "254712345678"),
    ])
    def test_normalise_phone(self, raw, expected):
        assert normalise_phone(raw) == expected

    def test_normalise_phone_empty(self):
        assert normalise_phone("") == ""

    @pytest.mark.parametrize("phone, valid", [
        ("254712345678", True),
        ("254112345678", True),
        ("25471234567", False),
        ("254812345678", False),
        ("2547123abc78", False),
        ("", False),
    ])
    def test_validate_kenyan_phone(self, phone, valid):
        assert validate_phone_number(phone)[0] is valid

    @pytest.mark.parametrize("value, expected", [
        (100, Decimal("100.00")),
        (99.5, Decimal("99.50")),
        ("10.006", Decimal("10.01")),
        (Decimal("1"), Decimal("1.00")),
    ])
    def test_to_amount(self, value, expected):
        assert to_amount(value) == expected

    @pytest.mark.parametrize("value", [0, -1, "ten", None, [1]])
    def test_to_amount_rejects(self, value):
        with pytest.raises(ValueError):
            to_amount(value)

    @pytest.mark.parametrize("url, valid", [
        ("https://example.com/cb", True),
        ("http://localhost:8000", True),
        ("example.com", False),
        ("https://exa mple.com/cb", False),
        ("https://example.com/c b", False),
        ("ftp://example.com/cb", False),
        (None, False),
    ])
    def test_is_valid_url(self, url, valid):
        assert is_valid_url(url) is valid
