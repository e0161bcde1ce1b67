"""
Pytest Configuration and Fixtures
"""
import json
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import Mock

import fakeredis
import pytest

from mpesa_service import create_app
from mpesa_service.extensions import db as _db
from mpesa_service.models import CredentialSet, Environment, ShortcodeType


def mock_http_response(json_data, status_code: int = 200) -> Mock:
    """Return a mock requests.Response whose .json() returns json_data."""
    resp = Mock()
    resp.ok = 200 <= status_code < 400
    resp.status_code = status_code
    resp.json.return_value = json_data
    resp.text = json.dumps(json_data)
    resp.headers = {"Content-Type": "application/json"}
    return resp


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def http_response():
    return mock_http_response


@pytest.fixture
def token_response(http_response):
    """Valid Daraja OAuth token response (expires in ~1 hour)."""
    return http_response({"access_token": "daraja_tok_abc", "expires_in": "3599"})


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 15, 10, 30, 45))


@pytest.fixture
def app():
    """Create application for testing"""
    app = create_app('testing')

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def fake_redis():
    fake = fakeredis.FakeStrictRedis(decode_responses=True)
    yield fake
    fake.flushall()


@pytest.fixture
def sandbox_credential():
    return CredentialSet(
        id="11111111-1111-1111-1111-111111111111",
        shortcode="174379",
        shortcode_type=ShortcodeType.PAYBILL,
        environment=Environment.SANDBOX,
        api_key="test_consumer_key",
        api_secret="test_consumer_secret",
        passkey="test_passkey",
        business_name="Test Shop",
        callback_url="https://example.com/mpesa/callback",
        confirmation_url="https://example.com/mpesa/confirmation",
        validation_url="https://example.com/mpesa/validation",
        min_amount=Decimal("1.00"),
        max_amount=Decimal("70000.00"),
        account_reference="DEFAULTREF",
        transaction_desc="Payment",
    )


@pytest.fixture
def production_credential(sandbox_credential):
    from dataclasses import replace
    return replace(
        sandbox_credential,
        id="22222222-2222-2222-2222-222222222222",
        environment=Environment.PRODUCTION,
        initiator_name="apiop",
        initiator_password="Initiator#2024",
    )
