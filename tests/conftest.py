"""Shared test fixtures and configuration."""

import hmac
import json
import time
import hashlib
import os
import pytest
from unittest.mock import MagicMock, patch
from typing import Dict, Any

from payment_gateway import GatewayConfig, PaymentGateway, PaymentProcessor, ServiceSettings

TEST_SECRET_KEY = "sk_test_dummy_key_for_testing"
TEST_WEBHOOK_SECRET = "whsec_test_secret"
TEST_API_KEY = "test_api_key_12345"


def sign_payload(payload: str, secret: str = TEST_WEBHOOK_SECRET, timestamp: int = None) -> str:
    """Build a Stripe-Signature header value for a payload."""
    timestamp = timestamp if timestamp is not None else int(time.time())
    signed = f"{timestamp}.{payload}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


@pytest.fixture
def clean_stripe_env():
    """Remove Stripe settings from the environment."""
    with patch.dict(os.environ, {}, clear=False):
        os.environ.pop("STRIPE_SECRET_KEY", None)
        os.environ.pop("STRIPE_WEBHOOK_SECRET", None)
        yield


@pytest.fixture
def mock_gateway() -> PaymentGateway:
    """A gateway with no credentials, i.e. in mock mode."""
    return PaymentGateway(GatewayConfig())


@pytest.fixture
def fake_processor() -> MagicMock:
    """A processor double that records calls and never touches the network."""
    return MagicMock(spec=PaymentProcessor)


@pytest.fixture
def live_gateway(fake_processor) -> PaymentGateway:
    """A live-mode gateway backed by the fake processor."""
    return PaymentGateway(GatewayConfig(
        secret_key=TEST_SECRET_KEY,
        webhook_secret=TEST_WEBHOOK_SECRET,
        processor=fake_processor,
    ))


@pytest.fixture
def service_settings() -> ServiceSettings:
    return ServiceSettings(api_key=TEST_API_KEY, rate_limit="1000/minute")


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    """Return headers with authentication."""
    return {"Authorization": f"Bearer {TEST_API_KEY}"}


@pytest.fixture
def mock_stripe_payment_intent():
    """Create a mock Stripe PaymentIntent."""
    mock_pi = MagicMock()
    mock_pi.id = "pi_1234567890abcdefghijklmno"
    mock_pi.status = "requires_payment_method"
    mock_pi.client_secret = "pi_1234567890abcdefghijklmno_secret_xyz"
    mock_pi.to_dict.return_value = {
        "id": "pi_1234567890abcdefghijklmno",
        "status": "requires_payment_method",
        "amount": 500,
        "currency": "sar",
        "metadata": {"invoiceId": "inv_1001", "clientAccountId": "acct_42"},
    }
    return mock_pi


@pytest.fixture
def mock_stripe_canceled_intent():
    """Create a mock canceled Stripe PaymentIntent."""
    mock_pi = MagicMock()
    mock_pi.id = "pi_1234567890abcdefghijklmno"
    mock_pi.status = "canceled"
    mock_pi.to_dict.return_value = {
        "id": "pi_1234567890abcdefghijklmno",
        "status": "canceled",
        "metadata": {},
    }
    return mock_pi


@pytest.fixture
def succeeded_event_payload() -> str:
    """A payment_intent.succeeded webhook body."""
    return json.dumps({
        "id": "evt_1NG8Du2eZvKYlo2CUI79vXWy",
        "object": "event",
        "type": "payment_intent.succeeded",
        "livemode": False,
        "data": {
            "object": {
                "id": "pi_1234567890abcdefghijklmno",
                "object": "payment_intent",
                "amount": 500,
                "currency": "sar",
                "status": "succeeded",
                "metadata": {"invoiceId": "inv_1001", "clientAccountId": "acct_42"},
            }
        },
    })
