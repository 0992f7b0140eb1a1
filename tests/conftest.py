"""Test configuration and fixtures."""

import hashlib
import hmac
import json
import os
import time
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from core.dependencies import get_payment_gateway, get_price_pipeline
from core.settings import Settings
from main import app
from payments.stripe_service import PaymentGatewayError
from pricing.pipeline import PriceQuote

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
WEBHOOK_SECRET = "whsec_test_dummy"


class FakeGateway:
    """Records create_intent calls instead of talking to Stripe."""

    def __init__(self, error: str | None = None):
        self.error = error
        self.calls = []

    async def create_intent(self, amount: int, currency: str):
        self.calls.append({"amount": amount, "currency": currency})
        if self.error:
            raise PaymentGatewayError(self.error)
        return {
            "client_secret": f"pi_fake_{amount}_secret_test",
            "payment_intent_id": f"pi_fake_{amount}",
        }

    def construct_event(self, payload, signature):
        raise NotImplementedError


class FakePipeline:
    def __init__(self, quote: PriceQuote | None = None, error: Exception | None = None):
        self.quote = quote
        self.error = error
        self.calls = 0

    async def current_price(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.quote


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp=None) -> str:
    """Build a Stripe-Signature header value for ``payload``."""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.".encode() + payload
    signature = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def event_payload(event_type: str, status: str = "succeeded") -> bytes:
    return json.dumps(
        {
            "id": "evt_test_123",
            "object": "event",
            "type": event_type,
            "data": {
                "object": {
                    "id": "pi_test_123",
                    "object": "payment_intent",
                    "amount": 15000,
                    "currency": "eur",
                    "status": status,
                }
            },
        }
    ).encode()


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Setup test environment variables before each test."""
    original_env = dict(os.environ)

    os.environ.update(
        {
            "STRIPE_SECRET_KEY": "sk_test_dummy",
            "STRIPE_PUBLISHABLE_KEY": "pk_test_dummy",
            "STRIPE_WEBHOOK_SECRET": WEBHOOK_SECRET,
            "STATIC_DIR": str(STATIC_DIR),
            "INFURA_ID": "test_infura_id",
            "CONTRACT_ADDRESS": "0x5fbdb2315678afecb367f032d93f642f64180aa3",
            "APP_NAME": "Test Checkout",
            "ENVIRONMENT": "test",
            "DISABLE_TRACING": "true",
        }
    )

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_settings():
    return Settings(
        STRIPE_SECRET_KEY="sk_test_mock",
        STRIPE_PUBLISHABLE_KEY="pk_test_mock",
        STRIPE_WEBHOOK_SECRET=WEBHOOK_SECRET,
        INFURA_ID="test_infura_id",
        CONTRACT_ADDRESS="0x5fbdb2315678afecb367f032d93f642f64180aa3",
        APP_NAME="Test Checkout",
        ENVIRONMENT="test",
    )


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def fake_gateway():
    gateway = FakeGateway()
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield gateway
    app.dependency_overrides.pop(get_payment_gateway, None)


@pytest.fixture
def sample_quote():
    """0.05 ETH at 3000 EUR/ETH."""
    return PriceQuote(native_amount=Decimal("0.05"), fiat_amount=150.0)


@pytest.fixture
def override_pipeline():
    def _override(pipeline: FakePipeline) -> FakePipeline:
        app.dependency_overrides[get_price_pipeline] = lambda: pipeline
        return pipeline

    yield _override
    app.dependency_overrides.pop(get_price_pipeline, None)
