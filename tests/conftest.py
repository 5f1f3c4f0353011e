import asyncio

import pytest
from fastapi.testclient import TestClient

from paygate.api import create_app
from paygate.adapters.bank_accounts import StaticBankAccountSource
from paygate.domain.models import PaymentRequest
from paygate.domain.providers import ProviderUnavailableError


class MockProviderGateway:
    def __init__(self, failing: bool = False, delays: dict | None = None):
        self.failing = failing
        self.delays = delays or {}
        self.calls = []

    async def call(self, provider: str, payload: dict) -> dict:
        self.calls.append((provider, payload))
        delay = self.delays.get(provider, 0)
        if delay:
            await asyncio.sleep(delay)
        if self.failing:
            raise ProviderUnavailableError(f"{provider} API temporarily unavailable")
        return {"success": True, "data": payload}


class FailingBankAccountSource:
    async def get_accounts(self, user_id: str):
        raise RuntimeError("bank link offline")


def make_payment_request(**overrides) -> PaymentRequest:
    data = {
        "amount": 100,
        "currency": "USD",
        "paymentMethod": "paypal",
        "customerInfo": {"name": "A", "email": "a@b.com"},
    }
    data.update(overrides)
    return PaymentRequest(**data)


def create_payment_service(mock_gateway=None, bank_accounts=None):
    """Factory function to create PaymentService with sensible defaults"""
    from paygate.domain.providers import BraintreeAdapter, MastercardAdapter, PayPalAdapter, PlaidAdapter
    from paygate.domain.services import PaymentService

    gateway = mock_gateway or MockProviderGateway()
    return PaymentService(
        adapters=[
            MastercardAdapter(gateway),
            PayPalAdapter(gateway),
            BraintreeAdapter(gateway),
            PlaidAdapter(gateway),
        ],
        bank_accounts=bank_accounts or StaticBankAccountSource(),
    )


@pytest.fixture
def mock_gateway():
    """Create a provider gateway that always succeeds"""
    return MockProviderGateway()


@pytest.fixture
def mock_failing_gateway():
    """Create a provider gateway that is always unavailable"""
    return MockProviderGateway(failing=True)


@pytest.fixture
def payment_service_factory():
    """Fixture that returns the payment service factory function"""
    return create_payment_service


@pytest.fixture
def client(mock_gateway):
    """Create a test client backed by an always-succeeding gateway"""
    app = create_app(create_payment_service(mock_gateway=mock_gateway))
    return TestClient(app)


@pytest.fixture
def failing_client(mock_failing_gateway):
    """Create a test client whose providers are all unavailable"""
    app = create_app(create_payment_service(mock_gateway=mock_failing_gateway))
    return TestClient(app)


@pytest.fixture
def valid_payment_data():
    """Create valid payment data for testing"""
    return {
        "amount": 100,
        "currency": "USD",
        "paymentMethod": "paypal",
        "customerInfo": {"name": "A", "email": "a@b.com"},
    }
