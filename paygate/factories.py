import random
from typing import Optional

from paygate.adapters.bank_accounts import StaticBankAccountSource
from paygate.adapters.simulator import SimulatedProviderGateway
from paygate.config.settings import Settings
from paygate.domain.providers import BraintreeAdapter, MastercardAdapter, PayPalAdapter, PlaidAdapter
from paygate.domain.services import PaymentService


def create_provider_gateway(settings: Settings, rng: Optional[random.Random] = None) -> SimulatedProviderGateway:
    """Create the simulated processor gateway from settings."""
    return SimulatedProviderGateway(
        failure_rate=settings.provider_failure_rate,
        min_delay=settings.provider_min_delay,
        max_delay=settings.provider_max_delay,
        rng=rng,
    )


def create_payment_service(
    settings: Optional[Settings] = None,
    gateway: Optional[SimulatedProviderGateway] = None,
) -> PaymentService:
    """Create a PaymentService with all four provider adapters sharing one gateway."""
    settings = settings or Settings()
    gateway = gateway or create_provider_gateway(settings)

    adapters = [
        MastercardAdapter(gateway),
        PayPalAdapter(gateway),
        BraintreeAdapter(gateway),
        PlaidAdapter(gateway),
    ]

    return PaymentService(
        adapters=adapters,
        bank_accounts=StaticBankAccountSource(),
    )
