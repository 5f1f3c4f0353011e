from typing import Any, Dict, List, Protocol

from paygate.domain.models import BankAccount, PaymentMethod, PaymentRequest, PaymentResponse


class ProviderGateway(Protocol):
    async def call(self, provider: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Send a provider-shaped payload to the external processor."""
        ...


class PaymentAdapter(Protocol):
    method: PaymentMethod

    async def process(self, payment_request: PaymentRequest) -> PaymentResponse:
        """Process a payment request through one provider."""
        ...


class BankAccountSource(Protocol):
    async def get_accounts(self, user_id: str) -> List[BankAccount]:
        """Return the bank accounts linked to a user."""
        ...

