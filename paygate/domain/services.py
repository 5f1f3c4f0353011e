from types import MappingProxyType
from typing import Iterable, List, Mapping
import logging

from paygate.domain.models import BankAccount, PaymentDetails, PaymentMethod, PaymentRequest, PaymentResponse
from paygate.domain.protocols import BankAccountSource, PaymentAdapter

logger = logging.getLogger(__name__)

# Custom exceptions
class PaymentProcessingError(Exception):
    """Raised when payment processing fails."""
    pass

class UnsupportedPaymentMethodError(PaymentProcessingError):
    """Raised when a payment method tag has no registered adapter."""

    def __init__(self, payment_method: str):
        super().__init__(f"Unsupported payment method: {payment_method}")
        self.payment_method = payment_method


def build_adapter_registry(adapters: Iterable[PaymentAdapter]) -> Mapping[PaymentMethod, PaymentAdapter]:
    """Build the fixed method -> adapter table, one adapter per payment method."""
    registry = {}
    for adapter in adapters:
        if adapter.method in registry:
            raise ValueError(f"Duplicate adapter for payment method {adapter.method.value}")
        registry[adapter.method] = adapter

    missing = set(PaymentMethod) - set(registry)
    if missing:
        names = ", ".join(sorted(m.value for m in missing))
        raise ValueError(f"No adapter registered for payment methods: {names}")

    return MappingProxyType(registry)


class PaymentService:
    def __init__(
        self,
        adapters: Iterable[PaymentAdapter],
        bank_accounts: BankAccountSource,
    ):
        """Initialize the PaymentService with one adapter per payment method."""
        self.adapters = build_adapter_registry(adapters)
        self.bank_accounts = bank_accounts

    def resolve_adapter(self, payment_method: str) -> PaymentAdapter:
        try:
            method = PaymentMethod(payment_method)
        except ValueError:
            raise UnsupportedPaymentMethodError(payment_method) from None
        return self.adapters[method]

    async def process_payment(self, payment_request: PaymentRequest) -> PaymentResponse:
        """Route a payment request to the adapter matching its payment method.

        No retries and no fallback to another provider: the adapter's
        response is returned unchanged, failed or not.
        """
        adapter = self.resolve_adapter(payment_request.paymentMethod)
        response = await adapter.process(payment_request)
        logger.info(
            f"Payment {response.transactionId} via {payment_request.paymentMethod}: "
            f"success={response.success} status={response.status.value}"
        )
        return response

    async def process_with(self, payment_method: PaymentMethod, details: PaymentDetails) -> PaymentResponse:
        """Process a payment for a fixed provider, ignoring any tag in the body."""
        payment_request = PaymentRequest(**details.model_dump(exclude={"paymentMethod"}), paymentMethod=payment_method.value)
        return await self.process_payment(payment_request)

    async def get_bank_accounts(self, user_id: str) -> List[BankAccount]:
        """Get the bank accounts linked to a user."""
        logger.info(f"Fetching linked bank accounts for user {user_id}")
        return await self.bank_accounts.get_accounts(user_id)
