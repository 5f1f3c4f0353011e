import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict
from uuid import uuid4

from paygate.domain.models import PaymentMethod, PaymentRequest, PaymentResponse, PaymentStatus
from paygate.domain.protocols import ProviderGateway

logger = logging.getLogger(__name__)


class ProviderUnavailableError(Exception):
    """Raised when a payment provider cannot be reached."""
    pass


def generate_transaction_id(prefix: str) -> str:
    return f"{prefix}{uuid4().hex[:16]}"


class ProviderAdapter(ABC):
    """Translates a generic payment request into one provider's call and response.

    Subclasses set the provider constants and implement ``fee`` and
    ``build_payload``. Fees and settlement time are only reported on success.
    """

    method: PaymentMethod
    display_name: str
    transaction_prefix: str
    settlement_time: str
    success_status: PaymentStatus = PaymentStatus.COMPLETED
    success_message: str

    def __init__(self, gateway: ProviderGateway):
        self.gateway = gateway

    @abstractmethod
    def fee(self, amount: Decimal) -> Decimal:
        ...

    @abstractmethod
    def build_payload(self, payment_request: PaymentRequest) -> Dict[str, Any]:
        ...

    async def process(self, payment_request: PaymentRequest) -> PaymentResponse:
        logger.info(f"Processing {self.display_name} payment of {payment_request.amount} {payment_request.currency}")
        payload = self.build_payload(payment_request)
        try:
            await self.gateway.call(self.method.value, payload)
        except ProviderUnavailableError as exc:
            logger.error(f"{self.display_name} payment failed: {exc}")
            return self.failure_response(payment_request)
        except Exception as exc:
            # Any other gateway error is reported the same way as an outage
            logger.exception(f"{self.display_name} gateway error: {exc}")
            return self.failure_response(payment_request)

        return PaymentResponse(
            success=True,
            transactionId=generate_transaction_id(self.transaction_prefix),
            status=self.success_status,
            message=self.success_message,
            paymentMethod=self.method.value,
            amount=float(payment_request.amount),
            currency=payment_request.currency,
            fees=float(self.fee(payment_request.amount)),
            processingTime=self.settlement_time,
        )

    def failure_response(self, payment_request: PaymentRequest) -> PaymentResponse:
        return PaymentResponse(
            success=False,
            transactionId=generate_transaction_id("err_"),
            status=PaymentStatus.FAILED,
            message=f"{self.display_name} payment processing failed",
            paymentMethod=self.method.value,
            amount=float(payment_request.amount),
            currency=payment_request.currency,
        )


class MastercardAdapter(ProviderAdapter):
    method = PaymentMethod.MASTERCARD
    display_name = "Mastercard"
    transaction_prefix = "mc_"
    settlement_time = "2-3 business days"
    success_message = "Mastercard payment processed successfully"

    def fee(self, amount: Decimal) -> Decimal:
        return amount * Decimal("0.029")

    def build_payload(self, payment_request: PaymentRequest) -> Dict[str, Any]:
        return {
            "amount": str(payment_request.amount),
            "currency": payment_request.currency,
            "customer": payment_request.customerInfo.model_dump(exclude_none=True),
            "card_network": "mastercard",
        }


class PayPalAdapter(ProviderAdapter):
    method = PaymentMethod.PAYPAL
    display_name = "PayPal"
    transaction_prefix = "pp_"
    settlement_time = "instant"
    success_message = "PayPal payment processed successfully"

    def fee(self, amount: Decimal) -> Decimal:
        return amount * Decimal("0.034") + Decimal("0.30")

    def build_payload(self, payment_request: PaymentRequest) -> Dict[str, Any]:
        return {
            "amount": str(payment_request.amount),
            "currency": payment_request.currency,
            "payer": payment_request.customerInfo.model_dump(exclude_none=True),
            "intent": "sale",
        }


class BraintreeAdapter(ProviderAdapter):
    method = PaymentMethod.BRAINTREE
    display_name = "Braintree"
    transaction_prefix = "bt_"
    settlement_time = "1-2 business days"
    success_message = "Braintree payment processed successfully"

    def fee(self, amount: Decimal) -> Decimal:
        return amount * Decimal("0.029")

    def build_payload(self, payment_request: PaymentRequest) -> Dict[str, Any]:
        return {
            "amount": str(payment_request.amount),
            "currency_iso_code": payment_request.currency,
            "customer": payment_request.customerInfo.model_dump(exclude_none=True),
            "options": {"submit_for_settlement": True},
        }


class PlaidAdapter(ProviderAdapter):
    """ACH transfers clear asynchronously, so success is reported as pending."""

    method = PaymentMethod.PLAID
    display_name = "Plaid"
    transaction_prefix = "pl_"
    settlement_time = "3-5 business days"
    success_status = PaymentStatus.PENDING
    success_message = "Plaid ACH payment initiated successfully"

    # ACH fees are capped per transfer
    max_fee = Decimal("5.00")

    def fee(self, amount: Decimal) -> Decimal:
        return min(amount * Decimal("0.005"), self.max_fee)

    def build_payload(self, payment_request: PaymentRequest) -> Dict[str, Any]:
        return {
            "amount": str(payment_request.amount),
            "currency": payment_request.currency,
            "account_id": f"plaid_account_{uuid4().hex[:12]}",
            "customer": payment_request.customerInfo.model_dump(exclude_none=True),
        }
