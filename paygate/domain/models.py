from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# Largest single payment accepted by any processor
MAX_PAYMENT_AMOUNT = Decimal("1000000000")


class PaymentMethod(str, Enum):
    MASTERCARD = "mastercard"
    PAYPAL = "paypal"
    BRAINTREE = "braintree"
    PLAID = "plaid"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT = "credit"


class CustomerInfo(BaseModel):
    name: Annotated[str, Field(min_length=1)]
    email: Annotated[str, Field(min_length=1)]
    address: Optional[str] = None


class PaymentDetails(BaseModel):
    """Payment body without a method tag - what the provider routes accept"""
    amount: Annotated[Decimal, Field(gt=Decimal("0.00"), le=MAX_PAYMENT_AMOUNT)]
    currency: Annotated[str, Field(pattern=r"^[A-Z]{3}$")]
    customerInfo: CustomerInfo
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


class PaymentRequest(PaymentDetails):
    """Client payment request - what comes from API"""
    paymentMethod: Annotated[str, Field(min_length=1)]


class PaymentResponse(BaseModel):
    success: bool
    transactionId: str
    status: PaymentStatus
    message: str
    paymentMethod: str
    amount: float
    currency: str
    fees: Optional[Annotated[float, Field(ge=0)]] = None
    processingTime: Optional[str] = None

    @model_validator(mode="after")
    def check_failure_shape(self):
        if not self.success:
            if self.status != PaymentStatus.FAILED:
                raise ValueError("a failed payment must have status 'failed'")
            if self.fees is not None:
                raise ValueError("a failed payment cannot carry fees")
        return self


class BankAccount(BaseModel):
    model_config = ConfigDict(frozen=True)

    accountId: str
    bankName: str
    accountType: AccountType
    balance: float
    currency: str
    isActive: bool


class BankAccountsResponse(BaseModel):
    success: bool = True
    accounts: List[BankAccount]


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    detail: Optional[Any] = None


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime
    services: Dict[str, str]
