import logging
from typing import Iterable, List, Optional

from paygate.domain.models import AccountType, BankAccount

logger = logging.getLogger(__name__)


DEFAULT_ACCOUNTS = (
    BankAccount(
        accountId="plaid_checking_001",
        bankName="Chase Bank",
        accountType=AccountType.CHECKING,
        balance=15420.50,
        currency="USD",
        isActive=True,
    ),
    BankAccount(
        accountId="plaid_savings_002",
        bankName="Bank of America",
        accountType=AccountType.SAVINGS,
        balance=8750.25,
        currency="USD",
        isActive=True,
    ),
)


class StaticBankAccountSource:
    """In-memory implementation of BankAccountSource with pre-seeded accounts.

    Every user sees the same accounts; there is no aggregation behind it.
    """

    def __init__(self, accounts: Optional[Iterable[BankAccount]] = None):
        self.accounts = tuple(DEFAULT_ACCOUNTS if accounts is None else accounts)

    async def get_accounts(self, user_id: str) -> List[BankAccount]:
        logger.debug(f"Returning {len(self.accounts)} seeded accounts for user {user_id}")
        return list(self.accounts)
