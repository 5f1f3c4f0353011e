import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Dict, Optional

from paygate.domain.providers import ProviderUnavailableError

logger = logging.getLogger(__name__)


class SimulatedProviderGateway:
    """Stand-in for the external processor APIs.

    Every call waits a random delay and then fails with probability
    ``failure_rate``. Pass a seeded ``rng`` (and ``failure_rate`` 0 or 1)
    to make both the jitter and the outcome reproducible.
    """

    def __init__(
        self,
        failure_rate: float = 0.05,
        min_delay: float = 0.5,
        max_delay: float = 1.5,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError(f"failure_rate must be between 0 and 1, got {failure_rate}")
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError(f"invalid delay bounds: {min_delay}..{max_delay}")

        self.failure_rate = failure_rate
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.rng = rng or random.Random()
        self.sleep = sleep

    def next_delay(self) -> float:
        return self.rng.uniform(self.min_delay, self.max_delay)

    async def call(self, provider: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Simulate one round trip to ``provider``."""
        delay = self.next_delay()
        logger.debug(f"Calling {provider} API (simulated latency {delay:.3f}s)")
        await self.sleep(delay)

        if self.rng.random() < self.failure_rate:
            raise ProviderUnavailableError(f"{provider} API temporarily unavailable")

        logger.debug(f"{provider} API call succeeded")
        return {"success": True, "data": payload}
