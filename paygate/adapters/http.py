import logging
from decimal import Decimal
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

# Custom exceptions
class GatewayClientError(Exception):
    """Raised when the gateway API cannot be reached or rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GatewayApiClient:
    """HTTP client for the gateway REST API, built on httpx."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            logger.debug(f"{method} {self.base_url}{path}")
            response = await self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout for {method} {path}: {e}")
            raise GatewayClientError(f"Gateway timeout: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"Request error for {method} {path}: {e}")
            raise GatewayClientError(f"Gateway unreachable: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {"message": response.text}

        if response.status_code >= 400:
            message = data.get("message") if isinstance(data, dict) else None
            raise GatewayClientError(
                message or f"Gateway returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return data

    async def process_payment(
        self,
        amount: Decimal,
        currency: str,
        payment_method: str,
        customer_name: str,
        customer_email: str,
    ) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/payments/process",
            json={
                "amount": float(amount),
                "currency": currency.upper(),
                "paymentMethod": payment_method,
                "customerInfo": {"name": customer_name, "email": customer_email},
            },
        )

    async def get_bank_accounts(self, user_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/payments/plaid/accounts/{user_id}")

    async def health(self) -> Dict[str, Any]:
        # /health is served at the root, outside /api
        root = httpx.URL(self.base_url).copy_with(path="/health")
        return await self._request("GET", str(root))

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()
