"""Fallback sources for read-only financial queries.

Provides:
- The FallbackSource interface consulted when the primary backend is exhausted
- An HTTP mirror source reading from a secondary base URL
- A helper that invokes sync or async fallback handlers uniformly
"""

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
from urllib.parse import quote

import httpx

from ..config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class FallbackSource(ABC):
    """Secondary provider of balance and transaction history.

    Results are handed to the caller untouched, so implementations should
    return the same shapes the primary backend does.
    """

    @abstractmethod
    async def get_balance(self, customer_id: Any) -> Any:
        """Get a customer's balance."""

    @abstractmethod
    async def get_transactions(self, customer_id: Any) -> Any:
        """Get a customer's transaction history."""


class HttpFallbackSource(FallbackSource):
    """Fallback source backed by a mirror of the banking backend."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the mirror source.

        Args:
            base_url: Mirror base URL. If not provided, uses settings.
            settings: Client settings
            client: Existing HTTP client to reuse (not closed by this source)
            transport: Optional transport for the owned client
        """
        self.settings = settings or default_settings
        self.base_url = base_url or self.settings.fallback_api_url
        if not self.base_url:
            raise ValueError("HttpFallbackSource requires a base URL")

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=self.settings.base_timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def _get(self, path: str) -> Any:
        response = await self.client.get(path)
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()

    async def get_balance(self, customer_id: Any) -> Any:
        logger.info(f"Reading balance for customer {customer_id} from fallback source")
        return await self._get(f"/api/customers/{quote(str(customer_id), safe='')}/balance")

    async def get_transactions(self, customer_id: Any) -> Any:
        logger.info(f"Reading transactions for customer {customer_id} from fallback source")
        return await self._get(
            f"/api/transactions/customer/{quote(str(customer_id), safe='')}"
        )

    async def aclose(self) -> None:
        """Close the owned HTTP client."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


async def invoke_fallback(handler: Callable, *args, **kwargs) -> Any:
    """Invoke a fallback handler, awaiting it when needed.

    Failures are not caught: a failing fallback is the end of the line.

    Args:
        handler: Sync or async callable
        *args: Identifying arguments of the primary call
        **kwargs: Extra keyword arguments

    Returns:
        The handler's result, unchanged
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result
