"""Client facade wiring the executor, fallback source and operation groups."""

import logging
from typing import Optional

import httpx

from .config import Settings, settings as default_settings
from .customers import CustomerAPI
from .executor import RequestExecutor
from .observers import ExecutionObserver
from .resilience.fallback import FallbackSource, HttpFallbackSource
from .transactions import TransactionAPI

logger = logging.getLogger(__name__)


class BankClient:
    """Entry point for the banking backend.

    Usage:
        async with BankClient() as bank:
            await bank.customers.login("alice", "secret")
            history = await bank.transactions.get_transactions(42)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        fallback: Optional[FallbackSource] = None,
        observer: Optional[ExecutionObserver] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            settings: Client settings. If not provided, uses module settings.
            fallback: Secondary source. If not provided and
                settings.fallback_api_url is set, an HTTP mirror source is used.
            observer: Lifecycle observer for the executor
            transport: Optional transport for the backend HTTP client
        """
        self.settings = settings or default_settings
        self.executor = RequestExecutor(
            settings=self.settings,
            observer=observer,
            transport=transport,
        )

        self._owns_fallback = False
        if fallback is None and self.settings.fallback_api_url:
            fallback = HttpFallbackSource(settings=self.settings)
            self._owns_fallback = True
        if fallback is None:
            logger.info("No fallback source configured; balance and history reads will fail hard")
        self.fallback = fallback

        self.customers = CustomerAPI(self.executor, self.fallback)
        self.transactions = TransactionAPI(self.executor, self.fallback)

    async def aclose(self) -> None:
        """Release HTTP clients owned by this client."""
        try:
            await self.executor.aclose()
        finally:
            if self._owns_fallback and isinstance(self.fallback, HttpFallbackSource):
                await self.fallback.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
