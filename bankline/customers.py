"""Customer operations against the banking backend."""

from typing import Any, Dict, Optional
from urllib.parse import quote

from .executor import RequestExecutor
from .resilience.fallback import FallbackSource


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


class CustomerAPI:
    """Registration, login and customer lookups."""

    def __init__(self, executor: RequestExecutor, fallback: Optional[FallbackSource] = None):
        """Initialize customer operations.

        Args:
            executor: Request executor
            fallback: Secondary source for balance reads
        """
        self.executor = executor
        self.fallback = fallback

    async def register(self, customer_data: Dict[str, Any]) -> Any:
        """Register a new customer."""
        return await self.executor.run(
            "register",
            "POST",
            "/api/customers/register",
            payload=customer_data,
        )

    async def login(self, username: str, password: str) -> Any:
        """Authenticate a customer."""
        return await self.executor.run(
            "login",
            "POST",
            "/api/customer/login",
            payload={"username": username, "password": password},
        )

    async def get_customer_by_id(self, customer_id: Any) -> Any:
        return await self.executor.run(
            "get_customer_by_id",
            "GET",
            f"/api/customers/{_segment(customer_id)}",
        )

    async def get_by_username(self, username: str) -> Any:
        """Look up a customer by username, retrying once on timeout."""
        return await self.executor.run(
            "get_by_username",
            "GET",
            f"/api/customers/username/{_segment(username)}",
        )

    async def get_balance(self, customer_id: Any) -> Any:
        """Get a customer's balance.

        Retries once on timeout, then reads from the fallback source. A
        connectivity failure goes straight to the fallback source.
        """
        return await self.executor.run(
            "get_balance",
            "GET",
            f"/api/customers/{_segment(customer_id)}/balance",
            fallback_handler=self.fallback.get_balance if self.fallback else None,
            fallback_args=(customer_id,),
        )
