"""Transaction operations against the banking backend."""

from typing import Any, Optional
from urllib.parse import quote

from .executor import RequestExecutor
from .resilience.fallback import FallbackSource


class TransactionAPI:
    """Deposits, withdrawals, transfers and transaction history."""

    def __init__(self, executor: RequestExecutor, fallback: Optional[FallbackSource] = None):
        """Initialize transaction operations.

        Args:
            executor: Request executor
            fallback: Secondary source for transaction history reads
        """
        self.executor = executor
        self.fallback = fallback

    async def deposit(self, customer_id: Any, amount: float, description: str = "") -> Any:
        return await self.executor.run(
            "deposit",
            "POST",
            "/api/transactions/deposit",
            payload={
                "customerId": customer_id,
                "amount": amount,
                "description": description,
            },
        )

    async def withdraw(self, customer_id: Any, amount: float, description: str = "") -> Any:
        return await self.executor.run(
            "withdraw",
            "POST",
            "/api/transactions/withdraw",
            payload={
                "customerId": customer_id,
                "amount": amount,
                "description": description,
            },
        )

    async def transfer(
        self,
        from_customer_id: Any,
        to_customer_id: Any,
        amount: float,
        description: str = "",
    ) -> Any:
        """Transfer funds between customers.

        A timed-out transfer is retried once with the transfer timeout tier.
        There is no fallback for transfers.
        """
        return await self.executor.run(
            "transfer",
            "POST",
            "/api/transactions/transfer",
            payload={
                "fromCustomerId": from_customer_id,
                "toCustomerId": to_customer_id,
                "amount": amount,
                "description": description,
            },
        )

    async def get_transactions(self, customer_id: Any) -> Any:
        """Get a customer's transaction history.

        Retries once on timeout, then reads from the fallback source. A
        connectivity failure goes straight to the fallback source.
        """
        return await self.executor.run(
            "get_transactions",
            "GET",
            f"/api/transactions/customer/{quote(str(customer_id), safe='')}",
            fallback_handler=self.fallback.get_transactions if self.fallback else None,
            fallback_args=(customer_id,),
        )

    async def get_passbook(self, customer_id: Any) -> Any:
        return await self.executor.run(
            "get_passbook",
            "GET",
            f"/api/transactions/customer/{quote(str(customer_id), safe='')}/passbook",
        )

    async def debug_transactions(self, customer_id: Any) -> Any:
        """Get the backend's diagnostic view of a customer's transactions."""
        return await self.executor.run(
            "debug_transactions",
            "GET",
            f"/api/transactions/debug/customer/{quote(str(customer_id), safe='')}",
        )

    async def get_transaction(self, transaction_id: Any) -> Any:
        return await self.executor.run(
            "get_transaction",
            "GET",
            f"/api/transactions/{quote(str(transaction_id), safe='')}",
        )
