"""Example script demonstrating Bankline against a running backend."""

import asyncio
import logging

from bankline import ApiError, BankClient
from bankline.config import settings
from bankline.monitoring import generate_metrics

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def main():
    """Log in, read a balance and history, and make a transfer."""

    logger.info("=" * 60)
    logger.info(f"Bankline client -> {settings.api_url}")
    if settings.fallback_api_url:
        logger.info(f"Fallback source -> {settings.fallback_api_url}")
    logger.info("=" * 60)

    async with BankClient() as bank:
        try:
            customer = await bank.customers.login("alice", "secret")
        except ApiError as e:
            logger.error(f"Login failed: {e.body}")
            return

        customer_id = customer.get("id") if isinstance(customer, dict) else None
        if customer_id is None:
            logger.error(f"Login response has no customer id: {customer}")
            return

        balance = await bank.customers.get_balance(customer_id)
        logger.info(f"Balance: {balance}")

        history = await bank.transactions.get_transactions(customer_id)
        logger.info(f"Transactions: {len(history) if isinstance(history, list) else history}")

        try:
            result = await bank.transactions.transfer(customer_id, 2, 100.0, "rent")
            logger.info(f"Transfer: {result}")
        except ApiError as e:
            logger.error(f"Transfer failed: {e.body}")

    logger.info("-" * 60)
    logger.info("\n" + generate_metrics())


if __name__ == "__main__":
    asyncio.run(main())
