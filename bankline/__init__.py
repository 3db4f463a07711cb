"""Bankline: resilient async client for the banking backend."""

__version__ = "0.1.0"

from .client import BankClient
from .customers import CustomerAPI
from .errors import ApiError
from .executor import RequestExecutor
from .transactions import TransactionAPI

__all__ = ["BankClient", "CustomerAPI", "TransactionAPI", "RequestExecutor", "ApiError"]
