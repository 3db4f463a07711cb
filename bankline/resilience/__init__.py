"""Resilience layer for Bankline.

This module provides:
- Failure classification (timeout, connectivity, terminal)
- Timeout tiers for primary calls and retries
- Fallback sources for balance and transaction history
"""

from .classifier import Disposition, classify
from .fallback import FallbackSource, HttpFallbackSource, invoke_fallback
from .timeout import TimeoutConfig, TimeoutTier

__all__ = [
    "classify",
    "Disposition",
    "TimeoutConfig",
    "TimeoutTier",
    "FallbackSource",
    "HttpFallbackSource",
    "invoke_fallback",
]
