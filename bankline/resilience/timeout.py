"""Timeout tiers for backend calls.

Every call starts at the base tier. Retries escalate to either the
extended tier or, for transfers, the larger transfer tier.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import Settings


class TimeoutTier(str, Enum):
    """Named timeout budgets."""

    BASE = "BASE"
    EXTENDED = "EXTENDED"
    TRANSFER = "TRANSFER"


# Defaults, in seconds
BASE_TIMEOUT = 10.0
EXTENDED_TIMEOUT = 15.0
TRANSFER_TIMEOUT = 20.0


@dataclass(frozen=True)
class TimeoutConfig:
    """Resolved timeout budgets."""

    base: float = BASE_TIMEOUT
    extended: float = EXTENDED_TIMEOUT
    transfer: float = TRANSFER_TIMEOUT

    @classmethod
    def from_settings(cls, settings: Settings) -> "TimeoutConfig":
        """Build timeouts from client settings."""
        return cls(
            base=settings.base_timeout,
            extended=settings.extended_timeout,
            transfer=settings.transfer_timeout,
        )

    def resolve(self, tier: Optional[TimeoutTier]) -> Optional[float]:
        """Get the duration for a tier.

        Args:
            tier: Timeout tier, or None for no tier

        Returns:
            Seconds, or None when no tier is given
        """
        if tier is None:
            return None
        if tier == TimeoutTier.BASE:
            return self.base
        if tier == TimeoutTier.EXTENDED:
            return self.extended
        return self.transfer
