"""Per-operation retry and fallback policy.

Each named operation maps to a fixed policy. The executor never branches on
operation names; it only reads the descriptor built from this table.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .config import Settings
from .resilience.timeout import TimeoutConfig, TimeoutTier


@dataclass(frozen=True)
class OperationPolicy:
    """Resilience policy for one operation."""

    retry_eligible: bool = False
    fallback_eligible: bool = False
    retry_tier: Optional[TimeoutTier] = None


NO_RESILIENCE = OperationPolicy()

OPERATION_POLICIES: dict[str, OperationPolicy] = {
    # Customer operations
    "register": NO_RESILIENCE,
    "login": NO_RESILIENCE,
    "get_customer_by_id": NO_RESILIENCE,
    "get_by_username": OperationPolicy(
        retry_eligible=True,
        retry_tier=TimeoutTier.EXTENDED,
    ),
    "get_balance": OperationPolicy(
        retry_eligible=True,
        fallback_eligible=True,
        retry_tier=TimeoutTier.EXTENDED,
    ),
    # Transaction operations
    "deposit": NO_RESILIENCE,
    "withdraw": NO_RESILIENCE,
    "transfer": OperationPolicy(
        retry_eligible=True,
        retry_tier=TimeoutTier.TRANSFER,  # Cross-account locking is slow server-side
    ),
    "get_transactions": OperationPolicy(
        retry_eligible=True,
        fallback_eligible=True,
        retry_tier=TimeoutTier.EXTENDED,
    ),
    "get_passbook": NO_RESILIENCE,
    "debug_transactions": NO_RESILIENCE,
    "get_transaction": NO_RESILIENCE,
}


@dataclass
class OperationDescriptor:
    """One logical backend call and how to recover from its failures."""

    name: str
    method: str
    path: str
    payload: Optional[Any] = None
    base_timeout: float = 10.0
    extended_timeout: Optional[float] = None
    retry_eligible: bool = False
    fallback_eligible: bool = False
    fallback_handler: Optional[Callable] = None
    fallback_args: tuple = field(default_factory=tuple)

    @property
    def can_retry(self) -> bool:
        """Check if a timed-out call may be reissued."""
        return self.retry_eligible and self.extended_timeout is not None

    @property
    def can_fall_back(self) -> bool:
        """Check if a fallback handler may be invoked."""
        return self.fallback_eligible and self.fallback_handler is not None


def get_policy(name: str) -> OperationPolicy:
    """Look up the policy for an operation.

    Raises:
        KeyError: If the operation is unknown
    """
    try:
        return OPERATION_POLICIES[name]
    except KeyError:
        raise KeyError(f"Unknown operation: {name}") from None


def build_descriptor(
    name: str,
    method: str,
    path: str,
    settings: Settings,
    payload: Optional[Any] = None,
    fallback_handler: Optional[Callable] = None,
    fallback_args: tuple = (),
) -> OperationDescriptor:
    """Build the descriptor for one call of a named operation.

    Args:
        name: Operation name from OPERATION_POLICIES
        method: HTTP method
        path: Request path relative to the API base URL
        settings: Client settings providing timeout tiers
        payload: Optional JSON body
        fallback_handler: Handler used when the operation is fallback-eligible
        fallback_args: Arguments passed to the fallback handler

    Returns:
        Operation descriptor
    """
    policy = get_policy(name)
    timeouts = TimeoutConfig.from_settings(settings)

    return OperationDescriptor(
        name=name,
        method=method,
        path=path,
        payload=payload,
        base_timeout=timeouts.base,
        extended_timeout=timeouts.resolve(policy.retry_tier) if policy.retry_eligible else None,
        retry_eligible=policy.retry_eligible,
        fallback_eligible=policy.fallback_eligible,
        fallback_handler=fallback_handler if policy.fallback_eligible else None,
        fallback_args=tuple(fallback_args),
    )
