"""Request executor with timeout retry and fallback.

Runs one logical backend operation:
- Primary attempt at the base timeout
- One retry at the extended timeout for timed-out, retry-eligible calls
- Fallback source for exhausted or unreachable, fallback-eligible calls

Callers get the backend payload, the fallback result, or an ApiError.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import httpx

from .config import Settings, settings as default_settings
from .errors import normalize
from .observers import ExecutionObserver, default_observer, notify
from .policy import OperationDescriptor, build_descriptor
from .resilience.classifier import Disposition, classify
from .resilience.fallback import invoke_fallback


class OutcomeKind(str, Enum):
    """Result of a single HTTP attempt."""

    SUCCESS = "SUCCESS"
    TRANSIENT = "TRANSIENT"
    TERMINAL = "TERMINAL"


@dataclass
class AttemptOutcome:
    """Outcome of one attempt, consumed immediately by the executor."""

    kind: OutcomeKind
    payload: Any = None
    error: Optional[BaseException] = None
    disposition: Optional[Disposition] = None

    @classmethod
    def success(cls, payload: Any) -> "AttemptOutcome":
        return cls(kind=OutcomeKind.SUCCESS, payload=payload)

    @classmethod
    def failure(cls, error: BaseException) -> "AttemptOutcome":
        disposition = classify(error)
        kind = OutcomeKind.TERMINAL if disposition == Disposition.TERMINAL else OutcomeKind.TRANSIENT
        return cls(kind=kind, error=error, disposition=disposition)

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS


def decode_payload(response: httpx.Response) -> Any:
    """Decode a success response body.

    Returns:
        Parsed JSON, raw text when the body is not JSON, or None when empty
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class RequestExecutor:
    """Executes operation descriptors against the banking backend.

    Usage:
        async with RequestExecutor() as executor:
            balance = await executor.run(
                "get_balance",
                "GET",
                "/api/customers/42/balance",
                fallback_handler=source.get_balance,
                fallback_args=(42,),
            )
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        observer: Optional[ExecutionObserver] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the executor.

        Args:
            settings: Client settings. If not provided, uses module settings.
            client: Existing HTTP client to reuse (not closed by the executor)
            observer: Lifecycle observer. Defaults to logging plus metrics.
            transport: Optional transport for the owned client
        """
        self.settings = settings or default_settings
        self.observer = observer if observer is not None else default_observer()
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            base_url=self.settings.api_url,
            headers={"Content-Type": "application/json"},
            timeout=self.settings.base_timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def _attempt(
        self,
        descriptor: OperationDescriptor,
        attempt: int,
        timeout: float,
    ) -> AttemptOutcome:
        """Issue one HTTP call for the descriptor."""
        notify(self.observer, "on_attempt_start", descriptor, attempt, timeout)
        started = time.monotonic()
        try:
            response = await self.client.request(
                descriptor.method,
                descriptor.path,
                json=descriptor.payload,
                timeout=timeout,
            )
            response.raise_for_status()
            payload = decode_payload(response)
        except Exception as e:
            outcome = AttemptOutcome.failure(e)
            notify(self.observer, "on_attempt_failure", descriptor, attempt, e, outcome.disposition)
            return outcome

        notify(self.observer, "on_success", descriptor, attempt, time.monotonic() - started)
        return AttemptOutcome.success(payload)

    async def _fall_back(self, descriptor: OperationDescriptor) -> Any:
        notify(self.observer, "on_fallback", descriptor)
        return await invoke_fallback(descriptor.fallback_handler, *descriptor.fallback_args)

    async def execute(self, descriptor: OperationDescriptor) -> Any:
        """Execute a descriptor with the retry/fallback policy.

        Args:
            descriptor: Operation to run

        Returns:
            Backend response body, or the fallback handler's result

        Raises:
            ApiError: If the call fails and no recovery applies
        """
        primary = await self._attempt(descriptor, 1, descriptor.base_timeout)
        if primary.ok:
            return primary.payload

        if primary.disposition == Disposition.TIMEOUT_RETRYABLE and descriptor.can_retry:
            notify(self.observer, "on_retry", descriptor, descriptor.extended_timeout)
            retry = await self._attempt(descriptor, 2, descriptor.extended_timeout)
            if retry.ok:
                return retry.payload
            if descriptor.can_fall_back:
                return await self._fall_back(descriptor)
            raise normalize(retry.error, descriptor.name) from None

        if primary.disposition == Disposition.FALLBACK_ELIGIBLE and descriptor.can_fall_back:
            return await self._fall_back(descriptor)

        raise normalize(primary.error, descriptor.name) from None

    async def run(
        self,
        name: str,
        method: str,
        path: str,
        payload: Optional[Any] = None,
        fallback_handler: Optional[Callable] = None,
        fallback_args: tuple = (),
    ) -> Any:
        """Build the descriptor for a named operation and execute it."""
        descriptor = build_descriptor(
            name,
            method,
            path,
            self.settings,
            payload=payload,
            fallback_handler=fallback_handler,
            fallback_args=fallback_args,
        )
        return await self.execute(descriptor)

    async def aclose(self) -> None:
        """Close the owned HTTP client."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
