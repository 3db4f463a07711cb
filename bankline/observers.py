"""Execution observers.

The executor reports its lifecycle (attempt start, attempt failure, retry,
fallback, success) to an observer instead of logging directly. Observer
errors are logged and never change the outcome of a call.
"""

import logging
from typing import Optional

from .monitoring import metrics
from .policy import OperationDescriptor
from .resilience.classifier import Disposition

logger = logging.getLogger(__name__)


class ExecutionObserver:
    """Base observer. Every hook is a no-op."""

    def on_attempt_start(self, descriptor: OperationDescriptor, attempt: int, timeout: float) -> None:
        pass

    def on_attempt_failure(
        self,
        descriptor: OperationDescriptor,
        attempt: int,
        error: BaseException,
        disposition: Disposition,
    ) -> None:
        pass

    def on_retry(self, descriptor: OperationDescriptor, timeout: float) -> None:
        pass

    def on_fallback(self, descriptor: OperationDescriptor) -> None:
        pass

    def on_success(self, descriptor: OperationDescriptor, attempt: int, elapsed: float) -> None:
        pass


class LoggingObserver(ExecutionObserver):
    """Writes the call lifecycle to the standard logger."""

    def on_attempt_start(self, descriptor, attempt, timeout):
        logger.debug(
            f"API: {descriptor.name} attempt {attempt} "
            f"{descriptor.method} {descriptor.path} (timeout {timeout}s)"
        )

    def on_attempt_failure(self, descriptor, attempt, error, disposition):
        logger.warning(
            f"API: {descriptor.name} attempt {attempt} failed "
            f"[{disposition.value}]: {error!r}"
        )

    def on_retry(self, descriptor, timeout):
        logger.info(f"Retrying {descriptor.name} with longer timeout ({timeout}s)...")

    def on_fallback(self, descriptor):
        logger.info(f"Using fallback source for {descriptor.name}")

    def on_success(self, descriptor, attempt, elapsed):
        logger.debug(f"API: {descriptor.name} succeeded on attempt {attempt} in {elapsed:.3f}s")


class MetricsObserver(ExecutionObserver):
    """Records the call lifecycle in the monitoring metrics."""

    def on_attempt_start(self, descriptor, attempt, timeout):
        metrics.api_requests_total.labels(operation=descriptor.name).inc()

    def on_attempt_failure(self, descriptor, attempt, error, disposition):
        metrics.api_errors_total.labels(
            operation=descriptor.name,
            disposition=disposition.value,
        ).inc()

    def on_retry(self, descriptor, timeout):
        metrics.api_retries_total.labels(operation=descriptor.name).inc()

    def on_fallback(self, descriptor):
        metrics.fallback_invocations_total.labels(operation=descriptor.name).inc()

    def on_success(self, descriptor, attempt, elapsed):
        metrics.api_latency_seconds.labels(operation=descriptor.name).observe(elapsed)


class CompositeObserver(ExecutionObserver):
    """Fans every hook out to several observers."""

    def __init__(self, *observers: ExecutionObserver):
        self.observers = list(observers)

    def _dispatch(self, hook: str, *args) -> None:
        for observer in self.observers:
            notify(observer, hook, *args)

    def on_attempt_start(self, descriptor, attempt, timeout):
        self._dispatch("on_attempt_start", descriptor, attempt, timeout)

    def on_attempt_failure(self, descriptor, attempt, error, disposition):
        self._dispatch("on_attempt_failure", descriptor, attempt, error, disposition)

    def on_retry(self, descriptor, timeout):
        self._dispatch("on_retry", descriptor, timeout)

    def on_fallback(self, descriptor):
        self._dispatch("on_fallback", descriptor)

    def on_success(self, descriptor, attempt, elapsed):
        self._dispatch("on_success", descriptor, attempt, elapsed)


def notify(observer: Optional[ExecutionObserver], hook: str, *args) -> None:
    """Call an observer hook, logging instead of raising on failure."""
    if observer is None:
        return
    try:
        getattr(observer, hook)(*args)
    except Exception as e:
        logger.error(f"Observer {observer.__class__.__name__}.{hook} failed: {e}")


def default_observer() -> ExecutionObserver:
    """Observer used when none is injected: logging plus metrics."""
    return CompositeObserver(LoggingObserver(), MetricsObserver())
