"""Request metrics for Bankline.

Tracks, per operation:
- Request metrics: api_requests_total, api_latency_seconds
- Failure metrics: api_errors_total by disposition
- Resilience metrics: api_retries_total, fallback_invocations_total

Rendered in Prometheus text format by generate_metrics().
"""

import threading
from dataclasses import dataclass, replace
from typing import Optional


# =============================================================================
# Metric Classes (in-process, no prometheus_client dependency)
# =============================================================================


def _format_labels(names: list[str], values: tuple) -> str:
    return ",".join(f'{name}="{value}"' for name, value in zip(names, values))


class Counter:
    """A counter metric that can only increase."""

    def __init__(self, name: str, description: str, labels: Optional[list[str]] = None):
        self.name = name
        self.description = description
        self._label_names = labels or []
        self._values: dict[tuple, float] = {}
        self._lock = threading.Lock()

    def labels(self, **kwargs) -> "CounterWithLabels":
        """Return a counter with specific labels."""
        label_values = tuple(str(kwargs.get(l, "")) for l in self._label_names)
        return CounterWithLabels(self, label_values)

    def inc(self, value: float = 1.0) -> None:
        """Increment the counter."""
        self._inc_labels((), value)

    def _inc_labels(self, label_values: tuple, value: float = 1.0) -> None:
        if value < 0:
            raise ValueError("Counters can only increase")
        with self._lock:
            self._values[label_values] = self._values.get(label_values, 0) + value

    def get(self, **kwargs) -> float:
        """Get the value for a label set."""
        label_values = tuple(str(kwargs.get(l, "")) for l in self._label_names)
        with self._lock:
            return self._values.get(label_values, 0)

    def get_all(self) -> dict[tuple, float]:
        """Get all values."""
        with self._lock:
            return self._values.copy()

    def clear(self) -> None:
        """Drop all recorded values."""
        with self._lock:
            self._values.clear()

    def to_prometheus(self) -> str:
        """Format as Prometheus text."""
        lines = [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} counter"]
        with self._lock:
            for label_values, value in self._values.items():
                if label_values:
                    labels_str = _format_labels(self._label_names, label_values)
                    lines.append(f"{self.name}{{{labels_str}}} {value}")
                else:
                    lines.append(f"{self.name} {value}")
        return "\n".join(lines)


class CounterWithLabels:
    """Counter with specific label values."""

    def __init__(self, parent: Counter, label_values: tuple):
        self._parent = parent
        self._label_values = label_values

    def inc(self, value: float = 1.0) -> None:
        """Increment the counter."""
        self._parent._inc_labels(self._label_values, value)


@dataclass
class HistogramSeries:
    """Aggregated observations for one label set."""

    bucket_counts: list[int]  # Cumulative, one per bucket
    total: float = 0.0
    count: int = 0


class Histogram:
    """A histogram metric for tracking distributions.

    Observations are folded into cumulative bucket counts, a running sum and
    a count, so memory stays constant per label set.
    """

    DEFAULT_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

    def __init__(
        self,
        name: str,
        description: str,
        labels: Optional[list[str]] = None,
        buckets: Optional[tuple] = None,
    ):
        self.name = name
        self.description = description
        self._label_names = labels or []
        self.buckets = tuple(sorted(buckets or self.DEFAULT_BUCKETS))
        self._series: dict[tuple, HistogramSeries] = {}
        self._lock = threading.Lock()

    def labels(self, **kwargs) -> "HistogramWithLabels":
        """Return a histogram with specific labels."""
        label_values = tuple(str(kwargs.get(l, "")) for l in self._label_names)
        return HistogramWithLabels(self, label_values)

    def observe(self, value: float) -> None:
        """Record an observation."""
        self._observe_labels((), value)

    def _observe_labels(self, label_values: tuple, value: float) -> None:
        with self._lock:
            series = self._series.get(label_values)
            if series is None:
                series = HistogramSeries(bucket_counts=[0] * len(self.buckets))
                self._series[label_values] = series
            for i, bucket in enumerate(self.buckets):
                if value <= bucket:
                    series.bucket_counts[i] += 1
            series.total += value
            series.count += 1

    def get(self, **kwargs) -> Optional[HistogramSeries]:
        """Get a copy of the series for a label set."""
        label_values = tuple(str(kwargs.get(l, "")) for l in self._label_names)
        with self._lock:
            series = self._series.get(label_values)
            if series is None:
                return None
            return replace(series, bucket_counts=list(series.bucket_counts))

    def get_all(self) -> dict[tuple, HistogramSeries]:
        """Get copies of all series."""
        with self._lock:
            return {
                k: replace(v, bucket_counts=list(v.bucket_counts))
                for k, v in self._series.items()
            }

    def clear(self) -> None:
        """Drop all series."""
        with self._lock:
            self._series.clear()

    def to_prometheus(self) -> str:
        """Format as Prometheus text."""
        lines = [
            f"# HELP {self.name} {self.description}",
            f"# TYPE {self.name} histogram",
        ]
        with self._lock:
            for label_values, series in self._series.items():
                prefix = _format_labels(self._label_names, label_values)
                sep = "," if prefix else ""

                for bucket, bucket_count in zip(self.buckets, series.bucket_counts):
                    lines.append(f'{self.name}_bucket{{{prefix}{sep}le="{bucket}"}} {bucket_count}')

                lines.append(f'{self.name}_bucket{{{prefix}{sep}le="+Inf"}} {series.count}')
                if prefix:
                    lines.append(f"{self.name}_sum{{{prefix}}} {series.total}")
                    lines.append(f"{self.name}_count{{{prefix}}} {series.count}")
                else:
                    lines.append(f"{self.name}_sum {series.total}")
                    lines.append(f"{self.name}_count {series.count}")

        return "\n".join(lines)


class HistogramWithLabels:
    """Histogram with specific label values."""

    def __init__(self, parent: Histogram, label_values: tuple):
        self._parent = parent
        self._label_values = label_values

    def observe(self, value: float) -> None:
        """Record an observation."""
        self._parent._observe_labels(self._label_values, value)


# =============================================================================
# Request Metrics
# =============================================================================

api_requests_total = Counter(
    name="bankline_api_requests_total",
    description="Total number of backend attempts",
    labels=["operation"],
)

api_latency_seconds = Histogram(
    name="bankline_api_latency_seconds",
    description="Latency of successful backend attempts in seconds",
    labels=["operation"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0, 20.0),
)

api_errors_total = Counter(
    name="bankline_api_errors_total",
    description="Total number of failed backend attempts",
    labels=["operation", "disposition"],
)


# =============================================================================
# Resilience Metrics
# =============================================================================

api_retries_total = Counter(
    name="bankline_api_retries_total",
    description="Total number of timeout-extended retries",
    labels=["operation"],
)

fallback_invocations_total = Counter(
    name="bankline_fallback_invocations_total",
    description="Total number of fallback source invocations",
    labels=["operation"],
)


# =============================================================================
# Metrics Registry
# =============================================================================

_ALL_METRICS = [
    api_requests_total,
    api_latency_seconds,
    api_errors_total,
    api_retries_total,
    fallback_invocations_total,
]


def generate_metrics() -> str:
    """Generate all metrics in Prometheus text format."""
    output = []
    for metric in _ALL_METRICS:
        prometheus_text = metric.to_prometheus()
        if prometheus_text.strip():
            output.append(prometheus_text)
    return "\n\n".join(output)


def reset_metrics() -> None:
    """Clear every registered metric."""
    for metric in _ALL_METRICS:
        metric.clear()
