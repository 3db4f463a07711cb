"""Tests for request metrics."""

import pytest

from bankline.monitoring.metrics import (
    Counter,
    Histogram,
    api_requests_total,
    generate_metrics,
    reset_metrics,
)


class TestCounter:
    """Test Counter metric."""

    def test_inc(self):
        """Test increments accumulate."""
        counter = Counter("test_total", "Test counter")
        counter.inc()
        counter.inc(2)
        assert counter.get() == 3

    def test_labels(self):
        """Test label sets are counted separately."""
        counter = Counter("test_total", "Test counter", labels=["operation"])
        counter.labels(operation="login").inc()
        counter.labels(operation="login").inc()
        counter.labels(operation="transfer").inc()
        assert counter.get(operation="login") == 2
        assert counter.get(operation="transfer") == 1
        assert counter.get(operation="deposit") == 0

    def test_cannot_decrease(self):
        """Test negative increments are rejected."""
        counter = Counter("test_total", "Test counter")
        with pytest.raises(ValueError):
            counter.inc(-1)

    def test_to_prometheus(self):
        """Test Prometheus text rendering."""
        counter = Counter("test_total", "Test counter", labels=["operation"])
        counter.labels(operation="login").inc()
        text = counter.to_prometheus()
        assert "# HELP test_total Test counter" in text
        assert "# TYPE test_total counter" in text
        assert 'test_total{operation="login"} 1.0' in text

    def test_clear(self):
        """Test clear() drops every value."""
        counter = Counter("test_total", "Test counter")
        counter.inc()
        counter.clear()
        assert counter.get_all() == {}


class TestHistogram:
    """Test Histogram metric."""

    def test_observe(self):
        """Test observations fold into cumulative buckets, sum and count."""
        histogram = Histogram("test_seconds", "Test histogram", buckets=(0.1, 1.0))
        histogram.observe(0.05)
        histogram.observe(0.5)
        histogram.observe(3.0)

        series = histogram.get()
        assert series.bucket_counts == [1, 2]
        assert series.count == 3
        assert series.total == pytest.approx(3.55)

    def test_get_unknown_labels(self):
        """Test get() returns None for an unseen label set."""
        histogram = Histogram("test_seconds", "Test histogram", labels=["operation"])
        assert histogram.get(operation="login") is None

    def test_get_returns_copy(self):
        """Test callers cannot mutate the stored series."""
        histogram = Histogram("test_seconds", "Test histogram", buckets=(1.0,))
        histogram.observe(0.5)
        histogram.get().bucket_counts[0] = 99
        assert histogram.get().bucket_counts == [1]

    def test_state_size_is_constant(self):
        """Test many observations do not grow the stored state."""
        histogram = Histogram("test_seconds", "Test histogram", labels=["operation"], buckets=(0.1, 1.0))
        for i in range(5000):
            histogram.labels(operation="get_customer_by_id").observe((i % 20) / 10)

        stored = histogram.get_all()
        assert list(stored) == [("get_customer_by_id",)]
        series = stored[("get_customer_by_id",)]
        assert len(series.bucket_counts) == len(histogram.buckets)
        assert series.count == 5000
        assert series.bucket_counts == [500, 2750]

    def test_buckets_are_sorted(self):
        """Test bucket bounds are kept in ascending order."""
        histogram = Histogram("test_seconds", "Test histogram", buckets=(1.0, 0.1))
        assert histogram.buckets == (0.1, 1.0)

    def test_to_prometheus_with_labels(self):
        """Test labelled rendering with cumulative buckets."""
        histogram = Histogram("test_seconds", "Test histogram", labels=["operation"], buckets=(0.1, 1.0))
        histogram.labels(operation="get_balance").observe(0.05)
        histogram.labels(operation="get_balance").observe(0.5)
        text = histogram.to_prometheus()
        assert 'test_seconds_bucket{operation="get_balance",le="0.1"} 1' in text
        assert 'test_seconds_bucket{operation="get_balance",le="1.0"} 2' in text
        assert 'test_seconds_bucket{operation="get_balance",le="+Inf"} 2' in text
        assert 'test_seconds_count{operation="get_balance"} 2' in text

    def test_to_prometheus_without_labels(self):
        """Test unlabelled rendering."""
        histogram = Histogram("test_seconds", "Test histogram", buckets=(1.0,))
        histogram.observe(2.0)
        text = histogram.to_prometheus()
        assert 'test_seconds_bucket{le="1.0"} 0' in text
        assert 'test_seconds_bucket{le="+Inf"} 1' in text
        assert "test_seconds_sum 2.0" in text

    def test_clear(self):
        """Test clear() drops every series."""
        histogram = Histogram("test_seconds", "Test histogram")
        histogram.observe(0.5)
        histogram.clear()
        assert histogram.get_all() == {}


class TestRegistry:
    """Test generate_metrics() and reset_metrics()."""

    def test_generate_metrics_includes_all(self):
        """Test every registered metric is rendered."""
        text = generate_metrics()
        for name in (
            "bankline_api_requests_total",
            "bankline_api_latency_seconds",
            "bankline_api_errors_total",
            "bankline_api_retries_total",
            "bankline_fallback_invocations_total",
        ):
            assert f"# TYPE {name}" in text

    def test_reset_metrics(self):
        """Test reset_metrics() clears registered metrics."""
        api_requests_total.labels(operation="login").inc()
        reset_metrics()
        assert api_requests_total.get(operation="login") == 0
