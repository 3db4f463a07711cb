"""Monitoring module for Bankline.

This module provides:
- Prometheus-format metrics for backend requests, retries and fallbacks
"""

from .metrics import (
    api_errors_total,
    api_latency_seconds,
    api_requests_total,
    api_retries_total,
    fallback_invocations_total,
    generate_metrics,
    reset_metrics,
)

__all__ = [
    "api_requests_total",
    "api_latency_seconds",
    "api_errors_total",
    "api_retries_total",
    "fallback_invocations_total",
    "generate_metrics",
    "reset_metrics",
]
