"""Tests for request metrics."""
