"""Tests for the resilience layer."""
