"""Testcontainers helpers for integration tests."""
