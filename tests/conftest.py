"""Fixtures and configuration for pytest."""

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "gold: mark test as a gold file test")
    config.addinivalue_line("markers", "cli: mark test as a command line test")
