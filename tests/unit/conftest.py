"""Shared fixtures for unit tests."""

import pytest

from bibaudit.schema import SchemaRegistry, default_registry


@pytest.fixture(scope="session")
def registry() -> SchemaRegistry:
    """Standard rule registry, built once for all unit tests."""
    return default_registry()
