"""Shared fixtures for mailform tests."""

import pytest

from mailform.delivery.dispatchers import (
    DispatcherRegistry,
    outbox,
    register_builtin_dispatchers,
)
from mailform.validation.registry import ValidatorRegistry, register_builtin_validators


@pytest.fixture(autouse=True)
def test_environment(monkeypatch):
    """Run every test in the test environment with the default outbox."""
    monkeypatch.setenv("MAILFORM_ENV", "test")
    monkeypatch.delenv("MAILFORM_DISPATCHER", raising=False)
    monkeypatch.delenv("MAILFORM_LOG_LEVEL", raising=False)


@pytest.fixture(autouse=True)
def reset_registries():
    """Reset validator and dispatcher registries to the built-ins."""
    ValidatorRegistry.clear()
    register_builtin_validators()
    DispatcherRegistry.clear()
    register_builtin_dispatchers()
    outbox.clear()
    yield
    ValidatorRegistry.clear()
    register_builtin_validators()
    DispatcherRegistry.clear()
    register_builtin_dispatchers()
    outbox.clear()


@pytest.fixture
def sent():
    """Descriptors delivered through the default outbox."""
    return outbox.deliveries
