"""Tests for SuiteDescriptor validation."""

import pytest
from pydantic import ValidationError

from security_orchestrator.models.suite import SuiteDescriptor


def test_concurrent_suite_needs_no_capabilities() -> None:
    """Concurrent suites are valid without capabilities."""
    descriptor = SuiteDescriptor(
        name="API Security Tests",
        file="test/security/api-security-tests.ts",
        category="API Security",
        timeout=60,
    )

    assert descriptor.mode == "concurrent"
    assert descriptor.runner == "process"
    assert descriptor.capabilities == frozenset()


def test_serial_suite_requires_capability() -> None:
    """Rejects serial suites that do not name the resource they monopolize."""
    with pytest.raises(ValidationError, match="must declare the capability"):
        SuiteDescriptor(
            name="GUI Security Tests",
            file="gui.spec.ts",
            category="UI Security",
            timeout=60,
            mode="serial",
        )


def test_serial_suite_with_capability() -> None:
    """Accepts serial suites with a capability."""
    descriptor = SuiteDescriptor(
        name="GUI Security Tests",
        file="gui.spec.ts",
        category="UI Security",
        timeout=60,
        mode="serial",
        runner="browser",
        capabilities=frozenset({"playwright"}),
    )

    assert descriptor.capabilities == {"playwright"}


@pytest.mark.parametrize("timeout", [0, -5])
def test_rejects_non_positive_timeout(timeout: float) -> None:
    """Rejects zero or negative timeouts."""
    with pytest.raises(ValidationError):
        SuiteDescriptor(name="s", file="s.ts", category="c", timeout=timeout)


def test_rejects_empty_name() -> None:
    """Rejects descriptors without a name."""
    with pytest.raises(ValidationError):
        SuiteDescriptor(name="", file="s.ts", category="c", timeout=10)


def test_descriptor_is_frozen() -> None:
    """Descriptors cannot be mutated after construction."""
    descriptor = SuiteDescriptor(name="s", file="s.ts", category="c", timeout=10)

    with pytest.raises(ValidationError):
        descriptor.timeout = 20  # type: ignore[misc]
