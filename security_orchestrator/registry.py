"""Built-in catalog of security test suites."""

from collections.abc import Iterable, Iterator, Mapping, Sequence

from security_orchestrator.models.suite import SuiteDescriptor

OWASP_TOP_10_2021: Mapping[str, str] = {
    "A01:2021": "Broken Access Control",
    "A02:2021": "Cryptographic Failures",
    "A03:2021": "Injection",
    "A04:2021": "Insecure Design",
    "A05:2021": "Security Misconfiguration",
    "A06:2021": "Vulnerable and Outdated Components",
    "A07:2021": "Identification and Authentication Failures",
    "A08:2021": "Software and Data Integrity Failures",
    "A09:2021": "Security Logging and Monitoring Failures",
    "A10:2021": "Server-Side Request Forgery (SSRF)",
}

BROWSER_CAPABILITY = "playwright"

DEFAULT_SUITES: Sequence[SuiteDescriptor] = (
    SuiteDescriptor(
        name="SQL Injection Tests",
        file="test/security/sql-injection-tests.ts",
        category="Injection Attacks",
        standard_tags=frozenset({"A03:2021"}),
        estimated_tests=85,
        timeout=300,
    ),
    SuiteDescriptor(
        name="XSS Attack Tests",
        file="test/security/xss-attack-tests.ts",
        category="XSS Prevention",
        standard_tags=frozenset({"A03:2021", "A05:2021"}),
        estimated_tests=105,
        timeout=240,
    ),
    SuiteDescriptor(
        name="Authentication Security",
        file="test/security/authentication-security-tests.ts",
        category="Authentication & Authorization",
        standard_tags=frozenset({"A01:2021", "A07:2021"}),
        estimated_tests=120,
        timeout=360,
    ),
    SuiteDescriptor(
        name="CSRF Protection Tests",
        file="test/security/csrf-tests.ts",
        category="CSRF Protection",
        standard_tags=frozenset({"A01:2021", "A08:2021"}),
        estimated_tests=95,
        timeout=300,
    ),
    SuiteDescriptor(
        name="API Security Tests",
        file="test/security/api-security-tests.ts",
        category="API Security",
        standard_tags=frozenset({"A01:2021", "A03:2021", "A05:2021"}),
        estimated_tests=150,
        timeout=480,
    ),
    SuiteDescriptor(
        name="File Upload Security",
        file="test/security/file-upload-security-tests.ts",
        category="File Upload Security",
        standard_tags=frozenset({"A03:2021", "A05:2021"}),
        estimated_tests=75,
        timeout=300,
    ),
    SuiteDescriptor(
        name="GUI Security Tests",
        file="test/e2e/security/comprehensive-gui-security.spec.ts",
        category="UI Security",
        standard_tags=frozenset({"A01:2021", "A03:2021", "A07:2021"}),
        estimated_tests=200,
        timeout=600,
        mode="serial",
        runner="browser",
        capabilities=frozenset({BROWSER_CAPABILITY}),
    ),
    SuiteDescriptor(
        name="Security Penetration Edge Cases",
        file="test/e2e/security-penetration-edge-cases.spec.ts",
        category="Penetration Testing",
        standard_tags=frozenset({"A01:2021", "A03:2021", "A05:2021", "A07:2021"}),
        estimated_tests=150,
        timeout=720,
        mode="serial",
        runner="browser",
        capabilities=frozenset({BROWSER_CAPABILITY}),
    ),
)


class DuplicateSuiteError(ValueError):
    """Raised when two descriptors share a name."""


class SuiteRegistry:
    """Ordered, read-only collection of suite descriptors."""

    __slots__ = ("_descriptors",)

    def __init__(self, descriptors: Iterable[SuiteDescriptor]) -> None:
        self._descriptors = tuple(descriptors)

        seen: set[str] = set()
        for descriptor in self._descriptors:
            if descriptor.name in seen:
                raise DuplicateSuiteError(f"Duplicate suite name: {descriptor.name}")
            seen.add(descriptor.name)

    def __iter__(self) -> Iterator[SuiteDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    @property
    def descriptors(self) -> Sequence[SuiteDescriptor]:
        return self._descriptors

    def partition(self) -> tuple[Sequence[SuiteDescriptor], Sequence[SuiteDescriptor]]:
        """Split descriptors into (concurrent, serial), keeping registry order."""
        concurrent = tuple(d for d in self._descriptors if d.mode == "concurrent")
        serial = tuple(d for d in self._descriptors if d.mode == "serial")
        return concurrent, serial

    def estimated_total(self) -> int:
        return sum(d.estimated_tests for d in self._descriptors)

    def declared_tags(self) -> frozenset[str]:
        """All standard tags claimed by at least one suite."""
        return frozenset(tag for d in self._descriptors for tag in d.standard_tags)


def default_registry() -> SuiteRegistry:
    """Create the registry of built-in security suites."""
    return SuiteRegistry(DEFAULT_SUITES)
