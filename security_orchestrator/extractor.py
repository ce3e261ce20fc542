"""Extract vulnerability findings from suite output by pattern matching."""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from security_orchestrator.models.result import Finding, Likelihood, Severity
from security_orchestrator.models.suite import SuiteDescriptor
from security_orchestrator.scoring import impact_for, remediation_for, risk_score

DEFAULT_LIKELIHOOD: Likelihood = "Medium"


@dataclass(frozen=True, kw_only=True)
class VulnerabilityPattern:
    """A text signature of a vulnerability class in suite output."""

    pattern: re.Pattern[str]
    severity: Severity
    category: str
    standard_tag: str


SECURITY_PATTERNS: Sequence[VulnerabilityPattern] = (
    VulnerabilityPattern(
        pattern=re.compile(r"XSS.*vulnerable|vulnerable.*XSS", re.IGNORECASE),
        severity="HIGH",
        category="Cross-Site Scripting",
        standard_tag="A03:2021",
    ),
    VulnerabilityPattern(
        pattern=re.compile(r"SQL.*injection|injection.*SQL", re.IGNORECASE),
        severity="CRITICAL",
        category="SQL Injection",
        standard_tag="A03:2021",
    ),
    VulnerabilityPattern(
        pattern=re.compile(r"CSRF.*vulnerable|vulnerable.*CSRF", re.IGNORECASE),
        severity="MEDIUM",
        category="CSRF",
        standard_tag="A01:2021",
    ),
    VulnerabilityPattern(
        pattern=re.compile(
            r"authentication.*failed|unauthorized.*access", re.IGNORECASE
        ),
        severity="HIGH",
        category="Authentication Bypass",
        standard_tag="A07:2021",
    ),
    VulnerabilityPattern(
        pattern=re.compile(r"authorization.*failed|access.*control", re.IGNORECASE),
        severity="HIGH",
        category="Access Control",
        standard_tag="A01:2021",
    ),
)


def finding_id(suite_name: str, pattern_index: int, match_index: int) -> str:
    """Build the deterministic identifier of a finding."""
    slug = re.sub(r"\s+", "-", suite_name)
    return f"VULN-{slug}-{pattern_index}-{match_index}"


def extract_findings(
    output: str,
    descriptor: SuiteDescriptor,
    patterns: Sequence[VulnerabilityPattern] = SECURITY_PATTERNS,
) -> Sequence[Finding]:
    """Scan suite output for vulnerability signatures.

    Every match of every pattern yields one finding, in pattern order then
    match order.
    """
    findings: list[Finding] = []

    for pattern_index, signature in enumerate(patterns):
        for match_index, match in enumerate(signature.pattern.finditer(output)):
            findings.append(
                Finding(
                    id=finding_id(descriptor.name, pattern_index, match_index),
                    title=f"{signature.category} Vulnerability Detected",
                    description=(
                        "Security test detected potential "
                        f"{signature.category.lower()} vulnerability: "
                        f"{match.group(0)}"
                    ),
                    severity=signature.severity,
                    category=signature.category,
                    standard_tag=signature.standard_tag,
                    location=descriptor.file,
                    remediation=remediation_for(signature.category),
                    impact=impact_for(signature.severity),
                    likelihood=DEFAULT_LIKELIHOOD,
                    risk_score=risk_score(signature.severity, DEFAULT_LIKELIHOOD),
                )
            )

    return findings
