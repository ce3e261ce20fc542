"""Score suite results and findings into a run report.

Every function here is pure: the same results, findings and registry always
produce the same scores, compliance figures and report text.
"""

import platform
from collections import Counter
from collections.abc import Mapping, Sequence
from datetime import datetime

from security_orchestrator import __version__
from security_orchestrator.models.report import (
    ComplianceMetrics,
    RunMetadata,
    RunReport,
    RunSummary,
)
from security_orchestrator.models.result import (
    Finding,
    Likelihood,
    Severity,
    SuiteResult,
)
from security_orchestrator.registry import OWASP_TOP_10_2021, SuiteRegistry

SEVERITY_WEIGHTS: Mapping[Severity, int] = {
    "CRITICAL": 10,
    "HIGH": 8,
    "MEDIUM": 6,
    "LOW": 4,
    "INFO": 2,
}

LIKELIHOOD_WEIGHTS: Mapping[Likelihood, int] = {
    "High": 3,
    "Medium": 2,
    "Low": 1,
}

SCORE_DEDUCTIONS: Mapping[Severity, int] = {
    "CRITICAL": 20,
    "HIGH": 10,
    "MEDIUM": 5,
}

REMEDIATIONS: Mapping[str, str] = {
    "Cross-Site Scripting": (
        "Implement proper input sanitization and output encoding. "
        "Use Content Security Policy (CSP)."
    ),
    "SQL Injection": (
        "Use parameterized queries and prepared statements. "
        "Implement input validation."
    ),
    "CSRF": (
        "Implement CSRF tokens for all state-changing operations. "
        "Use SameSite cookie attributes."
    ),
    "Authentication Bypass": (
        "Review authentication logic. Implement proper session management "
        "and multi-factor authentication."
    ),
    "Access Control": (
        "Implement role-based access control (RBAC). "
        "Validate permissions on server side."
    ),
}
DEFAULT_REMEDIATION = "Review security implementation and follow OWASP guidelines."

IMPACTS: Mapping[Severity, str] = {
    "CRITICAL": "Complete system compromise, data breach, or service disruption",
    "HIGH": "Significant security vulnerability that could lead to data exposure",
    "MEDIUM": "Moderate security risk that should be addressed promptly",
    "LOW": "Minor security concern with limited impact",
    "INFO": "Informational finding for security awareness",
}

PCI_DSS_CONTROLS: Sequence[str] = (
    "authentication",
    "authorization",
    "input validation",
    "encryption",
    "access control",
    "logging",
)
GDPR_KEYWORDS: Sequence[str] = ("authentication", "authorization", "access")

STANDING_RECOMMENDATIONS: Sequence[str] = (
    "🔒 Implement regular security testing in CI/CD pipeline",
    "📚 Conduct security training for development team",
    "🔍 Set up automated vulnerability scanning",
    "📊 Establish security metrics and KPIs",
)

RISK_HEADLINES: Mapping[Severity, str] = {
    "CRITICAL": (
        "⛔ CRITICAL: Immediate action required to address critical security "
        "vulnerabilities"
    ),
    "HIGH": "🔴 HIGH RISK: Multiple high-severity security issues identified",
    "MEDIUM": "🟡 MEDIUM RISK: Some security concerns need attention",
}
DEFAULT_RISK_HEADLINE = "🟢 LOW RISK: Security posture is generally good"


def remediation_for(category: str) -> str:
    return REMEDIATIONS.get(category, DEFAULT_REMEDIATION)


def impact_for(severity: Severity) -> str:
    return IMPACTS[severity]


def risk_score(severity: Severity, likelihood: Likelihood) -> int:
    """Severity weight multiplied by likelihood weight."""
    return SEVERITY_WEIGHTS[severity] * LIKELIHOOD_WEIGHTS[likelihood]


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def _percent(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def severity_counts(findings: Sequence[Finding]) -> Counter[Severity]:
    return Counter(finding.severity for finding in findings)


def security_score(
    results: Sequence[SuiteResult], findings: Sequence[Finding]
) -> float:
    """Pass rate as a percentage, minus per-finding deductions, in [0, 100]."""
    total_run = sum(r.counts.run for r in results)
    total_passed = sum(r.counts.passed for r in results)
    base = _percent(total_passed, total_run)

    counts = severity_counts(findings)
    deductions = sum(
        counts[severity] * points for severity, points in SCORE_DEDUCTIONS.items()
    )
    return _clamp(base - deductions)


def risk_level(findings: Sequence[Finding]) -> Severity:
    """Classify a run by its worst findings; the first matching rule wins."""
    counts = severity_counts(findings)

    if counts["CRITICAL"] > 0:
        return "CRITICAL"
    if counts["HIGH"] > 5:
        return "HIGH"
    if counts["HIGH"] > 0 or counts["MEDIUM"] > 10:
        return "MEDIUM"
    if counts["MEDIUM"] > 0:
        return "LOW"
    return "INFO"


def standard_compliance(
    registry: SuiteRegistry, findings: Sequence[Finding]
) -> Mapping[str, bool]:
    """Mark a tag compliant when some suite covers it and no finding carries it."""
    declared = registry.declared_tags()
    flagged = {finding.standard_tag for finding in findings}
    tags = [*OWASP_TOP_10_2021, *sorted(declared.difference(OWASP_TOP_10_2021))]
    return {tag: tag in declared and tag not in flagged for tag in tags}


def owasp_coverage(registry: SuiteRegistry) -> float:
    """Percentage of OWASP Top 10 categories declared by at least one suite."""
    tested = registry.declared_tags().intersection(OWASP_TOP_10_2021)
    return _percent(len(tested), len(OWASP_TOP_10_2021))


def compliance_metrics(
    registry: SuiteRegistry, results: Sequence[SuiteResult]
) -> ComplianceMetrics:
    """Estimate per-standard compliance from suite categories and outcomes.

    These are keyword heuristics over category names, not audits.
    """
    pci_tested = sum(
        1
        for r in results
        if any(control in r.category.lower() for control in PCI_DSS_CONTROLS)
    )

    gdpr_results = [
        r for r in results if any(k in r.category.lower() for k in GDPR_KEYWORDS)
    ]
    gdpr_run = sum(r.counts.run for r in gdpr_results)
    gdpr_passed = sum(r.counts.passed for r in gdpr_results)

    iso_passed = sum(1 for r in results if r.status == "passed")

    return ComplianceMetrics(
        owasp=owasp_coverage(registry),
        pci_dss=_clamp(_percent(pci_tested, len(PCI_DSS_CONTROLS))),
        gdpr=_clamp(_percent(gdpr_passed, gdpr_run)),
        iso27001=_clamp(_percent(iso_passed, len(results))),
    )


def score_rating(score: float) -> str:
    if score >= 90:
        return "Excellent"
    if score >= 80:
        return "Good"
    if score >= 70:
        return "Fair"
    if score >= 60:
        return "Poor"
    return "Critical"


def recommendations(
    results: Sequence[SuiteResult],
    findings: Sequence[Finding],
    compliance: Mapping[str, bool],
) -> Sequence[str]:
    """Build the ordered list of recommendations for a run."""
    counts = severity_counts(findings)
    items: list[str] = []

    if counts["CRITICAL"]:
        items.append(
            f"🚨 URGENT: Address {counts['CRITICAL']} critical security "
            "vulnerabilities immediately"
        )

    if counts["HIGH"]:
        items.append(
            f"⚠️ HIGH: Fix {counts['HIGH']} high-severity vulnerabilities "
            "within 48 hours"
        )

    failed = [r.category for r in results if r.status == "failed"]
    if failed:
        items.append(f"🔧 Review and fix failing tests in: {', '.join(failed)}")

    gaps = [
        OWASP_TOP_10_2021.get(tag, tag)
        for tag, compliant in compliance.items()
        if not compliant
    ]
    if gaps:
        items.append(f"📋 Improve OWASP Top 10 compliance for: {', '.join(gaps)}")

    items.extend(STANDING_RECOMMENDATIONS)
    return items


def executive_summary(
    *,
    score: float,
    level: Severity,
    results: Sequence[SuiteResult],
    findings: Sequence[Finding],
    owasp: float,
) -> str:
    """Render the plain-text executive summary."""
    counts = severity_counts(findings)
    total_tests = sum(r.counts.run for r in results)
    total_failed = sum(r.counts.failed for r in results)
    failure_rate = _percent(total_failed, total_tests)
    first_step = (
        "Address critical vulnerabilities immediately"
        if counts["CRITICAL"]
        else "Maintain current security posture"
    )

    lines = [
        "Security Assessment Executive Summary",
        "",
        f"OVERALL SECURITY SCORE: {score:.1f}/100 ({score_rating(score)})",
        f"RISK LEVEL: {level}",
        "",
        "Test Execution Summary:",
        f"- Total Tests Executed: {total_tests}",
        f"- Test Failure Rate: {failure_rate:.1f}%",
        f"- Security Categories Tested: {len(results)}",
        "",
        "Vulnerability Summary:",
        f"- Critical Vulnerabilities: {counts['CRITICAL']}",
        f"- High-Risk Vulnerabilities: {counts['HIGH']}",
        f"- Total Vulnerabilities: {len(findings)}",
        "",
        "Key Findings:",
        RISK_HEADLINES.get(level, DEFAULT_RISK_HEADLINE),
        "",
        "Compliance Status:",
        f"- OWASP Top 10: {owasp:.1f}% coverage",
        "- Critical security controls: "
        f"{'Adequate' if score > 80 else 'Needs improvement'}",
        "",
        "Recommendations:",
        f"1. {first_step}",
        "2. Implement continuous security testing",
        "3. Regular security training and updates",
    ]
    return "\n".join(lines)


def build_report(
    registry: SuiteRegistry,
    results: Sequence[SuiteResult],
    *,
    run_id: str,
    timestamp: datetime,
    duration: float,
    environment: str,
    test_frameworks: Sequence[str],
) -> RunReport:
    """Aggregate suite results into the frozen run report."""
    findings = [finding for result in results for finding in result.findings]

    score = security_score(results, findings)
    level = risk_level(findings)
    compliance = standard_compliance(registry, findings)
    owasp = owasp_coverage(registry)

    summary = RunSummary(
        total_tests=sum(r.counts.run for r in results),
        total_passed=sum(r.counts.passed for r in results),
        total_failed=sum(r.counts.failed for r in results),
        total_skipped=sum(r.counts.skipped for r in results),
        duration=duration,
        security_score=score,
        compliance_score=owasp,
        risk_level=level,
    )

    return RunReport(
        run_id=run_id,
        timestamp=timestamp,
        summary=summary,
        suite_results=tuple(results),
        findings=tuple(findings),
        standard_compliance=compliance,
        compliance_metrics=compliance_metrics(registry, results),
        recommendations=recommendations(results, findings, compliance),
        executive_summary=executive_summary(
            score=score,
            level=level,
            results=results,
            findings=findings,
            owasp=owasp,
        ),
        metadata=RunMetadata(
            environment=environment,
            tool_versions={
                "python": platform.python_version(),
                "security_orchestrator": __version__,
            },
            test_frameworks=tuple(test_frameworks),
            duration=duration,
        ),
    )


def exit_code_for(report: RunReport) -> int:
    """Map a report to the process exit code.

    Returns:
        2 if any critical finding exists, 1 if any test or suite failed,
        otherwise 0

    """
    if report.count_severity("CRITICAL"):
        return 2

    suite_failed = any(r.status in {"failed", "errored"} for r in report.suite_results)
    if report.summary.total_failed > 0 or suite_failed:
        return 1
    return 0
