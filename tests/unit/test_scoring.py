"""Tests for the scoring engine."""

from datetime import datetime, timezone

import pytest

from security_orchestrator.models.report import RunReport
from security_orchestrator.models.result import Counts, Finding, Severity, SuiteResult
from security_orchestrator.registry import SuiteRegistry, default_registry
from security_orchestrator.scoring import (
    STANDING_RECOMMENDATIONS,
    build_report,
    compliance_metrics,
    exit_code_for,
    impact_for,
    recommendations,
    risk_level,
    risk_score,
    score_rating,
    security_score,
    standard_compliance,
)
from security_orchestrator.testing.factories import (
    FindingFactory,
    SuiteDescriptorFactory,
    SuiteResultFactory,
)


def findings_of(*severities: Severity, tag: str = "A03:2021") -> list[Finding]:
    return [FindingFactory.build(severity=s, standard_tag=tag) for s in severities]


def result(
    run: int,
    passed: int,
    *,
    status: str = "passed",
    category: str = "Injection Attacks",
) -> SuiteResult:
    return SuiteResultFactory.build(
        status=status,
        category=category,
        counts=Counts(run=run, passed=passed, failed=run - passed),
    )


def make_report(results: list[SuiteResult]) -> RunReport:
    return build_report(
        default_registry(),
        results,
        run_id="security-test-1",
        timestamp=datetime(2026, 1, 1, tzinfo=timezone.utc),
        duration=1.5,
        environment="test",
        test_frameworks=("vitest", "playwright"),
    )


class TestSecurityScore:
    """Tests for security_score."""

    def test_zero_suites_scores_zero(self) -> None:
        """An empty run scores 0."""
        assert security_score([], []) == 0

    def test_pass_rate(self) -> None:
        """Base score is the overall pass rate."""
        results = [result(10, 10), result(10, 5, status="failed")]

        assert security_score(results, []) == 75

    def test_severity_deductions(self) -> None:
        """Deducts 20/10/5 per critical/high/medium finding."""
        results = [result(10, 10)]
        findings = findings_of("CRITICAL", "HIGH", "MEDIUM", "LOW", "INFO")

        assert security_score(results, findings) == 65

    def test_clamped_at_zero(self) -> None:
        """Never drops below 0."""
        findings = findings_of(*["CRITICAL"] * 10)

        assert security_score([result(10, 10)], findings) == 0

    def test_nothing_ran_with_findings(self) -> None:
        """Zero tests run with findings still stays within bounds."""
        assert security_score([result(0, 0)], findings_of("HIGH")) == 0


class TestRiskLevel:
    """Tests for risk_level."""

    @pytest.mark.parametrize(
        ("severities", "expected"),
        [
            ((), "INFO"),
            (("LOW", "INFO"), "INFO"),
            (("MEDIUM",), "LOW"),
            (("MEDIUM",) * 11, "MEDIUM"),
            (("HIGH",), "MEDIUM"),
            (("HIGH",) * 5, "MEDIUM"),
            (("HIGH",) * 6, "HIGH"),
            (("CRITICAL",), "CRITICAL"),
            (("CRITICAL", "LOW", "HIGH", "MEDIUM"), "CRITICAL"),
        ],
    )
    def test_classification(
        self, severities: tuple[Severity, ...], expected: Severity
    ) -> None:
        """First matching rule decides the level."""
        assert risk_level(findings_of(*severities)) == expected


def test_risk_score_table() -> None:
    """Risk score multiplies severity and likelihood weights."""
    assert risk_score("CRITICAL", "Medium") == 20
    assert risk_score("HIGH", "High") == 24
    assert risk_score("INFO", "Low") == 2


def test_impact_lookup() -> None:
    """Every severity has an impact text."""
    assert impact_for("CRITICAL").startswith("Complete system compromise")


@pytest.mark.parametrize(
    ("score", "rating"),
    [(95, "Excellent"), (90, "Excellent"), (85, "Good"), (72, "Fair"),
     (60, "Poor"), (10, "Critical")],
)
def test_score_rating(score: float, rating: str) -> None:
    """Maps scores to ratings."""
    assert score_rating(score) == rating


class TestStandardCompliance:
    """Tests for standard_compliance."""

    def test_covered_tag_without_findings_is_compliant(self) -> None:
        """A declared tag with no findings is compliant."""
        registry = SuiteRegistry(
            [SuiteDescriptorFactory.build(standard_tags=frozenset({"A03:2021"}))]
        )

        compliance = standard_compliance(registry, [])

        assert compliance["A03:2021"] is True
        assert compliance["A02:2021"] is False
        assert len(compliance) == 10

    def test_finding_breaks_compliance(self) -> None:
        """A finding carrying the tag makes it non-compliant."""
        registry = SuiteRegistry(
            [SuiteDescriptorFactory.build(standard_tags=frozenset({"A03:2021"}))]
        )

        compliance = standard_compliance(registry, findings_of("LOW"))

        assert compliance["A03:2021"] is False

    def test_includes_non_owasp_tags(self) -> None:
        """Custom tags declared by suites are also reported."""
        registry = SuiteRegistry(
            [SuiteDescriptorFactory.build(standard_tags=frozenset({"PCI-6.5"}))]
        )

        assert standard_compliance(registry, [])["PCI-6.5"] is True


def test_compliance_metrics_default_registry() -> None:
    """Computes keyword-based percentages for each standard."""
    results = [
        result(10, 8, status="failed", category="Authentication & Authorization"),
        result(10, 10, category="Injection Attacks"),
        result(4, 4, category="API Security"),
    ]

    metrics = compliance_metrics(default_registry(), results)

    assert metrics.owasp == 50
    assert metrics.pci_dss == pytest.approx(100 / 6)
    assert metrics.gdpr == 80
    assert metrics.iso27001 == pytest.approx(200 / 3)


def test_compliance_metrics_empty_results() -> None:
    """Empty runs never divide by zero."""
    metrics = compliance_metrics(SuiteRegistry([]), [])

    assert (metrics.owasp, metrics.pci_dss, metrics.gdpr, metrics.iso27001) == (
        0,
        0,
        0,
        0,
    )


def test_recommendations_order() -> None:
    """Critical, high, failed categories and gaps precede the standing items."""
    results = [result(5, 3, status="failed", category="CSRF Protection")]
    findings = findings_of("CRITICAL", "HIGH", "HIGH")
    compliance = {"A01:2021": True, "A02:2021": False}

    items = recommendations(results, findings, compliance)

    assert items[0].startswith("🚨 URGENT: Address 1 critical")
    assert items[1].startswith("⚠️ HIGH: Fix 2 high-severity")
    assert items[2] == "🔧 Review and fix failing tests in: CSRF Protection"
    assert items[3] == (
        "📋 Improve OWASP Top 10 compliance for: Cryptographic Failures"
    )
    assert list(items[4:]) == list(STANDING_RECOMMENDATIONS)


def test_recommendations_clean_run() -> None:
    """A clean, fully compliant run only gets the standing items."""
    items = recommendations([result(5, 5)], [], {"A01:2021": True})

    assert list(items) == list(STANDING_RECOMMENDATIONS)


class TestBuildReport:
    """Tests for build_report."""

    def test_totals_match_suite_results(self) -> None:
        """Summary totals are sums over suite results."""
        results = [result(10, 10), result(5, 3, status="failed")]

        report = make_report(results)

        assert report.summary.total_tests == 15
        assert report.summary.total_passed == 13
        assert report.summary.total_failed == 2
        assert report.summary.total_passed <= report.summary.total_tests
        assert report.summary.compliance_score == 50

    def test_findings_are_flattened(self) -> None:
        """Report findings flatten every suite's findings in order."""
        first = SuiteResultFactory.build(findings=findings_of("HIGH"))
        second = SuiteResultFactory.build(findings=findings_of("CRITICAL", "LOW"))

        report = make_report([first, second])

        assert [f.severity for f in report.findings] == ["HIGH", "CRITICAL", "LOW"]
        assert report.summary.risk_level == "CRITICAL"

    def test_executive_summary_content(self) -> None:
        """Executive summary interpolates score and counts."""
        report = make_report([result(10, 10)])

        summary = report.executive_summary
        assert "OVERALL SECURITY SCORE: 100.0/100 (Excellent)" in summary
        assert "RISK LEVEL: INFO" in report.executive_summary
        assert "- Total Tests Executed: 10" in report.executive_summary
        assert "- OWASP Top 10: 50.0% coverage" in report.executive_summary
        assert "1. Maintain current security posture" in report.executive_summary

    def test_metadata(self) -> None:
        """Metadata records environment, frameworks and tool versions."""
        report = make_report([])

        assert report.metadata.environment == "test"
        assert report.metadata.test_frameworks == ("vitest", "playwright")
        assert "python" in report.metadata.tool_versions
        assert report.summary.security_score == 0


class TestExitCode:
    """Tests for exit_code_for."""

    def test_clean_run(self) -> None:
        """Returns 0 without failures or critical findings."""
        assert exit_code_for(make_report([result(10, 10)])) == 0

    def test_failures(self) -> None:
        """Returns 1 when tests failed."""
        report = make_report([result(10, 10), result(5, 3, status="failed")])

        assert exit_code_for(report) == 1

    def test_errored_suite(self) -> None:
        """Returns 1 when a suite errored even without failed tests."""
        errored = SuiteResultFactory.build(
            status="errored", counts=Counts(), error_detail="runner missing"
        )

        assert exit_code_for(make_report([result(10, 10), errored])) == 1

    def test_critical_wins(self) -> None:
        """Returns 2 when a critical finding exists, even alongside failures."""
        critical = SuiteResultFactory.build(
            status="failed",
            counts=Counts(run=5, passed=3, failed=2),
            findings=findings_of("CRITICAL"),
        )

        assert exit_code_for(make_report([critical])) == 2
