"""Models for the run-level security report."""

from collections.abc import Mapping, Sequence
from datetime import datetime

from pydantic import Field

from security_orchestrator.models.base import Model
from security_orchestrator.models.result import Finding, Severity, SuiteResult


class RunSummary(Model):
    """Aggregated counts and scores for a run."""

    total_tests: int
    total_passed: int
    total_failed: int
    total_skipped: int
    duration: float
    security_score: float = Field(..., ge=0, le=100)
    compliance_score: float = Field(..., ge=0, le=100)
    risk_level: Severity


class ComplianceMetrics(Model):
    """Estimated compliance percentages per standard."""

    owasp: float
    pci_dss: float
    gdpr: float
    iso27001: float


class RunMetadata(Model):
    """Execution environment details."""

    environment: str
    tool_versions: Mapping[str, str]
    test_frameworks: Sequence[str]
    duration: float


class RunReport(Model):
    """Complete, immutable report for one orchestrator invocation."""

    run_id: str
    timestamp: datetime
    summary: RunSummary
    suite_results: Sequence[SuiteResult]
    findings: Sequence[Finding]
    standard_compliance: Mapping[str, bool]
    compliance_metrics: ComplianceMetrics
    recommendations: Sequence[str]
    executive_summary: str
    metadata: RunMetadata

    def count_severity(self, severity: Severity) -> int:
        """Count findings of the given severity."""
        return sum(1 for finding in self.findings if finding.severity == severity)
