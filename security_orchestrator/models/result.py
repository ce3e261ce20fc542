"""Models for suite execution results and extracted findings."""

from collections.abc import Sequence
from typing import Literal, Self, TypeAlias

from pydantic import Field, computed_field, model_validator

from security_orchestrator.models.base import Model

Severity: TypeAlias = Literal["CRITICAL", "HIGH", "MEDIUM", "LOW", "INFO"]
Likelihood: TypeAlias = Literal["High", "Medium", "Low"]
SuiteStatus: TypeAlias = Literal["passed", "failed", "skipped", "errored"]

# Most severe first
SEVERITIES: Sequence[Severity] = ("CRITICAL", "HIGH", "MEDIUM", "LOW", "INFO")


class Counts(Model):
    """Test counts decoded from a runner's output."""

    run: int = Field(default=0, ge=0)
    passed: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _outcomes_within_run(self) -> Self:
        if self.passed + self.failed + self.skipped > self.run:
            raise ValueError("passed + failed + skipped must not exceed run")
        return self


class Finding(Model):
    """A vulnerability signal extracted from a suite's output."""

    id: str
    title: str
    description: str
    severity: Severity
    category: str
    standard_tag: str
    location: str
    remediation: str
    impact: str
    likelihood: Likelihood
    risk_score: int
    references: Sequence[str] = Field(default_factory=tuple)


class SuiteResult(Model):
    """Outcome of one suite within a run."""

    name: str
    category: str
    status: SuiteStatus
    duration: float = Field(..., ge=0, description="Wall-clock seconds")
    counts: Counts = Field(default_factory=Counts)
    findings: Sequence[Finding] = Field(default_factory=tuple)
    standard_tags: frozenset[str] = Field(default_factory=frozenset)
    error_detail: str | None = None

    @model_validator(mode="after")
    def _error_detail_only_when_errored(self) -> Self:
        if (self.status == "errored") != (self.error_detail is not None):
            raise ValueError("error_detail must be set iff status is errored")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def coverage(self) -> float:
        """Ratio of passed to run tests, 0 when nothing ran."""
        if self.counts.run == 0:
            return 0.0
        return self.counts.passed / self.counts.run
