"""Models for security test suite descriptors."""

from typing import Literal, Self, TypeAlias

from pydantic import Field, model_validator

from security_orchestrator.models.base import Model

ExecutionMode: TypeAlias = Literal["concurrent", "serial"]
RunnerKind: TypeAlias = Literal["process", "browser"]

RUNNER_KINDS: tuple[RunnerKind, ...] = ("process", "browser")


class SuiteDescriptor(Model):
    """Static description of one externally-executed security test suite."""

    name: str = Field(..., min_length=1, description="Human-readable suite name")
    file: str = Field(
        ..., description="Suite file passed to the runner, relative to working dir"
    )
    category: str = Field(..., description="Category label used in reports")
    standard_tags: frozenset[str] = Field(
        default_factory=frozenset,
        description="Compliance control codes the suite covers (e.g. A03:2021)",
    )
    estimated_tests: int = Field(
        default=0, ge=0, description="Approximate test count, display only"
    )
    timeout: float = Field(..., gt=0, description="Suite timeout in seconds")
    mode: ExecutionMode = Field(default="concurrent", description="Scheduling phase")
    runner: RunnerKind = Field(default="process", description="Runner to invoke")
    capabilities: frozenset[str] = Field(
        default_factory=frozenset,
        description="External resources the suite needs exclusive access to",
    )

    @model_validator(mode="after")
    def _serial_requires_capability(self) -> Self:
        if self.mode == "serial" and not self.capabilities:
            raise ValueError(
                f"Serial suite '{self.name}' must declare the capability it "
                "monopolizes"
            )
        return self
