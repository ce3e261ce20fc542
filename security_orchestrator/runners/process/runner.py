"""Plain test runner implementation."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from security_orchestrator.models.suite import SuiteDescriptor
from security_orchestrator.runners.base import SuiteRunner
from security_orchestrator.runners.process.config import ProcessRunnerConfig


@dataclass(frozen=True, kw_only=True)
class ProcessRunner(SuiteRunner):
    """Runs a suite with an in-process test runner such as vitest."""

    config: ProcessRunnerConfig

    @classmethod
    def from_config(cls, config: ProcessRunnerConfig) -> "ProcessRunner":
        return cls(config=config)

    def build_command(
        self, descriptor: SuiteDescriptor, suite_path: Path
    ) -> Sequence[str]:
        return [
            self.config.executable,
            *self.config.args,
            str(suite_path),
            *self.config.reporter_args,
        ]
