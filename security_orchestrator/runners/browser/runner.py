"""Browser-driven test runner implementation."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from security_orchestrator.models.suite import SuiteDescriptor
from security_orchestrator.runners.base import SuiteRunner
from security_orchestrator.runners.browser.config import BrowserRunnerConfig


@dataclass(frozen=True, kw_only=True)
class BrowserRunner(SuiteRunner):
    """Runs a suite through a browser-automation test runner."""

    config: BrowserRunnerConfig

    @classmethod
    def from_config(cls, config: BrowserRunnerConfig) -> "BrowserRunner":
        return cls(config=config)

    def build_command(
        self, descriptor: SuiteDescriptor, suite_path: Path
    ) -> Sequence[str]:
        command = [
            self.config.executable,
            *self.config.args,
            str(suite_path),
            *self.config.reporter_args,
        ]
        if self.config.pass_timeout:
            command.append(f"--timeout={int(descriptor.timeout * 1000)}")
        return command
