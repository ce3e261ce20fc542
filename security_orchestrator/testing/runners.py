"""Scripted runner returning canned outputs, for tests."""

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from security_orchestrator.models.suite import SuiteDescriptor
from security_orchestrator.runners.base import RunnerOutput, SuiteRunner


@dataclass(frozen=True, kw_only=True)
class ScriptedRunner(SuiteRunner):
    """Runner that replays a configured outcome per suite name.

    Each outcome is either a RunnerOutput to return or an exception to raise.
    Delays simulate suites finishing in a different order than registered.
    """

    outcomes: Mapping[str, RunnerOutput | BaseException]
    delays: Mapping[str, float] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    def build_command(
        self, descriptor: SuiteDescriptor, suite_path: Path
    ) -> Sequence[str]:  # pragma: no cover
        return ["scripted", str(suite_path)]

    async def run(self, descriptor: SuiteDescriptor, working_dir: Path) -> RunnerOutput:
        self.calls.append(descriptor.name)
        await asyncio.sleep(self.delays.get(descriptor.name, 0))
        outcome = self.outcomes[descriptor.name]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome
