"""Security test orchestrator coordinating suite execution for one run."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from security_orchestrator.errors import (
    OutputDirectoryError,
    RunnerError,
    SuiteTimeoutError,
)
from security_orchestrator.extractor import extract_findings
from security_orchestrator.models.report import RunReport
from security_orchestrator.models.result import SuiteResult
from security_orchestrator.models.suite import RunnerKind, SuiteDescriptor
from security_orchestrator.normalizer import normalize
from security_orchestrator.registry import SuiteRegistry
from security_orchestrator.runners.base import SuiteRunner
from security_orchestrator.scoring import build_report

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class SecurityTestOrchestrator:
    """Runs every registered suite and scores the run.

    Concurrent suites are launched together and awaited as a group; serial
    suites follow one at a time because they share an exclusive resource.
    Results keep registry order within each phase, concurrent phase first.
    """

    registry: SuiteRegistry
    runners: Mapping[RunnerKind, SuiteRunner]
    working_dir: Path
    output_dir: Path
    selected: frozenset[str] | None = None
    environment: str = "test"
    test_frameworks: Sequence[str] = ()

    def prepare(self) -> None:
        """Create the output directory before any suite starts.

        Raises:
            OutputDirectoryError: If the directory cannot be created

        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(
                f"Cannot create output directory {self.output_dir}: {e}"
            ) from e

    async def run(self) -> RunReport:
        """Execute all suites and build the run report."""
        loop = asyncio.get_running_loop()
        start = loop.time()
        timestamp = datetime.now(timezone.utc)

        self.prepare()

        log.info(
            "Executing ~%d security tests across %d suite(s)",
            self.registry.estimated_total(),
            len(self.registry),
        )
        results = await self.execute_suites()

        return build_report(
            self.registry,
            results,
            run_id=f"security-test-{int(timestamp.timestamp() * 1000)}",
            timestamp=timestamp,
            duration=loop.time() - start,
            environment=self.environment,
            test_frameworks=self.test_frameworks,
        )

    async def execute_suites(self) -> Sequence[SuiteResult]:
        """Run the concurrent phase, then the serial phase."""
        concurrent, serial = self.registry.partition()
        results: list[SuiteResult] = []

        if concurrent:
            log.info("Running %d concurrent suite(s)...", len(concurrent))
            outcomes = await asyncio.gather(
                *(self._run_suite(descriptor) for descriptor in concurrent),
                return_exceptions=True,
            )
            results.extend(self._process_results(concurrent, outcomes))

        for descriptor in serial:
            log.info("Running serial suite: %s", descriptor.name)
            try:
                result = await self._run_suite(descriptor)
            except Exception as e:
                result = self._error_result(descriptor, e)
            results.append(result)

        return results

    def _process_results(
        self,
        descriptors: Sequence[SuiteDescriptor],
        outcomes: Sequence[SuiteResult | BaseException],
    ) -> Sequence[SuiteResult]:
        """Convert gathered outcomes to results, keeping registry order."""
        final_results: list[SuiteResult] = []

        for descriptor, outcome in zip(descriptors, outcomes, strict=True):
            if isinstance(outcome, SuiteResult):
                final_results.append(outcome)
            elif isinstance(outcome, Exception):
                final_results.append(self._error_result(descriptor, outcome))
            else:
                raise outcome

        return final_results

    def _error_result(
        self, descriptor: SuiteDescriptor, error: BaseException, duration: float = 0.0
    ) -> SuiteResult:
        log.error("Suite %s errored: %s", descriptor.name, error, exc_info=error)
        return SuiteResult(
            name=descriptor.name,
            category=descriptor.category,
            status="errored",
            duration=duration,
            standard_tags=descriptor.standard_tags,
            error_detail=str(error) or type(error).__name__,
        )

    async def _run_suite(self, descriptor: SuiteDescriptor) -> SuiteResult:
        """Run one suite and normalize its output into a result."""
        if self.selected is not None and descriptor.name not in self.selected:
            log.info("Skipping %s (not selected)", descriptor.name)
            return SuiteResult(
                name=descriptor.name,
                category=descriptor.category,
                status="skipped",
                duration=0.0,
                standard_tags=descriptor.standard_tags,
            )

        runner = self.runners[descriptor.runner]
        loop = asyncio.get_running_loop()
        start = loop.time()

        log.info(
            "Executing %s (~%d tests)", descriptor.name, descriptor.estimated_tests
        )
        try:
            output = await runner.run(descriptor, self.working_dir)
        except SuiteTimeoutError as e:
            log.warning("Suite %s timed out", descriptor.name)
            return self._error_result(descriptor, e, loop.time() - start)
        except RunnerError as e:
            return self._error_result(descriptor, e, loop.time() - start)

        counts, status = normalize(output.output, output.exit_code, descriptor)
        findings = extract_findings(output.output, descriptor)

        error_detail = None
        if status == "errored":
            error_detail = (
                f"Runner exited with code {output.exit_code} without reporting tests"
            )

        log.info(
            "Completed %s: status=%s tests=%d findings=%d duration=%.2fs",
            descriptor.name,
            status,
            counts.run,
            len(findings),
            output.duration,
        )
        return SuiteResult(
            name=descriptor.name,
            category=descriptor.category,
            status=status,
            duration=output.duration,
            counts=counts,
            findings=findings,
            standard_tags=descriptor.standard_tags,
            error_detail=error_detail,
        )
