"""Abstract base class for suite runners."""

import asyncio
import contextlib
import logging
import os
import signal
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from security_orchestrator.errors import (
    RunnerError,
    RunnerNotFoundError,
    SuiteFileNotFoundError,
    SuiteTimeoutError,
)
from security_orchestrator.models.suite import SuiteDescriptor

log = logging.getLogger(__name__)

# Upper bound on reaping a killed runner whose pipes stay open
REAP_TIMEOUT = 1.0


@dataclass(frozen=True, kw_only=True)
class RunnerOutput:
    """Combined output and exit status of a finished runner process.

    A non-zero exit code is a normal outcome: it signals test failures.
    """

    output: str
    exit_code: int
    duration: float


@dataclass(frozen=True, kw_only=True)
class SuiteRunner(ABC):
    """Abstract base for external test runners.

    Subclasses only decide which command executes a suite; spawning, timeout
    enforcement and output capture are shared.
    """

    @abstractmethod
    def build_command(
        self, descriptor: SuiteDescriptor, suite_path: Path
    ) -> Sequence[str]:
        """Build the command line that runs one suite.

        Args:
            descriptor: Suite to execute
            suite_path: Absolute path of the suite file

        Returns:
            Executable followed by its arguments

        """

    async def run(self, descriptor: SuiteDescriptor, working_dir: Path) -> RunnerOutput:
        """Run a suite and capture its combined stdout/stderr.

        Args:
            descriptor: Suite to execute
            working_dir: Project root the runner is started in

        Returns:
            Output text, exit code and duration of the runner process

        Raises:
            SuiteFileNotFoundError: If the suite file does not exist
            RunnerNotFoundError: If the runner executable cannot be found
            RunnerError: If the process cannot be spawned
            SuiteTimeoutError: If the suite exceeds its timeout

        """
        suite_path = (working_dir / descriptor.file).resolve()
        if not suite_path.exists():
            raise SuiteFileNotFoundError(f"Test file not found: {suite_path}")

        command = self.build_command(descriptor, suite_path)
        loop = asyncio.get_running_loop()
        start = loop.time()

        log.debug("Spawning %s: %s", descriptor.name, " ".join(command))
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=working_dir,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                start_new_session=True,
            )
        except FileNotFoundError as e:
            raise RunnerNotFoundError(
                f"Runner executable not found: {command[0]}"
            ) from e
        except OSError as e:
            raise RunnerError(f"Failed to start {command[0]}: {e}") from e

        try:
            stdout, _ = await asyncio.wait_for(
                process.communicate(), timeout=descriptor.timeout
            )
        except TimeoutError:
            await self._kill(process)
            raise SuiteTimeoutError(
                f"{descriptor.name} did not complete within {descriptor.timeout:g} "
                "seconds"
            ) from None

        exit_code = await process.wait()
        return RunnerOutput(
            output=stdout.decode(errors="replace"),
            exit_code=exit_code,
            duration=loop.time() - start,
        )

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        """Kill the runner's whole process group and reap it.

        Runners such as npx leave child processes holding the output pipe, so
        killing only the direct child would not end the run.
        """
        with contextlib.suppress(ProcessLookupError):
            os.killpg(process.pid, signal.SIGKILL)
        try:
            await asyncio.wait_for(process.wait(), timeout=REAP_TIMEOUT)
        except TimeoutError:
            log.warning("Runner process %d did not exit after kill", process.pid)
