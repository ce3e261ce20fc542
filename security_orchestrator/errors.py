"""Exceptions raised by the orchestrator and its runners."""


class OrchestratorError(Exception):
    """Raised when the orchestrator cannot produce a report."""


class OutputDirectoryError(OrchestratorError):
    """Raised when the run's output directory cannot be prepared."""


class ReportEmissionError(OrchestratorError):
    """Raised when no report artifact can be written."""


class RunnerError(Exception):
    """Raised when a suite's runner process cannot be executed."""


class RunnerNotFoundError(RunnerError):
    """Raised when the runner executable does not exist."""


class SuiteFileNotFoundError(RunnerError):
    """Raised when a suite's file is missing from the working directory."""


class SuiteTimeoutError(RunnerError, TimeoutError):
    """Raised when a suite exceeds its configured timeout."""
