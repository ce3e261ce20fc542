"""Plain test-runner (vitest) module."""

from security_orchestrator.runners.process.config import ProcessRunnerConfig
from security_orchestrator.runners.process.manifest import process_manifest
from security_orchestrator.runners.process.runner import ProcessRunner

__all__ = ["ProcessRunner", "ProcessRunnerConfig", "process_manifest"]
