"""Plain test runner manifest."""

from security_orchestrator.runners.manifest import RunnerManifest
from security_orchestrator.runners.process.config import ProcessRunnerConfig
from security_orchestrator.runners.process.runner import ProcessRunner

process_manifest = RunnerManifest(
    config_cls=ProcessRunnerConfig,
    runner_factory=ProcessRunner.from_config,
    framework="vitest",
)
