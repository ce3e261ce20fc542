"""Browser-driven test runner manifest."""

from security_orchestrator.runners.browser.config import BrowserRunnerConfig
from security_orchestrator.runners.browser.runner import BrowserRunner
from security_orchestrator.runners.manifest import RunnerManifest

browser_manifest = RunnerManifest(
    config_cls=BrowserRunnerConfig,
    runner_factory=BrowserRunner.from_config,
    framework="playwright",
)
