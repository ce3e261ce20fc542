"""Browser-driven test runner (playwright) module."""

from security_orchestrator.runners.browser.config import BrowserRunnerConfig
from security_orchestrator.runners.browser.manifest import browser_manifest
from security_orchestrator.runners.browser.runner import BrowserRunner

__all__ = ["BrowserRunner", "BrowserRunnerConfig", "browser_manifest"]
