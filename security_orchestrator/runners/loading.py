"""Loading of runners from entry points."""

from collections.abc import Mapping
from importlib.metadata import entry_points
from typing import Any

from pydantic import ValidationError

from security_orchestrator.errors import OrchestratorError
from security_orchestrator.models.suite import RUNNER_KINDS, RunnerKind
from security_orchestrator.runners.base import SuiteRunner
from security_orchestrator.runners.manifest import RunnerManifest

ENTRY_POINT_GROUP = "security_orchestrator.runners"


class RunnerManifestNotFoundError(OrchestratorError):
    """Raised when a runner is not registered."""


class RunnerConfigError(OrchestratorError):
    """Raised when a runner configuration is invalid."""


def load_runner_manifest(key: str) -> RunnerManifest[Any]:
    """Load a runner manifest by key.

    Args:
        key: The runner key as registered in pyproject.toml
             (e.g., "process", "browser")

    Returns:
        The runner manifest instance

    Raises:
        RunnerManifestNotFoundError: If no runner with the given key is found

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == key:
            manifest: RunnerManifest[Any] = entry.load()
            return manifest

    available = [e.name for e in entries]
    raise RunnerManifestNotFoundError(
        f"Runner '{key}' not found. Available runners: {available}"
    )


def build_runners(
    configs: Mapping[str, Mapping[str, Any]] | None = None,
) -> tuple[Mapping[RunnerKind, SuiteRunner], tuple[str, ...]]:
    """Instantiate every runner kind from its (optional) configuration.

    Args:
        configs: Configuration dictionaries keyed by runner kind

    Returns:
        Runners keyed by kind, and the test framework names they drive

    Raises:
        RunnerManifestNotFoundError: If a runner kind is not registered
        RunnerConfigError: If a configuration fails validation or names an
            unknown runner kind

    """
    configs = configs or {}
    unknown = sorted(set(configs) - set(RUNNER_KINDS))
    if unknown:
        raise RunnerConfigError(f"Unknown runner kind(s) in config: {unknown}")

    runners: dict[RunnerKind, SuiteRunner] = {}
    frameworks: list[str] = []
    for kind in RUNNER_KINDS:
        manifest = load_runner_manifest(kind)
        try:
            config = manifest.config_cls(**configs.get(kind, {}))
        except ValidationError as e:
            raise RunnerConfigError(f"Invalid '{kind}' runner config: {e}") from e
        runners[kind] = manifest.runner_factory(config)
        frameworks.append(manifest.framework)

    return runners, tuple(frameworks)
