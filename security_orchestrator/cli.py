"""CLI entry point for the security test orchestrator."""

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from security_orchestrator.errors import OrchestratorError
from security_orchestrator.models.report import RunReport
from security_orchestrator.models.result import SEVERITIES
from security_orchestrator.orchestrator import SecurityTestOrchestrator
from security_orchestrator.registry import default_registry
from security_orchestrator.reporting import ReportEmitter
from security_orchestrator.runners.loading import RunnerConfigError, build_runners
from security_orchestrator.scoring import exit_code_for, score_rating

EXIT_ORCHESTRATOR_FAILURE = 3
ENVIRONMENT_VARIABLE = "SECURITY_TEST_ENV"
DEFAULT_OUTPUT_DIR = Path("test-results") / "security"

STATUS_SYMBOLS = {
    "passed": "✓",
    "failed": "✗",
    "errored": "!",
    "skipped": "-",
}

EXIT_MESSAGES = {
    0: "✅ All security tests passed successfully!",
    1: "⚠️  Some security tests failed. Review required.",
    2: "❌ CRITICAL vulnerabilities detected. Immediate action required!",
}


def log_results_summary(
    log: logging.Logger, report: RunReport, output_dir: Path
) -> None:
    """Log per-suite outcomes followed by the run summary block."""
    summary = report.summary

    log.info("=" * 80)
    log.info("Security Test Results:")
    log.info("=" * 80)

    for result in report.suite_results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info(
            "%s %s: %s (%d/%d passed, %.2fs)",
            symbol,
            result.name,
            result.status,
            result.counts.passed,
            result.counts.run,
            result.duration,
        )
        if result.error_detail:
            log.info("  Error: %s", result.error_detail)

    log.info("=" * 80)
    log.info(
        "Security Score: %.1f/100 (%s)",
        summary.security_score,
        score_rating(summary.security_score),
    )
    log.info("Risk Level: %s", summary.risk_level)
    log.info(
        "Tests: %d executed, %d passed, %d failed",
        summary.total_tests,
        summary.total_passed,
        summary.total_failed,
    )
    log.info("Vulnerabilities: %d", len(report.findings))
    for severity in SEVERITIES[:-1]:
        log.info("  %s: %d", severity.capitalize(), report.count_severity(severity))
    log.info("Duration: %.2f seconds", summary.duration)
    log.info("Top Recommendations:")
    for recommendation in report.recommendations[:3]:
        log.info("  • %s", recommendation)
    log.info("Reports saved to: %s", output_dir)
    log.info("=" * 80)


def format_output(report: RunReport, exit_code: int) -> dict[str, Any]:
    """Format a compact, machine-readable run summary for stdout."""
    return {
        "run_id": report.run_id,
        "exit_code": exit_code,
        "security_score": round(report.summary.security_score, 1),
        "risk_level": report.summary.risk_level,
        "total": report.summary.total_tests,
        "passed": report.summary.total_passed,
        "failed": report.summary.total_failed,
        "skipped": report.summary.total_skipped,
        "findings": {
            severity: report.count_severity(severity) for severity in SEVERITIES
        },
        "suites": [
            {
                "name": result.name,
                "status": result.status,
                "tests": result.counts.run,
                "findings": len(result.findings),
            }
            for result in report.suite_results
        ],
    }


def parse_runner_config(runner_config: str) -> Mapping[str, Mapping[str, Any]]:
    """Parse the JSON runner configuration (empty string means defaults)."""
    if not runner_config.strip():
        return {}
    try:
        config = json.loads(runner_config)
    except json.JSONDecodeError as e:
        raise RunnerConfigError(f"Runner config is not valid JSON: {e}") from e
    if not isinstance(config, dict):
        raise RunnerConfigError("Runner config must be a JSON object")
    return config


async def run(
    working_dir: Path,
    output_dir: Path,
    selected_suites: Sequence[str] = (),
    runner_config_json: str = "",
    environment: str = "test",
) -> int:
    """Run the security suites, write reports and return the exit code."""
    log = logging.getLogger("security_orchestrator")

    registry = default_registry()
    unknown = sorted(set(selected_suites) - {d.name for d in registry})
    if unknown:
        log.warning("Ignoring unknown suite name(s): %s", ", ".join(unknown))
        if len(unknown) == len(set(selected_suites)):
            log.error("None of the selected suites exist, nothing to run")
            return EXIT_ORCHESTRATOR_FAILURE

    try:
        runners, frameworks = build_runners(parse_runner_config(runner_config_json))
        orchestrator = SecurityTestOrchestrator(
            registry=registry,
            runners=runners,
            working_dir=working_dir,
            output_dir=output_dir,
            selected=frozenset(selected_suites) if selected_suites else None,
            environment=environment,
            test_frameworks=frameworks,
        )
        report = await orchestrator.run()
        ReportEmitter(output_dir=output_dir).emit(report)
    except OrchestratorError as e:
        log.error("Security test execution failed: %s", e)
        return EXIT_ORCHESTRATOR_FAILURE

    log_results_summary(log, report, output_dir)

    exit_code = exit_code_for(report)
    print(json.dumps(format_output(report, exit_code), indent=2))
    log.info(EXIT_MESSAGES[exit_code])
    return exit_code


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run the security test suites and generate compliance reports"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory for report artifacts (default: test-results/security)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--working-dir",
        type=Path,
        default=Path.cwd(),
        help="Project root the test runners are started in",
    )
    parser.add_argument(
        "--suite",
        action="append",
        default=[],
        help="Run only the named suite (repeatable); others are reported skipped",
    )
    parser.add_argument(
        "--runner-config",
        default="",
        help='JSON configuration keyed by runner kind, e.g. {"process": {...}}',
    )
    parser.add_argument(
        "--environment",
        default=os.environ.get(ENVIRONMENT_VARIABLE, "test"),
        help=f"Environment name recorded in the report (env: {ENVIRONMENT_VARIABLE})",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    working_dir = args.working_dir.resolve()
    exit_code = asyncio.run(
        run(
            working_dir=working_dir,
            output_dir=args.output or working_dir / DEFAULT_OUTPUT_DIR,
            selected_suites=args.suite,
            runner_config_json=args.runner_config,
            environment=args.environment,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
