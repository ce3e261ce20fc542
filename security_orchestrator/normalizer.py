"""Normalize raw runner output into test counts and a suite status."""

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from pydantic import ValidationError

from security_orchestrator.models.result import Counts, SuiteStatus
from security_orchestrator.models.suite import SuiteDescriptor

log = logging.getLogger(__name__)

LINE_COUNT_PATTERN = re.compile(r"(\d+) (passing|failing|pending)")


class OutputParser(Protocol):
    """Strategy decoding test counts from one output shape."""

    def parse(self, output: str) -> Counts | None:
        """Return decoded counts, or None if the output has another shape."""
        ...


@dataclass(frozen=True)
class JsonReportParser:
    """Decodes the JSON report block embedded in runner output.

    Two report shapes are understood: a per-test list under ``testResults``
    and summary counters under a non-zero ``numTotalTests``. Counters that
    do not add up are rejected.
    """

    def parse(self, output: str) -> Counts | None:
        start = output.find("{")
        end = output.rfind("}")
        if start == -1 or end < start:
            return None

        try:
            data = json.loads(output[start : end + 1])
        except ValueError:
            return None

        if not isinstance(data, Mapping):
            return None
        if isinstance(data.get("testResults"), list):
            return self._from_test_list(data["testResults"])
        if data.get("numTotalTests"):
            return self._from_counters(data)
        return None

    @staticmethod
    def _from_test_list(tests: Sequence[Any]) -> Counts:
        statuses = [t.get("status") for t in tests if isinstance(t, Mapping)]
        return Counts(
            run=len(tests),
            passed=statuses.count("passed"),
            failed=statuses.count("failed"),
            skipped=statuses.count("skipped"),
        )

    @staticmethod
    def _from_counters(data: Mapping[str, Any]) -> Counts | None:
        try:
            return Counts(
                run=int(data["numTotalTests"] or 0),
                passed=int(data.get("numPassedTests") or 0),
                failed=int(data.get("numFailedTests") or 0),
                skipped=int(data.get("numPendingTests") or 0),
            )
        except (TypeError, ValueError, ValidationError):
            return None


@dataclass(frozen=True)
class LinePatternParser:
    """Sums free-text ``<n> passing|failing|pending`` summary lines."""

    def parse(self, output: str) -> Counts | None:
        totals = {"passing": 0, "failing": 0, "pending": 0}
        matched = False
        for match in LINE_COUNT_PATTERN.finditer(output):
            totals[match.group(2)] += int(match.group(1))
            matched = True

        if not matched:
            return None

        return Counts(
            run=sum(totals.values()),
            passed=totals["passing"],
            failed=totals["failing"],
            skipped=totals["pending"],
        )


DEFAULT_PARSERS: Sequence[OutputParser] = (JsonReportParser(), LinePatternParser())


def decode_counts(
    output: str, parsers: Sequence[OutputParser] = DEFAULT_PARSERS
) -> Counts | None:
    """Try each parser in order and return the first decoded counts."""
    for parser in parsers:
        if (counts := parser.parse(output)) is not None:
            return counts
    return None


def derive_status(exit_code: int, counts: Counts | None) -> SuiteStatus:
    """Derive a suite status from its exit code and decoded counts.

    Runner failures (spawn errors, timeouts) never reach this point; the
    scheduler reports them as errored directly.
    """
    if exit_code == 0:
        return "passed"
    if counts is not None and counts.run > 0:
        return "failed"
    return "errored"


def normalize(
    output: str,
    exit_code: int,
    descriptor: SuiteDescriptor,
    parsers: Sequence[OutputParser] = DEFAULT_PARSERS,
) -> tuple[Counts, SuiteStatus]:
    """Convert raw runner output into counts and a status.

    When no parser recognizes the output, ``run`` falls back to the suite's
    estimated test count.
    """
    decoded = decode_counts(output, parsers)
    status = derive_status(exit_code, decoded)

    if decoded is None:
        log.warning(
            "Could not decode test counts for %s, using estimate of %d",
            descriptor.name,
            descriptor.estimated_tests,
        )
        return Counts(run=descriptor.estimated_tests), status

    return decoded, status
