"""Write a run report to disk in several formats."""

import csv
import io
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from security_orchestrator.errors import ReportEmissionError
from security_orchestrator.models.report import RunReport
from security_orchestrator.models.result import Finding
from security_orchestrator.registry import OWASP_TOP_10_2021
from security_orchestrator.scoring import score_rating

log = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

CSV_HEADERS = (
    "ID",
    "Title",
    "Severity",
    "Category",
    "OWASP Category",
    "Location",
    "Risk Score",
    "Description",
    "Remediation",
)

jinja_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
)


def artifact_stem(report: RunReport) -> str:
    """Filesystem-safe timestamp shared by every artifact of a run."""
    ts = report.timestamp.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H-%M-%S-") + f"{ts.microsecond // 1000:03d}Z"


def _score_color(score: float) -> str:
    if score > 80:
        return "#27ae60"
    if score > 60:
        return "#f39c12"
    return "#e74c3c"


def render_html(report: RunReport) -> str:
    """Render the human-readable HTML report from ``templates/report.html``."""
    summary = report.summary
    template = jinja_env.get_template("report.html")
    return template.render(
        report=report,
        summary=summary,
        metrics=report.compliance_metrics,
        generated=report.timestamp.isoformat(),
        rating=score_rating(summary.security_score),
        score_color=_score_color(summary.security_score),
        critical_count=report.count_severity("CRITICAL"),
        owasp_names=OWASP_TOP_10_2021,
    )


def render_csv(findings: Sequence[Finding]) -> str:
    """Flatten findings into CSV rows."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for finding in findings:
        writer.writerow(
            (
                finding.id,
                finding.title,
                finding.severity,
                finding.category,
                finding.standard_tag,
                finding.location,
                finding.risk_score,
                finding.description,
                finding.remediation,
            )
        )
    return buffer.getvalue()


@dataclass(frozen=True, kw_only=True)
class ReportEmitter:
    """Persists a run report as JSON, HTML, CSV and plain-text artifacts."""

    output_dir: Path

    def emit(self, report: RunReport) -> Sequence[Path]:
        """Write every artifact, continuing past individual write failures.

        Returns:
            Paths of the artifacts that were written

        Raises:
            ReportEmissionError: If the output directory cannot be created

        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ReportEmissionError(
                f"Cannot create output directory {self.output_dir}: {e}"
            ) from e

        stem = artifact_stem(report)
        artifacts: Sequence[tuple[str, str, Callable[[RunReport], str]]] = (
            ("JSON report", f"security-report-{stem}.json", self._render_json),
            ("HTML report", f"security-report-{stem}.html", render_html),
            (
                "CSV findings",
                f"vulnerabilities-{stem}.csv",
                lambda r: render_csv(r.findings),
            ),
            (
                "Executive summary",
                f"executive-summary-{stem}.txt",
                lambda r: r.executive_summary,
            ),
        )

        written: list[Path] = []
        for label, filename, render in artifacts:
            path = self.output_dir / filename
            try:
                path.write_text(render(report), encoding="utf-8")
            except OSError as e:
                log.error("Failed to write %s to %s: %s", label, path, e)
                continue
            log.info("%s saved: %s", label, path)
            written.append(path)

        return written

    @staticmethod
    def _render_json(report: RunReport) -> str:
        return report.model_dump_json(indent=2)
