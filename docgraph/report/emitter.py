"""Report emitter - console and JSON renderings of a report."""

from typing import Literal, TextIO

from docgraph.contracts.findings import Report, Severity

OutputFormat = Literal["text", "json"]


class ReportEmitter:
    """
    Write a report to a sink.

    Both renderings are deterministic: findings come pre-sorted from the
    report and nothing time- or environment-dependent is included (colour is
    only applied when explicitly requested).
    """

    COLORS = {
        Severity.ERROR: "\033[31m",  # Red
        Severity.WARNING: "\033[33m",  # Yellow
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def __init__(self, output_format: OutputFormat = "text", use_color: bool = False):
        self.output_format = output_format
        self.use_color = use_color

    def _color(self, text: str, severity: Severity) -> str:
        if not self.use_color:
            return text
        return f"{self.COLORS[severity]}{text}{self.RESET}"

    def _bold(self, text: str) -> str:
        if not self.use_color:
            return text
        return f"{self.BOLD}{text}{self.RESET}"

    def render(self, report: Report) -> str:
        match self.output_format:
            case "json":
                return render_json(report)
            case "text":
                return self.render_text(report)
            case _:
                raise ValueError(f"Unknown output format: {self.output_format}")

    def render_text(self, report: Report) -> str:
        lines: list[str] = []

        for document_id, findings in report.grouped().items():
            lines.append(self._bold(document_id))
            for finding in findings:
                label = self._color(f"{finding.severity.value:<7}", finding.severity)
                lines.append(f"  {label} {finding.kind.value}: {finding.detail}")
            lines.append("")

        lines.append(summary_line(report))
        return "\n".join(lines) + "\n"

    def emit(self, report: Report, sink: TextIO) -> None:
        sink.write(self.render(report))
        sink.flush()


def render_json(report: Report) -> str:
    return report.canonical_json() + "\n"


def summary_line(report: Report) -> str:
    return (
        f"{report.error_count} error(s), {report.warning_count} warning(s) "
        f"in {report.documents_checked} document(s)"
    )


__all__ = ["OutputFormat", "ReportEmitter", "render_json", "summary_line"]
