"""Report rendering."""

from docgraph.report.emitter import OutputFormat, ReportEmitter, render_json, summary_line

__all__ = ["OutputFormat", "ReportEmitter", "render_json", "summary_line"]
