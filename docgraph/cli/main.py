"""CLI entry point for docgraph."""

import logging
import sys
from datetime import date, datetime
from pathlib import Path

import click

from docgraph.audit.learning_paths import LearningPathAuditor
from docgraph.audit.storage import ReportStorage
from docgraph.cli.progress import StageProgress
from docgraph.constants import CANONICAL_DEPTHS
from docgraph.corpus.loader import DocumentLoader
from docgraph.corpus.registry import DocumentRegistry
from docgraph.errors import ConfigurationError, CorpusLoadError, ReportVerifyError
from docgraph.pipeline import ValidationPipeline
from docgraph.report.emitter import OutputFormat, ReportEmitter, summary_line
from docgraph.settings import ValidationConfig, load_settings

EXIT_FINDINGS = 1
EXIT_CONFIG = 2


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def load_registry(content_dir: Path) -> DocumentRegistry:
    """Parse and register a content tree without running graph checks.

    Raises:
        ConfigurationError: If the environment settings are invalid.
    """
    loader = DocumentLoader(content_dir, load_settings().content_patterns())
    registry, _ = ValidationPipeline().register(loader.load_corpus())
    return registry


def _registry_or_exit(content_dir: Path) -> DocumentRegistry:
    try:
        return load_registry(content_dir)
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(EXIT_CONFIG)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log pipeline activity to stderr")
@click.pass_context
def app(ctx: click.Context, verbose: bool):
    """docgraph - validate front-matter and cross-references of a docs corpus."""
    ctx.ensure_object(dict)
    configure_logging(verbose)
    ctx.obj["verbose"] = verbose


@app.command()
@click.argument(
    "content_dir", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Report format",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the report to a file instead of the console",
)
@click.option(
    "--now",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Reference date for staleness (default: today)",
)
@click.option("--stale-days", type=int, default=None, help="Staleness threshold in days")
@click.option(
    "--strict-related/--lenient-related",
    default=None,
    help="Treat dangling related topics as errors",
)
@click.option(
    "--require-all-depths/--allow-partial-topics",
    default=None,
    help="Treat topics missing a depth as errors",
)
@click.option(
    "--save-report",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to store the JSON report and its digest",
)
@click.option("--report-name", default="latest", help="Name for --save-report")
@click.option("--progress", is_flag=True, help="Show pipeline steps on stderr")
def validate(
    content_dir: Path,
    output_format: OutputFormat,
    output: Path | None,
    now: datetime | None,
    stale_days: int | None,
    strict_related: bool | None,
    require_all_depths: bool | None,
    save_report: Path | None,
    report_name: str,
    progress: bool,
):
    """Validate every document below CONTENT_DIR.

    Exits 1 when any error-severity finding exists, 2 on configuration
    errors, 0 otherwise (warnings are printed to stderr).
    """
    try:
        config = ValidationConfig.build(
            stale_threshold_days=stale_days,
            strict_related_topics=strict_related,
            require_all_depths=require_all_depths,
        )
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(EXIT_CONFIG)

    pipeline = ValidationPipeline(
        config,
        now=now.date() if now else date.today(),
        progress=StageProgress() if progress else None,
    )

    try:
        outcome = pipeline.validate_directory(
            content_dir, load_settings().content_patterns()
        )
    except CorpusLoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG)

    report = outcome.report
    emitter = ReportEmitter(output_format)
    rendered = emitter.render(report)

    if output is not None:
        output.write_text(rendered, encoding="utf-8")
        click.echo(summary_line(report), err=True)
    elif output_format == "json" or report.has_errors:
        click.echo(rendered, nl=False)
    elif report.findings:
        click.echo(rendered, nl=False, err=True)
    else:
        click.echo(summary_line(report), err=True)

    if save_report is not None:
        path = ReportStorage(save_report).save(report, report_name)
        click.echo(f"Report saved to: {path}", err=True)

    if report.has_errors:
        sys.exit(EXIT_FINDINGS)


@app.command()
@click.argument(
    "content_dir", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.argument("topic", required=False)
def topics(content_dir: Path, topic: str | None):
    """List topics and the depths they cover, or the documents of one TOPIC."""
    registry = _registry_or_exit(content_dir)

    if topic is not None:
        siblings = list(registry.topic_siblings(topic))
        if not siblings:
            click.echo(f"No documents for topic '{topic}'", err=True)
            sys.exit(EXIT_FINDINGS)
        for doc in siblings:
            click.echo(f"{doc.depth:<11} {doc.doc_id}  {doc.title}  ({doc.path})")
        return

    for name in registry.topics():
        present = {d.depth for d in registry.topic_siblings(name)}
        marks = " ".join(
            depth if depth in present else "-" * len(depth) for depth in CANONICAL_DEPTHS
        )
        click.echo(f"{name:<40} {marks}")


@app.command()
@click.argument(
    "content_dir", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.argument(
    "paths_dir", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option(
    "--metadata-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory holding topics/<topic>.json metadata files",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
)
def paths(
    content_dir: Path,
    paths_dir: Path,
    metadata_dir: Path | None,
    output_format: OutputFormat,
):
    """Check that learning paths in PATHS_DIR reference existing documents."""
    registry = _registry_or_exit(content_dir)
    report = LearningPathAuditor(registry, metadata_dir).audit_directory(paths_dir)

    click.echo(ReportEmitter(output_format).render(report), nl=False)

    if report.has_errors:
        sys.exit(EXIT_FINDINGS)


@app.command("verify-report")
@click.argument(
    "storage_dir", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.argument("name", default="latest")
def verify_report(storage_dir: Path, name: str):
    """Verify a stored report against its SHA-256 digest."""
    try:
        valid, message = ReportStorage(storage_dir).verify(name)
    except ReportVerifyError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(EXIT_FINDINGS)

    click.echo(message)
    if not valid:
        sys.exit(EXIT_FINDINGS)


__all__ = ["app", "load_registry"]
