"""Validation pipeline: parse -> register -> resolve -> check -> report.

Registration is the single synchronization point: every document is parsed
before any is registered, and resolution and graph checks only start once
the registry is sealed.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from kungfu import Error, Result

from docgraph.contracts.document import Document, ParseFailure
from docgraph.contracts.findings import Finding, FindingKind, Report, error
from docgraph.corpus.loader import DocumentLoader, parse_sources, split_results
from docgraph.corpus.registry import DocumentRegistry
from docgraph.graph.model import DocumentGraph
from docgraph.graph.resolver import ReferenceResolver
from docgraph.graph.validator import GraphValidator
from docgraph.settings import ValidationConfig

if TYPE_CHECKING:
    from docgraph.cli.progress import StageProgress

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationOutcome:
    """What a run produces: the graph (possibly partial) and the report."""

    graph: DocumentGraph
    report: Report

    @property
    def ok(self) -> bool:
        return not self.report.has_errors


def failure_to_finding(failure: ParseFailure) -> Finding:
    return error(
        FindingKind(failure.kind),
        failure.path,
        failure.detail,
        related=failure.fields,
    )


class ValidationPipeline:
    """
    Batch validation of a document corpus.

    Usage:
        pipeline = ValidationPipeline(ValidationConfig.build(), now=date.today())
        outcome = pipeline.validate_directory(Path("content"))
        if not outcome.ok:
            ...
    """

    def __init__(
        self,
        config: ValidationConfig | None = None,
        now: date | None = None,
        progress: "StageProgress | None" = None,
    ):
        self.config = config or ValidationConfig()
        self.now = now or date.today()
        self.progress = progress

    def _start(self, stage: str) -> None:
        if self.progress:
            self.progress.on_stage_start(stage)

    def _note(self, note: str) -> None:
        if self.progress:
            self.progress.on_stage_note(note)

    def _complete(self, stage: str, findings: int) -> None:
        if self.progress:
            self.progress.on_stage_complete(stage, findings)

    def parse(
        self, sources: Iterable[tuple[str, str | None]]
    ) -> list[Result[Document, ParseFailure]]:
        self._start("parse")
        results = parse_sources(sources)
        self._report_parse(results)
        return results

    def _report_parse(self, results: list[Result[Document, ParseFailure]]) -> None:
        failed = sum(1 for r in results if isinstance(r, Error))
        self._note(f"Parsed {len(results) - failed} of {len(results)} documents")
        self._complete("parse", failed)

    def register(
        self, results: Iterable[Result[Document, ParseFailure]]
    ) -> tuple[DocumentRegistry, list[Finding]]:
        """Build the registry; parse failures and duplicates become findings."""
        self._start("register")
        documents, failures = split_results(results)
        findings = [failure_to_finding(f) for f in failures]

        registry, duplicates = DocumentRegistry.build(documents)
        for dup in duplicates:
            findings.append(
                error(
                    FindingKind.DUPLICATE_IDENTITY,
                    dup.doc_id,
                    f"identity declared by both {dup.existing_path} and {dup.duplicate_path}",
                    related=(dup.existing_path, dup.duplicate_path),
                )
            )

        self._note(f"{len(registry)} documents across {len(registry.topics())} topics")
        self._complete("register", len(duplicates))
        return registry, findings

    def link(self, registry: DocumentRegistry) -> tuple[DocumentGraph, list[Finding]]:
        self._start("resolve")
        resolver = ReferenceResolver(
            registry, strict_related_topics=self.config.strict_related_topics
        )
        resolution = resolver.resolve_all()
        self._complete("resolve", len(resolution.findings))
        return DocumentGraph.build(registry, resolution), resolution.findings

    def check(self, graph: DocumentGraph) -> list[Finding]:
        self._start("check")
        findings = GraphValidator(graph, self.config).run(self.now)
        self._complete("check", len(findings))
        return findings

    def run(self, results: list[Result[Document, ParseFailure]]) -> ValidationOutcome:
        """Run every stage after parsing."""
        registry, findings = self.register(results)
        graph, link_findings = self.link(registry)
        findings.extend(link_findings)
        findings.extend(self.check(graph))

        report = Report.from_findings(findings, documents_checked=len(results))
        logger.info(
            f"Validated {len(results)} documents: "
            f"{report.error_count} errors, {report.warning_count} warnings"
        )
        return ValidationOutcome(graph=graph, report=report)

    def validate_texts(
        self, sources: Iterable[tuple[str, str | None]]
    ) -> ValidationOutcome:
        """Validate in-memory (path, text) pairs."""
        return self.run(self.parse(sources))

    def validate_directory(
        self, content_root: Path, patterns: Iterable[str] | None = None
    ) -> ValidationOutcome:
        """
        Validate every document below ``content_root``.

        Raises:
            CorpusLoadError: If ``content_root`` is not a directory.
        """
        loader = DocumentLoader(content_root, patterns)
        self._start("parse")
        results = loader.load_corpus()
        self._report_parse(results)
        return self.run(results)


__all__ = ["ValidationOutcome", "ValidationPipeline", "failure_to_finding"]
