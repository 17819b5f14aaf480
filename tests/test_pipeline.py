from __future__ import annotations

from datetime import date

import pytest

from docgraph.contracts.findings import FindingKind, Severity
from docgraph.errors import CorpusLoadError
from docgraph.pipeline import ValidationPipeline
from docgraph.report.emitter import ReportEmitter
from docgraph.settings import ValidationConfig
from tests.helpers import NOW, doc_text, full_topic, source


def _pipeline(**config) -> ValidationPipeline:
    return ValidationPipeline(ValidationConfig(**config), now=NOW)


def test_healthy_corpus_has_no_findings(content_dir) -> None:
    outcome = _pipeline().validate_directory(content_dir)

    assert outcome.ok
    assert outcome.report.findings == ()
    assert outcome.report.documents_checked == 6
    assert outcome.graph.prerequisites_of("02-design/database-design/mid-depth") == (
        "02-design/database-design/surface",
    )
    assert outcome.graph.dependents_of("02-design/database-design/surface") == [
        "02-design/database-design/mid-depth"
    ]


def test_duplicate_identity_names_both_paths() -> None:
    text = doc_text("02-design", "database-design", "surface")
    outcome = _pipeline().validate_texts(
        [("one/index.md", text), ("two/index.md", text)]
    )

    dups = outcome.report.by_kind(FindingKind.DUPLICATE_IDENTITY)
    assert len(dups) == 1
    assert dups[0].severity == Severity.ERROR
    assert dups[0].related == ("one/index.md", "two/index.md")
    assert not outcome.ok
    # P1: the registry keeps one document per identity
    assert outcome.graph.registry.ids() == ["02-design/database-design/surface"]


def test_dangling_prerequisite_for_unknown_topic() -> None:
    outcome = _pipeline().validate_texts(
        [source("02-design", "database-design", "surface", prerequisites=["topic-x-surface"])]
    )

    dangling = outcome.report.by_kind(FindingKind.DANGLING_PREREQUISITE)
    assert len(dangling) == 1
    assert dangling[0].document_id == "02-design/database-design/surface"


def test_prerequisite_cycle_is_reported_once() -> None:
    outcome = _pipeline().validate_texts(
        [
            source("02-design", "a", "surface", prerequisites=["b-surface"]),
            source("02-design", "b", "surface", prerequisites=["c-surface"]),
            source("02-design", "c", "surface", prerequisites=["a-surface"]),
        ]
    )

    cycles = outcome.report.by_kind(FindingKind.PREREQUISITE_CYCLE)
    assert len(cycles) == 1
    assert cycles[0].related == (
        "02-design/a/surface",
        "02-design/b/surface",
        "02-design/c/surface",
    )


def test_surface_only_topic_is_incomplete() -> None:
    outcome = _pipeline().validate_texts(
        [
            *full_topic("06-operations", "incident-response"),
            source("04-testing-security", "security-posture-reviews", "surface"),
        ]
    )

    incomplete = outcome.report.by_kind(FindingKind.INCOMPLETE_TOPIC)
    assert [f.document_id for f in incomplete] == ["security-posture-reviews"]
    assert incomplete[0].related == ("mid-depth", "deep-water")
    assert outcome.ok


def test_old_document_is_stale() -> None:
    pipeline = ValidationPipeline(
        ValidationConfig(stale_threshold_days=180), now=date(2025, 11, 16)
    )
    outcome = pipeline.validate_texts(full_topic("02-design", "database-design", updated="2020-01-01"))

    stale = outcome.report.by_kind(FindingKind.STALE_DOCUMENT)
    assert len(stale) == 3
    assert all(f.severity == Severity.WARNING for f in stale)
    assert outcome.ok


def test_malformed_document_does_not_hide_others() -> None:
    broken = doc_text("02-design", "broken", "surface").replace("\n---\n", "\n", 1)
    sources = [
        *full_topic("02-design", "database-design"),
        ("02-design/broken/surface/index.md", broken),
    ]

    outcome = _pipeline().validate_texts(sources)

    malformed = outcome.report.by_kind(FindingKind.MALFORMED_METADATA)
    assert [f.document_id for f in malformed] == ["02-design/broken/surface/index.md"]
    assert len(outcome.graph.registry) == 3
    assert outcome.report.documents_checked == 4


def test_empty_prerequisites_produce_no_resolution_findings() -> None:
    outcome = _pipeline().validate_texts(
        full_topic("02-design", "database-design", prerequisites=[], related_topics=[])
    )

    assert outcome.report.findings == ()


def test_unreadable_source_is_reported() -> None:
    outcome = _pipeline().validate_texts([("missing.md", None)])

    assert [f.kind for f in outcome.report.findings] == [FindingKind.MALFORMED_METADATA]


def test_repeated_runs_are_byte_identical() -> None:
    sources = [
        source("02-design", "a", "surface", prerequisites=["b-surface", "ghost"]),
        source("02-design", "b", "surface", prerequisites=["a"], related_topics=["zzz"]),
        source("02-design", "c", "deep-water", updated="2019-05-05"),
        ("bad.md", "no front matter"),
    ]

    first = _pipeline().validate_texts(sources).report
    second = _pipeline().validate_texts(list(reversed(sources))).report

    assert first.canonical_json() == second.canonical_json()
    assert ReportEmitter("text").render(first) == ReportEmitter("text").render(second)


def test_missing_content_root_raises(tmp_path) -> None:
    with pytest.raises(CorpusLoadError):
        _pipeline().validate_directory(tmp_path / "nope")


def test_unlisted_phase_still_satisfies_prerequisites() -> None:
    outcome = _pipeline().validate_texts(
        [
            *full_topic(
                "02-design",
                "database-design",
                prerequisites=["deployment-strategy-surface"],
            ),
            source("Deployment", "deployment-strategy", "surface"),
        ]
    )

    assert outcome.ok
    assert outcome.report.by_kind(FindingKind.DANGLING_PREREQUISITE) == []
    (unknown,) = outcome.report.by_kind(FindingKind.UNKNOWN_PHASE)
    assert unknown.document_id == "Deployment/deployment-strategy/surface"
    assert unknown.severity == Severity.WARNING
    assert outcome.graph.dependents_of("Deployment/deployment-strategy/surface") == [
        "02-design/database-design/deep-water",
        "02-design/database-design/mid-depth",
        "02-design/database-design/surface",
    ]


def test_each_repeated_dangling_reference_is_reported() -> None:
    outcome = _pipeline().validate_texts(
        [source("02-design", "database-design", "surface", prerequisites=["ghost", "ghost"])]
    )

    dangling = outcome.report.by_kind(FindingKind.DANGLING_PREREQUISITE)
    assert [f.detail for f in dangling] == [
        "prerequisite #1 'ghost' does not resolve to any document",
        "prerequisite #2 'ghost' does not resolve to any document",
    ]
    links = outcome.graph.links["02-design/database-design/surface"]
    assert links.dangling_prerequisites == ["ghost", "ghost"]
