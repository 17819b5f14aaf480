from __future__ import annotations

import json
from pathlib import Path

import pytest

from docgraph.audit.learning_paths import LearningPathAuditor
from docgraph.contracts.findings import FindingKind, Severity
from docgraph.contracts.learning_path import LearningPath
from docgraph.corpus.registry import DocumentRegistry
from docgraph.errors import CorpusLoadError
from tests.helpers import make_document


def _registry() -> DocumentRegistry:
    registry, _ = DocumentRegistry.build(
        [
            make_document(),
            make_document(depth="mid-depth"),
            make_document(phase="06-operations", topic="incident-response"),
        ]
    )
    return registry


def _write(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_all_steps_collects_every_section() -> None:
    path = LearningPath.model_validate(
        {
            "milestones": [{"steps": [{"topic": "a"}]}, {"steps": [{"topic": "b"}]}],
            "journey_steps": [{"topic": "c"}],
            "steps": [{"topic": "d"}],
        }
    )
    assert [s.topic for s in path.all_steps()] == ["a", "b", "c", "d"]


def test_audit_reports_missing_and_incomplete_steps(tmp_path: Path) -> None:
    paths_dir = tmp_path / "learning-paths"
    _write(
        paths_dir / "personas" / "new-developer.json",
        {
            "description": "Start here",
            "milestones": [
                {
                    "steps": [
                        {"phase": "02-design", "topic": "database-design", "depth": "surface"},
                        {"phase": "02-design", "topic": "database-design", "depth": "deep-water"},
                        {"topic": "database-design"},
                        {"note": "pick your own adventure"},
                    ]
                }
            ],
        },
    )

    report = LearningPathAuditor(_registry()).audit_directory(paths_dir)

    missing = report.by_kind(FindingKind.MISSING_PATH_STEP)
    assert len(missing) == 1
    assert missing[0].document_id == "personas/new-developer"
    assert missing[0].related == ("02-design/database-design/deep-water",)
    assert missing[0].severity == Severity.ERROR

    incomplete = report.by_kind(FindingKind.INCOMPLETE_PATH_STEP)
    assert [f.detail for f in incomplete] == ["step 3 is missing phase/topic/depth"]
    assert report.documents_checked == 1


def test_missing_topic_metadata_is_listed_once_per_topic(tmp_path: Path) -> None:
    paths_dir = tmp_path / "learning-paths"
    metadata_dir = tmp_path / "metadata"
    step = {"phase": "06-operations", "topic": "incident-response", "depth": "surface"}
    _write(paths_dir / "a.json", {"steps": [step]})
    _write(paths_dir / "b.json", {"journey_steps": [step]})
    _write(
        paths_dir / "c.json",
        {"steps": [{"phase": "02-design", "topic": "database-design", "depth": "surface"}]},
    )
    _write(metadata_dir / "topics" / "database-design.json", {"id": "database-design"})

    report = LearningPathAuditor(_registry(), metadata_dir).audit_directory(paths_dir)

    meta = report.by_kind(FindingKind.MISSING_TOPIC_METADATA)
    assert len(meta) == 1
    assert meta[0].document_id == "incident-response"
    assert meta[0].related == ("a", "b")
    assert not report.has_errors


def test_malformed_learning_path_does_not_stop_audit(tmp_path: Path) -> None:
    paths_dir = tmp_path / "learning-paths"
    paths_dir.mkdir()
    (paths_dir / "broken.json").write_text("{not json", encoding="utf-8")
    _write(paths_dir / "list.json", ["not", "an", "object"])
    _write(
        paths_dir / "ok.json",
        {"steps": [{"phase": "02-design", "topic": "nope", "depth": "surface"}]},
    )

    report = LearningPathAuditor(_registry()).audit_directory(paths_dir)

    malformed = report.by_kind(FindingKind.MALFORMED_LEARNING_PATH)
    assert [f.document_id for f in malformed] == ["broken", "list"]
    assert len(report.by_kind(FindingKind.MISSING_PATH_STEP)) == 1


def test_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(CorpusLoadError):
        LearningPathAuditor(_registry()).audit_directory(tmp_path / "nope")
