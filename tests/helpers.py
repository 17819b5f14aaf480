"""Builders shared by the test modules."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest
from kungfu import Error, Ok

from docgraph.contracts.document import Document, DocumentMetadata
from docgraph.corpus.registry import DocumentRegistry
from docgraph.graph.model import DocumentGraph
from docgraph.graph.resolver import ReferenceResolver

NOW = date(2025, 11, 16)

_OMIT = object()


def doc_text(
    phase: object = "02-design",
    topic: object = "database-design",
    depth: object = "surface",
    *,
    title: object = _OMIT,
    prerequisites: object = _OMIT,
    related_topics: object = _OMIT,
    reading_time: object = 10,
    updated: object = "2025-11-01",
    body: str = "# Heading\n\nBody text.\n",
) -> str:
    """Markdown text with YAML front-matter. Pass None to leave a field out."""
    fields: dict[str, object] = {
        "title": f"{topic} ({depth})" if title is _OMIT else title,
        "phase": phase,
        "topic": topic,
        "depth": depth,
        "reading_time": reading_time,
        "updated": updated,
    }
    if prerequisites is not _OMIT:
        fields["prerequisites"] = prerequisites
    if related_topics is not _OMIT:
        fields["related_topics"] = related_topics

    lines = ["---"]
    for key, value in fields.items():
        if value is None:
            continue
        # JSON scalars and lists are valid YAML flow values
        lines.append(f"{key}: {json.dumps(value)}")
    lines.append("---")
    return "\n".join(lines) + "\n" + body


def doc_path(phase: str, topic: str, depth: str) -> str:
    return f"{phase}/{topic}/{depth}/index.md"


def source(phase: str, topic: str, depth: str, **kwargs) -> tuple[str, str]:
    return doc_path(phase, topic, depth), doc_text(phase, topic, depth, **kwargs)


def full_topic(phase: str, topic: str, **kwargs) -> list[tuple[str, str]]:
    return [source(phase, topic, depth, **kwargs) for depth in ("surface", "mid-depth", "deep-water")]


def make_document(
    phase: str = "02-design",
    topic: str = "database-design",
    depth: str = "surface",
    path: str | None = None,
    **metadata,
) -> Document:
    meta = DocumentMetadata.model_validate(
        {
            "title": metadata.pop("title", f"{topic} ({depth})"),
            "phase": phase,
            "topic": topic,
            "depth": depth,
            **metadata,
        }
    )
    return Document(metadata=meta, path=path or doc_path(phase, topic, depth))


def build_graph(documents: list[Document], strict_related_topics: bool = False) -> DocumentGraph:
    registry, duplicates = DocumentRegistry.build(documents)
    assert not duplicates
    resolution = ReferenceResolver(registry, strict_related_topics).resolve_all()
    return DocumentGraph.build(registry, resolution)


def unwrap_ok(result):
    match result:
        case Ok(value):
            return value
        case Error(err):
            pytest.fail(f"expected Ok, got Error({err!r})")


def unwrap_err(result):
    match result:
        case Error(err):
            return err
        case Ok(value):
            pytest.fail(f"expected Error, got Ok({value!r})")


def write_corpus(root: Path, sources: list[tuple[str, str]]) -> Path:
    for rel, text in sources:
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    return root
