from __future__ import annotations

import pytest

from docgraph.contracts.findings import FindingKind, Severity
from docgraph.corpus.registry import DocumentRegistry
from docgraph.graph.resolver import ReferenceResolver, split_reference
from tests.helpers import make_document


@pytest.mark.parametrize(
    ("reference", "expected"),
    [
        ("02-design/database-design/surface", ("02-design", "database-design", "surface")),
        ("database-design/mid-depth", (None, "database-design", "mid-depth")),
        ("database-design-deep-water", (None, "database-design", "deep-water")),
        ("topic-x-surface", (None, "topic-x", "surface")),
        ("database-design", (None, "database-design", "surface")),
        ("  database-design  ", (None, "database-design", "surface")),
        ("", None),
        ("a/b/c/d", None),
    ],
)
def test_split_reference(reference: str, expected) -> None:
    assert split_reference(reference) == expected


def test_resolver_requires_sealed_registry() -> None:
    with pytest.raises(ValueError):
        ReferenceResolver(DocumentRegistry())


def test_forward_references_resolve() -> None:
    # the surface document sorts after the document that references it
    early = make_document(
        phase="01-discovery-planning",
        topic="architecture-design",
        prerequisites=["zz-topic-surface"],
    )
    late = make_document(phase="07-iteration", topic="zz-topic")
    registry, _ = DocumentRegistry.build([early, late])

    result = ReferenceResolver(registry).resolve_all()

    links = result.links[early.doc_id]
    assert links.resolved_prerequisites == ["07-iteration/zz-topic/surface"]
    assert result.findings == []


def test_dangling_prerequisite_is_an_error() -> None:
    doc = make_document(prerequisites=["topic-x-surface"])
    registry, _ = DocumentRegistry.build([doc])

    result = ReferenceResolver(registry).resolve_all()

    assert len(result.findings) == 1
    finding = result.findings[0]
    assert finding.kind == FindingKind.DANGLING_PREREQUISITE
    assert finding.severity == Severity.ERROR
    assert finding.document_id == doc.doc_id
    assert finding.related == ("topic-x-surface",)


def test_dangling_related_topic_is_warning_unless_strict() -> None:
    doc = make_document(related_topics=["database-design", "ghost-topic"])
    registry, _ = DocumentRegistry.build([doc])

    lenient = ReferenceResolver(registry).resolve_all()
    strict = ReferenceResolver(registry, strict_related_topics=True).resolve_all()

    assert [f.severity for f in lenient.findings] == [Severity.WARNING]
    assert [f.severity for f in strict.findings] == [Severity.ERROR]
    assert lenient.findings[0].kind == FindingKind.DANGLING_RELATED_TOPIC
    assert lenient.links[doc.doc_id].related_topics == ("database-design",)
    assert lenient.links[doc.doc_id].dangling_related_topics == ("ghost-topic",)


def test_every_reference_is_classified() -> None:
    docs = [
        make_document(
            prerequisites=["database-design-mid-depth", "nope-surface", "", "02-design/database-design/deep-water"],
            related_topics=["database-design", "ghost", "incident-response"],
        ),
        make_document(depth="mid-depth"),
        make_document(depth="deep-water"),
        make_document(topic="incident-response", phase="06-operations"),
    ]
    registry, _ = DocumentRegistry.build(docs)

    result = ReferenceResolver(registry).resolve_all()

    for doc in registry:
        links = result.links[doc.doc_id]
        prereq_total = len(links.prerequisites)
        resolved = sum(1 for ref in links.prerequisites if not ref.dangling)
        assert prereq_total == len(doc.metadata.prerequisites)
        assert resolved + len(links.dangling_prerequisites) == prereq_total
        assert len(links.related_topics) + len(links.dangling_related_topics) == len(
            doc.metadata.related_topics
        )

    links = result.links["02-design/database-design/surface"]
    assert links.dangling_prerequisites == ["nope-surface", ""]
    assert links.dangling_related_topics == ("ghost",)
