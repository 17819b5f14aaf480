"""Reference resolution - prerequisites and related topics against the registry."""

import logging
from dataclasses import dataclass, field

from kungfu import Some
from pydantic import BaseModel, ConfigDict, Field

from docgraph.constants import CANONICAL_DEPTHS
from docgraph.contracts.document import Document
from docgraph.contracts.findings import Finding, FindingKind, error, warning
from docgraph.corpus.registry import DocumentRegistry

logger = logging.getLogger(__name__)


class ResolvedReference(BaseModel):
    """A reference string and the document identities it resolved to (empty = dangling)."""

    model_config = ConfigDict(frozen=True)

    reference: str
    targets: tuple[str, ...] = ()

    @property
    def dangling(self) -> bool:
        return not self.targets


class ResolvedLinks(BaseModel):
    """Resolution outcome for one document. Every reference appears exactly once."""

    model_config = ConfigDict(frozen=True)

    document_id: str
    prerequisites: tuple[ResolvedReference, ...] = Field(default=())
    related_topics: tuple[str, ...] = Field(default=(), description="Topics that exist")
    dangling_related_topics: tuple[str, ...] = Field(default=())

    @property
    def resolved_prerequisites(self) -> list[str]:
        """Target identities of resolved prerequisites, in reference order."""
        seen: dict[str, None] = {}
        for ref in self.prerequisites:
            for target in ref.targets:
                seen.setdefault(target)
        return list(seen)

    @property
    def dangling_prerequisites(self) -> list[str]:
        return [ref.reference for ref in self.prerequisites if ref.dangling]


@dataclass
class ResolutionResult:
    links: dict[str, ResolvedLinks] = field(default_factory=dict)
    findings: list[Finding] = field(default_factory=list)


def split_reference(reference: str) -> tuple[str | None, str, str] | None:
    """
    Break a prerequisite reference into (phase, topic, depth).

    Accepted forms: ``phase/topic/depth``, ``topic/depth``,
    ``topic-depth`` and a bare ``topic`` (meaning its surface document).
    Returns None when the reference cannot name a document.
    """
    ref = reference.strip()
    if not ref:
        return None

    if "/" in ref:
        parts = ref.strip("/").split("/")
        if len(parts) == 3:
            return parts[0], parts[1], parts[2]
        if len(parts) == 2:
            return None, parts[0], parts[1]
        return None

    for depth in CANONICAL_DEPTHS:
        suffix = f"-{depth}"
        if ref.endswith(suffix) and len(ref) > len(suffix):
            return None, ref[: -len(suffix)], depth

    return None, ref, "surface"


class ReferenceResolver:
    """
    Resolve string references of every registered document.

    The registry must be complete before resolution starts: documents may
    reference siblings that were parsed after them.
    """

    def __init__(self, registry: DocumentRegistry, strict_related_topics: bool = False):
        if not registry.sealed:
            raise ValueError("Registry must be fully built before resolving references")
        self.registry = registry
        self.strict_related_topics = strict_related_topics

    def resolve_prerequisite(self, reference: str) -> ResolvedReference:
        parts = split_reference(reference)
        if parts is None:
            return ResolvedReference(reference=reference)

        phase, topic, depth = parts
        if phase is not None:
            match self.registry.lookup(phase, topic, depth):
                case Some(doc):
                    targets: tuple[str, ...] = (doc.doc_id,)
                case _:
                    targets = ()
        else:
            targets = tuple(d.doc_id for d in self.registry.find(topic, depth))

        return ResolvedReference(reference=reference, targets=targets)

    def resolve(self, document: Document) -> tuple[ResolvedLinks, list[Finding]]:
        findings: list[Finding] = []
        doc_id = document.doc_id

        prerequisites = tuple(
            self.resolve_prerequisite(ref) for ref in document.metadata.prerequisites
        )
        for position, ref in enumerate(prerequisites, start=1):
            if ref.dangling:
                findings.append(
                    error(
                        FindingKind.DANGLING_PREREQUISITE,
                        doc_id,
                        f"prerequisite #{position} '{ref.reference}' "
                        "does not resolve to any document",
                        related=(ref.reference,),
                    )
                )

        related: list[str] = []
        dangling: list[str] = []
        for position, topic in enumerate(document.metadata.related_topics, start=1):
            if topic.strip() and self.registry.has_topic(topic.strip()):
                related.append(topic)
            else:
                dangling.append(topic)
                make = error if self.strict_related_topics else warning
                findings.append(
                    make(
                        FindingKind.DANGLING_RELATED_TOPIC,
                        doc_id,
                        f"related topic #{position} '{topic}' "
                        "has no documents at any depth",
                        related=(topic,),
                    )
                )

        links = ResolvedLinks(
            document_id=doc_id,
            prerequisites=prerequisites,
            related_topics=tuple(related),
            dangling_related_topics=tuple(dangling),
        )
        return links, findings

    def resolve_all(self) -> ResolutionResult:
        """Resolve every document. Collects all failures; never stops early."""
        result = ResolutionResult()

        for document in self.registry.documents():
            links, findings = self.resolve(document)
            result.links[document.doc_id] = links
            result.findings.extend(findings)

        logger.info(
            f"Resolved references of {len(result.links)} documents "
            f"({len(result.findings)} dangling)"
        )
        return result


__all__ = [
    "ReferenceResolver",
    "ResolutionResult",
    "ResolvedLinks",
    "ResolvedReference",
    "split_reference",
]
