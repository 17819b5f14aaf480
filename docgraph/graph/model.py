"""The document graph - registry plus resolved adjacency lists."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from docgraph.corpus.registry import DocumentRegistry
from docgraph.graph.resolver import ResolutionResult, ResolvedLinks


@dataclass(frozen=True)
class DocumentGraph:
    """
    Read-only view of the corpus as a graph.

    Edges are keyed by string identity rather than object references, so the
    graph serializes directly and cycles need no special handling.

    Attributes:
        registry: Sealed document registry
        links: Resolution record per document identity
        prerequisite_edges: identity -> identities it requires
        related_edges: identity -> existing topic slugs it links to
    """

    registry: DocumentRegistry
    links: Mapping[str, ResolvedLinks]
    prerequisite_edges: Mapping[str, tuple[str, ...]]
    related_edges: Mapping[str, tuple[str, ...]]

    @classmethod
    def build(
        cls, registry: DocumentRegistry, resolution: ResolutionResult
    ) -> "DocumentGraph":
        prerequisite_edges: dict[str, tuple[str, ...]] = {}
        related_edges: dict[str, tuple[str, ...]] = {}

        for doc_id in registry.ids():
            links = resolution.links.get(doc_id, ResolvedLinks(document_id=doc_id))
            prerequisite_edges[doc_id] = tuple(links.resolved_prerequisites)
            related_edges[doc_id] = tuple(dict.fromkeys(links.related_topics))

        return cls(
            registry=registry,
            links=MappingProxyType(dict(resolution.links)),
            prerequisite_edges=MappingProxyType(prerequisite_edges),
            related_edges=MappingProxyType(related_edges),
        )

    def prerequisites_of(self, doc_id: str) -> tuple[str, ...]:
        return self.prerequisite_edges.get(doc_id, ())

    def dependents_of(self, doc_id: str) -> list[str]:
        """Documents that list ``doc_id`` as a prerequisite."""
        return sorted(
            source
            for source, targets in self.prerequisite_edges.items()
            if doc_id in targets
        )


__all__ = ["DocumentGraph"]
