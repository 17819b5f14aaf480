"""Document graph - reference resolution and structural validation."""

from docgraph.graph.model import DocumentGraph
from docgraph.graph.resolver import (
    ReferenceResolver,
    ResolutionResult,
    ResolvedLinks,
    ResolvedReference,
    split_reference,
)
from docgraph.graph.validator import GraphValidator, find_cycles

__all__ = [
    "DocumentGraph",
    "GraphValidator",
    "ReferenceResolver",
    "ResolutionResult",
    "ResolvedLinks",
    "ResolvedReference",
    "find_cycles",
    "split_reference",
]
