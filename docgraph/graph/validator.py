"""Graph validation - corpus-wide structural checks.

Each check is a pure function of the built graph and may run in any order.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from datetime import date
from enum import Enum
from pathlib import PurePosixPath

from docgraph.constants import CANONICAL_DEPTHS
from docgraph.contracts.findings import Finding, FindingKind, error, warning
from docgraph.graph.model import DocumentGraph
from docgraph.settings import ValidationConfig

logger = logging.getLogger(__name__)


class Color(Enum):
    """DFS marking."""

    WHITE = "white"  # unvisited
    GRAY = "gray"  # on the current path
    BLACK = "black"  # fully explored


def _canonical_cycle(cycle: list[str]) -> tuple[str, ...]:
    """Rotate so the smallest identity comes first."""
    start = cycle.index(min(cycle))
    return tuple(cycle[start:] + cycle[:start])


def find_cycles(edges: Mapping[str, tuple[str, ...]]) -> list[tuple[str, ...]]:
    """
    Depth-first search with white/gray/black marking.

    A back-edge to a gray node closes a cycle: the gray node and everything
    after it on the current path. Cycles are deduplicated by rotation.
    """
    color = {node: Color.WHITE for node in edges}
    found: dict[tuple[str, ...], None] = {}

    for root in sorted(edges):
        if color[root] is not Color.WHITE:
            continue

        path = [root]
        stack: list[Iterator[str]] = [iter(edges[root])]
        color[root] = Color.GRAY

        while stack:
            child = next(stack[-1], None)
            if child is None:
                color[path.pop()] = Color.BLACK
                stack.pop()
                continue

            state = color.get(child)
            if state is None:
                # Edge to an unknown node; resolution only emits registered ids.
                continue
            if state is Color.GRAY:
                found.setdefault(_canonical_cycle(path[path.index(child) :]))
            elif state is Color.WHITE:
                color[child] = Color.GRAY
                path.append(child)
                stack.append(iter(edges.get(child, ())))

    return list(found)


class GraphValidator:
    """Structural invariants beyond reference existence."""

    def __init__(self, graph: DocumentGraph, config: ValidationConfig | None = None):
        self.graph = graph
        self.config = config or ValidationConfig()

    def check_cycles(self) -> list[Finding]:
        findings: list[Finding] = []

        for cycle in find_cycles(self.graph.prerequisite_edges):
            loop = " -> ".join([*cycle, cycle[0]])
            findings.append(
                error(
                    FindingKind.PREREQUISITE_CYCLE,
                    cycle[0],
                    f"prerequisite cycle: {loop}",
                    related=cycle,
                )
            )

        return findings

    def check_depth_completeness(self) -> list[Finding]:
        findings: list[Finding] = []
        make = error if self.config.require_all_depths else warning

        for topic in self.graph.registry.topics():
            present = {d.depth for d in self.graph.registry.topic_siblings(topic)}
            missing = [d for d in CANONICAL_DEPTHS if d not in present]
            if missing:
                findings.append(
                    make(
                        FindingKind.INCOMPLETE_TOPIC,
                        topic,
                        f"topic '{topic}' is missing depth(s): {', '.join(missing)}",
                        related=missing,
                    )
                )

        return findings

    def check_staleness(self, now: date, threshold_days: int | None = None) -> list[Finding]:
        """Flag documents whose ``updated`` date is more than ``threshold_days`` before ``now``."""
        threshold = (
            self.config.stale_threshold_days if threshold_days is None else threshold_days
        )
        findings: list[Finding] = []

        for doc in self.graph.registry.documents():
            updated = doc.metadata.updated
            if updated is None:
                continue
            age = (now - updated).days
            if age > threshold:
                findings.append(
                    warning(
                        FindingKind.STALE_DOCUMENT,
                        doc.doc_id,
                        f"last updated {updated.isoformat()}, {age} days ago "
                        f"(threshold {threshold})",
                        related=(doc.path, str(age)),
                    )
                )

        return findings

    def check_phases(self, known_phases: Iterable[str] | None = None) -> list[Finding]:
        known = set(self.config.known_phases if known_phases is None else known_phases)
        return [
            warning(
                FindingKind.UNKNOWN_PHASE,
                doc.doc_id,
                f"phase '{doc.phase}' is not a known phase",
                related=(doc.phase,),
            )
            for doc in self.graph.registry.documents()
            if doc.phase not in known
        ]

    def check_path_layout(self) -> list[Finding]:
        """Compare ``<phase>/<topic>/<depth>/<file>`` paths with front-matter identity."""
        findings: list[Finding] = []

        for doc in self.graph.registry.documents():
            parts = PurePosixPath(doc.path).parts
            if len(parts) < 4:
                continue
            from_path = parts[-4:-1]
            declared = (doc.phase, doc.topic, doc.depth)
            if from_path != declared:
                findings.append(
                    warning(
                        FindingKind.PATH_MISMATCH,
                        doc.doc_id,
                        f"located at {'/'.join(from_path)} but front-matter declares "
                        f"{'/'.join(declared)}",
                        related=(doc.path,),
                    )
                )

        return findings

    def run(self, now: date) -> list[Finding]:
        """Run every check."""
        findings = [
            *self.check_cycles(),
            *self.check_depth_completeness(),
            *self.check_staleness(now),
            *self.check_phases(),
            *self.check_path_layout(),
        ]
        logger.info(f"Graph checks produced {len(findings)} findings")
        return findings


__all__ = ["Color", "GraphValidator", "find_cycles"]
