"""Data contracts for the document graph."""

from docgraph.contracts.document import (
    Depth,
    Document,
    DocumentMetadata,
    ParseFailure,
    make_doc_id,
)
from docgraph.contracts.findings import Finding, FindingKind, Report, Severity
from docgraph.contracts.learning_path import LearningPath, LearningPathStep, Milestone

__all__ = [
    # Documents
    "Depth",
    "Document",
    "DocumentMetadata",
    "ParseFailure",
    "make_doc_id",
    # Findings
    "Finding",
    "FindingKind",
    "Report",
    "Severity",
    # Learning paths
    "LearningPath",
    "LearningPathStep",
    "Milestone",
]
