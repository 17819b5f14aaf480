"""Audit tooling - learning-path checks and report storage."""

from docgraph.audit.learning_paths import LearningPathAuditor
from docgraph.audit.storage import ReportStorage

__all__ = [
    "LearningPathAuditor",
    "ReportStorage",
]
