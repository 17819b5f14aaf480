"""Finding and report contracts."""

import hashlib
import json
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Severity(str, Enum):
    """Severity of a finding."""

    ERROR = "error"
    WARNING = "warning"


class FindingKind(str, Enum):
    """What a finding is about."""

    # Structural errors
    MALFORMED_METADATA = "MalformedMetadata"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    DUPLICATE_IDENTITY = "DuplicateIdentity"
    DANGLING_PREREQUISITE = "DanglingPrerequisite"
    DANGLING_RELATED_TOPIC = "DanglingRelatedTopic"
    PREREQUISITE_CYCLE = "PrerequisiteCycle"

    # Advisory
    INCOMPLETE_TOPIC = "IncompleteTopic"
    STALE_DOCUMENT = "StaleDocument"
    UNKNOWN_PHASE = "UnknownPhase"
    PATH_MISMATCH = "PathMismatch"

    # Learning paths
    MISSING_PATH_STEP = "MissingPathStep"
    INCOMPLETE_PATH_STEP = "IncompletePathStep"
    MISSING_TOPIC_METADATA = "MissingTopicMetadata"
    MALFORMED_LEARNING_PATH = "MalformedLearningPath"


class Finding(BaseModel):
    """One error or warning attached to a document (or topic, or learning path)."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    kind: FindingKind
    document_id: str = Field(description="Document identity, source path, or topic slug")
    detail: str = Field(description="Human-readable explanation")
    related: tuple[str, ...] = Field(
        default=(),
        description="Other identities involved: paths, references, cycle members, depths",
    )

    def sort_key(self) -> tuple[str, str, str, tuple[str, ...], str]:
        return (
            self.document_id,
            self.kind.value,
            self.detail,
            self.related,
            self.severity.value,
        )


def error(
    kind: FindingKind, document_id: str, detail: str, related: Iterable[str] = ()
) -> Finding:
    return Finding(
        severity=Severity.ERROR,
        kind=kind,
        document_id=document_id,
        detail=detail,
        related=tuple(related),
    )


def warning(
    kind: FindingKind, document_id: str, detail: str, related: Iterable[str] = ()
) -> Finding:
    return Finding(
        severity=Severity.WARNING,
        kind=kind,
        document_id=document_id,
        detail=detail,
        related=tuple(related),
    )


class Report(BaseModel):
    """
    Collected findings of a run.

    Findings are kept sorted by document identity, then kind, so identical
    input always yields an identical report.
    """

    model_config = ConfigDict(frozen=True)

    findings: tuple[Finding, ...] = Field(default=())
    documents_checked: int = Field(default=0, ge=0)

    @classmethod
    def from_findings(
        cls, findings: Iterable[Finding], documents_checked: int = 0
    ) -> "Report":
        unique = {f.sort_key(): f for f in findings}
        ordered = sorted(unique.values(), key=Finding.sort_key)
        return cls(findings=tuple(ordered), documents_checked=documents_checked)

    @property
    def errors(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == Severity.WARNING]

    @computed_field
    @property
    def error_count(self) -> int:
        return len(self.errors)

    @computed_field
    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def by_kind(self, kind: FindingKind) -> list[Finding]:
        return [f for f in self.findings if f.kind == kind]

    def grouped(self) -> dict[str, list[Finding]]:
        """Findings grouped by document identity, in report order."""
        groups: dict[str, list[Finding]] = {}
        for finding in self.findings:
            groups.setdefault(finding.document_id, []).append(finding)
        return groups

    def canonical_json(self) -> str:
        """Deterministic JSON used for output and hashing."""
        return json.dumps(
            self.model_dump(mode="json"),
            indent=2,
            sort_keys=True,
            ensure_ascii=False,
        )

    def digest(self) -> str:
        """SHA-256 of the canonical JSON."""
        return hashlib.sha256(self.canonical_json().encode("utf-8")).hexdigest()
