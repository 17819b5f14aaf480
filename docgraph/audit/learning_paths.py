"""Learning-path audit - curated reading orders must point at real documents."""

import json
import logging
from pathlib import Path

from docgraph.contracts.document import make_doc_id
from docgraph.contracts.findings import Finding, FindingKind, Report, error, warning
from docgraph.contracts.learning_path import LearningPath
from docgraph.corpus.registry import DocumentRegistry
from docgraph.errors import CorpusLoadError

logger = logging.getLogger(__name__)


class LearningPathAuditor:
    """
    Check learning-path JSON files against the document registry.

    Each step naming ``phase``/``topic``/``depth`` must match a registered
    document. When a metadata directory is given, each referenced topic
    must also have ``<metadata_dir>/topics/<topic>.json``.
    """

    def __init__(self, registry: DocumentRegistry, metadata_dir: Path | None = None):
        self.registry = registry
        self.metadata_dir = Path(metadata_dir) if metadata_dir is not None else None

    def _has_topic_metadata(self, metadata_dir: Path, topic: str) -> bool:
        return (metadata_dir / "topics" / f"{topic}.json").is_file()

    def load_path(self, path_file: Path) -> LearningPath:
        """
        Raises:
            ValueError: If the file is not valid JSON or not a learning path.
        """
        data = json.loads(path_file.read_text(encoding="utf-8"))
        return LearningPath.model_validate(data)

    def audit_path(
        self, name: str, learning_path: LearningPath
    ) -> tuple[list[Finding], set[str]]:
        """
        Audit one learning path.

        Returns:
            (findings, referenced_topics)
        """
        findings: list[Finding] = []
        topics: set[str] = set()

        for idx, step in enumerate(learning_path.all_steps(), start=1):
            if not (step.phase and step.topic and step.depth):
                # Dynamic steps are resolved at reading time
                if step.is_dynamic:
                    continue
                findings.append(
                    warning(
                        FindingKind.INCOMPLETE_PATH_STEP,
                        name,
                        f"step {idx} is missing phase/topic/depth",
                        related=(str(idx),),
                    )
                )
                continue

            topics.add(step.topic)
            doc_id = make_doc_id(step.phase, step.topic, step.depth)
            if doc_id not in self.registry:
                findings.append(
                    error(
                        FindingKind.MISSING_PATH_STEP,
                        name,
                        f"step {idx} references missing document {doc_id}",
                        related=(doc_id,),
                    )
                )

        return findings, topics

    def audit_directory(self, paths_dir: Path) -> Report:
        """
        Audit every ``*.json`` file below ``paths_dir``.

        Raises:
            CorpusLoadError: If ``paths_dir`` is not a directory.
        """
        paths_dir = Path(paths_dir)
        if not paths_dir.is_dir():
            raise CorpusLoadError(f"Learning paths directory {paths_dir} not found")

        findings: list[Finding] = []
        referenced_by: dict[str, set[str]] = {}
        files = sorted(p for p in paths_dir.rglob("*.json") if p.is_file())

        for path_file in files:
            name = path_file.relative_to(paths_dir).with_suffix("").as_posix()
            try:
                learning_path = self.load_path(path_file)
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to parse learning path {name}: {e}")
                findings.append(
                    error(
                        FindingKind.MALFORMED_LEARNING_PATH,
                        name,
                        f"cannot read learning path: {str(e).splitlines()[0]}",
                    )
                )
                continue

            path_findings, topics = self.audit_path(name, learning_path)
            findings.extend(path_findings)
            for topic in topics:
                referenced_by.setdefault(topic, set()).add(name)

        if self.metadata_dir is not None:
            for topic in sorted(referenced_by):
                if not self._has_topic_metadata(self.metadata_dir, topic):
                    users = sorted(referenced_by[topic])
                    findings.append(
                        warning(
                            FindingKind.MISSING_TOPIC_METADATA,
                            topic,
                            f"no metadata file topics/{topic}.json "
                            f"(referenced by {', '.join(users)})",
                            related=users,
                        )
                    )

        logger.info(f"Audited {len(files)} learning paths")
        return Report.from_findings(findings, documents_checked=len(files))


__all__ = ["LearningPathAuditor"]
