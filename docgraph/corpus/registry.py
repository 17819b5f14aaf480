"""Document registry - identity-keyed store of parsed documents."""

import logging
from collections.abc import Iterable, Iterator

from kungfu import Nothing, Option, Some

from docgraph.constants import DEPTH_ORDER
from docgraph.contracts.document import Document, make_doc_id
from docgraph.errors import DuplicateIdentityError, RegistrySealedError

logger = logging.getLogger(__name__)


def _depth_rank(doc: Document) -> tuple[int, str]:
    return (DEPTH_ORDER.get(doc.depth, len(DEPTH_ORDER)), doc.doc_id)


class DocumentRegistry:
    """
    Documents keyed by ``phase/topic/depth``.

    Filled once, then sealed; queries never depend on registration order.
    """

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}
        self._sealed = False

    @classmethod
    def build(
        cls, documents: Iterable[Document]
    ) -> tuple["DocumentRegistry", list[DuplicateIdentityError]]:
        """
        Register all documents and seal the registry.

        Documents are registered in (identity, path) order, so when two claim
        the same identity the one with the smaller path is kept regardless of
        input order.

        Returns:
            (registry, duplicate_errors)
        """
        registry = cls()
        duplicates: list[DuplicateIdentityError] = []

        for doc in sorted(documents, key=lambda d: (d.doc_id, d.path)):
            try:
                registry.register(doc)
            except DuplicateIdentityError as e:
                duplicates.append(e)

        registry.seal()
        logger.info(
            f"Registered {len(registry)} documents ({len(duplicates)} duplicates)"
        )
        return registry, duplicates

    def register(self, document: Document) -> None:
        """
        Insert a document.

        Raises:
            DuplicateIdentityError: If the identity is already registered.
            RegistrySealedError: If the registry has been sealed.
        """
        if self._sealed:
            raise RegistrySealedError("Registry is sealed; rebuild it to add documents")

        existing = self._documents.get(document.doc_id)
        if existing is not None:
            raise DuplicateIdentityError(document.doc_id, existing.path, document.path)

        self._documents[document.doc_id] = document

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def lookup(self, phase: str, topic: str, depth: str) -> Option[Document]:
        return self.get(make_doc_id(phase, topic, depth))

    def get(self, doc_id: str) -> Option[Document]:
        doc = self._documents.get(doc_id)
        if doc is None:
            return Nothing()
        return Some(doc)

    def topic_siblings(self, topic: str) -> Iterator[Document]:
        """All documents sharing ``topic``, shallowest depth first. Recomputed per call."""
        siblings = (d for d in self._documents.values() if d.topic == topic)
        yield from sorted(siblings, key=_depth_rank)

    def find(self, topic: str, depth: str) -> list[Document]:
        """Documents of ``topic`` at ``depth`` in any phase."""
        return sorted(
            (d for d in self._documents.values() if d.topic == topic and d.depth == depth),
            key=lambda d: d.doc_id,
        )

    def has_topic(self, topic: str) -> bool:
        return any(d.topic == topic for d in self._documents.values())

    def topics(self) -> list[str]:
        return sorted({d.topic for d in self._documents.values()})

    def documents(self) -> list[Document]:
        return [self._documents[k] for k in sorted(self._documents)]

    def ids(self) -> list[str]:
        return sorted(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._documents

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents())


__all__ = ["DocumentRegistry"]
