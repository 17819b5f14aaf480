"""Document loader for a content tree."""

import logging
from collections.abc import Iterable
from pathlib import Path

from kungfu import Error, Ok, Result

from docgraph.constants import CORPUS_EXTENSIONS
from docgraph.contracts.document import Document, ParseFailure
from docgraph.corpus.frontmatter import parse_document
from docgraph.errors import CorpusLoadError

logger = logging.getLogger(__name__)


class DocumentLoader:
    """
    Load and parse every markdown document below a content root.

    Document paths are recorded relative to the root, with forward slashes,
    so identities and reports do not depend on where the tree is checked out.
    """

    def __init__(self, content_root: Path, patterns: Iterable[str] | None = None):
        """
        Initialize document loader.

        Args:
            content_root: Directory holding the content tree
            patterns: Glob patterns selecting documents (default: markdown files)

        Raises:
            CorpusLoadError: If the root does not exist or is not a directory.
        """
        self.content_root = Path(content_root)
        self.patterns = tuple(patterns) if patterns else CORPUS_EXTENSIONS

        if not self.content_root.is_dir():
            raise CorpusLoadError(f"Content root {self.content_root} is not a directory")

    def _find_markdown_files(self) -> list[Path]:
        """Find all matching files below the content root."""
        files: set[Path] = set()

        for pattern in self.patterns:
            files.update(p for p in self.content_root.rglob(pattern) if p.is_file())

        return sorted(files)

    def relative_path(self, file_path: Path) -> str:
        return file_path.relative_to(self.content_root).as_posix()

    def read_sources(self) -> list[tuple[str, str | None]]:
        """
        Read raw text of every document.

        Unreadable files are returned with ``None`` text so the caller can
        report them without dropping the rest of the batch.
        """
        sources: list[tuple[str, str | None]] = []

        for file_path in self._find_markdown_files():
            rel = self.relative_path(file_path)
            try:
                sources.append((rel, file_path.read_text(encoding="utf-8")))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Failed to read {rel}: {e}")
                sources.append((rel, None))

        logger.info(f"Read {len(sources)} documents from {self.content_root}")
        return sources

    def load_document(self, file_path: Path) -> Result[Document, ParseFailure]:
        """Load and parse a single document."""
        rel = self.relative_path(file_path)
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return Error(
                ParseFailure(
                    path=rel, kind="MalformedMetadata", detail=f"unreadable file: {e}"
                )
            )
        return parse_document(content, rel)

    def load_corpus(self) -> list[Result[Document, ParseFailure]]:
        """Parse every document. Failures are kept in place, never raised."""
        results = parse_sources(self.read_sources())

        failed = sum(1 for r in results if isinstance(r, Error))
        if failed:
            logger.warning(f"{failed} of {len(results)} documents failed to parse")

        return results

    def get_document_by_path(
        self, relative_path: str
    ) -> Result[Document, ParseFailure] | None:
        """Load a specific document by relative path."""
        full_path = self.content_root / relative_path

        if not full_path.is_file():
            return None

        return self.load_document(full_path)


def parse_sources(
    sources: Iterable[tuple[str, str | None]],
) -> list[Result[Document, ParseFailure]]:
    """Parse (path, text) pairs in order. ``None`` text marks an unreadable file."""
    results: list[Result[Document, ParseFailure]] = []

    for path, content in sources:
        if content is None:
            results.append(
                Error(
                    ParseFailure(
                        path=path, kind="MalformedMetadata", detail="unreadable file"
                    )
                )
            )
            continue
        results.append(parse_document(content, path))

    return results


def split_results(
    results: Iterable[Result[Document, ParseFailure]],
) -> tuple[list[Document], list[ParseFailure]]:
    documents: list[Document] = []
    failures: list[ParseFailure] = []

    for result in results:
        match result:
            case Ok(doc):
                documents.append(doc)
            case Error(failure):
                failures.append(failure)

    return documents, failures


__all__ = ["DocumentLoader", "parse_sources", "split_results"]
