"""Corpus management - front-matter parsing, loading, and the document registry."""

from docgraph.corpus.frontmatter import (
    parse_document,
    parse_yaml_frontmatter,
    split_frontmatter,
)
from docgraph.corpus.loader import DocumentLoader, parse_sources, split_results
from docgraph.corpus.registry import DocumentRegistry

__all__ = [
    "DocumentLoader",
    "DocumentRegistry",
    "parse_document",
    "parse_sources",
    "parse_yaml_frontmatter",
    "split_frontmatter",
    "split_results",
]
