"""Document contracts - front-matter metadata and parsed documents."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from docgraph.constants import SLUG_PATTERN

Depth = Literal["surface", "mid-depth", "deep-water"]


def make_doc_id(phase: str, topic: str, depth: str) -> str:
    """Stable string identity of a document."""
    return f"{phase}/{topic}/{depth}"


class DocumentMetadata(BaseModel):
    """
    Front-matter of one article.

    Values arrive as loosely typed YAML and are coerced here: ``depth`` to one
    of the canonical tiers, ``reading_time`` to a positive integer, ``updated``
    to a date, and list fields to tuples. Absent list fields default to empty.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str = Field(min_length=1, description="Display title")
    phase: str = Field(min_length=1, description="Lifecycle phase, e.g. 02-design")
    topic: str = Field(pattern=SLUG_PATTERN, description="Topic slug shared across depths")
    depth: Depth = Field(description="Content tier")

    reading_time: PositiveInt | None = Field(
        default=None, description="Estimated reading time in minutes"
    )
    prerequisites: tuple[str, ...] = Field(
        default=(), description="Documents to read first, in display order"
    )
    related_topics: tuple[str, ...] = Field(
        default=(), description="Topic slugs linked from this document"
    )
    personas: tuple[str, ...] = Field(default=(), description="Audience tags")
    updated: date | None = Field(default=None, description="Last content update")

    type: str | None = Field(default=None, description="Content type, e.g. case-study")
    domain: str | None = None
    industry: str | None = None
    keywords: tuple[str, ...] = Field(default=(), description="SEO keywords")

    @field_validator(
        "prerequisites", "related_topics", "personas", "keywords", mode="before"
    )
    @classmethod
    def coerce_sequence(cls, v: object) -> object:
        if v is None:
            return ()
        if isinstance(v, str):
            return (v,)
        return v

    @field_validator("updated", mode="before")
    @classmethod
    def coerce_timestamp(cls, v: object) -> object:
        # unquoted YAML timestamps arrive as datetime
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str):
            try:
                return datetime.fromisoformat(v.strip()).date()
            except ValueError:
                return v
        return v

    @property
    def doc_id(self) -> str:
        return make_doc_id(self.phase, self.topic, self.depth)


class Document(BaseModel):
    """A parsed article: its metadata plus where it came from."""

    model_config = ConfigDict(frozen=True)

    metadata: DocumentMetadata = Field(description="Parsed front-matter")
    path: str = Field(description="Source path, relative to the content root")

    @property
    def doc_id(self) -> str:
        return self.metadata.doc_id

    @property
    def phase(self) -> str:
        return self.metadata.phase

    @property
    def topic(self) -> str:
        return self.metadata.topic

    @property
    def depth(self) -> str:
        return self.metadata.depth

    @property
    def title(self) -> str:
        return self.metadata.title


class ParseFailure(BaseModel):
    """Why one document could not be turned into a ``Document``."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Source path of the failing document")
    kind: Literal["MalformedMetadata", "MissingRequiredField"]
    detail: str
    fields: tuple[str, ...] = Field(
        default=(), description="Fields involved (missing or failing coercion)"
    )
