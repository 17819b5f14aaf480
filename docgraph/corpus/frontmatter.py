"""Front-matter parsing - raw document text to a typed ``Document``.

Pure functions: nothing here touches the filesystem.
"""

from typing import Any

import yaml
from kungfu import Error, Ok, Result
from pydantic import ValidationError

from docgraph.constants import FRONTMATTER_DELIMITER, REQUIRED_FIELDS
from docgraph.contracts.document import Document, DocumentMetadata, ParseFailure

BOM = "\ufeff"


def split_frontmatter(content: str) -> Result[tuple[str, str], str]:
    """
    Split text into (yaml_block, body).

    The block opens on the first line with ``---`` and closes on the next
    line consisting only of ``---``. Trailing whitespace on delimiter lines
    is tolerated.
    """
    lines = content.removeprefix(BOM).splitlines(keepends=True)

    if not lines or lines[0].rstrip() != FRONTMATTER_DELIMITER:
        return Error("no front-matter block (file must start with '---')")

    for i in range(1, len(lines)):
        if lines[i].rstrip() == FRONTMATTER_DELIMITER:
            return Ok(("".join(lines[1:i]), "".join(lines[i + 1 :])))

    return Error("unterminated front-matter block (missing closing '---')")


def parse_yaml_frontmatter(content: str) -> Result[dict[str, Any], str]:
    """Extract the front-matter mapping from markdown content."""
    match split_frontmatter(content):
        case Error(reason):
            return Error(reason)
        case Ok((block, _)):
            pass

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        where = f" at line {mark.line + 2}" if mark is not None else ""
        return Error(f"invalid YAML in front-matter{where}")

    if data is None:
        return Ok({})
    if not isinstance(data, dict):
        return Error(
            f"front-matter must be a mapping of fields, got {type(data).__name__}"
        )

    return Ok({str(k): v for k, v in data.items()})


def _missing_required(data: dict[str, Any]) -> list[str]:
    missing = []
    for name in REQUIRED_FIELDS:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def _describe_errors(error: ValidationError) -> tuple[str, tuple[str, ...]]:
    messages = []
    fields: list[str] = []
    for err in error.errors():
        field = str(err["loc"][0]) if err["loc"] else "<front-matter>"
        if field not in fields:
            fields.append(field)
        messages.append(f"{field}: {err['msg']}")
    return "; ".join(messages), tuple(fields)


def parse_document(content: str, path: str) -> Result[Document, ParseFailure]:
    """
    Parse one document.

    Returns:
        Ok(Document) on success, otherwise Error(ParseFailure) with kind
        ``MalformedMetadata`` (block absent, unterminated, not YAML, or a value
        that cannot be coerced) or ``MissingRequiredField``.
    """
    match parse_yaml_frontmatter(content):
        case Error(reason):
            return Error(
                ParseFailure(path=path, kind="MalformedMetadata", detail=reason)
            )
        case Ok(data):
            pass

    missing = _missing_required(data)
    if missing:
        return Error(
            ParseFailure(
                path=path,
                kind="MissingRequiredField",
                detail=f"missing required field(s): {', '.join(missing)}",
                fields=tuple(missing),
            )
        )

    try:
        metadata = DocumentMetadata.model_validate(data)
    except ValidationError as e:
        detail, fields = _describe_errors(e)
        return Error(
            ParseFailure(
                path=path,
                kind="MalformedMetadata",
                detail=detail,
                fields=fields,
            )
        )

    return Ok(Document(metadata=metadata, path=path))


__all__ = ["parse_document", "parse_yaml_frontmatter", "split_frontmatter"]
