"""Metadata extraction for blog posts.

A post starts with a preamble of ``key: value`` lines, followed by its first
heading, which doubles as the title::

    Date: 2024-05-01
    Tags: test, demo

    # My Title

Only text that appears before the first top-level heading counts as
metadata. Recognized keys are ``date`` and ``tags``; other keys are ignored.

Key functions:
- extract_metadata: Read the preamble and title without touching the document.
- extract_metadata_and_strip: Same, then drop the preamble before rendering.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .document import Document, is_heading, text_children, text_value
from .utils import parse_date


class MetadataError(ValueError):
    """A preamble line has a value that cannot be parsed.

    Attributes:
        key: Metadata key of the offending line.
        value: Raw value text.
        source: Name of the file being read, when known.
    """

    def __init__(self, key: str, value: str, reason: str, source: str | None = None):
        self.key = key
        self.value = value
        self.source = source
        message = f"Invalid {key!r} value {value.strip()!r}: {reason}"
        super().__init__(f"{source}: {message}" if source else message)


def _parse_tags(value: str) -> list[str]:
    return [tag.strip() for tag in value.split(",")]


FIELD_PARSERS: dict[str, Callable[[str], Any]] = {
    "date": parse_date,
    "tags": _parse_tags,
}


def extract_metadata(
    document: Document, strict: bool = True, source: str | None = None
) -> dict[str, Any]:
    """Extract post metadata from a parsed document.

    Walks the top-level nodes in order. Text children of nodes before the
    first heading are read as ``key: value`` lines; the first text child of
    that heading becomes ``title`` and scanning stops. A document without a
    heading is scanned to the end and gets no ``title``.

    Args:
        document: Parsed post.
        strict: When False, a value that fails to parse is reported with a
            printed warning and left out instead of raising.
        source: Name of the file being read, used in error messages.

    Returns:
        Mapping with any of ``title``, ``date`` and ``tags``.

    Raises:
        MetadataError: If ``strict`` and a recognized value fails to parse.
    """
    meta: dict[str, Any] = {}
    for node in document:
        if is_heading(node):
            texts = text_children(node)
            if texts:
                meta["title"] = text_value(texts[0])
            break
        for text in text_children(node):
            for line in text_value(text).splitlines():
                _read_line(meta, line, strict, source)
    return meta


def _read_line(meta: dict[str, Any], line: str, strict: bool, source: str | None) -> None:
    """Store the value of one ``key: value`` line if the key is recognized."""
    if ":" not in line:
        return
    key, value = line.split(":", 1)
    field_name = key.strip().lower()
    parser = FIELD_PARSERS.get(field_name)
    if parser is None:
        return
    try:
        meta[field_name] = parser(value.strip())
    except ValueError as exc:
        error = MetadataError(field_name, value, str(exc), source)
        if strict:
            raise error from exc
        print(f"Ignoring metadata: {error}")


def extract_metadata_and_strip(
    document: Document, strict: bool = True, source: str | None = None
) -> dict[str, Any]:
    """Extract metadata, then remove the preamble from the document.

    Every top-level node before the first heading is dropped, so the heading
    becomes the first node. A document with no heading is all preamble and
    ends up empty. The document is modified in place.

    Args:
        document: Parsed post.
        strict: Passed through to ``extract_metadata``.
        source: Passed through to ``extract_metadata``.

    Returns:
        Mapping with any of ``title``, ``date`` and ``tags``.
    """
    meta = extract_metadata(document, strict=strict, source=source)
    start = document.first_heading_index()
    if start is None:
        start = len(document.children)
    del document.children[:start]
    return meta
