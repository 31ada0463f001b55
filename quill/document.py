"""Parsed Markdown documents.

A Document is the block-level node tree mistune produces in AST mode, kept
together with the parser state the HTML renderer needs. Nodes are mistune
token dicts: every node has a ``type``, containers carry an ordered
``children`` list and text leaves carry their string in ``raw``.

A Document belongs to the request that parsed it and is thrown away once
rendered.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

Node = dict[str, Any]

HEADING = "heading"
TEXT = "text"


@dataclass
class Document:
    """Top-level nodes of a parsed Markdown source.

    Attributes:
        children: Top-level block nodes in document order.
        state: mistune block state from parsing, passed back when rendering.
    """

    children: list[Node]
    state: Any = None

    def first_heading_index(self) -> int | None:
        """Return the position of the first top-level heading, if any."""
        for index, node in enumerate(self.children):
            if is_heading(node):
                return index
        return None

    def __iter__(self) -> Iterator[Node]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)


def is_heading(node: Node) -> bool:
    return node.get("type") == HEADING


def text_children(node: Node) -> list[Node]:
    """Return the direct ``text`` children of a node, in order."""
    return [child for child in node.get("children", ()) if child.get("type") == TEXT]


def text_value(node: Node) -> str:
    """Return the string a text leaf carries."""
    return node.get("raw", "")
