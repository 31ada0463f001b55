"""Utility functions for Quill.

This module contains small string and date helpers used throughout the
package.

Key functions:
    slugify: Convert a post title or filename to a URL slug.
    parse_date: Parse the value of a ``Date:`` metadata line.
    format_rfc822: Format a date or datetime for RSS.
    is_safe_name: Check that a URL segment names a single file stem.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone

from dateutil import parser as dateutil_parser

RFC822_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"

_UNSAFE_NAME_RE = re.compile(r"[/\\*?\[\]]")


def slugify(name: str) -> str:
    """Convert a title or filename stem to a URL slug.

    Args:
        name: Title or filename stem.

    Returns:
        URL-friendly slug.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", name)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "untitled"


def parse_date(value: str) -> date:
    """Parse a calendar date written by hand in a post preamble.

    Parsing is lenient: ``2024-03-01``, ``2024-3-1``, ``1st March 2024``,
    ``March 1, 2024`` and ``Sat, 01 Jun 2024`` are all accepted. A time part
    is dropped.

    Args:
        value: Raw date text.

    Returns:
        The parsed date.

    Raises:
        ValueError: If the text is not a recognizable date.
    """
    text = value.strip()
    try:
        return dateutil_parser.parse(text).date()
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Unrecognized date: {text!r}") from exc


def format_rfc822(value: date | datetime) -> str:
    """Format a date for RSS ``pubDate`` / ``lastBuildDate`` elements.

    Plain dates are taken as midnight UTC. Aware datetimes are converted
    to UTC first.

    Args:
        value: Date or datetime.

    Returns:
        String such as ``Wed, 01 May 2024 00:00:00 GMT``.
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, time(0, 0))
    elif value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(RFC822_FORMAT)


def is_safe_name(name: str) -> bool:
    """Check that a URL segment is a bare file stem.

    Rejects empty names, path separators, parent references and glob
    characters.

    Args:
        name: Candidate name from a URL.

    Returns:
        True if the name can be used to build a filename.
    """
    if not name or name in (".", ".."):
        return False
    if ".." in name or name.startswith("."):
        return False
    return not _UNSAFE_NAME_RE.search(name)
