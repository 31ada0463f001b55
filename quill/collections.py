"""Post collections for Quill.

PostCollection wraps a list of posts with the filters and orderings used by
the listing pages and the feed.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .content import Post


class PostCollection(Sequence["Post"]):
    """Lightweight helper for working with lists of Posts in templates and code."""

    def __init__(self, posts: Iterable[Post]):
        self._posts = list(posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __getitem__(self, item):
        return self._posts[item]

    def published(self, today: date) -> PostCollection:
        """Keep posts that have a date no later than ``today``."""
        return PostCollection(p for p in self._posts if p.is_published(today))

    def sorted(self, reverse: bool = True) -> PostCollection:
        """Sort posts by date, newest first unless ``reverse`` is False.

        The sort is stable, so posts sharing a date keep their current order.
        Undated posts sort as the oldest.
        """
        return PostCollection(
            sorted(self._posts, key=lambda p: p.date or date.min, reverse=reverse)
        )

    def latest(self, count: int = 5) -> PostCollection:
        return PostCollection(self.sorted()[:count])

    def tags(self) -> list[str]:
        """Return every tag used by the posts, in first-seen order."""
        seen: list[str] = []
        for post in self._posts:
            for tag in post.tags:
                if tag not in seen:
                    seen.append(tag)
        return seen

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._posts)} posts)"
