"""Blog post loading for Quill.

This module finds post sources on disk and turns each into a Post: the
metadata from its preamble, its link, and optionally its rendered HTML.

Key classes:
- Post: Dataclass holding one post's metadata and rendered text.
- PostCatalog: Enumerates, filters and sorts posts, and resolves single posts.
- PostNotFound: Raised when a post key matches no file.

Posts are read fresh on every call; nothing is cached between requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from .collections import PostCollection
from .config import SiteConfig
from .extractors import extract_metadata_and_strip
from .renderers import MarkdownRenderer, default_markdown_renderer
from .utils import is_safe_name

POST_SUFFIX = ".markdown"


class PostNotFound(LookupError):
    """No post source exists for the requested key.

    Attributes:
        key: The key that was looked up.
    """

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Post not found: {key}")


@dataclass
class Post:
    """A blog post.

    Attributes:
        slug: Source filename without extension.
        link: URL of the post page.
        path: Path to the source file.
        title: Text of the first heading, if the post has one.
        date: Publication date from the ``Date:`` line.
        tags: Tags from the ``Tags:`` line.
        text: Rendered HTML body, when it was requested.
    """

    slug: str
    link: str
    path: Path
    title: str | None = None
    date: date | None = None
    tags: list[str] = field(default_factory=list)
    text: str | None = None

    def is_published(self, today: date) -> bool:
        return self.date is not None and self.date <= today

    def as_dict(self) -> dict[str, Any]:
        """Return the post as a mapping holding only the fields that are set."""
        data: dict[str, Any] = {"slug": self.slug, "link": self.link}
        if self.title is not None:
            data["title"] = self.title
        if self.date is not None:
            data["date"] = self.date
        if self.tags:
            data["tags"] = list(self.tags)
        if self.text is not None:
            data["text"] = self.text
        return data


class PostCatalog:
    """Reads blog posts from the posts directory.

    Attributes:
        posts_dir: Directory searched recursively for ``*.markdown`` files.
        post_url_root: Prefix for post links.
        strict_dates: Whether a malformed ``Date:`` line raises.
        renderer: Markdown renderer used to parse and render posts.
    """

    def __init__(self, config: SiteConfig, renderer: MarkdownRenderer | None = None):
        """Initialize the catalog.

        Args:
            config: Site configuration.
            renderer: Optional custom Markdown renderer.
        """
        self.posts_dir = config.posts_dir
        self.post_url_root = config.post_url_root.rstrip("/")
        self.strict_dates = config.strict_dates
        self.renderer = renderer or default_markdown_renderer

    def iter_files(self) -> list[Path]:
        """Return every post source under the posts directory, sorted by path."""
        if not self.posts_dir.is_dir():
            return []
        return sorted(
            path for path in self.posts_dir.rglob(f"*{POST_SUFFIX}") if path.is_file()
        )

    def load(self, path: Path, include_text: bool = True) -> Post:
        """Build a Post from a source file.

        The preamble is extracted and stripped; the rest of the document is
        rendered to HTML when ``include_text`` is set.

        Args:
            path: Path to the post source.
            include_text: Whether to render the post body.

        Returns:
            Post instance.
        """
        source = path.read_text(encoding="utf-8")
        document = self.renderer.parse(source)
        meta = extract_metadata_and_strip(
            document, strict=self.strict_dates, source=str(path)
        )
        slug = path.stem
        return Post(
            slug=slug,
            link=f"{self.post_url_root}/{slug}",
            path=path,
            title=meta.get("title"),
            date=meta.get("date"),
            tags=meta.get("tags", []),
            text=self.renderer.render(document) if include_text else None,
        )

    def list_posts(self, include_text: bool = False, today: date | None = None) -> PostCollection:
        """List published posts, newest first.

        Posts without a date, or dated after ``today``, are left out.

        Args:
            include_text: Whether to render each post's body.
            today: Reference date; defaults to the current date.

        Returns:
            PostCollection sorted by date, most recent first.
        """
        today = today or date.today()
        posts = PostCollection(self.load(path, include_text) for path in self.iter_files())
        return posts.published(today).sorted()

    def get_post(self, key: str) -> Post:
        """Load a single post by key, with its rendered body.

        Unpublished posts are returned too; only listings hide them.

        Args:
            key: Filename without extension.

        Returns:
            Post instance.

        Raises:
            PostNotFound: If no ``<key>.markdown`` exists under the posts directory.
        """
        if not is_safe_name(key) or not self.posts_dir.is_dir():
            raise PostNotFound(key)
        matches = sorted(p for p in self.posts_dir.rglob(f"{key}{POST_SUFFIX}") if p.is_file())
        if not matches:
            raise PostNotFound(key)
        return self.load(matches[0], include_text=True)
