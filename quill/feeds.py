"""RSS feed generation for Quill.

The blog is published as an RSS 2.0 document at ``/blog/rss``. Each item
carries the post's full rendered HTML as its description, with root-relative
links made absolute so they work inside feed readers.

Classes:
    RSSFeed: Serializes a list of posts into an RSS 2.0 document.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from .config import SiteConfig
from .html_utils import absolutize_html_urls, escape_html, join_root_url
from .utils import format_rfc822

if TYPE_CHECKING:
    from .content import Post

CONTENT_TYPE = "application/rss+xml; charset=utf-8"


class RSSFeed:
    """Generates an RSS 2.0 feed for the blog.

    Attributes:
        title: Channel title.
        link: Absolute site URL.
        description: Channel description.
        language: Channel language code.
        blog_url: Absolute URL of the blog index.
    """

    def __init__(self, config: SiteConfig):
        """Initialize the feed from site configuration.

        Args:
            config: Site configuration.
        """
        self.title = config.title
        self.link = config.url
        self.description = config.description or config.title
        self.language = config.language
        self.blog_url = join_root_url(config.url, config.post_url_root)

    def generate(self, posts: Iterable[Post], now: datetime | None = None) -> str:
        """Generate the feed document.

        The channel ``pubDate`` is the date of the first (newest) post, or
        ``now`` when there are no posts. ``lastBuildDate`` is always ``now``.

        Args:
            posts: Published posts, newest first, with rendered text.
            now: Build time; defaults to the current UTC time.

        Returns:
            RSS XML content.
        """
        now = now or datetime.now(timezone.utc)
        posts = list(posts)
        pub_date = posts[0].date if posts and posts[0].date else now

        rss = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0">',
            "<channel>",
            f"<title>{escape_html(self.title)}</title>",
            f"<link>{escape_html(self.blog_url)}</link>",
            f"<description>{escape_html(self.description)}</description>",
            f"<language>{escape_html(self.language)}</language>",
            f"<pubDate>{format_rfc822(pub_date)}</pubDate>",
            f"<lastBuildDate>{format_rfc822(now)}</lastBuildDate>",
        ]
        rss.extend(self._item(post) for post in posts)
        rss.append("</channel>")
        rss.append("</rss>")
        return "\n".join(rss) + "\n"

    def _item(self, post: Post) -> str:
        """Serialize one post as an ``<item>`` element.

        Args:
            post: Post with rendered text.

        Returns:
            Item XML.
        """
        url = escape_html(join_root_url(self.link, post.link))
        description = absolutize_html_urls(post.text or "", self.link)
        parts = [
            "<item>",
            f"<title>{escape_html(post.title or post.slug)}</title>",
            f"<link>{url}</link>",
            f'<guid isPermaLink="true">{url}</guid>',
        ]
        if post.date is not None:
            parts.append(f"<pubDate>{format_rfc822(post.date)}</pubDate>")
        parts.extend(f"<category>{escape_html(tag)}</category>" for tag in post.tags)
        parts.append(f"<description>{escape_html(description)}</description>")
        parts.append("</item>")
        return "".join(parts)
