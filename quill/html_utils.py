"""HTML helpers for Quill.

String-level helpers for escaping text, building absolute URLs and
adjusting rendered HTML before it leaves the server.

Functions:
    escape_html: Escape special HTML and XML characters in a string.
    absolutize_html_urls: Convert root-relative URLs in HTML to absolute ones.
    join_root_url: Join a base URL with a path.
    inject_before_body_end: Insert markup just before the closing body tag.
"""

from __future__ import annotations

import re

_URL_ATTR_RE = re.compile(
    r'(?P<prefix>\b(?:href|src)=["\'])(?P<url>/[^"\']*)(?P<suffix>["\'])'
)


def escape_html(text: str) -> str:
    """Escape ``&``, ``<``, ``>`` and ``"`` so text is safe in HTML and XML.

    Examples:
        >>> escape_html('Tom & "Jerry"')
        'Tom &amp; &quot;Jerry&quot;'
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def join_root_url(root_url: str, path: str) -> str:
    """Join a root URL and a path without doubling slashes.

    Examples:
        >>> join_root_url('https://example.com/', 'blog/hello')
        'https://example.com/blog/hello'
    """
    if not root_url:
        return path
    base = root_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"


def absolutize_html_urls(html: str, root_url: str) -> str:
    """Rewrite root-relative ``href`` and ``src`` values to absolute URLs.

    Feed readers show item descriptions outside the site, so links like
    ``/blog/other-post`` need the site URL in front. Protocol-relative
    URLs (``//cdn...``) are left alone.

    Args:
        html: Rendered HTML.
        root_url: Absolute site URL.

    Returns:
        HTML with root-relative URLs made absolute.
    """
    if not root_url:
        return html

    def repl(match: re.Match) -> str:
        url = match.group("url")
        if url.startswith("//"):
            return match.group(0)
        return f"{match.group('prefix')}{join_root_url(root_url, url)}{match.group('suffix')}"

    return _URL_ATTR_RE.sub(repl, html)


def inject_before_body_end(html: str, snippet: str) -> str:
    """Insert a snippet before ``</body>``, or append it when there is none.

    Args:
        html: HTML document.
        snippet: Markup to insert.

    Returns:
        HTML with the snippet added.
    """
    if "</body>" in html:
        return html.replace("</body>", f"{snippet}</body>", 1)
    return html + snippet
