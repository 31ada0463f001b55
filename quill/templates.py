"""Template rendering engine for Quill.

This module uses Jinja2 to render the site's pages. Templates live in the
site's templates directory; a page named ``blog/post`` is looked up as
``blog/post.html.jinja``, then ``blog/post.jinja``, then ``blog/post.html``.

Besides the usual context, templates get:
- ``site``: public configuration values (title, author, url, ...).
- ``url_for(path)``: absolute URL for a site path.
- ``css_path(name)``: URL of a compiled stylesheet.
- ``pygments_css()``: CSS for highlighted code blocks.
- ``markdown`` filter: render a Markdown block, e.g. the body of the CV page.
- ``rfc822`` filter: format a date the way the feed does.
"""

from __future__ import annotations

from textwrap import dedent
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markupsafe import Markup
from pygments.formatters import HtmlFormatter

from .config import SiteConfig
from .html_utils import join_root_url
from .renderers import MarkdownRenderer, default_markdown_renderer
from .utils import format_rfc822

__all__ = ["TemplateEngine", "TemplateNotFound"]

TEMPLATE_SUFFIXES = (".html.jinja", ".jinja", ".html")


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        config: Site configuration.
        env: Jinja2 environment.
        markdown_renderer: Renderer behind the ``markdown`` filter.
    """

    def __init__(self, config: SiteConfig, markdown_renderer: MarkdownRenderer | None = None):
        """Initialize the template engine.

        Args:
            config: Site configuration.
            markdown_renderer: Optional custom Markdown renderer.
        """
        self.config = config
        self.markdown_renderer = markdown_renderer or default_markdown_renderer
        self.env = Environment(
            loader=FileSystemLoader(str(config.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            enable_async=False,
        )
        self._install_globals()

    def _install_globals(self) -> None:
        """Install global variables, functions and filters in the Jinja environment."""
        self.env.globals["site"] = self.config.as_dict()
        self.env.globals["url_for"] = self._url_for
        self.env.globals["css_path"] = self._css_path
        self.env.globals["pygments_css"] = self._pygments_css
        self.env.filters["markdown"] = self._markdown
        self.env.filters["rfc822"] = format_rfc822

    @staticmethod
    def _pygments_css() -> Markup:
        """Return Pygments CSS styles for the .highlight class."""
        return Markup(HtmlFormatter().get_style_defs(".highlight"))

    def _markdown(self, text: str) -> Markup:
        """Render a Markdown block inside a template.

        Common leading indentation is removed first, so the block can be
        indented to match the surrounding markup.

        Args:
            text: Markdown source.

        Returns:
            Markup-safe HTML.
        """
        return Markup(self.markdown_renderer.render_text(dedent(str(text)).strip("\n")))

    def _url_for(self, path: str) -> str:
        """Return the absolute URL for a site path.

        Args:
            path: Path such as ``/blog`` or ``blog/rss``.

        Returns:
            Absolute URL; URLs that already name a scheme are returned unchanged.
        """
        if path.startswith(("http://", "https://", "//")):
            return path
        return join_root_url(self.config.url, path if path.startswith("/") else f"/{path}")

    @staticmethod
    def _css_path(name: str) -> str:
        """Return the URL path of a compiled stylesheet.

        Args:
            name: Stylesheet name with or without ``.css``.

        Returns:
            URL path like /css/site.css
        """
        stem = name[:-4] if name.endswith(".css") else name
        return f"/css/{stem}.css"

    def get_template(self, name: str):
        """Resolve a template by name, trying each known suffix.

        Args:
            name: Template name without suffix, e.g. ``blog/index``.

        Returns:
            Jinja2 Template object.

        Raises:
            TemplateNotFound: If no candidate exists.
        """
        candidates = [f"{name}{suffix}" for suffix in TEMPLATE_SUFFIXES]
        return self.env.select_template(candidates)

    def render(self, name: str, **context: Any) -> str:
        """Render a named template.

        Args:
            name: Template name without suffix.
            **context: Variables made available to the template.

        Returns:
            Rendered HTML string.
        """
        return self.get_template(name).render(**context)
