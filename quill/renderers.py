"""Markdown parsing and HTML rendering for Quill.

Posts are parsed into a node tree first so the metadata preamble can be read
and removed; only the remaining tree is rendered. Both steps go through
mistune: AST mode for parsing, an ``HTMLRenderer`` subclass for output.

Key classes:
- PostHTMLRenderer: mistune HTML renderer with Pygments code highlighting.
- MarkdownRenderer: Parses Markdown into a Document and renders Documents.
"""

from __future__ import annotations

import mistune
from mistune.util import escape
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .document import Document

PLUGINS = ["strikethrough", "table", "url"]


class PostHTMLRenderer(mistune.HTMLRenderer):
    """HTML renderer that highlights fenced code blocks with Pygments.

    Raw HTML inside posts is passed through unchanged.
    """

    def __init__(self):
        super().__init__(escape=False)

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'ruby').

        Returns:
            HTML string with highlighted code.
        """
        if info:
            lang = info.split(None, 1)[0]
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        lang_class = f' class="language-{escape(info.split(None, 1)[0])}"' if info else ""
        return f"<pre><code{lang_class}>{escape(code)}</code></pre>\n"


class MarkdownRenderer:
    """Parses Markdown into Documents and renders Documents to HTML.

    Each call builds fresh mistune instances, so one renderer can be shared
    between request threads.
    """

    def parse(self, text: str) -> Document:
        """Parse Markdown text into a Document.

        Args:
            text: Markdown source.

        Returns:
            Document holding the top-level nodes.
        """
        parser = mistune.create_markdown(renderer="ast", plugins=PLUGINS)
        tokens, state = parser.parse(text)
        return Document(children=list(tokens), state=state)

    def render(self, document: Document) -> str:
        """Render a Document to HTML.

        Args:
            document: Parsed document, possibly with its preamble stripped.

        Returns:
            Rendered HTML.
        """
        renderer = PostHTMLRenderer()
        # Plugins only register their render hooks on an HTML renderer.
        mistune.create_markdown(renderer=renderer, plugins=PLUGINS)
        return renderer.render_tokens(document.children, document.state)

    def render_text(self, text: str) -> str:
        """Render Markdown text straight to HTML.

        Args:
            text: Markdown source.

        Returns:
            Rendered HTML.
        """
        markdown = mistune.create_markdown(renderer=PostHTMLRenderer(), plugins=PLUGINS)
        return markdown(text)


default_markdown_renderer = MarkdownRenderer()
