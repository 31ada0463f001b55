"""Quill personal website.

This package serves a small personal website: a home page, a CV page and a
blog whose posts are Markdown files with a metadata preamble (``Date:`` and
``Tags:`` lines before the first heading). Posts are rendered with mistune,
pages with Jinja2, and the blog is also published as an RSS 2.0 feed.

The main entry point is the CLI module, which provides commands for
scaffolding a new site, writing a new post and running the web server.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
