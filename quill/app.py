"""Flask application for Quill.

``create_app`` builds a Flask app for one site. Pages are rendered on every
request straight from the files on disk, so edits show up on the next reload.

Routes (with the default ``post_url_root`` of ``/blog``):
- ``/``: home page.
- ``/cv``: CV page.
- ``/blog``: post listing.
- ``/blog/rss``: RSS feed.
- ``/blog/<key>``: a single post, or the 404 page when it does not exist.
- ``/css/<style>.css``: compiled stylesheet.
- anything else: a file from the public directory (Flask's static folder),
  or the 404 page.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask, Response
from jinja2 import TemplateNotFound

from .config import SiteConfig
from .content import PostCatalog, PostNotFound
from .feeds import CONTENT_TYPE as RSS_CONTENT_TYPE
from .feeds import RSSFeed
from .html_utils import escape_html
from .styles import CONTENT_TYPE as CSS_CONTENT_TYPE
from .styles import StylesheetCompiler
from .templates import TemplateEngine

if TYPE_CHECKING:
    from .livereload import LiveReload

ERROR_PAGE = (
    "<!DOCTYPE html><html><head><title>{status} {reason}</title></head>"
    "<body><h1>{reason}</h1><p>{message}</p></body></html>"
)


def create_app(
    config: SiteConfig,
    catalog: PostCatalog | None = None,
    templates: TemplateEngine | None = None,
    stylesheets: StylesheetCompiler | None = None,
    live_reload: LiveReload | None = None,
) -> Flask:
    """Build the Flask application for a site.

    Args:
        config: Site configuration.
        catalog: Optional custom post catalog.
        templates: Optional custom template engine.
        stylesheets: Optional custom stylesheet compiler.
        live_reload: Optional live reload helper; its script is added to
            every HTML page.

    Returns:
        Configured Flask app.
    """
    catalog = catalog or PostCatalog(config)
    templates = templates or TemplateEngine(config)
    stylesheets = stylesheets or StylesheetCompiler(config)
    feed = RSSFeed(config)
    blog = config.post_url_root

    app = Flask(
        __name__,
        static_folder=str(config.public_dir),
        static_url_path="",
        template_folder=None,
    )

    def not_found(message: str):
        try:
            body = templates.render("404", area="Error", title="Not Found", message=message)
        except TemplateNotFound:
            return error_page(404, "Not Found", message)
        return body, 404

    @app.route("/")
    def home():
        posts = catalog.list_posts(include_text=False)
        return templates.render(
            "index", area="Home", title="Home", posts=posts.latest(config.recent_posts)
        )

    @app.route("/cv")
    def cv():
        return templates.render("cv", area="CV", title="CV")

    @app.route(blog)
    def blog_index():
        posts = catalog.list_posts(include_text=False)
        return templates.render(
            "blog/index", area="Blog", title="Blog", posts=posts, tags=posts.tags()
        )

    @app.route(f"{blog}/rss")
    def blog_rss():
        posts = catalog.list_posts(include_text=True)
        return Response(feed.generate(posts), content_type=RSS_CONTENT_TYPE)

    @app.route(f"{blog}/<key>")
    def blog_post(key: str):
        """Render a single post; PostNotFound becomes the 404 page."""
        post = catalog.get_post(key)
        context = post.as_dict()
        context.setdefault("title", post.slug)
        return templates.render("blog/post", area="Blog", post=post, **context)

    @app.route("/css/<style>.css")
    def stylesheet(style: str):
        return Response(stylesheets.compile(style), content_type=CSS_CONTENT_TYPE)

    @app.errorhandler(PostNotFound)
    def post_not_found(exc):
        return not_found("Post not found.")

    @app.errorhandler(404)
    def page_not_found(exc):
        return not_found("Page not found.")

    @app.errorhandler(500)
    def internal_error(exc):
        # Flask has already logged the original traceback.
        return error_page(500, "Internal Server Error", "Something went wrong.")

    if live_reload is not None:
        app.after_request(live_reload.inject)

    return app


def error_page(status: int, reason: str, message: str):
    """Return a bare HTML error page for when no template can be used."""
    body = ERROR_PAGE.format(
        status=status, reason=escape_html(reason), message=escape_html(message)
    )
    return body, status
