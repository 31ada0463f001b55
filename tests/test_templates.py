from datetime import date
from pathlib import Path

import pytest

from quill.config import SiteConfig
from quill.templates import TemplateEngine, TemplateNotFound


def create_engine(tmp_path: Path, templates: dict[str, str], **settings) -> TemplateEngine:
    for name, source in templates.items():
        path = tmp_path / "templates" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
    return TemplateEngine(SiteConfig.from_mapping(tmp_path, settings))


def test_suffixes_are_tried_in_order(tmp_path):
    engine = create_engine(
        tmp_path,
        {
            "page.html.jinja": "html.jinja",
            "page.jinja": "jinja",
            "other.jinja": "other jinja",
            "other.html": "other html",
            "plain.html": "plain",
        },
    )
    assert engine.render("page") == "html.jinja"
    assert engine.render("other") == "other jinja"
    assert engine.render("plain") == "plain"


def test_nested_template_names(tmp_path):
    engine = create_engine(tmp_path, {"blog/index.html.jinja": "{{ title }}"})
    assert engine.render("blog/index", title="Blog") == "Blog"


def test_missing_template_raises(tmp_path):
    engine = create_engine(tmp_path, {})
    with pytest.raises(TemplateNotFound):
        engine.render("nope")


def test_context_is_autoescaped(tmp_path):
    engine = create_engine(tmp_path, {"page.html.jinja": "{{ value }}"})
    assert engine.render("page", value="<b>") == "&lt;b&gt;"


def test_markdown_filter_dedents_block(tmp_path):
    source = (
        "<div>{% filter markdown %}\n"
        "    ## Experience\n"
        "\n"
        "    * Wrote *things*\n"
        "{% endfilter %}</div>"
    )
    html = create_engine(tmp_path, {"cv.html.jinja": source}).render("cv")
    assert "<h2>Experience</h2>" in html
    assert "<li>Wrote <em>things</em></li>" in html
    assert "&lt;h2&gt;" not in html


def test_site_globals(tmp_path):
    engine = create_engine(
        tmp_path,
        {
            "page.html.jinja": (
                "{{ site.title }}|{{ url_for('/blog/rss') }}|{{ url_for('cv') }}"
                "|{{ url_for('https://other.org/x') }}|{{ css_path('site') }}"
                "|{{ css_path('print.css') }}"
            )
        },
        title="Notes",
        url="https://example.com/",
    )
    assert engine.render("page") == (
        "Notes|https://example.com/blog/rss|https://example.com/cv"
        "|https://other.org/x|/css/site.css|/css/print.css"
    )


def test_rfc822_filter_and_pygments_css(tmp_path):
    engine = create_engine(
        tmp_path, {"page.html.jinja": "{{ when | rfc822 }}\n{{ pygments_css() }}"}
    )
    rendered = engine.render("page", when=date(2024, 5, 1))
    assert rendered.startswith("Wed, 01 May 2024 00:00:00 GMT")
    assert ".highlight" in rendered
