import logging
from datetime import date, timedelta
from pathlib import Path

import pytest

from quill.app import create_app
from quill.config import SiteConfig
from quill.feeds import CONTENT_TYPE as RSS_CONTENT_TYPE
from quill.styles import StylesheetNotFound

TEMPLATES = {
    "layout.html.jinja": "<html><body>[{{ area }}] {% block content %}{% endblock %}</body></html>",
    "index.html.jinja": (
        '{% extends "layout.html.jinja" %}{% block content %}'
        "{% for post in posts %}<li>{{ post.title }}</li>{% endfor %}{% endblock %}"
    ),
    "cv.html.jinja": (
        '{% extends "layout.html.jinja" %}{% block content %}'
        "{% filter markdown %}\n  ## Work\n{% endfilter %}{% endblock %}"
    ),
    "blog/index.html.jinja": (
        '{% extends "layout.html.jinja" %}{% block content %}'
        "{% for post in posts %}<a href=\"{{ post.link }}\">{{ post.title }}</a>{% endfor %}"
        "<p>{{ tags | join(',') }}</p>{% endblock %}"
    ),
    "blog/post.html.jinja": (
        '{% extends "layout.html.jinja" %}{% block content %}'
        "<title>{{ title }}</title>{{ text | safe }}{% endblock %}"
    ),
    "404.html.jinja": '{% extends "layout.html.jinja" %}{% block content %}{{ message }}{% endblock %}',
}


def write(root: Path, rel: str, content: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def write_templates(root: Path) -> None:
    for name, source in TEMPLATES.items():
        write(root, f"templates/{name}", source)


@pytest.fixture()
def client(tmp_path):
    write_templates(tmp_path)
    write(tmp_path, "blog/older.markdown", "Date: 2024-01-01\nTags: a\n\n# Older\n\nFirst.\n")
    write(
        tmp_path,
        "blog/newer.markdown",
        "Date: 2024-02-01\nTags: b, a\n\n# Newer\n\nSee [older](/blog/older).\n",
    )
    future = (date.today() + timedelta(days=30)).isoformat()
    write(tmp_path, "blog/draft.markdown", f"Date: {future}\n\n# Draft\n\nSoon.\n")
    write(tmp_path, "blog/undated.markdown", "# Undated\n\nNo date.\n")
    write(tmp_path, "styles/site.css", "body { margin: 0; }\n")
    write(tmp_path, "public/robots.txt", "User-agent: *\n")
    write(tmp_path, "secret.txt", "hidden")
    config = SiteConfig.from_mapping(
        tmp_path, {"title": "Site", "url": "https://example.com", "recent_posts": 1}
    )
    return create_app(config).test_client()


def test_home_lists_recent_posts(client):
    response = client.get("/")
    body = response.get_data(as_text=True)
    assert response.status_code == 200
    assert response.mimetype == "text/html"
    assert "[Home]" in body
    assert "<li>Newer</li>" in body
    assert "Older" not in body
    assert "Draft" not in body


def test_cv_renders_markdown_block(client):
    response = client.get("/cv")
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "[CV]" in body
    assert "<h2>Work</h2>" in body


def test_blog_index_lists_published_posts(client):
    response = client.get("/blog")
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert body.index(">Newer<") < body.index(">Older<")
    assert "Draft" not in body
    assert "Undated" not in body
    assert "<p>b,a</p>" in body


def test_blog_post_page(client):
    response = client.get("/blog/newer")
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "[Blog]" in body
    assert "<title>Newer</title>" in body
    assert "<h1>Newer</h1>" in body
    assert "Date:" not in body


def test_unpublished_post_is_reachable_by_link(client):
    assert "<h1>Draft</h1>" in client.get("/blog/draft").get_data(as_text=True)
    assert "<h1>Undated</h1>" in client.get("/blog/undated").get_data(as_text=True)


def test_missing_post_is_404(client):
    response = client.get("/blog/does-not-exist")
    assert response.status_code == 404
    body = response.get_data(as_text=True)
    assert "Post not found." in body
    assert "[Error]" in body


def test_rss_feed(client):
    response = client.get("/blog/rss")
    assert response.status_code == 200
    assert response.content_type == RSS_CONTENT_TYPE
    body = response.get_data(as_text=True)
    assert body.startswith("<?xml")
    assert "<title>Newer</title>" in body
    assert "Draft" not in body
    assert "https://example.com/blog/older" in body


def test_stylesheet(client):
    response = client.get("/css/site.css")
    assert response.status_code == 200
    assert response.mimetype == "text/css"
    assert response.get_data(as_text=True) == "body { margin: 0; }\n"


def test_missing_stylesheet_is_500(client, caplog):
    with caplog.at_level(logging.ERROR):
        response = client.get("/css/missing.css")
    assert response.status_code == 500
    assert "Internal Server Error" in response.get_data(as_text=True)
    assert any(
        record.exc_info and record.exc_info[0] is StylesheetNotFound for record in caplog.records
    )


def test_query_string_is_ignored(client):
    assert client.get("/blog/newer?ref=rss").status_code == 200


def test_head_request(client):
    response = client.head("/blog/newer")
    assert response.status_code == 200
    assert response.get_data() == b""


def test_static_files(client):
    response = client.get("/robots.txt")
    assert response.status_code == 200
    assert response.mimetype == "text/plain"
    assert response.get_data() == b"User-agent: *\n"


@pytest.mark.parametrize("path", ["/missing.txt", "/../secret.txt", "/%2e%2e/secret.txt", "/css/"])
def test_unknown_and_escaping_paths(client, path):
    response = client.get(path)
    assert response.status_code == 404
    assert "hidden" not in response.get_data(as_text=True)


def test_missing_template_is_500(tmp_path, caplog):
    client = create_app(SiteConfig.from_mapping(tmp_path, {})).test_client()
    with caplog.at_level(logging.ERROR):
        response = client.get("/cv")
    assert response.status_code == 500
    assert "cv.html.jinja" in caplog.text


def test_not_found_without_template(tmp_path):
    client = create_app(SiteConfig.from_mapping(tmp_path, {})).test_client()
    response = client.get("/blog/nothing")
    assert response.status_code == 404
    body = response.get_data(as_text=True)
    assert "<h1>Not Found</h1>" in body
    assert "Post not found." in body


def test_custom_post_url_root(tmp_path):
    write_templates(tmp_path)
    write(tmp_path, "writing/hello.markdown", "Date: 2024-01-01\n\n# Hello\n")
    app = create_app(
        SiteConfig.from_mapping(tmp_path, {"posts_dir": "writing", "post_url_root": "writing"})
    )
    client = app.test_client()
    assert 'href="/writing/hello"' in client.get("/writing").get_data(as_text=True)
    assert client.get("/writing/hello").status_code == 200
    assert client.get("/blog").status_code == 404


@pytest.mark.parametrize("root", ["/", "", "//"])
def test_site_root_cannot_hold_posts(tmp_path, root):
    with pytest.raises(ValueError, match="post_url_root"):
        SiteConfig.from_mapping(tmp_path, {"post_url_root": root})


def test_top_level_public_files_stay_reachable(tmp_path):
    write_templates(tmp_path)
    write(tmp_path, "public/robots.txt", "User-agent: *\n")
    write(tmp_path, "posts/robots.markdown", "Date: 2024-01-01\n\n# Robots\n")
    client = create_app(
        SiteConfig.from_mapping(tmp_path, {"posts_dir": "posts", "post_url_root": "/posts"})
    ).test_client()
    assert client.get("/robots.txt").get_data() == b"User-agent: *\n"
    assert "<h1>Robots</h1>" in client.get("/posts/robots").get_data(as_text=True)
