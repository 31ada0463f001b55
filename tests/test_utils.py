from datetime import date, datetime, timedelta, timezone

import pytest

from quill import html_utils, utils


def test_slugify():
    assert utils.slugify("Hello, World!") == "hello-world"
    assert utils.slugify("  Spaces   and_underscores ") == "spaces-and-underscores"
    assert utils.slugify("!!!") == "untitled"


@pytest.mark.parametrize(
    "text",
    [
        "2024-03-01",
        " 2024-03-01 ",
        "2024-03-01T10:30:00",
        "2024/03/01",
        "1 March 2024",
        "1 Mar 2024",
        "March 1, 2024",
        "Mar 1, 2024",
        "2024-3-1",
        "1st March 2024",
        "March 1st 2024",
        "Fri, 01 Mar 2024",
        "Friday 1 March 2024",
    ],
)
def test_parse_date_formats(text):
    assert utils.parse_date(text) == date(2024, 3, 1)


@pytest.mark.parametrize("text", ["", "someday", "2024-02-30", "31 February 2024"])
def test_parse_date_rejects_garbage(text):
    with pytest.raises(ValueError):
        utils.parse_date(text)


def test_format_rfc822():
    assert utils.format_rfc822(date(2024, 5, 1)) == "Wed, 01 May 2024 00:00:00 GMT"
    aware = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert utils.format_rfc822(aware) == "Wed, 01 May 2024 10:00:00 GMT"
    assert utils.format_rfc822(datetime(2024, 5, 1, 8, 5, 9)) == "Wed, 01 May 2024 08:05:09 GMT"


def test_is_safe_name():
    assert utils.is_safe_name("hello-world")
    assert utils.is_safe_name("v1.2-notes")
    for name in ("", ".", "..", "../x", "a/b", "a\\b", "*", "a?", "[x]", ".env"):
        assert not utils.is_safe_name(name)


def test_html_helpers():
    assert html_utils.escape_html('<a href="x">&</a>') == "&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;"
    assert html_utils.join_root_url("https://example.com/", "blog/x") == "https://example.com/blog/x"
    assert html_utils.join_root_url("", "/blog") == "/blog"

    html = '<a href="/blog/x">x</a><img src="/img/a.png"><a href="//cdn/x">c</a><a href="https://o.com">o</a>'
    absolute = html_utils.absolutize_html_urls(html, "https://example.com")
    assert 'href="https://example.com/blog/x"' in absolute
    assert 'src="https://example.com/img/a.png"' in absolute
    assert 'href="//cdn/x"' in absolute
    assert 'href="https://o.com"' in absolute
    assert html_utils.absolutize_html_urls(html, "") == html


def test_inject_before_body_end():
    assert html_utils.inject_before_body_end("<body>x</body>", "<s/>") == "<body>x<s/></body>"
    assert html_utils.inject_before_body_end("x", "<s/>") == "x<s/>"
