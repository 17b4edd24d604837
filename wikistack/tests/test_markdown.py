"""
Tests for markdown rendering, internal links and sanitizing.
"""

from wikistack.utils.markdown_extensions import render_markdown
from wikistack.utils.sanitizer import sanitize_html


def test_internal_link_points_to_url_title():
    html = render_markdown("Read [[Cracking the Code]] next.")
    assert 'href="/wiki/Cracking_the_Code"' in html
    assert ">Cracking the Code</a>" in html


def test_regular_links_still_render():
    html = render_markdown("[docs](https://example.com)")
    assert '<a href="https://example.com">docs</a>' in html


def test_empty_content_renders_nothing():
    assert render_markdown("") == ""


def test_script_tags_are_stripped():
    html = render_markdown("hello <script>alert(1)</script>")
    assert "<script>" not in html
    assert "hello" in html


def test_sanitize_html_drops_javascript_urls():
    cleaned = sanitize_html('<a href="javascript:alert(1)">x</a>')
    assert "javascript:" not in cleaned


def test_tables_are_rendered():
    html = render_markdown("| a | b |\n| --- | --- |\n| 1 | 2 |")
    assert "<table>" in html
    assert "<td>1</td>" in html
