"""
Custom Markdown extensions for WikiStack.
Adds support for [[Page Title]] internal linking syntax.
"""

from xml.etree.ElementTree import Element

import markdown
from loguru import logger
from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor
from markdown.util import AtomicString

from .sanitizer import sanitize_html
from .validation import generate_url_title

INTERNAL_LINK_PATTERN = r"\[\[([^\]]+?)\]\]"


class InternalLinkProcessor(InlineProcessor):
    """Turn [[Page Title]] into a link to the page's /wiki/<url_title> route."""

    def handleMatch(self, m, data):
        title = m.group(1).strip()
        if not title:
            return None, None, None

        link = Element("a")
        link.set("href", f"/wiki/{generate_url_title(title)}")
        link.set("class", "internal-link")
        link.text = AtomicString(title)
        logger.debug(f"Internal link processed: {title} -> {link.get('href')}")
        return link, m.start(0), m.end(0)


class InternalLinkExtension(Extension):
    """Markdown extension to support [[Page Title]] internal links."""

    def extendMarkdown(self, md):
        # Run before the default link patterns so [[...]] is not read as a reference link
        md.inlinePatterns.register(
            InternalLinkProcessor(INTERNAL_LINK_PATTERN, md), "internal_link", 175
        )


def render_markdown(content: str) -> str:
    """Render page markdown to sanitized HTML."""
    if not content:
        return ""
    md = markdown.Markdown(extensions=[InternalLinkExtension(), "tables", "fenced_code"])
    return sanitize_html(md.convert(content))
