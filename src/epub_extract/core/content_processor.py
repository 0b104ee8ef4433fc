"""Turn chapter documents into plain-text previews."""

import re
import warnings

from bs4 import BeautifulSoup, UnicodeDammit, XMLParsedAsHTMLWarning

from epub_extract.core.package_parser import normalize_text

# Suppress XML parsing warnings - EPUB files often use XHTML
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

# Comments and CDATA first so a '>' inside them does not end a tag early
_MARKUP = re.compile(r"<!--.*?-->|<!\[CDATA\[.*?\]\]>|<[^>]+>", re.DOTALL)


def strip_markup(markup: str) -> str:
    """Remove every tag, keeping text between tags.

    Whitespace runs collapse to a single space. Entities are left as they
    are, so the result is stable under repeated stripping.
    """
    return normalize_text(_MARKUP.sub("", markup))


class ContentProcessor:
    """Process chapter HTML into stripped text, title and preview."""

    def __init__(self, preview_length: int = 200, truncation_marker: str = "..."):
        self.preview_length = preview_length
        self.truncation_marker = truncation_marker

    def decode(self, content: bytes) -> str:
        """Decode document bytes, trusting UTF-8 before sniffing."""
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError:
            dammit = UnicodeDammit(content, is_html=True)
            if dammit.unicode_markup is None:
                return content.decode("utf-8", errors="replace")
            return dammit.unicode_markup

    def process(self, content: bytes) -> tuple[str | None, str]:
        """Return ``(title, stripped_text)`` for a chapter document."""
        soup = BeautifulSoup(self.decode(content), "lxml")
        title = self._extract_title(soup)

        body = soup.body
        if body is None:
            # Bodyless document: everything outside <head> counts as content
            body = soup
            if soup.head is not None:
                soup.head.decompose()
            for tag in soup("title"):
                tag.decompose()
        for tag in body(["script", "style"]):
            tag.decompose()
        # Minimal formatter keeps &, < and > escaped so literal text
        # survives tag stripping
        return title, strip_markup(body.decode_contents(formatter="minimal"))

    def preview(self, text: str) -> str:
        """Bound ``text`` to the preview length, marking truncation."""
        if len(text) > self.preview_length:
            return text[: self.preview_length] + self.truncation_marker
        return text

    def _extract_title(self, soup: BeautifulSoup) -> str | None:
        element = soup.find("title")
        if element is None:
            return None
        return normalize_text(element.get_text()) or None
