"""
HTML document abstraction shared by link discovery and form handling.

Email bodies and unsubscribe landing pages are arbitrary third-party
markup, so everything goes through BeautifulSoup's forgiving
``html.parser`` instead of regular expressions.
"""

import re
from typing import List, Optional
from bs4 import BeautifulSoup


WHITESPACE_PATTERN = re.compile(r'\s+')


class Element:
    """Read-only view of a single parsed HTML element."""

    def __init__(self, tag):
        self._tag = tag

    @property
    def name(self) -> str:
        return self._tag.name

    def get_attribute(self, name: str) -> Optional[str]:
        """Return an attribute value, or None when absent.

        Multi-valued attributes (``class``, ``rel``) are joined with spaces.
        """
        value = self._tag.get(name.lower())
        if value is None:
            return None
        if isinstance(value, list):
            return ' '.join(value)
        return value

    def has_attribute(self, name: str) -> bool:
        return self._tag.has_attr(name.lower())

    @property
    def text(self) -> str:
        """Visible text with whitespace runs collapsed."""
        return WHITESPACE_PATTERN.sub(' ', self._tag.get_text(' ')).strip()

    @property
    def inner_html(self) -> str:
        """The element's own markup, including its tag and attributes."""
        return str(self._tag)

    def find_elements(self, tag: str) -> List['Element']:
        return [Element(child) for child in self._tag.find_all(tag)]

    def __repr__(self):
        return f"<Element({self.name})>"


class HtmlDocument:
    """Parsed HTML document exposing element lookup by tag name."""

    def __init__(self, html: Optional[str]):
        self.soup = BeautifulSoup(html or '', 'html.parser')

    def find_elements(self, tag: str) -> List[Element]:
        return [Element(node) for node in self.soup.find_all(tag)]


def extract_text(html: Optional[str]) -> str:
    """
    Convert an HTML email body to plain text for the spam classifier.

    Drops <style> and <script> blocks entirely, strips all remaining tags,
    decodes entities, collapses whitespace runs to single spaces and trims.
    """
    if not html:
        return ''

    soup = BeautifulSoup(html, 'html.parser')
    for node in soup.find_all(['style', 'script']):
        node.decompose()

    return WHITESPACE_PATTERN.sub(' ', soup.get_text(' ')).strip()
