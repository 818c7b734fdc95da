"""
Unsubscribe link discovery from raw email bodies.

Scans HTML (or plain text) bodies for two kinds of candidates:
- anchors whose href or visible text matches a multilingual unsubscribe keyword
- mailto: URIs anywhere in the body whose local part or query asks for removal

Results are deduplicated by URL, keeping first-seen order. Finding nothing
is the common case and is never an error.

Candidate URLs carry decoded entities: the HTML parser turns an href of
``?a=1&amp;b=2`` into ``?a=1&b=2``, and raw mailto: matches are unescaped
the same way so both scans agree on one URL.
"""

import html
import re
import urllib.parse
from typing import Iterator, List, Optional, Pattern, Sequence

from .constants import (
    UNSUBSCRIBE_PATTERNS, MAILTO_PATTERN, IGNORED_HREF_PREFIXES,
    KIND_LINK, KIND_MAILTO
)
from .html_document import HtmlDocument
from .logging import UnsubscribeLogger
from .types import UnsubscribeCandidate


SCHEME_PATTERN = re.compile(r'^[a-z][a-z0-9+.-]*://', re.IGNORECASE)


def matches_any(text: Optional[str], patterns: Sequence[Pattern]) -> bool:
    """Check whether any keyword pattern occurs in text."""
    if not text:
        return False
    return any(pattern.search(text) for pattern in patterns)


def normalize_url(href: str) -> str:
    """Give scheme-less links an https:// scheme; mailto: URIs pass through."""
    if href.lower().startswith('mailto:'):
        return href
    if href.startswith('//'):
        return f"https:{href}"
    if SCHEME_PATTERN.match(href):
        return href
    return f"https://{href}"


class UnsubscribeLinkDiscovery:
    """Discover unsubscribe candidates in email body content."""

    def __init__(self, patterns: Optional[Sequence[Pattern]] = None):
        self.patterns = list(patterns) if patterns is not None else UNSUBSCRIBE_PATTERNS
        self.logger = UnsubscribeLogger("link_discovery")

    def discover(self, body: Optional[str]) -> List[UnsubscribeCandidate]:
        """Return the deduplicated, ordered unsubscribe candidates found in body."""
        if not body:
            return []

        candidates = list(self._discover_anchors(body))
        candidates.extend(self._discover_mailto_uris(body))

        unique = self._deduplicate(candidates)
        self.logger.debug("Unsubscribe discovery finished", {
            'candidates': len(unique),
            'duplicates_removed': len(candidates) - len(unique)
        })
        return unique

    def _discover_anchors(self, body: str) -> Iterator[UnsubscribeCandidate]:
        document = HtmlDocument(body)

        for anchor in document.find_elements('a'):
            href = (anchor.get_attribute('href') or '').strip()
            if not href or href.lower().startswith(IGNORED_HREF_PREFIXES):
                continue

            text = anchor.text
            if not (matches_any(href, self.patterns) or matches_any(text, self.patterns)):
                continue

            if href.lower().startswith('mailto:'):
                yield UnsubscribeCandidate(url=href, display_text=text or href, kind=KIND_MAILTO)
            else:
                url = normalize_url(href)
                yield UnsubscribeCandidate(url=url, display_text=text or url, kind=KIND_LINK)

    def _discover_mailto_uris(self, body: str) -> Iterator[UnsubscribeCandidate]:
        for match in MAILTO_PATTERN.finditer(body):
            # Raw markup may still hold entities such as &amp; between parameters
            uri = html.unescape(match.group(0))
            address = html.unescape(match.group(1))
            query = urllib.parse.unquote_plus(html.unescape(match.group(2) or ''))
            local_part = address.split('@', 1)[0]

            if matches_any(local_part, self.patterns) or matches_any(query, self.patterns):
                yield UnsubscribeCandidate(
                    url=uri,
                    display_text=f"Unsubscribe via {address}",
                    kind=KIND_MAILTO
                )

    @staticmethod
    def _deduplicate(candidates: List[UnsubscribeCandidate]) -> List[UnsubscribeCandidate]:
        seen = set()
        unique = []
        for candidate in candidates:
            if candidate.url not in seen:
                seen.add(candidate.url)
                unique.append(candidate)
        return unique


def discover_unsubscribe_candidates(body: Optional[str]) -> List[UnsubscribeCandidate]:
    """Find unsubscribe candidates in an email body."""
    return UnsubscribeLinkDiscovery().discover(body)
