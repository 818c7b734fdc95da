"""
Unsubscribe discovery module.

This module provides the parsing surface of the unsubscribe pipeline:
- Multilingual link and mailto discovery in raw email bodies
- HTML-to-text extraction for the spam classifier
- Unsubscribe form selection and field filling for landing pages
- Result types, exceptions and structured logging shared with the executors
"""

from .discovery import UnsubscribeLinkDiscovery, discover_unsubscribe_candidates
from .forms import UnsubscribeFormParser
from .html_document import HtmlDocument, Element, extract_text
from .types import UnsubscribeCandidate, UnsubscribeOutcome, FormDescriptor

__all__ = [
    'UnsubscribeLinkDiscovery',
    'discover_unsubscribe_candidates',
    'UnsubscribeFormParser',
    'HtmlDocument',
    'Element',
    'extract_text',
    'UnsubscribeCandidate',
    'UnsubscribeOutcome',
    'FormDescriptor'
]
