"""
Unsubscribe form selection and field filling for landing pages.

The first <form> whose markup mentions an unsubscribe or confirmation
keyword is chosen; there is no scoring across forms. Its inputs are then
filled by a fixed policy:

    submit/button  -> existing value, or "Unsubscribe"
    hidden         -> existing value, untouched (CSRF tokens, tracking ids)
    name ~ email   -> placeholder address
    name ~ confirm -> "1"
    anything else  -> existing value (possibly empty)
"""

import urllib.parse
from typing import Dict, Optional, Pattern, Sequence

from .constants import (
    FORM_PATTERNS, SUBMIT_INPUT_TYPES, SUBMIT_FALLBACK_VALUE, CONFIRM_FIELD_VALUE
)
from .discovery import matches_any
from .exceptions import NoFormFoundError
from .html_document import Element, HtmlDocument
from .types import FormDescriptor


DEFAULT_PLACEHOLDER_EMAIL = 'user@example.com'


class UnsubscribeFormParser:
    """Select the unsubscribe form on a page and synthesize its submission."""

    def __init__(self, placeholder_email: str = DEFAULT_PLACEHOLDER_EMAIL,
                 patterns: Optional[Sequence[Pattern]] = None):
        self.placeholder_email = placeholder_email
        self.patterns = list(patterns) if patterns is not None else FORM_PATTERNS

    def select_form(self, page_html: str) -> Optional[Element]:
        """Return the first form whose markup matches an unsubscribe/confirm keyword."""
        for form in HtmlDocument(page_html).find_elements('form'):
            if matches_any(form.inner_html, self.patterns):
                return form
        return None

    def find_unsubscribe_form(self, page_html: str, page_url: str,
                              original_url: Optional[str] = None) -> FormDescriptor:
        """
        Parse the unsubscribe form of a landing page.

        Args:
            page_html: Landing page markup
            page_url: URL the page was served from (relative actions resolve against it)
            original_url: Candidate URL, used when the form has no action

        Raises:
            NoFormFoundError: if no form on the page qualifies
        """
        form = self.select_form(page_html)
        if form is None:
            forms_seen = len(HtmlDocument(page_html).find_elements('form'))
            raise NoFormFoundError(url=page_url, forms_seen=forms_seen)

        return self.parse_form(form, page_url, original_url or page_url)

    def parse_form(self, form: Element, page_url: str, original_url: str) -> FormDescriptor:
        action = (form.get_attribute('action') or '').strip()
        action_url = urllib.parse.urljoin(page_url, action) if action else original_url

        method = (form.get_attribute('method') or 'POST').strip().upper()
        if method not in ('GET', 'POST'):
            method = 'POST'

        return FormDescriptor(action=action_url, method=method, fields=self.fill_fields(form))

    def fill_fields(self, form: Element) -> Dict[str, str]:
        fields = {}
        for input_tag in form.find_elements('input'):
            name = input_tag.get_attribute('name')
            if not name:
                continue
            fields[name] = self.synthesize_value(input_tag)
        return fields

    def synthesize_value(self, input_tag: Element) -> str:
        input_type = (input_tag.get_attribute('type') or 'text').strip().lower()
        name = (input_tag.get_attribute('name') or '').lower()
        value = input_tag.get_attribute('value')

        if input_type in SUBMIT_INPUT_TYPES:
            return value or SUBMIT_FALLBACK_VALUE
        if input_type == 'hidden':
            return value if value is not None else ''
        if 'email' in name:
            return self.placeholder_email
        if 'confirm' in name:
            return CONFIRM_FIELD_VALUE
        return value or ''
