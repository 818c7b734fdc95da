"""
Form Unsubscribe Executor (tier 2)

Fetches the landing page, picks the first form that mentions an
unsubscribe or confirmation keyword, fills its fields and submits it once
with the original URL as Referer. The response is judged with the same
success-phrase heuristic as tier 1.
"""

from typing import Optional

import requests

from src.config import Config
from src.email_processor.unsubscribe.constants import METHOD_FORM, FAILURE_AMBIGUOUS
from src.email_processor.unsubscribe.forms import UnsubscribeFormParser
from src.email_processor.unsubscribe.types import FormDescriptor, UnsubscribeOutcome
from .base_executor import BaseUnsubscribeExecutor


class FormSubmitExecutor(BaseUnsubscribeExecutor):
    """Discover and submit the unsubscribe form of a landing page."""

    def __init__(
        self,
        http_session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        verify_ssl: Optional[bool] = None,
        placeholder_email: Optional[str] = None
    ):
        """
        Initialize form executor.

        Args:
            http_session: HTTP client used for the page fetch and the submission
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header for requests
            verify_ssl: Whether to verify TLS certificates
            placeholder_email: Value for form fields whose name contains "email"
        """
        super().__init__(http_session, timeout, user_agent, verify_ssl)
        self.form_parser = UnsubscribeFormParser(placeholder_email or Config.PLACEHOLDER_EMAIL)

    @property
    def method_name(self) -> str:
        return METHOD_FORM

    def _perform_execution(self, url: str) -> UnsubscribeOutcome:
        self._validate_url(url)

        page = self._get(url)
        form = self.form_parser.find_unsubscribe_form(page.text, page.url or url, original_url=url)

        self.logger.debug("Submitting unsubscribe form", {
            'action': form.action,
            'form_method': form.method,
            'fields': form.fields
        })
        response = self._submit(form, referer=url)

        target = self._host(form.action)
        detail = f'status={response.status_code} {form.method} {form.action}'
        phrase = self.find_success_phrase(response.text)

        if phrase:
            return UnsubscribeOutcome.completed(
                METHOD_FORM,
                f'Unsubscribed via form submission to {target}',
                detail=f'{detail} phrase={phrase!r}',
                status_code=response.status_code
            )

        return self._failed(
            'Form submitted but the response did not confirm the unsubscribe',
            FAILURE_AMBIGUOUS,
            detail=detail,
            status_code=response.status_code
        )

    def _submit(self, form: FormDescriptor, referer: str) -> requests.Response:
        self._validate_url(form.action)
        if form.method == 'GET':
            return self._get(form.action, referer=referer, params=form.fields)
        return self._post(form.action, data=form.fields, referer=referer)
