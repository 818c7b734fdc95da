"""
HTTP GET Unsubscribe Executor (tier 1)

Requests the unsubscribe URL once with browser headers and follows
redirects. A 2xx page containing a success phrase is a completed
unsubscribe; a 2xx page without one is ambiguous and lets the cascade
move on to form discovery.
"""

from src.email_processor.unsubscribe.constants import METHOD_GET, FAILURE_AMBIGUOUS
from src.email_processor.unsubscribe.types import UnsubscribeOutcome
from .base_executor import BaseUnsubscribeExecutor


class HttpGetExecutor(BaseUnsubscribeExecutor):
    """Execute unsubscribe requests via HTTP GET method."""

    @property
    def method_name(self) -> str:
        return METHOD_GET

    def _perform_execution(self, url: str) -> UnsubscribeOutcome:
        self._validate_url(url)

        response = self._get(url)
        host = self._host(response.url or url)
        phrase = self.find_success_phrase(response.text)

        if phrase:
            return UnsubscribeOutcome.completed(
                METHOD_GET,
                f'Unsubscribed via GET request to {host}',
                detail=f'status={response.status_code} host={host} phrase={phrase!r}',
                status_code=response.status_code
            )

        return self._failed(
            'Request succeeded but the page did not confirm the unsubscribe',
            FAILURE_AMBIGUOUS,
            detail=f'status={response.status_code} host={host}',
            status_code=response.status_code
        )
