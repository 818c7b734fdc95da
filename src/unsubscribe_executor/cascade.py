"""
Cascading unsubscribe execution.

    mailto candidate -> MailtoExecutor (terminal)
    link candidate   -> HttpGetExecutor -> completed or failed: terminal
                                        -> ambiguous 2xx: FormSubmitExecutor (terminal)

Each tier makes its HTTP calls exactly once; nothing is retried. The
executor holds no state between candidates beyond its HTTP session.
"""

from typing import Optional

import requests

from src.email_processor.unsubscribe.constants import FAILURE_AMBIGUOUS
from src.email_processor.unsubscribe.logging import UnsubscribeLogger
from src.email_processor.unsubscribe.types import UnsubscribeCandidate, UnsubscribeOutcome
from .form_executor import FormSubmitExecutor
from .http_executor import HttpGetExecutor
from .mailto_executor import MailtoExecutor


class UnsubscribeExecutor:
    """Run the mailto / GET / form cascade for one candidate at a time."""

    def __init__(
        self,
        http_session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        verify_ssl: Optional[bool] = None,
        placeholder_email: Optional[str] = None
    ):
        self._owns_session = http_session is None
        self.http = http_session if http_session is not None else requests.Session()
        self.mailto_executor = MailtoExecutor(self.http, timeout, user_agent, verify_ssl)
        self.get_executor = HttpGetExecutor(self.http, timeout, user_agent, verify_ssl)
        self.form_executor = FormSubmitExecutor(
            self.http, timeout, user_agent, verify_ssl, placeholder_email=placeholder_email
        )
        self.logger = UnsubscribeLogger("cascade")

    def close(self):
        """Close the HTTP session if this executor created it."""
        if self._owns_session:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def execute(self, candidate: UnsubscribeCandidate) -> UnsubscribeOutcome:
        """Attempt the unsubscribe for a candidate and return a best-effort verdict."""
        with self.logger.scoped_context({'url': candidate.url, 'kind': candidate.kind}):
            if candidate.is_mailto:
                return self.mailto_executor.execute(candidate.url)

            outcome = self.get_executor.execute(candidate.url)
            if outcome.succeeded or outcome.failure != FAILURE_AMBIGUOUS:
                return outcome

            self.logger.debug("GET was ambiguous, trying form discovery")
            return self.form_executor.execute(candidate.url)


def execute_unsubscribe(candidate: UnsubscribeCandidate,
                        http_session: Optional[requests.Session] = None,
                        **options) -> UnsubscribeOutcome:
    """
    Execute the unsubscribe cascade for one candidate. Never raises.

    Without an explicit http_session a private session is opened and
    closed around the call, so concurrent calls share nothing.
    """
    if http_session is not None:
        return UnsubscribeExecutor(http_session, **options).execute(candidate)

    with UnsubscribeExecutor(**options) as executor:
        return executor.execute(candidate)
