"""
Mailto Unsubscribe Executor (tier 0)

Prepares unsubscribe email instructions from a mailto: URI. No email is
ever sent and no network call is made: the outcome is reported as
succeeded with status ``instructions_only``.
"""

from typing import Dict
from urllib.parse import urlparse, parse_qs, unquote

from src.email_processor.unsubscribe.constants import METHOD_MAILTO
from src.email_processor.unsubscribe.exceptions import InvalidUrlError
from src.email_processor.unsubscribe.types import UnsubscribeOutcome
from .base_executor import BaseUnsubscribeExecutor


class MailtoExecutor(BaseUnsubscribeExecutor):
    """Turn a mailto: candidate into unsubscribe instructions."""

    @property
    def method_name(self) -> str:
        return METHOD_MAILTO

    def parse_mailto(self, url: str) -> Dict[str, str]:
        """
        Parse a mailto: URI into address, subject and body.

        Raises:
            InvalidUrlError: if the URI is not mailto: or names no address
        """
        if not url.lower().startswith('mailto:'):
            raise InvalidUrlError('not a mailto: URI', url=url)

        parsed = urlparse(url)
        query = {
            key.lower(): values[0]
            for key, values in parse_qs(parsed.query).items()
            if values
        }

        address = unquote(parsed.path) or query.get('to', '')
        if '@' not in address:
            raise InvalidUrlError('no recipient address', url=url)

        return {
            'email_address': address,
            'subject': query.get('subject', ''),
            'body': query.get('body', '')
        }

    def _perform_execution(self, url: str) -> UnsubscribeOutcome:
        params = self.parse_mailto(url)
        address = params['email_address']

        message = f'Unsubscribe email prepared for {address}'
        if params['subject']:
            message += f" with subject '{params['subject']}'"
        message += ' (not sent)'

        detail = '; '.join(f'{key}={value}' for key, value in params.items() if value)
        return UnsubscribeOutcome.instructions_only(METHOD_MAILTO, message, detail=detail)
