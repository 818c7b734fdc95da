"""
Base Unsubscribe Executor

Provides common functionality for every tier of the unsubscribe cascade:
- Browser-like request headers and a hard per-request deadline
- URL validation (an http(s) scheme and a hostname are required)
- Success-phrase detection in response bodies
- Conversion of every failure into an UnsubscribeOutcome (template method)

A tier's execute() never raises; the outbound request is attempted once and
must complete, body included, within the timeout.
"""

import concurrent.futures
import urllib.parse
from abc import ABC, abstractmethod
from typing import Dict, Optional

import requests
from urllib3.exceptions import ReadTimeoutError

from src.config import Config
from src.email_processor.unsubscribe.constants import (
    SUCCESS_PATTERNS,
    FAILURE_NETWORK, FAILURE_TIMEOUT, FAILURE_INVALID_URL,
    FAILURE_HTTP_ERROR, FAILURE_NO_FORM_FOUND, FAILURE_UNEXPECTED
)
from src.email_processor.unsubscribe.exceptions import (
    InvalidUrlError, HttpStatusError, NoFormFoundError
)
from src.email_processor.unsubscribe.logging import UnsubscribeLogger
from src.email_processor.unsubscribe.types import UnsubscribeOutcome


BODY_CHUNK_SIZE = 8192


class BaseUnsubscribeExecutor(ABC):
    """
    Abstract base class for all unsubscribe tiers.

    Subclasses implement _perform_execution() and may raise the engine's
    exceptions or any requests exception; execute() maps them to outcomes.
    """

    def __init__(
        self,
        http_session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        verify_ssl: Optional[bool] = None
    ):
        """
        Initialize base executor.

        Args:
            http_session: HTTP client used for every request (a new requests.Session if omitted)
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header for requests
            verify_ssl: Whether to verify TLS certificates
        """
        self._owns_session = http_session is None
        self.http = http_session if http_session is not None else requests.Session()
        self.timeout = Config.REQUEST_TIMEOUT if timeout is None else timeout
        self.user_agent = user_agent or Config.USER_AGENT
        self.verify_ssl = Config.VERIFY_SSL if verify_ssl is None else verify_ssl
        self.max_response_bytes = Config.MAX_RESPONSE_BYTES
        self.logger = UnsubscribeLogger(f"{self.method_name}_executor")

    def close(self):
        """Close the HTTP session if this executor created it."""
        if self._owns_session:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    @property
    @abstractmethod
    def method_name(self) -> str:
        """Return the method name (get, form, mailto)."""
        pass

    def execute(self, url: str) -> UnsubscribeOutcome:
        """
        Run this tier against a URL (template method).

        Returns:
            UnsubscribeOutcome; failures carry a taxonomy code in ``failure``
        """
        with self.logger.scoped_context({'url': url, 'tier': self.method_name}):
            try:
                with self.logger.time_operation(f"{self.method_name}_tier"):
                    outcome = self._perform_execution(url)

            except requests.exceptions.Timeout:
                outcome = self._failed(
                    f'Request timed out after {self.timeout} seconds',
                    FAILURE_TIMEOUT, detail=self._host(url)
                )

            except InvalidUrlError as e:
                outcome = self._failed(f'Invalid URL: {e.args[0]}', FAILURE_INVALID_URL, detail=url)

            except (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema,
                    requests.exceptions.InvalidSchema) as e:
                outcome = self._failed(f'Invalid URL: {str(e)}', FAILURE_INVALID_URL, detail=url)

            except HttpStatusError as e:
                outcome = self._failed(
                    f'Server responded with HTTP {e.status_code}',
                    FAILURE_HTTP_ERROR,
                    detail=f'status={e.status_code} host={self._host(e.url or url)}',
                    status_code=e.status_code
                )

            except NoFormFoundError as e:
                outcome = self._failed(
                    e.args[0], FAILURE_NO_FORM_FOUND,
                    detail=f'forms_seen={e.forms_seen} host={self._host(url)}'
                )

            except requests.exceptions.ConnectionError as e:
                outcome = self._failed(f'Connection error: {str(e)}', FAILURE_NETWORK, detail=self._host(url))

            except requests.exceptions.RequestException as e:
                outcome = self._failed(f'Request failed: {str(e)}', FAILURE_NETWORK, detail=self._host(url))

            except Exception as e:
                self.logger.log_exception(e)
                outcome = self._failed(f'Unexpected error: {str(e)}', FAILURE_UNEXPECTED, detail=self._host(url))

            self.logger.log_operation_count(self.method_name, outcome.succeeded)
            self.logger.info("Unsubscribe tier finished", outcome.to_dict())
            return outcome

    @abstractmethod
    def _perform_execution(self, url: str) -> UnsubscribeOutcome:
        """
        Perform tier-specific unsubscribe execution.

        Override in subclass to implement mailto, GET or form logic.
        """
        pass

    def _failed(self, message: str, failure: str, detail: Optional[str] = None,
                status_code: Optional[int] = None) -> UnsubscribeOutcome:
        return UnsubscribeOutcome.failed(
            self.method_name, message, failure, detail=detail, status_code=status_code
        )

    def _headers(self, referer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            'User-Agent': self.user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.9,nl;q=0.8,de;q=0.7,fr;q=0.6',
        }
        if referer:
            headers['Referer'] = referer
        return headers

    def _validate_url(self, url: str) -> str:
        """Require an http(s) URL with a hostname."""
        try:
            parsed = urllib.parse.urlparse(url)
        except ValueError as e:
            raise InvalidUrlError(str(e), url=url)

        if parsed.scheme.lower() not in ('http', 'https'):
            raise InvalidUrlError(f'unsupported scheme {parsed.scheme!r}', url=url)
        if not parsed.hostname:
            raise InvalidUrlError('no hostname', url=url)
        return url

    def _get(self, url: str, referer: Optional[str] = None,
             params: Optional[Dict[str, str]] = None) -> requests.Response:
        return self._send(self.http.get, url, referer, params=params)

    def _post(self, url: str, data: Dict[str, str], referer: Optional[str] = None) -> requests.Response:
        return self._send(self.http.post, url, referer, data=data)

    def _send(self, send, url: str, referer: Optional[str], **kwargs) -> requests.Response:
        """
        Issue one request and read its body within a hard deadline.

        The request runs on a worker thread; past ``self.timeout`` seconds the
        response is closed and requests.exceptions.Timeout is raised, however
        slowly the server is still sending.
        """
        started = {}
        pool = concurrent.futures.ThreadPoolExecutor(max_workers=1)
        future = pool.submit(self._fetch, send, url, referer, started, kwargs)
        try:
            return future.result(timeout=self.timeout)
        except concurrent.futures.TimeoutError:
            response = started.get('response')
            if response is not None:
                response.close()
            raise requests.exceptions.Timeout(f'no complete response within {self.timeout} seconds')
        finally:
            pool.shutdown(wait=False)

    def _fetch(self, send, url: str, referer: Optional[str], started: Dict,
               kwargs: Dict) -> requests.Response:
        response = send(
            url,
            headers=self._headers(referer),
            timeout=self.timeout,
            allow_redirects=True,
            verify=self.verify_ssl,
            stream=True,
            **kwargs
        )
        started['response'] = response
        try:
            self._raise_for_status(response, url)
            self._read_body(response)
        finally:
            response.close()
        return response

    def _read_body(self, response: requests.Response):
        """Read at most max_response_bytes of the body into response.content."""
        body = bytearray()
        try:
            for chunk in response.iter_content(chunk_size=BODY_CHUNK_SIZE):
                body.extend(chunk)
                if len(body) >= self.max_response_bytes:
                    break
        except requests.exceptions.ConnectionError as e:
            # requests wraps a stalled body read as ConnectionError
            if e.args and isinstance(e.args[0], ReadTimeoutError):
                raise requests.exceptions.ReadTimeout(e.args[0])
            raise
        response._content = bytes(body[:self.max_response_bytes])

    @staticmethod
    def _raise_for_status(response: requests.Response, url: str):
        # Consider 2xx status codes as success
        if not 200 <= response.status_code < 300:
            raise HttpStatusError(response.status_code, url=url)

    @staticmethod
    def find_success_phrase(text: Optional[str]) -> Optional[str]:
        """Return the first success phrase found in a response body, if any."""
        if not text:
            return None
        for pattern in SUCCESS_PATTERNS:
            match = pattern.search(text)
            if match:
                return match.group(0)
        return None

    @staticmethod
    def _host(url: Optional[str]) -> str:
        try:
            return urllib.parse.urlparse(url or '').hostname or (url or '')
        except ValueError:
            return url or ''
