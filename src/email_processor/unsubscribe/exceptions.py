"""
Custom exceptions for unsubscribe execution with enhanced error context.

These never cross the execution engine's boundary: every tier converts
them into a failed UnsubscribeOutcome.
"""

from typing import Dict, Any, Optional


class UnsubscribeExecutionError(Exception):
    """Base exception for a failed unsubscribe tier."""

    def __init__(self, message: str, url: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.url = url
        self.context = context or {}

    def __str__(self) -> str:
        base_message = super().__str__()
        details = []
        if self.url:
            details.append(f"url={self.url}")
        details.extend(f"{k}={v}" for k, v in self.context.items())

        if details:
            return f"{base_message} ({', '.join(details)})"
        return base_message


class InvalidUrlError(UnsubscribeExecutionError):
    """Raised when a target URL has no hostname or an unsupported scheme."""


class HttpStatusError(UnsubscribeExecutionError):
    """Raised when an HTTP response is not 2xx."""

    def __init__(self, status_code: int, url: Optional[str] = None):
        super().__init__(f"HTTP {status_code}", url=url, context={'status_code': status_code})
        self.status_code = status_code


class NoFormFoundError(UnsubscribeExecutionError):
    """Raised when a page holds no unsubscribe or confirmation form."""

    def __init__(self, url: Optional[str] = None, forms_seen: int = 0):
        super().__init__("no suitable form found", url=url, context={'forms_seen': forms_seen})
        self.forms_seen = forms_seen
